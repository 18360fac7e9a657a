"""Tests for the policy catalog."""

from __future__ import annotations

import json

import pytest
import yaml

from policykit.core.policies.catalog import (
    BUILTIN_CLAUSES,
    BUILTIN_TEMPLATES,
    PolicyCatalog,
    get_policy_catalog,
)
from policykit.core.policies.permissions import FirmPermissions
from policykit.core.policies.types import Clause, ClauseCategory, PolicyTemplate, SectionType


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def catalog() -> PolicyCatalog:
    return PolicyCatalog()


@pytest.fixture
def custom_data() -> dict:
    return {
        "clauses": [
            {
                "id": "cm-purpose",
                "title": "Purpose of Compliance Monitoring",
                "content": "Sets out how the firm tests its compliance arrangements.",
                "category": "governance",
                "applies_to": ["COMPLIANCE_MONITORING"],
            },
            {
                "id": "cm-plan",
                "title": "Annual Monitoring Plan",
                "is_mandatory": True,
                "applies_to": ["COMPLIANCE_MONITORING"],
            },
        ],
        "templates": [
            {
                "code": "COMPLIANCE_MONITORING",
                "name": "Compliance Monitoring Plan",
                "category": "Governance",
                "description": "Risk-based testing of compliance arrangements.",
                "sections": [
                    {"id": "cm-purpose", "title": "Purpose", "suggested_clauses": ["cm-purpose"]},
                    {
                        "id": "cm-plan",
                        "title": "Monitoring Plan",
                        "suggested_clauses": ["cm-plan", "board-oversight"],
                        "section_type": "procedure",
                    },
                ],
                "mandatory_clauses": ["cm-plan"],
            }
        ],
    }


@pytest.fixture(autouse=True)
def reset_singleton():
    PolicyCatalog.reset()
    yield
    PolicyCatalog.reset()


# =============================================================================
# Built-in data
# =============================================================================


class TestBuiltinCatalog:
    """Tests for the built-in clause library and templates."""

    def test_builtin_templates_present(self, catalog: PolicyCatalog) -> None:
        codes = {t.code for t in catalog.get_templates()}
        assert codes == {"AML_CTF", "VULNERABLE_CUST", "SAFEGUARDING"}

    def test_no_dangling_references(self, catalog: PolicyCatalog) -> None:
        """Every clause ID a built-in template names exists."""
        assert catalog.find_dangling_references() == {}

    def test_clause_ids_unique(self) -> None:
        ids = [c.id for c in BUILTIN_CLAUSES]
        assert len(ids) == len(set(ids))

    def test_section_ids_unique_per_template(self) -> None:
        for template in BUILTIN_TEMPLATES:
            ids = [s.id for s in template.sections]
            assert len(ids) == len(set(ids)), template.code

    def test_mandatory_clauses_are_suggested(self) -> None:
        """Mandatory clauses are reachable from some section."""
        for template in BUILTIN_TEMPLATES:
            suggested = {cid for s in template.sections for cid in s.suggested_clauses}
            assert set(template.mandatory_clauses) <= suggested, template.code

    def test_builtin_flag(self, catalog: PolicyCatalog) -> None:
        assert all(t.is_builtin for t in catalog.get_templates())


class TestLookup:
    """Tests for lookups and filtering."""

    def test_get_template(self, catalog: PolicyCatalog) -> None:
        template = catalog.get_template("AML_CTF")
        assert template is not None
        assert template.mandatory_clauses == ["aml-cdd", "aml-mlro", "aml-sar"]

    def test_get_unknown_template(self, catalog: PolicyCatalog) -> None:
        assert catalog.get_template("NOPE") is None

    def test_get_clause(self, catalog: PolicyCatalog) -> None:
        clause = catalog.get_clause("aml-sar")
        assert clause is not None
        assert clause.category == ClauseCategory.FINANCIAL_CRIME

    def test_clauses_filtered_by_template(self, catalog: PolicyCatalog) -> None:
        """Template-specific clauses stay out of other templates."""
        ids = {c.id for c in catalog.get_clauses("VULNERABLE_CUST")}

        assert "vc-support" in ids
        assert "board-oversight" in ids
        assert "aml-cdd" not in ids

    def test_clauses_filtered_by_permissions(self, catalog: PolicyCatalog) -> None:
        """Permission-gated clauses follow the firm's flags."""
        without = {c.id for c in catalog.get_clauses("SAFEGUARDING", FirmPermissions())}
        with_flag = {
            c.id for c in catalog.get_clauses("SAFEGUARDING", FirmPermissions(safeguarding=True))
        }

        assert "sg-insurance-method" not in without
        assert "sg-insurance-method" in with_flag

    def test_search_by_name(self, catalog: PolicyCatalog) -> None:
        results = catalog.search_templates("safeguarding")
        assert results[0].code == "SAFEGUARDING"

    def test_search_by_code(self, catalog: PolicyCatalog) -> None:
        results = catalog.search_templates("aml_ctf")
        assert results[0].code == "AML_CTF"

    def test_search_no_match(self, catalog: PolicyCatalog) -> None:
        assert catalog.search_templates("pension transfer") == []

    def test_search_limit(self, catalog: PolicyCatalog) -> None:
        assert len(catalog.search_templates("policy", limit=1)) == 1


# =============================================================================
# Custom entries
# =============================================================================


class TestCustomEntries:
    """Tests for registering and loading custom entries."""

    def test_register_template_marks_custom(self, catalog: PolicyCatalog) -> None:
        template = PolicyTemplate(code="X", name="X Policy", category="Custom", description="")
        catalog.register_template(template)

        assert catalog.get_template("X").is_builtin is False

    def test_register_clause_replaces(self, catalog: PolicyCatalog) -> None:
        catalog.register_clause(Clause(id="policy-review", title="Biennial Review"))
        assert catalog.get_clause("policy-review").title == "Biennial Review"

    def test_load_dict(self, catalog: PolicyCatalog, custom_data: dict) -> None:
        assert catalog.load_dict(custom_data) == (2, 1)

        template = catalog.get_template("COMPLIANCE_MONITORING")
        assert template.sections[1].section_type == SectionType.PROCEDURE
        assert catalog.get_clause("cm-plan").is_mandatory is True
        assert catalog.find_dangling_references() == {}

    def test_load_json_file(self, catalog: PolicyCatalog, custom_data: dict, tmp_path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(custom_data), encoding="utf-8")

        assert catalog.load_file(path) is True
        assert catalog.get_template("COMPLIANCE_MONITORING") is not None

    def test_load_yaml_file(self, catalog: PolicyCatalog, custom_data: dict, tmp_path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text(yaml.safe_dump(custom_data), encoding="utf-8")

        assert catalog.load_file(path) is True
        assert catalog.get_clause("cm-purpose") is not None

    def test_malformed_file_is_skipped(self, catalog: PolicyCatalog, tmp_path) -> None:
        """A broken file leaves the catalog untouched."""
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        before = len(catalog.get_clauses())

        assert catalog.load_file(path) is False
        assert len(catalog.get_clauses()) == before

    @pytest.mark.parametrize(
        "filename,text",
        [
            ("catalog.json", "[]"),
            ("catalog.json", '"clauses"'),
            ("catalog.yaml", "just a string\n"),
            ("catalog.yaml", "- id: a\n  title: A\n"),
        ],
    )
    def test_non_mapping_file_is_skipped(self, catalog: PolicyCatalog, tmp_path, filename, text) -> None:
        """A file whose top level is not a mapping is rejected, not raised."""
        path = tmp_path / filename
        path.write_text(text, encoding="utf-8")
        before = len(catalog.get_clauses())

        assert catalog.load_file(path) is False
        assert len(catalog.get_clauses()) == before

    def test_constructor_survives_non_mapping_file(self, tmp_path) -> None:
        """Startup with a bad custom catalog keeps the built-in entries."""
        path = tmp_path / "custom.yaml"
        path.write_text("just a string\n", encoding="utf-8")

        catalog = PolicyCatalog(path)
        assert catalog.get_template("AML_CTF") is not None
        assert len(catalog.get_clauses()) == len(BUILTIN_CLAUSES)

    def test_load_dict_rejects_non_mapping_entries(self, catalog: PolicyCatalog, tmp_path) -> None:
        """Entries that are not mappings fail the load cleanly."""
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps({"clauses": ["not-a-clause"]}), encoding="utf-8")

        assert catalog.load_file(path) is False

    def test_missing_required_field(self, catalog: PolicyCatalog, tmp_path) -> None:
        path = tmp_path / "catalog.yaml"
        path.write_text("clauses:\n  - title: No ID\n", encoding="utf-8")

        assert catalog.load_file(path) is False

    def test_dangling_reference_reported(self, catalog: PolicyCatalog) -> None:
        catalog.load_dict({
            "templates": [{
                "code": "BROKEN",
                "name": "Broken",
                "sections": [{"id": "s", "title": "Scope", "suggested_clauses": ["ghost"]}],
            }]
        })

        assert catalog.find_dangling_references() == {"BROKEN": ["ghost"]}

    def test_constructor_loads_custom_path(self, custom_data: dict, tmp_path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps(custom_data), encoding="utf-8")

        catalog = PolicyCatalog(path)
        assert catalog.get_template("COMPLIANCE_MONITORING") is not None


class TestSingleton:
    """Tests for the shared catalog instance."""

    def test_same_instance(self) -> None:
        assert get_policy_catalog() is get_policy_catalog()

    def test_reset(self) -> None:
        first = get_policy_catalog()
        PolicyCatalog.reset()
        assert get_policy_catalog() is not first
