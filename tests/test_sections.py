"""Tests for section mapping onto the standard policy structure."""

from __future__ import annotations

import pytest

from policykit.core.policies.sections import (
    STANDARD_SECTIONS,
    is_appendix_section,
    map_to_standard_section,
)
from policykit.core.policies.types import SectionType


class TestStandardSections:
    """Tests for the canonical section list."""

    def test_ten_sections_in_canonical_order(self) -> None:
        """The taxonomy has exactly ten entries, purpose first, related last."""
        ids = [s.id for s in STANDARD_SECTIONS]
        assert ids == [
            "purpose", "scope", "definitions", "policy", "procedures",
            "roles", "governance", "monitoring", "training", "related",
        ]

    def test_procedure_typed_sections(self) -> None:
        """Only procedures and monitoring are procedure sections."""
        procedure_ids = {s.id for s in STANDARD_SECTIONS if s.section_type == SectionType.PROCEDURE}
        assert procedure_ids == {"procedures", "monitoring"}

    def test_related_uses_appendix_cap(self) -> None:
        """Related policies are capped like an appendix."""
        by_id = {s.id: s for s in STANDARD_SECTIONS}
        assert is_appendix_section(by_id["related"])
        assert not is_appendix_section(by_id["policy"])


class TestMapToStandardSection:
    """Tests for title classification."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Purpose & Objectives", "purpose"),
            ("Overview", "purpose"),
            ("Scope", "scope"),
            ("Applicability", "scope"),
            ("Glossary of Terms", "definitions"),
            ("Key Terminology", "definitions"),
            ("Policy Statement", "policy"),
            ("Core Principles", "policy"),
            ("Complaints Handling", "procedures"),
            ("CDD Workflow", "procedures"),
            ("Roles & Responsibilities", "roles"),
            ("Policy Owner", "policy"),
            ("Ownership", "roles"),
            ("Approval", "governance"),
            ("MI Pack", "monitoring"),
            ("Key Metrics", "monitoring"),
            ("Competence", "training"),
            ("Awareness", "training"),
            ("References", "related"),
            ("Appendix A", "related"),
        ],
    )
    def test_keyword_groups(self, title: str, expected: str) -> None:
        """Each keyword group maps to its standard section."""
        section = map_to_standard_section(title)
        assert section is not None
        assert section.id == expected

    def test_governance_and_oversight(self) -> None:
        """Governance & Oversight maps to governance."""
        section = map_to_standard_section("Governance & Oversight")
        assert section is not None
        assert section.id == "governance"

    def test_governance_checked_before_monitoring(self) -> None:
        """Earlier groups win when a title matches several."""
        section = map_to_standard_section("Governance & Reporting")
        assert section is not None
        assert section.id == "governance"

    def test_purpose_checked_before_scope(self) -> None:
        """Purpose & Scope maps to purpose."""
        assert map_to_standard_section("Purpose & Scope").id == "purpose"

    def test_case_insensitive(self) -> None:
        """Matching ignores case."""
        assert map_to_standard_section("TRAINING REQUIREMENTS").id == "policy"
        assert map_to_standard_section("STAFF TRAINING").id == "training"

    def test_unmapped_title_returns_none(self) -> None:
        """Unrelated headings are unmapped, not an error."""
        assert map_to_standard_section("Random Unrelated Heading") is None
        assert map_to_standard_section("Record Keeping") is None
        assert map_to_standard_section("") is None

    @pytest.mark.parametrize(
        "title",
        [
            "Committee Membership",
            "Committee Structure",
            "Administration",
            "Data Controller",
            "Subprocessing",
        ],
    )
    def test_keywords_match_word_starts_only(self, title: str) -> None:
        """Keywords buried inside other words do not fire."""
        assert map_to_standard_section(title) is None

    def test_keyword_stems_match_longer_words(self) -> None:
        """A keyword at a word start still matches the rest of the word."""
        assert map_to_standard_section("Data Controller Roles").id == "roles"
        assert map_to_standard_section("Processing Activities").id == "procedures"
