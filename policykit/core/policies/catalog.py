"""Policy catalog with the built-in clause library and templates.

The catalog is built once at process start and treated as read-only
afterwards. Firms generate derived documents from it; they never edit it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from policykit.core.policies.permissions import FirmPermissions, get_applicable_clauses
from policykit.core.policies.types import (
    Clause,
    ClauseCategory,
    PolicyTemplate,
    SectionType,
    TemplateSection,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Clause Library
# =============================================================================

BUILTIN_CLAUSES: list[Clause] = [
    # Shared clauses
    Clause(
        id="board-oversight",
        title="Board Oversight",
        summary="Board ownership of the policy and its annual approval.",
        content=(
            "The Board retains ultimate responsibility for this policy. It reviews and approves "
            "the policy at least annually, receives management information on its operation, "
            "and challenges senior management where outcomes fall short of expectations. "
            "Material changes are presented to the Board for approval before adoption."
        ),
        category=ClauseCategory.GOVERNANCE,
    ),
    Clause(
        id="policy-review",
        title="Policy Review and Version Control",
        summary="Review cycle and document control.",
        content=(
            "This policy is reviewed at least annually, and sooner where there is a change in "
            "regulation, business model or risk profile. The compliance function maintains the "
            "version history, records approvals and circulates updates to affected staff."
        ),
        category=ClauseCategory.GOVERNANCE,
    ),
    Clause(
        id="related-policies",
        title="Related Policies and References",
        summary="Cross-references to the wider policy framework.",
        content=(
            "This policy should be read alongside the firm's Compliance Monitoring Plan, Risk "
            "Management Framework, Complaints Handling Policy and Data Protection Policy."
        ),
        category=ClauseCategory.GOVERNANCE,
    ),
    Clause(
        id="consumer-duty-outcomes",
        title="Consumer Duty Outcomes",
        summary="Alignment with the four Consumer Duty outcomes.",
        content=(
            "The firm acts to deliver good outcomes for retail customers in line with PRIN 2A. "
            "This policy supports the products and services, price and value, consumer "
            "understanding and consumer support outcomes, and the firm monitors those outcomes "
            "through its Consumer Duty board report."
        ),
        category=ClauseCategory.CUSTOMER,
        permissions={"retail_clients": True},
    ),

    # AML / CTF
    Clause(
        id="aml-purpose",
        title="Purpose of this Policy",
        summary="Why the firm maintains an AML/CTF policy.",
        content=(
            "This policy sets out how the firm prevents its services being used for money "
            "laundering or terrorist financing and how it meets its obligations under the Money "
            "Laundering Regulations 2017, the Proceeds of Crime Act 2002 and FCA SYSC 6.3."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-regulatory-framework",
        title="Regulatory Framework",
        summary="Primary legislation and guidance.",
        content=(
            "The firm's regulatory obligations derive from the MLRs 2017, POCA 2002, the "
            "Terrorism Act 2000, the Sanctions and Anti-Money Laundering Act 2018, the FCA "
            "Financial Crime Guide and the JMLSG Guidance."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-scope",
        title="Scope and Application",
        summary="Who and what the policy covers.",
        content=(
            "This policy applies to all directors, employees, contractors and appointed "
            "representatives of the firm and to every product, service and delivery channel "
            "the firm offers."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-definitions",
        title="Definitions",
        summary="Key AML terms.",
        content=(
            "Money laundering means the process by which the proceeds of crime are converted "
            "into assets that appear legitimate. Terrorist financing means providing or "
            "collecting funds for use in terrorism. A politically exposed person (PEP) is an "
            "individual entrusted with a prominent public function."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-bwra",
        title="Business-Wide Risk Assessment",
        summary="Firm-wide assessment of ML/TF risk.",
        content=(
            "The firm maintains a documented business-wide risk assessment covering customers, "
            "countries, products, transactions and delivery channels. It is refreshed annually "
            "and whenever a new product or market is introduced."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-cdd",
        title="Customer Due Diligence Requirements",
        summary="Identification and verification of customers.",
        content=(
            "Customer due diligence is mandatory before establishing a business relationship. "
            "The firm identifies and verifies the customer and any beneficial owner, "
            "understands the purpose and intended nature of the relationship, and records the "
            "evidence obtained."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
        is_mandatory=True,
    ),
    Clause(
        id="aml-edd",
        title="Enhanced Due Diligence",
        summary="Higher-risk relationships.",
        content=(
            "Enhanced due diligence applies to high-risk customers, high-risk third countries "
            "and complex or unusually large transactions. It includes establishing source of "
            "funds and source of wealth and obtaining senior management approval."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-pep",
        title="Politically Exposed Persons",
        summary="Treatment of PEPs, family members and close associates.",
        content=(
            "The firm screens customers against PEP lists at onboarding and on an ongoing basis. "
            "Domestic PEPs are assessed on a risk-sensitive basis in line with FCA FG17/6."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-ongoing-monitoring",
        title="Ongoing Monitoring Process",
        summary="Transaction monitoring and periodic review.",
        content=(
            "The firm scrutinises transactions throughout the relationship and keeps customer "
            "information up to date. Review frequency follows the customer's risk rating, and "
            "alerts are escalated to the MLRO within agreed timelines."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-mlro",
        title="Money Laundering Reporting Officer",
        summary="Appointment and responsibilities of the MLRO.",
        content=(
            "The firm appoints a Money Laundering Reporting Officer (SMF17) who is responsible "
            "for oversight of the firm's compliance with FCA rules on systems and controls "
            "against money laundering and for reporting suspicions to the National Crime Agency."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
        is_mandatory=True,
    ),
    Clause(
        id="aml-staff-duties",
        title="Staff Responsibilities",
        summary="Obligations of every member of staff.",
        content=(
            "All staff must complete customer checks, remain alert to suspicious activity and "
            "report concerns to the MLRO without delay. Tipping off a customer is a criminal "
            "offence."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-sar",
        title="Suspicious Activity Reporting",
        summary="Internal and external reporting of suspicion.",
        content=(
            "Staff submit internal suspicious activity reports to the MLRO, who decides whether "
            "to submit a SAR to the National Crime Agency and whether a defence against money "
            "laundering is required before proceeding."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
        is_mandatory=True,
    ),
    Clause(
        id="aml-mlro-report",
        title="Annual MLRO Report",
        summary="Reporting to the Board.",
        content=(
            "The MLRO reports to the Board at least annually on the operation and effectiveness "
            "of the firm's AML systems and controls, including management information on "
            "alerts, SARs and training completion."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-training",
        title="AML Training",
        summary="Awareness training for staff.",
        content=(
            "All relevant employees receive AML/CTF training on joining and refresher training "
            "at least annually. Completion is tracked and reported to the MLRO."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-record-keeping",
        title="Record Keeping",
        summary="Retention of CDD and transaction records.",
        content=(
            "CDD records and supporting transaction records are retained for five years from "
            "the end of the business relationship and then deleted unless retention is "
            "required by law."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),
    Clause(
        id="aml-red-flags",
        title="Appendix: Red Flag Checklist",
        summary="Indicators of potential money laundering.",
        content=(
            "Examples include reluctance to provide identification, unexplained third-party "
            "payments, transactions inconsistent with the customer profile, and use of "
            "high-risk jurisdictions without a clear rationale."
        ),
        category=ClauseCategory.FINANCIAL_CRIME,
        applies_to=["AML_CTF"],
    ),

    # Vulnerable customers
    Clause(
        id="vc-purpose",
        title="Purpose",
        summary="Why the firm maintains a vulnerable customers policy.",
        content=(
            "This policy sets out how the firm identifies and supports customers in vulnerable "
            "circumstances so that they experience outcomes as good as those of other "
            "customers, in line with FCA FG21/1."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-drivers",
        title="Drivers of Vulnerability",
        summary="Health, life events, resilience and capability.",
        content=(
            "A vulnerable customer is someone who, due to their personal circumstances, is "
            "especially susceptible to harm. The FCA identifies four drivers: health, life "
            "events, resilience and capability."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-fair-outcomes",
        title="Fair Treatment Principle",
        summary="Commitment to fair outcomes.",
        content=(
            "The firm treats vulnerable customers fairly at every stage of the customer "
            "journey. This is a regulatory obligation under Principle 12 and is embedded in "
            "product design, communications and customer service."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-identification",
        title="Identifying Vulnerability",
        summary="Recognising indicators of vulnerability.",
        content=(
            "Staff are trained to recognise indicators of vulnerability in conversations and "
            "written contact, and to record them with the customer's consent."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-disclosure",
        title="Recording Disclosures",
        summary="Handling of information customers share.",
        content=(
            "Information disclosed by customers is recorded accurately, used only to provide "
            "appropriate support and processed in line with UK GDPR."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-support",
        title="Support Procedure",
        summary="Adjustments and tailored support.",
        content=(
            "Where vulnerability is identified, staff agree reasonable adjustments with the "
            "customer, such as alternative communication channels, extra time or a dedicated "
            "point of contact, and escalate complex cases to a specialist team."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-third-party",
        title="Third-Party Representatives",
        summary="Dealing with carers and attorneys.",
        content=(
            "The firm accepts trusted third parties such as carers and holders of a power of "
            "attorney and verifies their authority before acting on their instructions."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-mi",
        title="Vulnerability Monitoring and Reporting",
        summary="Outcome testing and management information.",
        content=(
            "The firm monitors outcomes for vulnerable customers against those of other "
            "customers and reports management information to the Board quarterly."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),
    Clause(
        id="vc-training",
        title="Staff Training",
        summary="Training for customer-facing staff.",
        content=(
            "Customer-facing staff complete vulnerability training on induction and annually "
            "thereafter, with additional training for specialist support teams."
        ),
        category=ClauseCategory.CUSTOMER,
        applies_to=["VULNERABLE_CUST"],
    ),

    # Safeguarding
    Clause(
        id="sg-purpose",
        title="Purpose and Scope",
        summary="Safeguarding obligations for payment and e-money firms.",
        content=(
            "This policy sets out how the firm safeguards relevant funds received for the "
            "execution of payment transactions or in exchange for electronic money, in line "
            "with the Payment Services Regulations 2017 and the Electronic Money Regulations 2011."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
    ),
    Clause(
        id="sg-segregation",
        title="Segregation of Relevant Funds",
        summary="Segregation method.",
        content=(
            "Relevant funds are segregated from the firm's own funds no later than the end of "
            "the business day following receipt and placed in a designated safeguarding "
            "account with an authorised credit institution."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
        is_mandatory=True,
    ),
    Clause(
        id="sg-insurance-method",
        title="Insurance or Guarantee Method",
        summary="Alternative safeguarding method.",
        content=(
            "Where the firm uses the insurance or comparable guarantee method, the policy is "
            "held with an authorised insurer outside the firm's group and covers an amount "
            "equal to the relevant funds at all times."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
        permissions={"safeguarding": True},
    ),
    Clause(
        id="sg-reconciliation",
        title="Daily Reconciliation Process",
        summary="Internal and external reconciliations.",
        content=(
            "The finance team performs internal safeguarding reconciliations every business "
            "day and external reconciliations against bank statements at least monthly. "
            "Shortfalls are corrected the same day and reported to the compliance function."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
        is_mandatory=True,
    ),
    Clause(
        id="sg-resolution-pack",
        title="Resolution Pack",
        summary="Information for an insolvency practitioner.",
        content=(
            "The firm maintains a resolution pack that would allow an insolvency practitioner "
            "to identify and return relevant funds promptly."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
    ),
    Clause(
        id="sg-audit",
        title="Annual Safeguarding Audit",
        summary="External audit of safeguarding arrangements.",
        content=(
            "An appropriately qualified auditor reviews the firm's safeguarding arrangements "
            "annually and the report is submitted to the FCA within the required timeframe."
        ),
        category=ClauseCategory.OPERATIONS,
        applies_to=["SAFEGUARDING"],
    ),
]


# =============================================================================
# Policy Templates
# =============================================================================

BUILTIN_TEMPLATES: list[PolicyTemplate] = [
    PolicyTemplate(
        code="AML_CTF",
        name="Anti-Money Laundering & Counter-Terrorist Financing Policy",
        category="Financial Crime",
        description="Systems and controls to prevent money laundering and terrorist financing.",
        sections=[
            TemplateSection(
                id="aml-purpose",
                title="Purpose & Objectives",
                suggested_clauses=["aml-purpose", "aml-regulatory-framework"],
            ),
            TemplateSection(id="aml-scope", title="Scope", suggested_clauses=["aml-scope"]),
            TemplateSection(
                id="aml-definitions",
                title="Definitions",
                suggested_clauses=["aml-definitions"],
            ),
            TemplateSection(
                id="aml-bwra",
                title="Business-Wide Risk Assessment",
                suggested_clauses=["aml-bwra"],
                requires_firm_notes=True,
            ),
            TemplateSection(
                id="aml-cdd",
                title="Customer Due Diligence Procedures",
                suggested_clauses=["aml-cdd", "aml-edd", "aml-pep", "aml-ongoing-monitoring"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="aml-roles",
                title="Roles & Responsibilities",
                suggested_clauses=["aml-mlro", "aml-staff-duties"],
            ),
            TemplateSection(
                id="aml-governance",
                title="Governance",
                suggested_clauses=["board-oversight", "aml-mlro-report", "policy-review"],
            ),
            TemplateSection(
                id="aml-sar",
                title="Suspicious Activity Reporting",
                suggested_clauses=["aml-sar"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="aml-training",
                title="Training & Awareness",
                suggested_clauses=["aml-training"],
            ),
            TemplateSection(
                id="aml-records",
                title="Record Keeping",
                suggested_clauses=["aml-record-keeping"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="aml-appendix",
                title="Appendix: Red Flags",
                suggested_clauses=["aml-red-flags", "related-policies"],
                section_type=SectionType.APPENDIX,
            ),
        ],
        mandatory_clauses=["aml-cdd", "aml-mlro", "aml-sar"],
    ),
    PolicyTemplate(
        code="VULNERABLE_CUST",
        name="Vulnerable Customers Policy",
        category="Customer",
        description="Identifying and supporting customers in vulnerable circumstances.",
        sections=[
            TemplateSection(id="vc-purpose", title="Purpose", suggested_clauses=["vc-purpose"]),
            TemplateSection(
                id="vc-definition",
                title="Definition of Vulnerability",
                suggested_clauses=["vc-drivers"],
            ),
            TemplateSection(
                id="vc-policy",
                title="Policy Statement",
                suggested_clauses=["vc-fair-outcomes", "consumer-duty-outcomes"],
            ),
            TemplateSection(
                id="vc-identification",
                title="Identifying Vulnerable Customers",
                suggested_clauses=["vc-identification", "vc-disclosure"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="vc-handling",
                title="Handling & Support",
                suggested_clauses=["vc-support", "vc-third-party"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="vc-governance",
                title="Governance & Oversight",
                suggested_clauses=["vc-mi", "board-oversight", "policy-review"],
            ),
            TemplateSection(id="vc-training", title="Staff Training", suggested_clauses=["vc-training"]),
            TemplateSection(
                id="vc-related",
                title="Related Policies",
                suggested_clauses=["related-policies"],
            ),
        ],
        mandatory_clauses=["vc-fair-outcomes"],
    ),
    PolicyTemplate(
        code="SAFEGUARDING",
        name="Safeguarding Policy",
        category="Operations",
        description="Protection of relevant funds for payment and e-money institutions.",
        sections=[
            TemplateSection(id="sg-purpose", title="Purpose & Scope", suggested_clauses=["sg-purpose"]),
            TemplateSection(
                id="sg-method",
                title="Safeguarding Method",
                suggested_clauses=["sg-segregation", "sg-insurance-method"],
                requires_firm_notes=True,
            ),
            TemplateSection(
                id="sg-reconciliation",
                title="Reconciliation Process",
                suggested_clauses=["sg-reconciliation"],
                section_type=SectionType.PROCEDURE,
            ),
            TemplateSection(
                id="sg-governance",
                title="Governance & Oversight",
                suggested_clauses=["board-oversight", "sg-resolution-pack", "policy-review"],
            ),
            TemplateSection(
                id="sg-audit",
                title="Annual Safeguarding Audit",
                suggested_clauses=["sg-audit"],
            ),
        ],
        mandatory_clauses=["sg-segregation", "sg-reconciliation"],
    ),
]


class PolicyCatalog:
    """Registry of clauses and policy templates.

    Built-in entries come from the module constants; custom entries can be
    loaded from a JSON or YAML file with ``clauses`` and ``templates`` lists.
    """

    _instance: PolicyCatalog | None = None

    def __init__(self, custom_catalog_path: Path | None = None):
        self._clauses: dict[str, Clause] = {c.id: c for c in BUILTIN_CLAUSES}
        self._templates: dict[str, PolicyTemplate] = {t.code: t for t in BUILTIN_TEMPLATES}

        if custom_catalog_path and custom_catalog_path.exists():
            self.load_file(custom_catalog_path)

    @classmethod
    def get_instance(cls, custom_path: Path | None = None) -> PolicyCatalog:
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls(custom_path)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset singleton (for testing)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_template(self, code: str) -> PolicyTemplate | None:
        """Get a template by code."""
        return self._templates.get(code)

    def get_templates(self) -> list[PolicyTemplate]:
        """Get all templates."""
        return list(self._templates.values())

    def get_clause(self, clause_id: str) -> Clause | None:
        """Get a clause by ID."""
        return self._clauses.get(clause_id)

    def get_clauses(
        self,
        template_code: str | None = None,
        permissions: FirmPermissions | None = None,
    ) -> list[Clause]:
        """Get clauses, optionally filtered to a template and firm."""
        clauses = list(self._clauses.values())
        if template_code is None:
            return clauses
        return get_applicable_clauses(clauses, template_code, permissions)

    def search_templates(self, query: str, limit: int = 10) -> list[PolicyTemplate]:
        """Search templates by name, description, or category.

        Args:
            query: Search query
            limit: Max results

        Returns:
            Matching templates sorted by relevance
        """
        query_lower = query.lower()
        query_terms = set(query_lower.split())

        results: list[tuple[PolicyTemplate, float]] = []

        for template in self._templates.values():
            score = 0.0

            # Name match (highest weight)
            if query_lower in template.name.lower():
                score += 3.0
            elif any(term in template.name.lower() for term in query_terms):
                score += 1.5

            if query_lower in template.description.lower():
                score += 2.0
            elif any(term in template.description.lower() for term in query_terms):
                score += 1.0

            if query_lower in template.category.lower():
                score += 2.0

            if query_lower == template.code.lower():
                score += 3.0

            if score > 0:
                results.append((template, score))

        results.sort(key=lambda x: x[1], reverse=True)

        return [t for t, _ in results[:limit]]

    def find_dangling_references(self) -> dict[str, list[str]]:
        """Clause IDs referenced by templates but missing from the library.

        Tiering tolerates these; this is a data-quality report.
        """
        dangling: dict[str, list[str]] = {}
        for template in self._templates.values():
            referenced = list(template.mandatory_clauses)
            for section in template.sections:
                referenced.extend(section.suggested_clauses)
            missing = [cid for cid in dict.fromkeys(referenced) if cid not in self._clauses]
            if missing:
                dangling[template.code] = missing
        return dangling

    # -------------------------------------------------------------------------
    # Custom entries
    # -------------------------------------------------------------------------

    def register_clause(self, clause: Clause) -> None:
        """Register a custom clause, replacing any clause with the same ID."""
        self._clauses[clause.id] = clause

    def register_template(self, template: PolicyTemplate) -> None:
        """Register a custom template."""
        template.is_builtin = False
        self._templates[template.code] = template

    def load_dict(self, data: dict[str, Any]) -> tuple[int, int]:
        """Register clauses and templates from a dictionary.

        Returns:
            Number of clauses and templates loaded
        """
        clauses = [Clause.from_dict(c) for c in data.get("clauses", [])]
        templates = [PolicyTemplate.from_dict(t) for t in data.get("templates", [])]

        for clause in clauses:
            self.register_clause(clause)
        for template in templates:
            self.register_template(template)

        return len(clauses), len(templates)

    def load_file(self, path: Path) -> bool:
        """Load custom entries from a JSON or YAML file.

        A malformed file is logged and skipped; the catalog keeps its
        current contents.
        """
        try:
            text = path.read_text(encoding="utf-8")
            if path.suffix.lower() in (".yaml", ".yml"):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
            if not isinstance(data, dict):
                logger.error(
                    "Failed to load custom catalog %s: expected a mapping, got %s",
                    path, type(data).__name__,
                )
                return False
            n_clauses, n_templates = self.load_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError, yaml.YAMLError) as e:
            logger.error("Failed to load custom catalog %s: %s", path, e)
            return False

        logger.info(
            "Loaded custom catalog %s: %d clauses, %d templates",
            path, n_clauses, n_templates,
        )
        dangling = self.find_dangling_references()
        if dangling:
            logger.warning("Templates reference unknown clauses: %s", dangling)
        return True


def get_policy_catalog(custom_path: Path | None = None) -> PolicyCatalog:
    """Get the singleton policy catalog."""
    return PolicyCatalog.get_instance(custom_path)
