"""Firm permissions and the policies they require.

Maps a firm's FCA permission profile to:
- the clauses applicable to a template
- the policy documents the firm is expected to maintain
"""

from __future__ import annotations

from typing import Callable, Iterable

from pydantic import BaseModel, Field

from policykit.core.policies.types import Clause


class FirmPermissions(BaseModel):
    """FCA permission and client profile flags for a firm."""

    # Regulated activities
    investment_services: bool = Field(default=False, description="Advising, arranging, managing investments")
    payment_services: bool = Field(default=False, description="Payment initiation, account information")
    e_money: bool = Field(default=False, description="Electronic money issuance")
    credit_broking: bool = Field(default=False, description="Consumer credit intermediation")

    # Client assets
    client_money: bool = Field(default=False, description="Hold or control client money (CASS 7)")
    client_assets: bool = Field(default=False, description="Safeguard and administer assets (CASS 6)")
    safeguarding: bool = Field(default=False, description="Safeguard relevant funds (PSR/EMR)")

    # Insurance and home finance
    insurance_mediation: bool = Field(default=False, description="Insurance distribution activities")
    mortgage_mediation: bool = Field(default=False, description="Home finance activities")

    # Client base
    retail_clients: bool = Field(default=True, description="Consumer Duty applies")
    professional_clients: bool = Field(default=False, description="Per se or elective professionals")
    eligible_counterparties: bool = Field(default=False, description="Large institutions")
    complex_products: bool = Field(default=False, description="PRIIPs, derivatives, structured products")

    @property
    def has_regulated_activity(self) -> bool:
        """Whether any regulated activity permission is held."""
        return any((
            self.investment_services,
            self.payment_services,
            self.e_money,
            self.credit_broking,
            self.insurance_mediation,
            self.mortgage_mediation,
        ))


DEFAULT_PERMISSIONS = FirmPermissions()


class PolicyRequirement(BaseModel):
    """A policy document a firm needs, and why."""

    code: str = Field(description="Template code, e.g. AML_CTF")
    name: str = Field(description="Policy name")
    reason: str = Field(description="Why the policy is required")
    mandatory: bool = Field(default=True)


# Evaluated in order; a code already required keeps its first reason.
POLICY_REQUIREMENT_RULES: list[tuple[Callable[[FirmPermissions], bool], PolicyRequirement]] = [
    (
        lambda p: True,
        PolicyRequirement(
            code="RISK_MGMT",
            name="Risk Management Framework",
            reason="All authorised firms must have adequate risk management (SYSC 7)",
        ),
    ),
    (
        lambda p: True,
        PolicyRequirement(
            code="COMPLIANCE_MONITORING",
            name="Compliance Monitoring Plan",
            reason="All authorised firms must monitor compliance (SYSC 6.1)",
        ),
    ),
    (
        lambda p: True,
        PolicyRequirement(
            code="COMPLAINTS",
            name="Complaints Handling Policy",
            reason="Complaints handling rules apply to all authorised firms (DISP 1)",
        ),
    ),
    (
        lambda p: p.has_regulated_activity,
        PolicyRequirement(
            code="AML_CTF",
            name="Anti-Money Laundering & Counter-Terrorist Financing",
            reason="Regulated activities fall within the Money Laundering Regulations 2017",
        ),
    ),
    (
        lambda p: p.retail_clients,
        PolicyRequirement(
            code="CONSUMER_DUTY",
            name="Consumer Duty Policy",
            reason="Retail customers bring the firm within the Consumer Duty (PRIN 2A)",
        ),
    ),
    (
        lambda p: p.retail_clients,
        PolicyRequirement(
            code="VULNERABLE_CUST",
            name="Vulnerable Customers Policy",
            reason="Retail customers require fair treatment of vulnerable customers (FG21/1)",
        ),
    ),
    (
        lambda p: p.payment_services or p.e_money or p.safeguarding,
        PolicyRequirement(
            code="SAFEGUARDING",
            name="Safeguarding Policy",
            reason="Relevant funds must be safeguarded under the PSRs 2017 / EMRs 2011",
        ),
    ),
    (
        lambda p: p.client_money or p.client_assets,
        PolicyRequirement(
            code="CASS",
            name="Client Assets (CASS) Policy",
            reason="Holding client money or assets brings the firm within CASS",
        ),
    ),
    (
        lambda p: p.investment_services,
        PolicyRequirement(
            code="BEST_EXECUTION",
            name="Best Execution Policy",
            reason="Investment services require best execution arrangements (COBS 11.2A)",
        ),
    ),
    (
        lambda p: p.investment_services,
        PolicyRequirement(
            code="CONFLICTS",
            name="Conflicts of Interest Policy",
            reason="Investment firms must identify and manage conflicts (SYSC 10)",
        ),
    ),
    (
        lambda p: p.complex_products,
        PolicyRequirement(
            code="PRODUCT_GOVERNANCE",
            name="Product Governance Policy",
            reason="Complex products require product governance (PROD)",
            mandatory=False,
        ),
    ),
]


def get_required_policies(permissions: FirmPermissions | None = None) -> list[PolicyRequirement]:
    """List the policies a firm's permissions require.

    Args:
        permissions: Firm permission flags (defaults used when omitted)

    Returns:
        Requirements in rule-table order, one per policy code
    """
    permissions = permissions or DEFAULT_PERMISSIONS
    required: dict[str, PolicyRequirement] = {}

    for predicate, requirement in POLICY_REQUIREMENT_RULES:
        if requirement.code in required:
            continue
        if predicate(permissions):
            required[requirement.code] = requirement

    return list(required.values())


def clause_matches_permissions(clause: Clause, permissions: FirmPermissions) -> bool:
    """Check a clause's permission predicate against firm flags."""
    if not clause.permissions:
        return True

    for flag, expected in clause.permissions.items():
        if bool(getattr(permissions, flag, False)) != bool(expected):
            return False
    return True


def get_applicable_clauses(
    clauses: Iterable[Clause],
    template_code: str,
    permissions: FirmPermissions | None = None,
) -> list[Clause]:
    """Filter a clause catalog down to a template and firm.

    Args:
        clauses: Full clause catalog
        template_code: Template being assembled
        permissions: Firm flags; the permission predicate is skipped when omitted

    Returns:
        Applicable clauses in catalog order
    """
    applicable = []
    for clause in clauses:
        if clause.applies_to is not None and template_code not in clause.applies_to:
            continue
        if permissions is not None and not clause_matches_permissions(clause, permissions):
            continue
        applicable.append(clause)
    return applicable
