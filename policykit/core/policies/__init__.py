"""Policy document assembly for FCA-regulated firms.

Provides:
- Built-in clause library and policy templates
- Section mapping onto the standard FCA policy structure
- Clause scoring and detail-level tiering with page estimates
- Permission-driven clause filtering and required policies
- Rules engine for answer-driven clause selection
"""

from __future__ import annotations

from policykit.core.policies.types import (
    Clause,
    ClauseCategory,
    DetailLevel,
    PolicyTemplate,
    SectionLimits,
    SectionType,
    StandardSection,
    TemplateSection,
    TieredSection,
)
from policykit.core.policies.sections import (
    STANDARD_SECTIONS,
    map_to_standard_section,
)
from policykit.core.policies.scoring import (
    PRIORITY_KEYWORDS,
    score_clause,
)
from policykit.core.policies.tiering import (
    DETAIL_LEVEL_INFO,
    SECTION_LIMITS,
    apply_tiering,
    estimate_page_count,
    get_recommended_detail_level,
)
from policykit.core.policies.permissions import (
    DEFAULT_PERMISSIONS,
    FirmPermissions,
    PolicyRequirement,
    get_applicable_clauses,
    get_required_policies,
)
from policykit.core.policies.catalog import (
    BUILTIN_CLAUSES,
    BUILTIN_TEMPLATES,
    PolicyCatalog,
    get_policy_catalog,
)
from policykit.core.policies.rules import (
    Rule,
    RuleAction,
    RuleCondition,
    RuleLoader,
    RulesEngineResult,
    evaluate_condition,
    evaluate_rules,
)

__all__ = [
    # Types
    "Clause",
    "ClauseCategory",
    "DetailLevel",
    "PolicyTemplate",
    "SectionLimits",
    "SectionType",
    "StandardSection",
    "TemplateSection",
    "TieredSection",
    # Sections and scoring
    "STANDARD_SECTIONS",
    "map_to_standard_section",
    "PRIORITY_KEYWORDS",
    "score_clause",
    # Tiering
    "DETAIL_LEVEL_INFO",
    "SECTION_LIMITS",
    "apply_tiering",
    "estimate_page_count",
    "get_recommended_detail_level",
    # Permissions
    "DEFAULT_PERMISSIONS",
    "FirmPermissions",
    "PolicyRequirement",
    "get_applicable_clauses",
    "get_required_policies",
    # Catalog
    "BUILTIN_CLAUSES",
    "BUILTIN_TEMPLATES",
    "PolicyCatalog",
    "get_policy_catalog",
    # Rules
    "Rule",
    "RuleAction",
    "RuleCondition",
    "RuleLoader",
    "RulesEngineResult",
    "evaluate_condition",
    "evaluate_rules",
]
