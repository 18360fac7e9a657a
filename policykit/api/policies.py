"""Policy generation API endpoints.

Exposes the clause catalog and the tiering engine to the document
assembly front end:
- Templates and clauses
- Tiered document structure with page estimates
- Detail-level guidance and recommendations
- Required policies for a permission profile
- Rules evaluation for wizard answers
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from policykit.api.audit import log_audit_event
from policykit.core.policies import (
    DETAIL_LEVEL_INFO,
    SECTION_LIMITS,
    DetailLevel,
    FirmPermissions,
    PolicyRequirement,
    Rule,
    RulesEngineResult,
    apply_tiering,
    estimate_page_count,
    evaluate_rules,
    get_policy_catalog,
    get_recommended_detail_level,
    get_required_policies,
)

router = APIRouter(prefix="/policies", tags=["Policies"])


# =============================================================================
# Request/Response Models
# =============================================================================


class ClauseResponse(BaseModel):
    """A clause from the library."""

    id: str
    title: str
    summary: str
    content: str
    category: str
    applies_to: list[str] | None = None
    is_mandatory: bool = False
    permissions: dict[str, bool] | None = None


class ClauseListResponse(BaseModel):
    """List of clauses."""

    clauses: list[ClauseResponse]
    total: int


class TemplateSectionResponse(BaseModel):
    """A section of a policy template."""

    id: str
    title: str
    summary: str
    suggested_clauses: list[str]
    section_type: str | None = None
    requires_firm_notes: bool = False


class TemplateResponse(BaseModel):
    """A full policy template."""

    code: str
    name: str
    category: str
    description: str
    sections: list[TemplateSectionResponse]
    mandatory_clauses: list[str]


class TemplateSummary(BaseModel):
    """Template listing entry."""

    code: str
    name: str
    category: str
    description: str
    section_count: int


class TemplateListResponse(BaseModel):
    """List of templates."""

    templates: list[TemplateSummary]
    total: int


class TierRequest(BaseModel):
    """Request to tier a template into a document structure."""

    template_code: str = Field(..., min_length=1, max_length=64, description="Template code, e.g. AML_CTF")
    detail_level: DetailLevel | None = Field(
        default=None,
        description="Defaults to the configured default detail level",
    )
    section_clause_overrides: dict[str, list[str]] | None = Field(
        default=None,
        description="Clause IDs keyed by template section ID, replacing suggested clauses",
    )
    permissions: FirmPermissions | None = Field(
        default=None,
        description="Firm permissions used to filter applicable clauses",
    )


class TieredSectionResponse(BaseModel):
    """A section of the tiered document."""

    id: str
    title: str
    section_type: str
    clauses: list[ClauseResponse]
    original_section_id: str | None = None


class TierResponse(BaseModel):
    """Tiered document structure."""

    template_code: str
    detail_level: DetailLevel
    sections: list[TieredSectionResponse]
    total_clauses: int
    page_estimate: int


class DetailLevelResponse(BaseModel):
    """Detail level guidance."""

    level: DetailLevel
    label: str
    description: str
    page_estimate: str
    recommended: str
    limits: dict[str, int]


class RecommendationResponse(BaseModel):
    """Recommended detail level for a firm size."""

    firm_size: str
    detail_level: DetailLevel


class RequiredPoliciesResponse(BaseModel):
    """Policies required by a permission profile."""

    policies: list[PolicyRequirement]
    mandatory_count: int


class RulesEvaluateRequest(BaseModel):
    """Request to evaluate clause selection rules."""

    rules: list[Rule] = Field(default_factory=list, max_length=500)
    answers: dict[str, Any] = Field(default_factory=dict)
    firm_attributes: dict[str, Any] | None = None


# =============================================================================
# Templates and Clauses
# =============================================================================


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    q: str | None = Query(default=None, max_length=200, description="Search query"),
) -> TemplateListResponse:
    """List policy templates, optionally filtered by a search query."""
    catalog = get_policy_catalog()
    templates = catalog.search_templates(q) if q else catalog.get_templates()
    summaries = [
        TemplateSummary(
            code=t.code,
            name=t.name,
            category=t.category,
            description=t.description,
            section_count=len(t.sections),
        )
        for t in templates
    ]
    return TemplateListResponse(templates=summaries, total=len(summaries))


@router.get("/templates/{code}", response_model=TemplateResponse)
async def get_template(code: str) -> TemplateResponse:
    """Get a template by code."""
    template = get_policy_catalog().get_template(code)
    if not template:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template '{code}' not found",
        )
    return TemplateResponse.model_validate(template.to_dict())


@router.get("/clauses", response_model=ClauseListResponse)
async def list_clauses(
    template_code: str | None = Query(default=None, max_length=64),
) -> ClauseListResponse:
    """List clauses, limited to those applicable to a template when given."""
    clauses = get_policy_catalog().get_clauses(template_code)
    return ClauseListResponse(
        clauses=[ClauseResponse.model_validate(c.to_dict()) for c in clauses],
        total=len(clauses),
    )


# =============================================================================
# Tiering
# =============================================================================


@router.post("/tier", response_model=TierResponse)
async def tier_template(body: TierRequest, request: Request) -> TierResponse:
    """Assemble the tiered document structure for a template.

    Clauses are filtered to the template (and firm permissions when given)
    before tiering. The page estimate includes cover, document control and
    contents pages.
    """
    catalog = get_policy_catalog()
    template = catalog.get_template(body.template_code)
    if not template:
        log_audit_event(
            event_type="policy_tiering",
            endpoint="/policies/tier",
            method="POST",
            action="apply_tiering",
            status="not_found",
            request=request,
            resource_id=body.template_code,
        )
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template '{body.template_code}' not found",
        )

    detail_level = body.detail_level or DetailLevel(request.app.state.settings.default_detail_level)
    clauses = catalog.get_clauses(template.code, body.permissions)
    sections = apply_tiering(
        template,
        clauses,
        detail_level,
        body.section_clause_overrides,
    )
    total_clauses = sum(len(s.clauses) for s in sections)
    page_estimate = estimate_page_count(sections)

    log_audit_event(
        event_type="policy_tiering",
        endpoint="/policies/tier",
        method="POST",
        action="apply_tiering",
        status="success",
        request=request,
        resource_id=template.code,
        details={
            "detail_level": detail_level.value,
            "sections": len(sections),
            "clauses": total_clauses,
            "overrides": len(body.section_clause_overrides or {}),
        },
    )

    return TierResponse(
        template_code=template.code,
        detail_level=detail_level,
        sections=[TieredSectionResponse.model_validate(s.to_dict()) for s in sections],
        total_clauses=total_clauses,
        page_estimate=page_estimate,
    )


@router.get("/detail-levels", response_model=list[DetailLevelResponse])
async def list_detail_levels() -> list[DetailLevelResponse]:
    """Describe each detail level and its per-section clause limits."""
    return [
        DetailLevelResponse(
            level=level,
            limits=SECTION_LIMITS[level].to_dict(),
            **info,
        )
        for level, info in DETAIL_LEVEL_INFO.items()
    ]


@router.get("/recommend", response_model=RecommendationResponse)
async def recommend_detail_level(
    firm_size: str = Query(..., max_length=32, description="small, medium or large"),
) -> RecommendationResponse:
    """Recommend a detail level for a firm size."""
    return RecommendationResponse(
        firm_size=firm_size,
        detail_level=get_recommended_detail_level(firm_size),
    )


# =============================================================================
# Permissions and Rules
# =============================================================================


@router.post("/required", response_model=RequiredPoliciesResponse)
async def required_policies(permissions: FirmPermissions) -> RequiredPoliciesResponse:
    """List the policies a firm's permission profile requires."""
    policies = get_required_policies(permissions)
    return RequiredPoliciesResponse(
        policies=policies,
        mandatory_count=sum(1 for p in policies if p.mandatory),
    )


@router.post("/rules/evaluate", response_model=RulesEngineResult)
async def evaluate_rules_endpoint(body: RulesEvaluateRequest, request: Request) -> RulesEngineResult:
    """Evaluate clause selection rules against wizard answers."""
    result = evaluate_rules(body.rules, body.answers, body.firm_attributes)

    log_audit_event(
        event_type="rules_evaluation",
        endpoint="/policies/rules/evaluate",
        method="POST",
        action="evaluate_rules",
        status="success",
        request=request,
        details={
            "rules": len(body.rules),
            "fired": sum(1 for r in result.rules_fired if r.condition_met),
        },
    )
    return result
