"""Clause tiering engine.

Controls document length by limiting the clauses kept per section for a
detail level:

- Essential: 8-12 pages total (1-2 clauses per section)
- Standard: 15-20 pages total (2-4 clauses per section)
- Comprehensive: 25-30 pages total (4-6 clauses per section)
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Sequence

from policykit.core.policies.scoring import score_clause
from policykit.core.policies.sections import (
    STANDARD_SECTIONS,
    is_appendix_section,
    map_to_standard_section,
)
from policykit.core.policies.types import (
    Clause,
    DetailLevel,
    PolicyTemplate,
    SectionLimits,
    SectionType,
    TemplateSection,
    TieredSection,
)

logger = logging.getLogger(__name__)


SECTION_LIMITS: dict[DetailLevel, SectionLimits] = {
    DetailLevel.ESSENTIAL: SectionLimits(min=1, max=2, appendix_max=1),
    DetailLevel.STANDARD: SectionLimits(min=2, max=4, appendix_max=2),
    DetailLevel.COMPREHENSIVE: SectionLimits(min=3, max=6, appendix_max=4),
}

DETAIL_LEVEL_INFO: dict[DetailLevel, dict[str, str]] = {
    DetailLevel.ESSENTIAL: {
        "label": "Essential",
        "description": "Minimum FCA compliance requirements",
        "page_estimate": "8-12 pages",
        "recommended": "Small firms, limited resources",
    },
    DetailLevel.STANDARD: {
        "label": "Standard",
        "description": "Balanced coverage for most firms",
        "page_estimate": "15-20 pages",
        "recommended": "Most FCA-regulated firms",
    },
    DetailLevel.COMPREHENSIVE: {
        "label": "Comprehensive",
        "description": "Enterprise-grade detail",
        "page_estimate": "25-30 pages",
        "recommended": "Large firms, complex operations",
    },
}

FIRM_SIZE_DETAIL_LEVELS: dict[str, DetailLevel] = {
    "small": DetailLevel.ESSENTIAL,
    "medium": DetailLevel.STANDARD,
    "large": DetailLevel.COMPREHENSIVE,
}

# ~400 words per page at ~6 characters per word
CHARS_PER_PAGE = 2400

# Cover page, document control, table of contents
FIXED_PAGE_OVERHEAD = 3


def _resolve_clause_ids(
    section: TemplateSection,
    overrides: Mapping[str, Sequence[str]] | None,
) -> Sequence[str]:
    """Clause IDs for a template section, honouring caller overrides."""
    # An empty override list still replaces the suggestions
    if overrides and overrides.get(section.id) is not None:
        return overrides[section.id]
    return section.suggested_clauses or []


def select_top_clauses(
    clauses: Sequence[Clause],
    mandatory_ids: Iterable[str],
    detail_level: DetailLevel,
    limit: int,
) -> list[Clause]:
    """Keep the ``limit`` highest-scoring clauses.

    The sort is stable, so equal scores keep their encounter order.
    """
    mandatory = set(mandatory_ids)
    scored = [
        (clause, score_clause(clause, detail_level, clause.id in mandatory))
        for clause in clauses
    ]
    scored.sort(key=lambda x: x[1], reverse=True)
    return [clause for clause, _ in scored[:limit]]


def apply_tiering(
    template: PolicyTemplate,
    all_clauses: Iterable[Clause],
    detail_level: DetailLevel | str,
    section_clause_overrides: Mapping[str, Sequence[str]] | None = None,
) -> list[TieredSection]:
    """Build the tiered section list for a template.

    Args:
        template: Policy template to assemble
        all_clauses: Clause catalog to resolve IDs against
        detail_level: Target detail level
        section_clause_overrides: Clause IDs keyed by template section ID,
            replacing that section's suggested clauses

    Returns:
        Standard sections in canonical order, followed by unmapped template
        sections in declaration order
    """
    detail_level = DetailLevel(detail_level)
    limits = SECTION_LIMITS[detail_level]
    clause_map = {c.id: c for c in all_clauses}
    mandatory_ids = template.mandatory_clauses or []

    groups: dict[str, list[TemplateSection]] = {}
    unmapped: list[TemplateSection] = []
    for section in template.sections:
        standard = map_to_standard_section(section.title)
        if standard is None:
            unmapped.append(section)
        else:
            groups.setdefault(standard.id, []).append(section)

    tiered: list[TieredSection] = []

    for standard in STANDARD_SECTIONS:
        contributing = groups.get(standard.id)
        if not contributing:
            continue

        candidates: list[Clause] = []
        seen: set[str] = set()
        for section in contributing:
            for clause_id in _resolve_clause_ids(section, section_clause_overrides):
                clause = clause_map.get(clause_id)
                if clause is None or clause.id in seen:
                    continue
                seen.add(clause.id)
                candidates.append(clause)

        if not candidates:
            continue

        is_appendix = is_appendix_section(standard)
        limit = limits.appendix_max if is_appendix else limits.max
        selected = select_top_clauses(candidates, mandatory_ids, detail_level, limit)

        if selected:
            tiered.append(TieredSection(
                id=standard.id,
                title=standard.title,
                section_type=SectionType.APPENDIX if is_appendix else standard.section_type,
                clauses=selected,
                original_section_id=contributing[0].id,
            ))

    for section in unmapped:
        candidates = [
            clause_map[clause_id]
            for clause_id in _resolve_clause_ids(section, section_clause_overrides)
            if clause_id in clause_map
        ]
        if not candidates:
            continue

        is_appendix = section.section_type == SectionType.APPENDIX
        limit = limits.appendix_max if is_appendix else limits.max
        selected = select_top_clauses(candidates, mandatory_ids, detail_level, limit)

        if selected:
            tiered.append(TieredSection(
                id=section.id,
                title=section.title,
                section_type=section.section_type or SectionType.POLICY,
                clauses=selected,
                original_section_id=section.id,
            ))

    logger.debug(
        "Tiered template %s at %s: %d sections, %d clauses",
        template.code,
        detail_level.value,
        len(tiered),
        sum(len(s.clauses) for s in tiered),
    )
    return tiered


def estimate_page_count(sections: Iterable[TieredSection]) -> int:
    """Rough page count for a tiered document, including front matter."""
    total_chars = sum(
        len(clause.content or "") + len(clause.title or "") * 2
        for section in sections
        for clause in section.clauses
    )
    return math.ceil(total_chars / CHARS_PER_PAGE) + FIXED_PAGE_OVERHEAD


def get_recommended_detail_level(firm_size: str | None) -> DetailLevel:
    """Recommended detail level for a firm size (small, medium, large)."""
    return FIRM_SIZE_DETAIL_LEVELS.get(firm_size or "", DetailLevel.STANDARD)
