"""Clause priority scoring.

Ranks candidate clauses inside a section. The formula is part of the
document contract: identical inputs must always select and order the same
clauses, so keep it exactly as is.
"""

from __future__ import annotations

from policykit.core.policies.types import Clause, DetailLevel


MANDATORY_BONUS = 100

# Only the head of the body is scanned for keywords
CONTENT_SCAN_CHARS = 500

# Keyword tier -> (keywords, title points, content points)
PRIORITY_KEYWORDS: dict[DetailLevel, tuple[tuple[str, ...], int, int]] = {
    DetailLevel.ESSENTIAL: (
        (
            "purpose", "scope", "definition", "mandatory", "requirement",
            "compliance", "fca", "regulatory", "principle", "obligation",
        ),
        20,
        5,
    ),
    DetailLevel.STANDARD: (
        (
            "procedure", "process", "responsible", "governance", "oversight",
            "monitoring", "reporting", "escalation", "timeline",
        ),
        15,
        3,
    ),
    DetailLevel.COMPREHENSIVE: (
        (
            "appendix", "template", "checklist", "example", "case study",
            "detailed", "enhanced", "additional",
        ),
        10,
        2,
    ),
}

# Keyword tiers consulted at each detail level
ACTIVE_TIERS: dict[DetailLevel, tuple[DetailLevel, ...]] = {
    DetailLevel.ESSENTIAL: (DetailLevel.ESSENTIAL,),
    DetailLevel.STANDARD: (DetailLevel.ESSENTIAL, DetailLevel.STANDARD),
    DetailLevel.COMPREHENSIVE: (
        DetailLevel.ESSENTIAL,
        DetailLevel.STANDARD,
        DetailLevel.COMPREHENSIVE,
    ),
}

# Detail level -> (content length threshold, penalty)
LENGTH_PENALTIES: dict[DetailLevel, tuple[int, int]] = {
    DetailLevel.ESSENTIAL: (2000, 20),
    DetailLevel.STANDARD: (4000, 10),
}


def score_clause(
    clause: Clause,
    detail_level: DetailLevel,
    is_mandatory: bool = False,
) -> int:
    """Score a clause for ranking within its section.

    Args:
        clause: Candidate clause
        detail_level: Target detail level
        is_mandatory: Whether the enclosing template marks the clause mandatory

    Returns:
        Integer priority, higher first. May be negative.
    """
    detail_level = DetailLevel(detail_level)
    score = 0

    if is_mandatory or clause.is_mandatory:
        score += MANDATORY_BONUS

    content = clause.content or ""
    title_lower = clause.title.lower()
    content_lower = content.lower()[:CONTENT_SCAN_CHARS]

    for tier in ACTIVE_TIERS[detail_level]:
        keywords, title_points, content_points = PRIORITY_KEYWORDS[tier]
        for keyword in keywords:
            if keyword in title_lower:
                score += title_points
            if keyword in content_lower:
                score += content_points

    penalty = LENGTH_PENALTIES.get(detail_level)
    if penalty and len(content) > penalty[0]:
        score -= penalty[1]

    return score
