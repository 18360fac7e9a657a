"""Section mapping onto the standard FCA policy structure.

Template authors title their sections freely ("Governance & Reporting",
"CDD Handling", ...). Every title is normalised into one of ten standard
sections so documents built from different templates share a layout.

Keywords match at the start of a word, not anywhere in the title. This
deliberately differs from plain substring matching: "Unrelated",
"Committee", "Controller", "Subprocessing" and "Administration" no longer
hit "related", "mi", "role" and "process", so such titles stay unmapped.
"""

from __future__ import annotations

import re

from policykit.core.policies.types import SectionType, StandardSection


STANDARD_SECTIONS: tuple[StandardSection, ...] = (
    StandardSection("purpose", "Purpose & Objectives", SectionType.POLICY),
    StandardSection("scope", "Scope & Applicability", SectionType.POLICY),
    StandardSection("definitions", "Definitions", SectionType.POLICY),
    StandardSection("policy", "Policy Statements", SectionType.POLICY),
    StandardSection("procedures", "Procedures & Processes", SectionType.PROCEDURE),
    StandardSection("roles", "Roles & Responsibilities", SectionType.POLICY),
    StandardSection("governance", "Governance & Oversight", SectionType.POLICY),
    StandardSection("monitoring", "Monitoring & Reporting", SectionType.PROCEDURE),
    StandardSection("training", "Training Requirements", SectionType.POLICY),
    StandardSection("related", "Related Policies", SectionType.POLICY),
)

STANDARD_SECTIONS_BY_ID: dict[str, StandardSection] = {s.id: s for s in STANDARD_SECTIONS}


# Evaluated top to bottom, first hit wins. A title such as
# "Governance & Reporting" must land on governance, not monitoring.
SECTION_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("purpose", "objective", "overview"), "purpose"),
    (("scope", "applicab"), "scope"),
    (("definition", "glossar", "terminolog"), "definitions"),
    (("policy", "principle", "statement", "requirement"), "policy"),
    (("procedure", "process", "handling", "workflow"), "procedures"),
    (("role", "responsibilit", "owner"), "roles"),
    (("governance", "oversight", "approval"), "governance"),
    (("monitor", "report", "mi", "metric"), "monitoring"),
    (("training", "competenc", "awareness"), "training"),
    (("related", "reference", "appendix"), "related"),
)

# Keywords are word prefixes: "MI" matches "MI Pack" but not "Committee",
# and "related" does not match "Unrelated".
_SECTION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(r"\b(?:" + "|".join(re.escape(kw) for kw in keywords) + ")"), section_id)
    for keywords, section_id in SECTION_KEYWORDS
)


def map_to_standard_section(title: str) -> StandardSection | None:
    """Classify a free-text section title.

    Args:
        title: Section title as written in the template

    Returns:
        The matching standard section, or None when the title is unmapped
    """
    title_lower = title.lower()

    for pattern, section_id in _SECTION_PATTERNS:
        if pattern.search(title_lower):
            return STANDARD_SECTIONS_BY_ID[section_id]

    return None


def is_appendix_section(section: StandardSection) -> bool:
    """Whether a standard section is limited by the appendix cap."""
    return section.section_type == SectionType.APPENDIX or section.id == "related"
