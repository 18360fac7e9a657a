"""Policy catalog types and structures.

Provides the foundational types for clause tiering and policy assembly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ClauseCategory(str, Enum):
    """Clause library categories."""

    GOVERNANCE = "governance"
    OPERATIONS = "operations"
    CUSTOMER = "customer"
    FINANCIAL_CRIME = "financial-crime"
    MARKET = "market"


class SectionType(str, Enum):
    """How a section is presented in the generated document."""

    POLICY = "policy"
    PROCEDURE = "procedure"
    APPENDIX = "appendix"


class DetailLevel(str, Enum):
    """Document detail tiers, shortest first."""

    ESSENTIAL = "essential"  # 8-12 pages
    STANDARD = "standard"  # 15-20 pages
    COMPREHENSIVE = "comprehensive"  # 25-30 pages


@dataclass(frozen=True)
class SectionLimits:
    """Clause-count bounds per section for a detail level."""

    min: int
    max: int
    appendix_max: int

    def to_dict(self) -> dict[str, int]:
        return {"min": self.min, "max": self.max, "appendix_max": self.appendix_max}


@dataclass
class Clause:
    """An atomic, reusable piece of policy text.

    ``applies_to`` of ``None`` means the clause is valid for every template.
    ``permissions`` is a partial predicate over firm permission flags: the
    clause only applies when every listed flag has the listed value.
    """

    id: str
    title: str
    summary: str = ""
    content: str = ""
    category: ClauseCategory = ClauseCategory.GOVERNANCE
    applies_to: list[str] | None = None
    is_mandatory: bool = False
    permissions: dict[str, bool] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "category": self.category.value if isinstance(self.category, ClauseCategory) else self.category,
            "applies_to": self.applies_to,
            "is_mandatory": self.is_mandatory,
            "permissions": self.permissions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Clause:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            title=data["title"],
            summary=data.get("summary", ""),
            content=data.get("content", ""),
            category=ClauseCategory(data.get("category", "governance")),
            applies_to=data.get("applies_to"),
            is_mandatory=data.get("is_mandatory", False),
            permissions=data.get("permissions"),
        )


@dataclass
class TemplateSection:
    """One logical subdivision of a policy template."""

    id: str
    title: str
    summary: str = ""
    suggested_clauses: list[str] = field(default_factory=list)
    section_type: SectionType | None = None
    requires_firm_notes: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "suggested_clauses": self.suggested_clauses,
            "section_type": self.section_type.value if self.section_type else None,
            "requires_firm_notes": self.requires_firm_notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TemplateSection:
        """Create from dictionary."""
        section_type = data.get("section_type")
        return cls(
            id=data["id"],
            title=data["title"],
            summary=data.get("summary", ""),
            suggested_clauses=list(data.get("suggested_clauses", [])),
            section_type=SectionType(section_type) if section_type else None,
            requires_firm_notes=data.get("requires_firm_notes", False),
        )


@dataclass
class PolicyTemplate:
    """A named policy type made of ordered sections.

    ``mandatory_clauses`` lists clause IDs that must survive tiering
    whenever they are in a section's candidate pool.
    """

    code: str
    name: str
    category: str
    description: str
    sections: list[TemplateSection] = field(default_factory=list)
    mandatory_clauses: list[str] = field(default_factory=list)
    is_builtin: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "sections": [s.to_dict() for s in self.sections],
            "mandatory_clauses": self.mandatory_clauses,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PolicyTemplate:
        """Create from dictionary."""
        return cls(
            code=data["code"],
            name=data["name"],
            category=data.get("category", "Custom"),
            description=data.get("description", ""),
            sections=[TemplateSection.from_dict(s) for s in data.get("sections", [])],
            mandatory_clauses=list(data.get("mandatory_clauses", [])),
            is_builtin=data.get("is_builtin", False),
        )


@dataclass(frozen=True)
class StandardSection:
    """An entry of the canonical document structure."""

    id: str
    title: str
    section_type: SectionType


@dataclass
class TieredSection:
    """A section of the assembled document after tiering."""

    id: str
    title: str
    section_type: SectionType
    clauses: list[Clause]
    original_section_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "section_type": self.section_type.value,
            "clauses": [c.to_dict() for c in self.clauses],
            "original_section_id": self.original_section_id,
        }
