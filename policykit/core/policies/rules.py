"""Rules engine for dynamic clause selection.

Rules pair a condition over wizard answers and firm attributes with an
action that includes, excludes or suggests clauses and sets document
variables. Condition format::

    {"q": "pep_domestic", "eq": true}
    {"all": [{"q": "firm_role", "eq": "principal"}, {"q": "client_types", "includes": "retail"}]}
    {"any": [...]}
    {"not": {"q": "outsourcing", "includes": "none"}}
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


# =============================================================================
# Models
# =============================================================================


class RuleCondition(BaseModel):
    """A condition node: either a logical combinator or a single comparison."""

    model_config = ConfigDict(populate_by_name=True)

    q: str | None = Field(default=None, description="Answer or firm attribute key")
    eq: Any = None
    neq: Any = None
    in_: list[Any] | None = Field(default=None, alias="in")
    nin: list[Any] | None = None
    includes: Any = None
    gt: float | None = None
    lt: float | None = None
    gte: float | None = None
    lte: float | None = None
    all_: list[RuleCondition] | None = Field(default=None, alias="all")
    any_: list[RuleCondition] | None = Field(default=None, alias="any")
    not_: RuleCondition | None = Field(default=None, alias="not")


RuleCondition.model_rebuild()


class RuleAction(BaseModel):
    """Action to take when a rule's condition holds."""

    include_clause_codes: list[str] = Field(default_factory=list)
    exclude_clause_codes: list[str] = Field(default_factory=list)
    suggest_clause_codes: list[str] = Field(default_factory=list)
    set_vars: dict[str, Any] = Field(default_factory=dict)
    reason: str | None = Field(default=None, description="Shown with suggestions")


class Rule(BaseModel):
    """A single clause selection rule."""

    id: str = Field(description="Unique rule ID")
    name: str = Field(description="Human-readable name")
    description: str = Field(default="")
    priority: int = Field(default=0, description="Higher = evaluated first")
    condition: RuleCondition
    action: RuleAction = Field(default_factory=RuleAction)
    is_active: bool = Field(default=True)


class SuggestedClause(BaseModel):
    """A clause suggested by a rule."""

    code: str
    reason: str


class RuleFiring(BaseModel):
    """Evaluation record for one rule."""

    rule_id: str
    rule_name: str
    condition_met: bool


class RulesEngineResult(BaseModel):
    """Accumulated outcome of a rule evaluation pass."""

    included_clauses: list[str] = Field(default_factory=list)
    excluded_clauses: list[str] = Field(default_factory=list)
    suggested_clauses: list[SuggestedClause] = Field(default_factory=list)
    variables: dict[str, Any] = Field(default_factory=dict)
    rules_fired: list[RuleFiring] = Field(default_factory=list)


class QuestionDependency(BaseModel):
    """Display dependency of a question on an earlier answer."""

    question_code: str
    operator: str = Field(default="eq", description="eq, neq, in, nin, gt or lt")
    value: Any = None


class QuestionValidation(BaseModel):
    """Validation constraints for an answer."""

    required: bool = False
    min: float | None = None
    max: float | None = None
    pattern: str | None = None


class Question(BaseModel):
    """A wizard question, reduced to what visibility and validation need."""

    code: str
    text: str = ""
    depends_on: QuestionDependency | list[QuestionDependency] | None = None
    validation: QuestionValidation | None = None


class AnswerError(BaseModel):
    """A validation failure for one answer."""

    field: str
    message: str
    code: str


# =============================================================================
# Condition evaluation
# =============================================================================


# Sentinel for an absent key; an explicit None answer is a value
_MISSING = object()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _same_value(a: Any, b: Any) -> bool:
    """Equality without bool/number coercion (True is not 1)."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    return bool(a == b)


def _contains(items: list[Any], value: Any) -> bool:
    return any(_same_value(item, value) for item in items)


def evaluate_condition(
    condition: RuleCondition,
    answers: Mapping[str, Any],
    firm_attributes: Mapping[str, Any] | None = None,
) -> bool:
    """Evaluate a condition against answers, falling back to firm attributes.

    A missing key or unknown operator evaluates to False. An explicit None
    answer is a value: it can match ``eq: null`` and does not fall back to
    the firm attributes. Booleans never equal numbers.
    """
    if condition.all_ is not None:
        return all(evaluate_condition(c, answers, firm_attributes) for c in condition.all_)

    if condition.any_ is not None:
        return any(evaluate_condition(c, answers, firm_attributes) for c in condition.any_)

    if condition.not_ is not None:
        return not evaluate_condition(condition.not_, answers, firm_attributes)

    if not condition.q:
        logger.warning("Rule condition missing 'q' (question code)")
        return False

    value = answers.get(condition.q, _MISSING)
    if value is _MISSING and firm_attributes:
        value = firm_attributes.get(condition.q, _MISSING)

    if value is _MISSING:
        return False

    # Operators are checked in a fixed order; presence, not truthiness, selects one
    present = condition.model_fields_set

    if "eq" in present:
        return _same_value(value, condition.eq)

    if "neq" in present:
        return not _same_value(value, condition.neq)

    if "in_" in present:
        return condition.in_ is not None and _contains(condition.in_, value)

    if "nin" in present:
        return condition.nin is not None and not _contains(condition.nin, value)

    if "includes" in present:
        if not isinstance(value, list):
            return False
        return _contains(value, condition.includes)

    if condition.gt is not None:
        return _is_number(value) and value > condition.gt

    if condition.lt is not None:
        return _is_number(value) and value < condition.lt

    if condition.gte is not None:
        return _is_number(value) and value >= condition.gte

    if condition.lte is not None:
        return _is_number(value) and value <= condition.lte

    logger.warning("Unknown rule operator in condition: %s", condition.model_dump(by_alias=True, exclude_unset=True))
    return False


def _apply_action(action: RuleAction, rule_name: str, result: RulesEngineResult) -> None:
    """Merge a rule action into the result."""
    for code in action.include_clause_codes:
        if code not in result.included_clauses:
            result.included_clauses.append(code)

    for code in action.exclude_clause_codes:
        if code not in result.excluded_clauses:
            result.excluded_clauses.append(code)

    suggested = {s.code for s in result.suggested_clauses}
    for code in action.suggest_clause_codes:
        if code not in suggested:
            suggested.add(code)
            result.suggested_clauses.append(SuggestedClause(
                code=code,
                reason=action.reason or f"Suggested by rule: {rule_name}",
            ))

    result.variables.update(action.set_vars)


def evaluate_rules(
    rules: list[Rule],
    answers: Mapping[str, Any],
    firm_attributes: Mapping[str, Any] | None = None,
) -> RulesEngineResult:
    """Evaluate all active rules and accumulate clause selections.

    Args:
        rules: Rules for the policy being generated
        answers: Wizard answers keyed by question code
        firm_attributes: Firm profile attributes used when an answer is missing

    Returns:
        Included, excluded and suggested clauses, variables, and a firing log.
        Excluded codes never appear among the included ones.
    """
    result = RulesEngineResult()

    active = sorted(
        (r for r in rules if r.is_active),
        key=lambda r: r.priority,
        reverse=True,
    )

    for rule in active:
        try:
            condition_met = evaluate_condition(rule.condition, answers, firm_attributes)
        except Exception:
            logger.exception("Error evaluating rule %r", rule.name)
            continue

        result.rules_fired.append(RuleFiring(
            rule_id=rule.id,
            rule_name=rule.name,
            condition_met=condition_met,
        ))

        if condition_met:
            _apply_action(rule.action, rule.name, result)

    excluded = set(result.excluded_clauses)
    result.included_clauses = [c for c in result.included_clauses if c not in excluded]

    logger.debug(
        "Evaluated %d rules: %d included, %d excluded, %d suggested",
        len(active),
        len(result.included_clauses),
        len(result.excluded_clauses),
        len(result.suggested_clauses),
    )
    return result


# =============================================================================
# Questions
# =============================================================================


def _is_blank(answer: Any) -> bool:
    return answer is None or answer == ""


def is_question_visible(question: Question, answers: Mapping[str, Any]) -> bool:
    """Whether every display dependency of a question is satisfied."""
    if question.depends_on is None:
        return True

    deps = question.depends_on if isinstance(question.depends_on, list) else [question.depends_on]

    for dep in deps:
        answer = answers.get(dep.question_code, _MISSING)
        if answer is _MISSING:
            return False

        if dep.operator == "eq":
            ok = _same_value(answer, dep.value)
        elif dep.operator == "neq":
            ok = not _same_value(answer, dep.value)
        elif dep.operator == "in":
            ok = isinstance(dep.value, list) and _contains(dep.value, answer)
        elif dep.operator == "nin":
            ok = isinstance(dep.value, list) and not _contains(dep.value, answer)
        elif dep.operator == "gt":
            ok = _is_number(answer) and _is_number(dep.value) and answer > dep.value
        elif dep.operator == "lt":
            ok = _is_number(answer) and _is_number(dep.value) and answer < dep.value
        else:
            logger.warning("Unknown dependency operator: %s", dep.operator)
            ok = False

        if not ok:
            return False

    return True


def get_visible_question_codes(questions: list[Question], answers: Mapping[str, Any]) -> list[str]:
    """Codes of the questions currently visible."""
    return [q.code for q in questions if is_question_visible(q, answers)]


def validate_answers(
    questions: list[Question],
    answers: Mapping[str, Any],
    visible_question_codes: list[str],
) -> list[AnswerError]:
    """Validate answers to visible questions."""
    errors: list[AnswerError] = []
    visible = set(visible_question_codes)

    for question in questions:
        if question.code not in visible or question.validation is None:
            continue

        validation = question.validation
        answer = answers.get(question.code)

        if _is_blank(answer):
            if validation.required:
                errors.append(AnswerError(
                    field=question.code,
                    message="This field is required",
                    code="REQUIRED",
                ))
            continue

        if _is_number(answer):
            if validation.min is not None and answer < validation.min:
                errors.append(AnswerError(
                    field=question.code,
                    message=f"Value must be at least {validation.min:g}",
                    code="MIN_VALUE",
                ))
            if validation.max is not None and answer > validation.max:
                errors.append(AnswerError(
                    field=question.code,
                    message=f"Value must be at most {validation.max:g}",
                    code="MAX_VALUE",
                ))

        if isinstance(answer, str) and validation.pattern:
            if not re.search(validation.pattern, answer):
                errors.append(AnswerError(
                    field=question.code,
                    message="Invalid format",
                    code="PATTERN_MISMATCH",
                ))

    return errors


def calculate_progress(
    questions: list[Question],
    answers: Mapping[str, Any],
    visible_question_codes: list[str],
) -> int:
    """Percentage of visible questions that have an answer."""
    visible = set(visible_question_codes)
    visible_questions = [q for q in questions if q.code in visible]
    if not visible_questions:
        return 0

    answered = sum(1 for q in visible_questions if not _is_blank(answers.get(q.code)))
    return round(answered / len(visible_questions) * 100)


def merge_answers_with_firm_profile(
    answers: Mapping[str, Any],
    firm_attributes: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Firm attributes act as defaults; answers override them."""
    if not firm_attributes:
        return dict(answers)
    return {**firm_attributes, **answers}


# =============================================================================
# Loading
# =============================================================================


class RuleLoader:
    """Load rule sets from dictionaries or YAML files."""

    def load_from_dict(self, raw: Mapping[str, Any]) -> list[Rule]:
        """Load rules from a ``{"rules": [...]}`` mapping."""
        if not raw:
            return []
        return [Rule.model_validate(rule_data) for rule_data in raw.get("rules", [])]

    def load_from_file(self, path: Path) -> list[Rule]:
        """Load rules from a YAML (or JSON) file."""
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        rules = self.load_from_dict(raw)
        logger.info("Loaded %d rules from %s", len(rules), path)
        return rules


__all__ = [
    "AnswerError",
    "Question",
    "QuestionDependency",
    "QuestionValidation",
    "Rule",
    "RuleAction",
    "RuleCondition",
    "RuleFiring",
    "RuleLoader",
    "RulesEngineResult",
    "SuggestedClause",
    "calculate_progress",
    "evaluate_condition",
    "evaluate_rules",
    "get_visible_question_codes",
    "is_question_visible",
    "merge_answers_with_firm_profile",
    "validate_answers",
]
