"""Tests for clause priority scoring."""

from __future__ import annotations

from policykit.core.policies.scoring import MANDATORY_BONUS, score_clause
from policykit.core.policies.types import Clause, DetailLevel


class TestKeywordScoring:
    """Tests for keyword tiers and their gating by detail level."""

    def test_essential_title_keyword(self) -> None:
        """An essential keyword in the title is worth 20 points."""
        clause = Clause(id="c", title="Purpose")
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 20

    def test_comprehensive_keywords_ignored_at_essential(self) -> None:
        """Comprehensive keywords only count at the comprehensive level."""
        clause = Clause(id="c", title="Appendix Checklist Template")
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 0
        assert score_clause(clause, DetailLevel.STANDARD) == 0
        assert score_clause(clause, DetailLevel.COMPREHENSIVE) == 30

    def test_standard_keywords_gated(self) -> None:
        """Standard keywords count at standard and comprehensive."""
        clause = Clause(id="c", title="Escalation")
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 0
        assert score_clause(clause, DetailLevel.STANDARD) == 15
        assert score_clause(clause, DetailLevel.COMPREHENSIVE) == 15

    def test_content_keywords_score_less(self) -> None:
        """Content hits score the per-tier content points."""
        clause = Clause(id="c", title="Untitled", content="This covers our process.")
        assert score_clause(clause, DetailLevel.STANDARD) == 3

    def test_content_scan_is_limited_to_head(self) -> None:
        """Keywords past the first 500 characters are not seen."""
        clause = Clause(id="c", title="Untitled", content="x" * 500 + " purpose")
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 0

    def test_case_insensitive_substring_match(self) -> None:
        """Keywords match as substrings regardless of case."""
        clause = Clause(id="c", title="FCA Regulatory Obligations")
        # fca, regulatory, obligation
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 60

    def test_string_detail_level_accepted(self) -> None:
        """Detail levels may be passed as their string values."""
        clause = Clause(id="c", title="Purpose")
        assert score_clause(clause, "essential") == 20


class TestMandatoryBonus:
    """Tests for the mandatory bonus."""

    def test_template_mandatory_flag(self) -> None:
        """A template-mandatory clause gets the bonus."""
        clause = Clause(id="c", title="Untitled")
        assert score_clause(clause, DetailLevel.ESSENTIAL, is_mandatory=True) == MANDATORY_BONUS

    def test_clause_mandatory_flag(self) -> None:
        """A clause flagged mandatory gets the bonus without template help."""
        clause = Clause(id="c", title="Untitled", is_mandatory=True)
        assert score_clause(clause, DetailLevel.ESSENTIAL) == MANDATORY_BONUS

    def test_bonus_not_doubled(self) -> None:
        """Both flags together still award the bonus once."""
        clause = Clause(id="c", title="Untitled", is_mandatory=True)
        assert score_clause(clause, DetailLevel.ESSENTIAL, is_mandatory=True) == MANDATORY_BONUS


class TestLengthPenalty:
    """Tests for the long-content penalty."""

    def test_essential_penalty(self) -> None:
        """Content over 2000 characters loses 20 points at essential."""
        clause = Clause(id="c", title="Untitled", content="x" * 2001)
        assert score_clause(clause, DetailLevel.ESSENTIAL) == -20

    def test_essential_threshold_is_exclusive(self) -> None:
        """Exactly 2000 characters is not penalised."""
        clause = Clause(id="c", title="Untitled", content="x" * 2000)
        assert score_clause(clause, DetailLevel.ESSENTIAL) == 0

    def test_standard_penalty(self) -> None:
        """Content over 4000 characters loses 10 points at standard."""
        assert score_clause(Clause(id="c", title="U", content="x" * 3000), DetailLevel.STANDARD) == 0
        assert score_clause(Clause(id="c", title="U", content="x" * 4001), DetailLevel.STANDARD) == -10

    def test_no_penalty_at_comprehensive(self) -> None:
        """Comprehensive documents never penalise length."""
        clause = Clause(id="c", title="Untitled", content="x" * 10000)
        assert score_clause(clause, DetailLevel.COMPREHENSIVE) == 0


class TestDeterminism:
    """Scoring is a pure function of its inputs."""

    def test_repeated_calls_agree(self) -> None:
        """The same clause always scores the same."""
        clause = Clause(
            id="c",
            title="Governance and Oversight",
            content="The board approves this policy and reviews MI reporting.",
        )
        scores = {score_clause(clause, DetailLevel.STANDARD) for _ in range(5)}
        assert len(scores) == 1
