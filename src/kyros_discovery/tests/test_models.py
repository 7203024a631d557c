# src/kyros_discovery/tests/test_models.py
"""
Unit tests for the pydantic models.

Tests cover:
- KnowledgeEntry keyword normalisation and title uniqueness
- Immutability of knowledge and result models
- WizardState defaults and validation
- LeadSubmission email validation
"""
import pytest
from pydantic import ValidationError

from kyros_discovery.knowledge_base import DEFAULT_RESULT, KNOWLEDGE_BASE
from kyros_discovery.models import (
    AnalysisResult,
    KnowledgeEntry,
    LeadSubmission,
    Solution,
    WizardState,
)


class TestKnowledgeEntry:
    """Tests for the KnowledgeEntry model."""

    @pytest.mark.unit
    def test_keywords_are_lowercased(self):
        entry = KnowledgeEntry(id="x", keywords=("CRM", "Data Entry"), root_cause="r")
        assert entry.keywords == ("crm", "data entry")

    @pytest.mark.unit
    def test_blank_keywords_dropped(self):
        entry = KnowledgeEntry(id="x", keywords=("crm", "  "), root_cause="r")
        assert entry.keywords == ("crm",)

    @pytest.mark.unit
    def test_requires_a_keyword(self):
        with pytest.raises(ValidationError):
            KnowledgeEntry(id="x", keywords=("",), root_cause="r")

    @pytest.mark.unit
    def test_duplicate_solution_titles_rejected(self):
        with pytest.raises(ValidationError):
            KnowledgeEntry(
                id="x",
                keywords=("crm",),
                root_cause="r",
                solutions=(Solution(title="A"), Solution(title="A")),
            )

    @pytest.mark.unit
    def test_matches_substring(self):
        entry = KnowledgeEntry(id="x", keywords=("status",), root_cause="r")
        assert entry.matches("the statuses are stale")
        assert not entry.matches("the stats are stale")

    @pytest.mark.unit
    def test_entries_are_frozen(self):
        with pytest.raises(ValidationError):
            KNOWLEDGE_BASE[0].root_cause = "changed"


class TestKnowledgeBase:
    """Sanity checks for the built-in knowledge base."""

    @pytest.mark.unit
    def test_ids_unique(self):
        ids = [entry.id for entry in KNOWLEDGE_BASE]
        assert len(ids) == len(set(ids))

    @pytest.mark.unit
    def test_small_fixed_table(self):
        assert 1 <= len(KNOWLEDGE_BASE) <= 6

    @pytest.mark.unit
    def test_default_result_shape(self):
        assert len(DEFAULT_RESULT.solutions) == 3
        assert len(DEFAULT_RESULT.insights) == 3
        assert DEFAULT_RESULT.solutions[0].title == "Discovery sprint"


class TestAnalysisResult:
    """Tests for the AnalysisResult model."""

    @pytest.mark.unit
    def test_defaults(self):
        result = AnalysisResult(root_cause="cause")
        assert result.solutions == ()
        assert result.insights == ()

    @pytest.mark.unit
    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_RESULT.root_cause = "changed"

    @pytest.mark.unit
    def test_json_round_trip_preserves_equality(self):
        restored = AnalysisResult.model_validate_json(DEFAULT_RESULT.model_dump_json())
        assert restored == DEFAULT_RESULT


class TestWizardState:
    """Tests for the WizardState model."""

    @pytest.mark.unit
    def test_defaults(self):
        state = WizardState()
        assert state.why_answers == [""] * 5
        assert state.current_step == 0
        assert state.show_analysis is False

    @pytest.mark.unit
    def test_default_answer_lists_not_shared(self):
        first, second = WizardState(), WizardState()
        first.why_answers[0] = "changed"
        assert second.why_answers[0] == ""

    @pytest.mark.unit
    @pytest.mark.parametrize("answers", [[], ["a"] * 4, ["a"] * 6])
    def test_answer_count_enforced(self, answers):
        with pytest.raises(ValidationError):
            WizardState(why_answers=answers)

    @pytest.mark.unit
    @pytest.mark.parametrize("step", [-1, 7])
    def test_step_range_enforced_on_assignment(self, step):
        state = WizardState()
        with pytest.raises(ValidationError):
            state.current_step = step

    @pytest.mark.unit
    def test_show_analysis_with_result(self):
        state = WizardState(analysis_result=DEFAULT_RESULT)
        assert state.show_analysis is True

    @pytest.mark.unit
    def test_animated_step_accepts_step_or_target(self):
        state = WizardState()
        state.animated_step = 3
        assert state.animated_step == 3
        state.animated_step = "analysis"
        assert state.animated_step == "analysis"


class TestLeadSubmission:
    """Tests for the LeadSubmission model."""

    @pytest.mark.unit
    def test_email_is_stripped(self):
        lead = LeadSubmission(email="  ops@example.com ")
        assert lead.email == "ops@example.com"
        assert lead.id

    @pytest.mark.unit
    @pytest.mark.parametrize("email", ["", "ops", "ops@", "@example.com", "ops@example", "a b@c.d"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            LeadSubmission(email=email)
