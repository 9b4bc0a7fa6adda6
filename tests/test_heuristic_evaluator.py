"""Tests for the offline heuristic evaluator."""

import pytest
from hypothesis import given, strategies as st

from interview_tracker.core.models import EvaluationSource
from interview_tracker.evaluation.heuristic import (
    FALLBACK_FEEDBACK,
    TECHNICAL_KEYWORDS,
    HeuristicEvaluator,
)


class TestHeuristicEvaluator:
    """Test cases for HeuristicEvaluator scoring."""

    @pytest.fixture
    def evaluator(self):
        return HeuristicEvaluator()

    def test_empty_answer_scores_base(self, evaluator):
        assert evaluator.score("") == 60

    def test_short_answer_without_keywords(self, evaluator):
        assert evaluator.score("I am not sure.") == 60

    def test_keywords_add_five_each(self, evaluator):
        # "react" and "component" both appear; length stays under 100
        assert evaluator.score("I would write a React component") == 70

    def test_keyword_match_is_case_insensitive(self, evaluator):
        assert evaluator.score("DATABASE") == 65

    def test_length_bonus_thresholds(self, evaluator):
        assert evaluator.score("x" * 100) == 60
        assert evaluator.score("x" * 101) == 70
        assert evaluator.score("x" * 200) == 70
        assert evaluator.score("x" * 201) == 80

    def test_score_is_capped_at_100(self, evaluator):
        answer = " ".join(TECHNICAL_KEYWORDS) + " " + "detail " * 40
        assert len(answer) > 200
        assert evaluator.score(answer) == 100

    def test_evaluate_marks_heuristic_provenance(self, evaluator):
        result = evaluator.evaluate("I would call the API from a function")

        assert result.source == EvaluationSource.HEURISTIC
        assert result.score == 70
        assert result.feedback == FALLBACK_FEEDBACK
        assert result.strengths == ["Provided a response"]
        assert result.improvements == ["Add more technical details", "Include specific examples"]

    def test_evaluate_tolerates_none(self, evaluator):
        assert evaluator.evaluate(None).score == 60

    def test_custom_keywords(self):
        evaluator = HeuristicEvaluator(keywords=("kubernetes",))
        assert evaluator.score("Kubernetes and React") == 65

    @given(answer=st.text(max_size=500))
    def test_score_always_within_bounds(self, answer):
        score = HeuristicEvaluator().score(answer)
        assert 60 <= score <= 100
