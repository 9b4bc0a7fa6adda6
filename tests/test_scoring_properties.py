"""Property-based tests for session score derivation."""

import pytest
from hypothesis import given, strategies as st

from interview_tracker.core.errors import ValidationError
from interview_tracker.core.models import (
    InterviewSession,
    JobRole,
    QuestionCategory,
    QuestionEvaluation,
    SessionCategory,
)
from interview_tracker.sessions.scoring import mean_score, recompute_score
from interview_tracker.utils.numbers import percentage, round_half_up


def make_question(score: int, category: QuestionCategory = QuestionCategory.TECHNICAL) -> QuestionEvaluation:
    return QuestionEvaluation(
        question_text="Explain event delegation",
        user_answer="Handlers on a parent element",
        score=score,
        feedback="Solid",
        category=category,
    )


def make_session(scores, total_score: int = 0) -> InterviewSession:
    return InterviewSession(
        user_id="user-1",
        role=JobRole.FRONTEND_DEVELOPER,
        category=SessionCategory.TECHNICAL,
        duration=30,
        questions=[make_question(score) for score in scores],
        total_score=total_score,
    )


class TestRoundHalfUp:
    """Test cases for presentation rounding."""

    @pytest.mark.parametrize("value,expected", [
        (82.5, 83),
        (82.49, 82),
        (2.5, 3),
        (0.5, 1),
        (83.333, 83),
        (0, 0),
        (100, 100),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected

    def test_percentage(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(0, 0) == 0
        assert percentage(5, 5) == 100


class TestRecomputeScore:
    """Test cases for recompute_score."""

    def test_mean_is_rounded_half_up(self):
        assert recompute_score(make_session([85, 75, 90])).total_score == 83
        assert recompute_score(make_session([82, 83])).total_score == 83

    def test_empty_questions_keep_existing_total(self):
        session = make_session([], total_score=42)
        assert recompute_score(session).total_score == 42

    def test_returns_copy(self):
        session = make_session([50])
        updated = recompute_score(session)
        assert updated is not session
        assert session.total_score == 0
        assert updated.total_score == 50

    def test_out_of_range_score_rejected(self):
        bad = QuestionEvaluation.model_construct(
            question_text="q", user_answer="a", score=150, feedback="f", category=QuestionCategory.TECHNICAL
        )
        session = make_session([]).model_copy(update={"questions": [bad]})

        with pytest.raises(ValidationError) as exc_info:
            recompute_score(session)
        assert exc_info.value.errors[0]["field"] == "questions.0.score"

    def test_non_integer_score_rejected(self):
        bad = QuestionEvaluation.model_construct(
            question_text="q", user_answer="a", score=85.5, feedback="f", category=QuestionCategory.TECHNICAL
        )
        session = make_session([]).model_copy(update={"questions": [bad]})

        with pytest.raises(ValidationError):
            recompute_score(session)

    @given(scores=st.lists(st.integers(min_value=0, max_value=100), min_size=1, max_size=20))
    def test_total_score_matches_rounded_mean(self, scores):
        session = recompute_score(make_session(scores))
        assert session.total_score == round_half_up(sum(scores) / len(scores))
        assert min(scores) <= session.total_score <= max(scores)

    @given(scores=st.lists(st.integers(min_value=0, max_value=100), max_size=20))
    def test_recompute_is_idempotent(self, scores):
        once = recompute_score(make_session(scores, total_score=10))
        twice = recompute_score(once)
        assert once.total_score == twice.total_score

    @given(scores=st.lists(st.integers(min_value=0, max_value=100), min_size=1, max_size=20))
    def test_mean_score_is_unrounded(self, scores):
        questions = [make_question(score) for score in scores]
        assert mean_score(questions) == pytest.approx(sum(scores) / len(scores))
