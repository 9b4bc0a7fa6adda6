"""Session score derivation."""

from typing import Sequence

from interview_tracker.core.errors import ValidationError
from interview_tracker.core.models import InterviewSession, QuestionEvaluation
from interview_tracker.utils.numbers import round_half_up


def _check_scores(questions: Sequence[QuestionEvaluation]) -> None:
    for index, question in enumerate(questions):
        score = question.score
        if isinstance(score, bool) or not isinstance(score, int) or not 0 <= score <= 100:
            raise ValidationError(
                f"Question {index} has invalid score {score!r}; expected an integer in [0, 100]",
                [{"field": f"questions.{index}.score", "value": score}],
            )


def mean_score(questions: Sequence[QuestionEvaluation]) -> float:
    """Unrounded mean of question scores. Callers guarantee a non-empty sequence."""
    return sum(q.score for q in questions) / len(questions)


def recompute_score(session: InterviewSession) -> InterviewSession:
    """
    Return a copy of ``session`` whose total score matches its questions.

    With questions present, ``total_score`` becomes the half-up rounded mean
    of their scores; with none, the existing total is kept. Out-of-range
    scores raise ``ValidationError`` rather than being clamped.
    """
    if not session.questions:
        return session.model_copy()

    _check_scores(session.questions)
    return session.model_copy(update={"total_score": round_half_up(mean_score(session.questions))})
