"""Deterministic fallback evaluation used when the AI backend is unavailable."""

from typing import Tuple

from interview_tracker.core.models import EvaluationResult, EvaluationSource

BASE_SCORE = 60
LENGTH_BONUS_THRESHOLDS = (100, 200)
LENGTH_BONUS = 10
KEYWORD_BONUS = 5
MAX_SCORE = 100

TECHNICAL_KEYWORDS: Tuple[str, ...] = (
    "component",
    "function",
    "database",
    "api",
    "react",
    "javascript",
)

FALLBACK_FEEDBACK = "Answer received. AI evaluation temporarily unavailable."
FALLBACK_SUGGESTED_ANSWER = (
    "A comprehensive answer would include technical details and specific examples."
)


class HeuristicEvaluator:
    """
    Scores an answer from its length and technical vocabulary alone.

    Base score 60, +10 once the answer exceeds 100 characters and another +10
    past 200, +5 for each technical keyword it mentions, capped at 100. There
    is no penalty path, so every answer (even an empty one) scores at least 60.
    """

    def __init__(self, keywords: Tuple[str, ...] = TECHNICAL_KEYWORDS):
        self.keywords = keywords

    def score(self, answer_text: str) -> int:
        score = BASE_SCORE

        for threshold in LENGTH_BONUS_THRESHOLDS:
            if len(answer_text) > threshold:
                score += LENGTH_BONUS

        answer_lower = answer_text.lower()
        keyword_matches = sum(1 for keyword in self.keywords if keyword in answer_lower)
        score += keyword_matches * KEYWORD_BONUS

        return min(score, MAX_SCORE)

    def evaluate(self, answer_text: str) -> EvaluationResult:
        """Evaluate an answer without any external calls. Never fails."""
        return EvaluationResult(
            score=self.score(answer_text or ""),
            feedback=FALLBACK_FEEDBACK,
            strengths=["Provided a response"],
            improvements=["Add more technical details", "Include specific examples"],
            suggested_answer=FALLBACK_SUGGESTED_ANSWER,
            source=EvaluationSource.HEURISTIC,
        )
