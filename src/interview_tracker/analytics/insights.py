"""Rule-based natural-language insights over scored interviews."""

from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from interview_tracker.core.models import (
    GroupStat,
    QuestionEvaluation,
    ScoreStats,
    SessionInsights,
    WeakCategory,
)
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)

STRENGTH_THRESHOLD = 80
WEAKNESS_THRESHOLD = 60
MAINTAIN_THRESHOLD = 70
CONSISTENCY_MILESTONE = 5
VARIANCE_THRESHOLD = 30

SESSION_FEEDBACK = {
    "excellent": "Excellent performance! You demonstrate strong interview skills.",
    "good": "Good performance with room for improvement.",
    "practice": "Keep practicing! Focus on understanding core concepts.",
}

FIXED_RECOMMENDATIONS = [
    "Review feedback for each question to understand areas of improvement",
    "Consider practicing with a timer to improve time management",
]

HISTORY_TIERS = {
    "excellent": "Excellent performance! You consistently score high in interviews.",
    "good": "Good performance with room for improvement. Keep practicing!",
    "practice": "Focus on understanding core concepts and practice more questions.",
}

NO_INTERVIEWS_MESSAGE = "Start your first interview practice to begin tracking your progress!"
VARIANCE_MESSAGE = "Your performance varies significantly. Work on consistency across different topics."


def _tier(score: float) -> str:
    if score >= STRENGTH_THRESHOLD:
        return "excellent"
    if score >= WEAKNESS_THRESHOLD:
        return "good"
    return "practice"


def best_category(category_stats: Sequence[GroupStat]) -> Optional[GroupStat]:
    """Highest mean score wins; ties go to the alphabetically first name."""
    if not category_stats:
        return None
    return min(category_stats, key=lambda stat: (-stat.avg_score, stat.key))


class InsightGenerator:
    """Summarizes one session, or a user's whole history, as short sentences."""

    def __init__(self):
        self.logger = logger.bind(component="insight_generator")

    def summarize(self, questions: Sequence[QuestionEvaluation]) -> SessionInsights:
        """
        Build per-session insights from answered questions.

        Categories averaging 80 or more become strengths and those under 60
        become weaknesses, in the order the categories first appear.
        """
        by_category: Dict[str, List[int]] = OrderedDict()
        for question in questions:
            by_category.setdefault(question.category.value, []).append(question.score)

        strengths = []
        weaknesses = []
        for category, scores in by_category.items():
            category_mean = sum(scores) / len(scores)
            if category_mean >= STRENGTH_THRESHOLD:
                strengths.append(f"Strong performance in {category}")
            elif category_mean < WEAKNESS_THRESHOLD:
                weaknesses.append(f"Needs improvement in {category}")

        overall_mean = sum(q.score for q in questions) / len(questions) if questions else 0.0
        tier_tip = (
            "Continue practicing to maintain your performance"
            if overall_mean >= MAINTAIN_THRESHOLD
            else "Focus on weak areas and practice more questions"
        )

        insights = SessionInsights(
            strengths=strengths,
            weaknesses=weaknesses,
            recommendations=[tier_tip, *FIXED_RECOMMENDATIONS],
            overall_feedback=SESSION_FEEDBACK[_tier(overall_mean)],
        )

        self.logger.debug(
            "Session insights generated",
            questions_count=len(questions),
            strengths_count=len(strengths),
            weaknesses_count=len(weaknesses)
        )
        return insights

    def generate_insights(
        self,
        total_interviews: int,
        completed_interviews: int,
        score_stats: Optional[ScoreStats],
        category_stats: Sequence[GroupStat],
        role_stats: Sequence[GroupStat],
        weak_categories: Sequence[WeakCategory],
    ) -> List[str]:
        """
        Build cross-session insights in a fixed order.

        Uses unrounded statistics throughout. Absent score stats (no completed
        sessions) count as a mean of 0 and never trigger the variance remark.
        """
        if total_interviews == 0:
            return [NO_INTERVIEWS_MESSAGE]

        insights = []

        avg_score = score_stats.avg_score if score_stats else 0.0
        insights.append(HISTORY_TIERS[_tier(avg_score)])

        best = best_category(category_stats)
        if best is not None:
            insights.append(f"You perform best in {best.key} interviews.")

        if weak_categories:
            names = ", ".join(weak.category for weak in weak_categories)
            insights.append(f"Consider focusing more on: {names}")

        if total_interviews >= CONSISTENCY_MILESTONE:
            insights.append(f"Great consistency! You've completed {total_interviews} interviews.")

        if score_stats and score_stats.max_score - score_stats.min_score > VARIANCE_THRESHOLD:
            insights.append(VARIANCE_MESSAGE)

        self.logger.debug(
            "History insights generated",
            total_interviews=total_interviews,
            completed_interviews=completed_interviews,
            roles_count=len(role_stats),
            insights_count=len(insights)
        )
        return insights
