"""Answer evaluation with AI-first, heuristic-fallback strategy."""

from typing import Any, List, Optional, Protocol, Sequence

from interview_tracker.core.errors import GatewayError, RecoverableEvaluationError, ValidationError
from interview_tracker.core.models import EvaluationResult, QuestionSpec, RoleDefinition
from interview_tracker.evaluation.gateway import AIGateway
from interview_tracker.evaluation.heuristic import HeuristicEvaluator
from interview_tracker.evaluation.question_bank import get_fallback_questions
from interview_tracker.utils.logging import get_logger, log_function_call

logger = get_logger(__name__)


def _text(value: Any) -> str:
    return getattr(value, "value", value)


class AnswerEvaluator(Protocol):
    """One way of scoring an answer. Raises RecoverableEvaluationError to defer to the next."""
    name: str

    async def evaluate(self, question: str, answer: str, role: str, category: str) -> EvaluationResult:
        ...


class AIAnswerEvaluator:
    """Scores answers through the AI gateway."""
    name = "ai"

    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    async def evaluate(self, question: str, answer: str, role: str, category: str) -> EvaluationResult:
        return await self.gateway.evaluate_answer(question, answer, role, category)


class HeuristicAnswerEvaluator:
    """Scores answers with the offline heuristic. Never fails."""
    name = "heuristic"

    def __init__(self, evaluator: Optional[HeuristicEvaluator] = None):
        self.evaluator = evaluator or HeuristicEvaluator()

    async def evaluate(self, question: str, answer: str, role: str, category: str) -> EvaluationResult:
        return self.evaluator.evaluate(answer)


class AnswerEvaluationService:
    """
    Produces evaluations and questions, preferring the AI backend.

    Evaluators are tried in order; a recoverable failure moves on to the next
    one. With the default chain (AI, then heuristic) callers always get a
    result, and only the ``source`` field tells them which evaluator ran.
    """

    def __init__(
        self,
        gateway: Optional[AIGateway] = None,
        evaluators: Optional[Sequence[AnswerEvaluator]] = None,
    ):
        self.gateway = gateway or AIGateway()
        if evaluators is None:
            evaluators = [AIAnswerEvaluator(self.gateway), HeuristicAnswerEvaluator()]
        if not evaluators:
            raise ValueError("At least one evaluator is required")
        self.evaluators: List[AnswerEvaluator] = list(evaluators)
        self.logger = logger.bind(component="answer_evaluation")

    async def evaluate(self, question: str, answer: str, role: Any, category: Any) -> EvaluationResult:
        """
        Evaluate one answer.

        Args:
            question: Question text
            answer: Candidate's answer (may be empty)
            role: Job role the interview targets
            category: Question or session category

        Returns:
            Evaluation from the first evaluator that succeeds
        """
        if not question or not question.strip():
            raise ValidationError("Question text is required", [{"field": "question"}])
        if answer is None:
            raise ValidationError("Answer is required", [{"field": "answer"}])

        role_name, category_name = _text(role), _text(category)
        self.logger.debug(
            "Evaluating answer",
            **log_function_call("evaluate", role=role_name, category=category_name, answer_length=len(answer))
        )

        last_error: Optional[RecoverableEvaluationError] = None
        for evaluator in self.evaluators:
            try:
                result = await evaluator.evaluate(question, answer, role_name, category_name)
            except RecoverableEvaluationError as e:
                self.logger.warning(
                    "Evaluator failed, falling back",
                    evaluator=evaluator.name,
                    cause=getattr(getattr(e, "cause", None), "value", None),
                    error=e.message
                )
                last_error = e
                continue

            self.logger.info(
                "Answer evaluated",
                evaluator=evaluator.name,
                score=result.score,
                role=role_name,
                category=category_name
            )
            return result

        raise last_error

    async def generate_questions(
        self,
        role: Any,
        category: Any,
        difficulty: str,
        count: int = 5,
        role_definition: Optional[RoleDefinition] = None,
    ) -> List[QuestionSpec]:
        """Generate questions via the AI backend, falling back to the static bank."""
        if count < 1:
            raise ValidationError("Question count must be at least 1", [{"field": "count"}])

        role_name, category_name = _text(role), _text(category)
        try:
            return await self.gateway.generate_questions(
                role_name, category_name, difficulty, count, role_definition=role_definition
            )
        except GatewayError as e:
            fallback = get_fallback_questions(role_name, category_name, count)
            self.logger.warning(
                "Question generation failed, using fallback bank",
                cause=e.cause.value,
                error=e.message,
                role=role_name,
                category=category_name,
                fallback_count=len(fallback)
            )
            return fallback
