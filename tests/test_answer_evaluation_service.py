"""Tests for the AI-first, heuristic-fallback evaluation service."""

import json

import pytest
from unittest.mock import AsyncMock

from interview_tracker.core.errors import GatewayError, GatewayErrorCause, ValidationError
from interview_tracker.core.models import EvaluationResult, EvaluationSource, JobRole, QuestionCategory
from interview_tracker.evaluation.gateway import AIGateway
from interview_tracker.evaluation.service import (
    AnswerEvaluationService,
    HeuristicAnswerEvaluator,
)


class FailingEvaluator:
    """Evaluator that always defers to the next one."""
    name = "failing"

    async def evaluate(self, question, answer, role, category):
        raise GatewayError(GatewayErrorCause.TRANSPORT, "offline")


class TestAnswerEvaluationService:
    """Test cases for evaluation fallback and provenance."""

    @pytest.fixture
    def backend(self):
        return AsyncMock()

    @pytest.fixture
    def service(self, backend):
        return AnswerEvaluationService(gateway=AIGateway(backend=backend, timeout_seconds=1.0))

    @pytest.mark.asyncio
    async def test_ai_result_used_when_available(self, service, backend):
        backend.complete.return_value = json.dumps({"score": 92, "feedback": "Great", "strengths": [], "improvements": []})

        result = await service.evaluate("What is a closure?", "A function with its scope", "Frontend Developer", "Technical")

        assert result.score == 92
        assert result.source == EvaluationSource.AI

    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", [
        {"side_effect": TimeoutError("slow")},
        {"return_value": "no structured data here"},
        {"return_value": '{"score": "high"'},
        {"return_value": '{"score": 101, "feedback": "x"}'},
    ])
    async def test_heuristic_fallback_on_any_gateway_failure(self, service, backend, failure):
        backend.complete.configure_mock(**failure)

        result = await service.evaluate("Explain the virtual DOM", "React component rendering", "Frontend Developer", "Technical")

        assert result.source == EvaluationSource.HEURISTIC
        assert result.score == 70

    @pytest.mark.asyncio
    async def test_accepts_enum_role_and_category(self, service, backend):
        backend.complete.side_effect = ConnectionError("down")

        result = await service.evaluate("Q?", "", JobRole.DATA_SCIENTIST, QuestionCategory.BEHAVIORAL)

        assert result.source == EvaluationSource.HEURISTIC
        assert result.score == 60

    @pytest.mark.asyncio
    async def test_gateway_without_backend_falls_back(self):
        service = AnswerEvaluationService()

        result = await service.evaluate("Q?", "an api answer", "Backend Developer", "Technical")

        assert result.source == EvaluationSource.HEURISTIC
        assert result.score == 65

    @pytest.mark.asyncio
    async def test_evaluator_chain_order(self):
        service = AnswerEvaluationService(evaluators=[FailingEvaluator(), HeuristicAnswerEvaluator()])

        result = await service.evaluate("Q?", "answer", "Backend Developer", "Technical")

        assert result.source == EvaluationSource.HEURISTIC

    @pytest.mark.asyncio
    async def test_exhausted_chain_raises_last_error(self):
        service = AnswerEvaluationService(evaluators=[FailingEvaluator()])

        with pytest.raises(GatewayError):
            await service.evaluate("Q?", "answer", "Backend Developer", "Technical")

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            AnswerEvaluationService(evaluators=[])

    @pytest.mark.asyncio
    async def test_missing_question_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.evaluate("  ", "answer", "Backend Developer", "Technical")

    @pytest.mark.asyncio
    async def test_missing_answer_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.evaluate("Q?", None, "Backend Developer", "Technical")

    @pytest.mark.asyncio
    async def test_result_is_evaluation_result(self, service, backend):
        backend.complete.side_effect = ConnectionError("down")
        result = await service.evaluate("Q?", "answer", "Backend Developer", "Technical")
        assert isinstance(result, EvaluationResult)


class TestQuestionGeneration:
    """Test cases for question generation fallback."""

    @pytest.fixture
    def backend(self):
        return AsyncMock()

    @pytest.fixture
    def service(self, backend):
        return AnswerEvaluationService(gateway=AIGateway(backend=backend, timeout_seconds=1.0))

    @pytest.mark.asyncio
    async def test_generated_questions_returned(self, service, backend):
        backend.complete.return_value = json.dumps([{"question": "Design a cache"}])

        questions = await service.generate_questions("Backend Developer", "Technical", "hard", 1)

        assert [q.question for q in questions] == ["Design a cache"]

    @pytest.mark.asyncio
    async def test_fallback_bank_used_on_failure(self, service, backend):
        backend.complete.side_effect = ConnectionError("down")

        questions = await service.generate_questions("Frontend Developer", "Technical", "medium", 5)

        assert len(questions) == 2
        assert all(q.question for q in questions)

    @pytest.mark.asyncio
    async def test_fallback_respects_count(self, service, backend):
        backend.complete.return_value = "not json"

        questions = await service.generate_questions("Frontend Developer", "Technical", "medium", 1)

        assert len(questions) == 1

    @pytest.mark.asyncio
    async def test_unknown_role_falls_back_to_empty(self, service, backend):
        backend.complete.side_effect = ConnectionError("down")

        questions = await service.generate_questions("UI/UX Designer", "Technical", "medium", 3)

        assert questions == []

    @pytest.mark.asyncio
    async def test_count_must_be_positive(self, service):
        with pytest.raises(ValidationError):
            await service.generate_questions("Frontend Developer", "Technical", "medium", 0)
