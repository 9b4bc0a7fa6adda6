"""Answer evaluation and question generation."""

from .gateway import (
    AIGateway,
    LangChainBackend,
    TextGenerationBackend,
    extract_json_text,
    parse_json_response,
)
from .heuristic import HeuristicEvaluator
from .question_bank import get_fallback_questions
from .service import (
    AIAnswerEvaluator,
    AnswerEvaluationService,
    AnswerEvaluator,
    HeuristicAnswerEvaluator,
)

__all__ = [
    "AIGateway",
    "LangChainBackend",
    "TextGenerationBackend",
    "extract_json_text",
    "parse_json_response",
    "HeuristicEvaluator",
    "get_fallback_questions",
    "AIAnswerEvaluator",
    "AnswerEvaluationService",
    "AnswerEvaluator",
    "HeuristicAnswerEvaluator",
]
