"""AI gateway: prompts the remote text-generation service and parses its JSON."""

import asyncio
import json
from typing import Any, List, Optional, Protocol, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI
from pydantic import ValidationError as PydanticValidationError

from interview_tracker.config import AIProviderConfig
from interview_tracker.core.errors import GatewayError, GatewayErrorCause
from interview_tracker.core.models import (
    EvaluationResult,
    EvaluationSource,
    QuestionSpec,
    RoleDefinition,
)
from interview_tracker.utils.logging import get_logger

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert interview coach and technical interviewer. "
    "Always respond with valid JSON."
)

_CLOSERS = {"{": "}", "[": "]"}


class TextGenerationBackend(Protocol):
    """Anything that can turn a prompt into free-form text."""

    async def complete(self, prompt: str, system_instruction: str) -> str:
        ...


class LangChainBackend:
    """Text generation through a langchain chat model."""

    def __init__(self, chat_model: Any):
        self.chat_model = chat_model

    @classmethod
    def from_config(cls, config: AIProviderConfig) -> Optional["LangChainBackend"]:
        """Create the configured chat model, or None when no provider is usable."""
        if not config.enabled:
            return None

        if config.provider == "groq":
            chat_model = ChatGroq(
                model=config.model,
                api_key=config.api_key,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout_seconds,
                max_retries=0,
            )
        elif config.provider == "openai":
            chat_model = ChatOpenAI(
                model=config.model,
                api_key=config.api_key,
                base_url=config.base_url,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout_seconds,
                max_retries=0,
            )
        else:
            raise ValueError(f"Unknown AI provider: {config.provider}")

        return cls(chat_model)

    async def complete(self, prompt: str, system_instruction: str) -> str:
        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=prompt),
        ]
        response = await self.chat_model.ainvoke(messages)
        return response.content


def extract_json_text(text: str) -> str:
    """
    Return the balanced ``{...}`` or ``[...]`` substring of ``text`` that starts earliest.

    Brackets inside JSON string literals are ignored. The text is scanned once,
    so a long run of unmatched brackets cannot stall the event loop. Raises
    ``GatewayError(no-json-found)`` when no balanced substring exists.
    """
    # (opening index, expected closer) for every bracket still open
    stack: List[Tuple[int, str]] = []
    best: Optional[Tuple[int, int]] = None
    in_string = False
    escaped = False

    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            # Quotes only matter inside a candidate; prose outside is free text.
            in_string = bool(stack)
        elif char in _CLOSERS:
            stack.append((index, _CLOSERS[char]))
        elif char in ("}", "]") and stack:
            start, closer = stack.pop()
            if closer != char:
                # Every open candidate spans this closer and is broken by it.
                if best is not None:
                    break
                stack.clear()
                continue
            if not stack:
                return text[start:index + 1]
            if best is None or start < best[0]:
                best = (start, index)

    if best is not None:
        return text[best[0]:best[1] + 1]
    raise GatewayError(GatewayErrorCause.NO_JSON_FOUND, "No JSON found in response")


def parse_json_response(text: str) -> Any:
    """Extract and decode the structured data embedded in a model response."""
    candidate = extract_json_text(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise GatewayError(GatewayErrorCause.PARSE_ERROR, f"Invalid JSON in response: {e}") from e


class AIGateway:
    """
    Adapter between the pipeline and the remote text-generation service.

    Every failure (transport error, timeout, missing or malformed JSON) is
    raised as a ``GatewayError``. The gateway never retries; callers decide
    what to fall back to.
    """

    def __init__(
        self,
        backend: Optional[TextGenerationBackend] = None,
        timeout_seconds: float = 30.0,
    ):
        self.backend = backend
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(component="ai_gateway")

    @classmethod
    def from_config(cls, config: AIProviderConfig) -> "AIGateway":
        return cls(
            backend=LangChainBackend.from_config(config),
            timeout_seconds=config.timeout_seconds,
        )

    async def generate_questions(
        self,
        role: str,
        category: str,
        difficulty: str,
        count: int,
        role_definition: Optional[RoleDefinition] = None,
    ) -> List[QuestionSpec]:
        """
        Ask the AI backend for interview questions.

        Args:
            role: Job role the questions target
            category: Question category
            difficulty: Requested difficulty
            count: Number of questions wanted
            role_definition: Optional role whose category prompt guides generation

        Returns:
            At most ``count`` generated questions
        """
        focus = None
        if role_definition is not None:
            role_category = role_definition.find_category(category)
            if role_category is not None:
                focus = role_category.ai_prompt

        prompt = self._build_questions_prompt(role, category, difficulty, count, focus)
        data = parse_json_response(await self._call(prompt))

        if isinstance(data, dict) and isinstance(data.get("questions"), list):
            data = data["questions"]
        if not isinstance(data, list):
            raise GatewayError(GatewayErrorCause.PARSE_ERROR, "Expected a JSON array of questions")

        try:
            questions = [QuestionSpec.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise GatewayError(GatewayErrorCause.PARSE_ERROR, f"Malformed question: {e}") from e

        self.logger.info(
            "Questions generated by AI backend",
            role=role,
            category=category,
            requested=count,
            received=len(questions)
        )
        return questions[:count]

    async def evaluate_answer(self, question: str, answer: str, role: str, category: str) -> EvaluationResult:
        """Ask the AI backend to score one answer."""
        prompt = self._build_evaluation_prompt(question, answer, role, category)
        data = parse_json_response(await self._call(prompt))

        if not isinstance(data, dict):
            raise GatewayError(GatewayErrorCause.PARSE_ERROR, "Expected a JSON object evaluation")

        try:
            result = EvaluationResult.model_validate({**data, "source": EvaluationSource.AI})
        except PydanticValidationError as e:
            raise GatewayError(GatewayErrorCause.PARSE_ERROR, f"Malformed evaluation: {e}") from e

        self.logger.info("Answer evaluated by AI backend", role=role, category=category, score=result.score)
        return result

    async def _call(self, prompt: str) -> str:
        if self.backend is None:
            raise GatewayError(GatewayErrorCause.TRANSPORT, "No AI backend configured")

        try:
            response = await asyncio.wait_for(
                self.backend.complete(prompt, SYSTEM_INSTRUCTION),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise GatewayError(
                GatewayErrorCause.TRANSPORT,
                f"AI backend timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise GatewayError(GatewayErrorCause.TRANSPORT, f"AI backend call failed: {e}") from e

        if not isinstance(response, str):
            raise GatewayError(GatewayErrorCause.PARSE_ERROR, "AI backend returned non-text content")
        return response

    def _build_questions_prompt(
        self,
        role: str,
        category: str,
        difficulty: str,
        count: int,
        focus: Optional[str] = None
    ) -> str:
        focus_section = f"\nFocus: {focus}\n" if focus else ""
        return f"""Generate {count} interview questions for a {role} position.

Category: {category}
Difficulty: {difficulty}
{focus_section}
Please provide questions in the following JSON format:
[
  {{
    "question": "The actual question text",
    "type": "technical|behavioral",
    "difficulty": "easy|medium|hard",
    "timeLimit": 300,
    "sampleAnswer": "A brief sample answer outline"
  }}
]

Requirements:
- Questions should be realistic and challenging
- Technical questions should test practical knowledge
- Behavioral questions should assess soft skills
- Time limits should be appropriate for question complexity
- Include a mix of problem-solving and conceptual questions
- Make questions specific to {role} role"""

    def _build_evaluation_prompt(self, question: str, answer: str, role: str, category: str) -> str:
        return f"""Evaluate the following interview answer:

Role: {role}
Category: {category}
Question: {question}
Answer: {answer}

Please provide evaluation in this JSON format:
{{
  "score": 85,
  "feedback": "Detailed feedback on the answer",
  "strengths": ["List of strengths"],
  "improvements": ["List of areas to improve"],
  "suggestedAnswer": "A model answer for comparison"
}}

Evaluation criteria:
- Technical accuracy
- Clarity and communication
- Problem-solving approach
- Relevance to the question
- Depth of knowledge"""
