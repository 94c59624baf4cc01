# src/generation/llm_generator.py - v1
"""LLM-backed generator: structured JSON over BaseLLMClient.

Each call is retried for transient provider errors and malformed JSON via
llm.retry.with_retry; exhausted retries surface as GenerationFailure.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, Field

from pathwise.core.errors import GenerationFailure
from pathwise.core.models import CareerSuggestion, QuizVariant
from pathwise.generation.base_generator import (
    BaseQuizGenerator,
    BaseRoadmapGenerator,
    GeneratedRoadmap,
    GeneratedSkill,
)
from pathwise.llm.base_client import BaseLLMClient
from pathwise.llm.models import Message
from pathwise.llm.retry import LLMRetryExhausted, RetryConfig, with_retry

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_PROMPTS_DIR = Path(__file__).parent / "prompts"

_SYSTEM_PROMPT = (
    "You are a career guidance expert for the Sri Lankan job market. "
    "Respond only with valid JSON."
)

# Human-readable labels for the question ids used by the quiz front end.
QUESTION_LABELS: dict[str, str] = {
    "activity": "Enjoys",
    "role": "Team role",
    "environment": "Preferred environment",
    "subject": "Favorite subject",
    "priority": "Career priority",
    "problemSolving": "Problem-solving approach",
    "workStyle": "Preferred work style",
    "ambition": "Long-term ambition",
    "workWith": "Prefers to work with",
    "learningStyle": "Preferred learning style",
    "pressure": "Handling pressure",
    "impact": "Desired impact",
    "workValue": "Core work value",
    "riskAttitude": "Attitude to risk",
    "reputation": "Desired reputation in 10 years",
    "dailyTasks": "Fulfilling daily tasks",
    "workLifeBalance": "Ideal work-life balance",
    "satisfactionSource": "Source of satisfaction",
    "failureReaction": "Reaction to failure",
    "leadershipStyle": "Preferred leadership style",
}

_VARIANT_GUIDANCE: dict[str, str] = {
    "standard": "Ensure the suggestions are distinct from each other (not all IT roles unless strongly indicated).",
    "long": "Cover different aspects of their potential: one safe bet, one ambitious, one creative.",
}


class SuggestionsPayload(BaseModel):
    suggestions: list[CareerSuggestion] = Field(default_factory=list)


class LLMGenerator(BaseRoadmapGenerator, BaseQuizGenerator):
    """Generates roadmaps, skill roadmaps and quiz suggestions with an LLM."""

    def __init__(
        self,
        client: BaseLLMClient,
        temperature: float = 0.4,
        max_tokens: int = 8192,
        suggestion_count: int = 3,
        step_count: int = 5,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._client = client
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._suggestion_count = suggestion_count
        self._step_count = step_count
        self._retry_configs = retry_configs
        self._templates: dict[str, str] = {}

    async def generate_roadmap(
        self, name: str, known_categories: list[str]
    ) -> GeneratedRoadmap:
        prompt = self._load_prompt("career_roadmap").format(
            career_name=name,
            step_count=self._step_count,
            categories=json.dumps(known_categories, ensure_ascii=False),
        )
        return await self._structured(prompt, GeneratedRoadmap, subject=name, temperature=0.5)

    async def generate_skill_roadmap(self, name: str) -> GeneratedSkill:
        prompt = self._load_prompt("skill_roadmap").format(skill_name=name, level_count=3)
        return await self._structured(prompt, GeneratedSkill, subject=name)

    async def generate_quiz_suggestions(
        self, answers: dict[str, str], variant: QuizVariant
    ) -> list[CareerSuggestion]:
        prompt = self._load_prompt("quiz_suggestions").format(
            quiz_label="in-depth" if variant == "long" else "short",
            count=self._suggestion_count,
            answer_lines=format_answer_lines(answers),
            variant_guidance=_VARIANT_GUIDANCE[variant],
        )
        payload = await self._structured(
            prompt, SuggestionsPayload, subject=f"{variant} quiz", temperature=0.8
        )
        return payload.suggestions

    async def _structured(
        self,
        prompt: str,
        schema: type[M],
        subject: str,
        temperature: float | None = None,
    ) -> M:
        async def _call() -> M:
            response = await self._client.complete(
                messages=[Message(role="user", content=prompt)],
                system=_SYSTEM_PROMPT,
                max_tokens=self._max_tokens,
                temperature=self._temperature if temperature is None else temperature,
                response_format=schema,
            )
            return schema.model_validate(parse_json_response(response.content))

        try:
            result = await with_retry(
                _call,
                operation=f"generate {schema.__name__}",
                retry_configs=self._retry_configs,
            )
        except LLMRetryExhausted as e:
            raise GenerationFailure(subject, str(e.last_error)) from e
        logger.debug("Generated %s for %s", schema.__name__, subject)
        return result

    def _load_prompt(self, name: str) -> str:
        if name not in self._templates:
            self._templates[name] = (_PROMPTS_DIR / f"{name}.txt").read_text(encoding="utf-8")
        return self._templates[name]


def format_answer_lines(answers: dict[str, str]) -> str:
    """Render answers as "- Label: value" lines, in the given order."""
    return "\n".join(
        f"- {QUESTION_LABELS.get(key, key)}: {value}" for key, value in answers.items()
    )


def parse_json_response(content: str) -> Any:
    """Parse model output, tolerating markdown code fences.

    Raises:
        ValueError: If the content is not valid JSON.
    """
    text = content.strip()
    if text.startswith("```"):
        lines = [ln for ln in text.split("\n") if not ln.strip().startswith("```")]
        text = "\n".join(lines)
    if not text:
        raise ValueError("Empty JSON response")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON response: {e}") from e
