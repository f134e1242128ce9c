"""
Block 1: Plan Generator
=======================
Turns (industry, topic, optional document text) into a structured
TrainingPlan with one JSON-mode completion call.

PlanGenerator
    Builds the instruction (schema-anchored, with explicit count ranges),
    sends it through CompletionClient and decodes the reply through the
    validating TrainingPlan model.
    Returns: TrainingPlan

The count ranges (objectives, modules, enhancements) are *requested*, not
enforced — GuardrailsPipeline.check_plan() reports deviations as warnings.
"""

from __future__ import annotations

import json
import logging
import textwrap
from typing import Optional

from pydantic import ValidationError

from trainkit.completion_client import CompletionClient
from trainkit.config import AppConfig, OpenAIConfig, get_settings
from trainkit.errors import ParseError
from trainkit.models import (
    ENHANCEMENTS_RANGE,
    MODULES_RANGE,
    OBJECTIVES_RANGE,
    TrainingPlan,
)

logger = logging.getLogger(__name__)


# The exact JSON shape we expect back from the LLM.
_PLAN_JSON_SCHEMA = {
    "title":              "string",
    "targetAudience":     "string",
    "learningObjectives": ["string"],
    "modules": [
        {"title": "string", "description": "string", "durationMinutes": "number"}
    ],
    "suggestedEnhancements": ["string"],
}

_PLAN_SCHEMA_STR = json.dumps(_PLAN_JSON_SCHEMA, indent=2)

_SYSTEM_PROMPT = textwrap.dedent("""
    You are an expert instructional designer specializing in corporate training.
    You create comprehensive, engaging training plans tailored to specific
    industries and topics, suitable for adult learners.
    Always respond with valid JSON matching the requested schema.
""").strip()


def _span(bounds: tuple[int, int]) -> str:
    return f"{bounds[0]}-{bounds[1]}"


def clip_document(document_text: Optional[str], budget: int) -> Optional[str]:
    """Return the first *budget* characters of the document (None if blank)."""
    if document_text is None or not document_text.strip():
        return None
    text = document_text.strip()
    if len(text) <= budget:
        return text
    return text[:budget] + "..."


def build_plan_messages(
    industry: str,
    topic: str,
    document_text: Optional[str] = None,
    char_budget: int = 2000,
) -> list[dict[str, str]]:
    """Assemble the system + user messages for one plan request."""
    document = clip_document(document_text, char_budget)

    if document:
        request = textwrap.dedent(f"""
            Analyze this uploaded training document for the {industry} industry on the topic of "{topic}".
            Create a structured training plan based on it rather than from scratch.
            Extract key modules and learning objectives, and suggest enhancements.

            Document content:
        """).strip() + "\n" + document
    else:
        request = textwrap.dedent(f"""
            Create a comprehensive training plan for:
            Industry: {industry}
            Topic: {topic}

            The plan should be professional, actionable, and specific to this
            industry and topic combination.
        """).strip()

    shape = (
        "Respond with ONLY a JSON object with this exact structure:\n"
        + _PLAN_SCHEMA_STR
        + "\n\n"
        + f"Provide {_span(OBJECTIVES_RANGE)} learning objectives, "
        + f"{_span(MODULES_RANGE)} modules with realistic durations in minutes, "
        + f"and {_span(ENHANCEMENTS_RANGE)} suggested enhancements.\n"
        + "Do NOT include any explanation, markdown, or extra text outside the JSON."
    )

    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user",   "content": request + "\n\n" + shape},
    ]


class PlanGenerator:
    """
    Sends (industry, topic, document) to the completion endpoint and returns a
    validated TrainingPlan.

    Raises:
        ValueError          – industry or topic is blank.
        ConfigurationError  – no API key configured.
        UpstreamError       – endpoint unreachable or non-2xx.
        ParseError          – reply is not a TrainingPlan-shaped JSON object.
    """

    def __init__(
        self,
        config: OpenAIConfig | None = None,
        client: CompletionClient | None = None,
        app_config: AppConfig | None = None,
    ) -> None:
        if config is None or app_config is None:
            settings   = get_settings()
            config     = config or settings.openai
            app_config = app_config or settings.app
        self._cfg    = config
        self._app    = app_config
        self._client = client or CompletionClient(config)

    @property
    def model(self) -> str:
        return self._cfg.plan_model

    def generate(
        self,
        industry: str,
        topic: str,
        document_text: Optional[str] = None,
    ) -> TrainingPlan:
        if not industry or not industry.strip():
            raise ValueError("industry must not be empty")
        if not topic or not topic.strip():
            raise ValueError("topic must not be empty")

        industry, topic = industry.strip(), topic.strip()
        has_document = clip_document(document_text, self._app.document_char_budget) is not None
        messages = build_plan_messages(
            industry, topic, document_text, self._app.document_char_budget,
        )
        logger.info(
            "Generating plan for %r / %r (document: %s)",
            industry, topic, "yes" if has_document else "no",
        )
        data = self._client.complete_json(messages, model=self._cfg.plan_model)

        try:
            plan = TrainingPlan.model_validate(data)
        except ValidationError as exc:
            raise ParseError(f"Plan JSON does not match the TrainingPlan shape: {exc}") from exc

        logger.info(
            "Plan ready: %d objectives, %d modules, %d min",
            len(plan.learning_objectives), len(plan.modules), plan.total_duration_minutes,
        )
        return plan


def generate_plan(
    industry: str,
    topic: str,
    document_text: Optional[str] = None,
    config: OpenAIConfig | None = None,
) -> TrainingPlan:
    """Convenience one-shot wrapper around PlanGenerator."""
    return PlanGenerator(config).generate(industry, topic, document_text)
