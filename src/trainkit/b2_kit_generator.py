"""
Block 2: Kit Generator
======================
Expands one TrainingPlan into a GeneratedKit (slides, flashcards, handout,
facilitator guide, background-image prompt) with a single JSON-mode call.

Every learning objective and every module title is written into the
instruction verbatim so the model cannot silently drop one.  No partial
recovery: if the reply cannot be decoded the whole attempt is discarded.
"""

from __future__ import annotations

import json
import logging
import textwrap

from pydantic import ValidationError

from trainkit.completion_client import CompletionClient
from trainkit.config import OpenAIConfig, get_config
from trainkit.errors import ParseError
from trainkit.models import (
    LIVE_FLASHCARDS_RANGE,
    LIVE_SLIDES_RANGE,
    GeneratedKit,
    TrainingPlan,
)

logger = logging.getLogger(__name__)


_KIT_JSON_SCHEMA = {
    "slides": [
        {
            "title":            "string",
            "content":          ["bullet1", "bullet2"],
            "speakerNotes":     "string",
            "visualSearchTerm": "string for finding relevant images",
        }
    ],
    "flashcards": [
        {"front": "question or term", "back": "answer or definition"}
    ],
    "handoutMarkdown":          "Complete markdown document for participant handout",
    "facilitatorGuideMarkdown": "Complete markdown document with facilitation tips",
    "backgroundImagePrompt":    "A description for a background image that fits the training theme",
}

_KIT_SCHEMA_STR = json.dumps(_KIT_JSON_SCHEMA, indent=2)

_SYSTEM_PROMPT = (
    "You are a world-class instructional designer creating comprehensive "
    "corporate training materials. Generate slides, flashcards, and "
    "documentation with engaging, industry-specific content. "
    "Always respond with valid JSON."
)


def _describe_plan(plan: TrainingPlan) -> str:
    objectives = "\n".join(f"- {o}" for o in plan.learning_objectives)
    modules = "\n".join(
        f"{i}. {m.title} ({m.duration_minutes} min): {m.description}"
        for i, m in enumerate(plan.modules, start=1)
    )
    return (
        f"Title: {plan.title}\n"
        f"Target Audience: {plan.target_audience}\n"
        f"Learning Objectives:\n{objectives}\n"
        f"Modules:\n{modules}"
    )


def build_kit_messages(plan: TrainingPlan) -> list[dict[str, str]]:
    s_lo, s_hi = LIVE_SLIDES_RANGE
    f_lo, f_hi = LIVE_FLASHCARDS_RANGE
    user_prompt = (
        "Based on this training plan, create a complete training kit:\n\n"
        + _describe_plan(plan)
        + "\n\nReturn a JSON object with this exact structure:\n"
        + _KIT_SCHEMA_STR
        + "\n\n"
        + textwrap.dedent(f"""
            Create:
            - {s_lo}-{s_hi} slides covering all modules with an intro and conclusion slide
            - {f_lo}-{f_hi} flashcards for key concepts
            - A comprehensive handout (markdown format) with all key information
            - A detailed facilitator guide (markdown format) with timing, tips, and activities
            - A professional background image description

            Make content engaging, professional, and aligned with the learning objectives.
        """).strip()
    )
    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user",   "content": user_prompt},
    ]


class KitGenerator:
    """
    Sends a TrainingPlan to the completion endpoint and returns a validated
    GeneratedKit.  Same error taxonomy as PlanGenerator.
    """

    def __init__(
        self,
        config: OpenAIConfig | None = None,
        client: CompletionClient | None = None,
    ) -> None:
        self._cfg    = config or get_config()
        self._client = client or CompletionClient(self._cfg)

    @property
    def model(self) -> str:
        return self._cfg.kit_model

    def generate(self, plan: TrainingPlan) -> GeneratedKit:
        messages = build_kit_messages(plan)
        logger.info("Generating kit for plan %r (%d modules)", plan.title, len(plan.modules))
        data = self._client.complete_json(
            messages,
            model=self._cfg.kit_model,
            max_tokens=self._cfg.kit_max_tokens,
        )

        try:
            kit = GeneratedKit.model_validate(data)
        except ValidationError as exc:
            raise ParseError(f"Kit JSON does not match the GeneratedKit shape: {exc}") from exc

        logger.info("Kit ready: %d slides, %d flashcards", len(kit.slides), len(kit.flashcards))
        return kit


def generate_kit(plan: TrainingPlan, config: OpenAIConfig | None = None) -> GeneratedKit:
    """Convenience one-shot wrapper around KitGenerator."""
    return KitGenerator(config).generate(plan)
