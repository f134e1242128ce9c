"""
guardrails.py – Input and output checks around each generation stage
=====================================================================
The generators only *request* count ranges from the model; this layer
reports what actually came back so the caller can decide what to show.

Guardrail levels
----------------
BLOCK   – Hard-stop: the pipeline does not proceed.
WARN    – Soft-stop: the pipeline proceeds with a visible warning.
INFO    – Advisory: informational note recorded in the trace.

Guards implemented
------------------
Input guards (before Plan Generator):
  G-01  Industry and topic non-empty
  G-02  Industry / topic unusually long (> 200 chars)
  G-03  Document text exceeds the inline character budget (will be truncated)

Plan guards (after Plan Generator):
  G-04  Learning objective count in [3, 5]
  G-05  Module count in [4, 6]
  G-06  Suggested enhancement count in [3, 4]
  G-07  Total module duration realistic (10–480 min)

Kit guards (after Kit Generator):
  G-08  Slide count in [5, 12]
  G-09  Flashcard count in [5, 15]
  G-10  Handout and facilitator guide non-empty

Content guards (all free text):
  G-11  PII patterns (email, phone number) in caller input and generated kit text
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from trainkit.models import (
    ENHANCEMENTS_RANGE,
    KIT_FLASHCARDS_RANGE,
    KIT_SLIDES_RANGE,
    MODULES_RANGE,
    OBJECTIVES_RANGE,
    GeneratedKit,
    TrainingPlan,
    TrainingRequest,
)


# ─── Enums & data models ─────────────────────────────────────────────────────

class GuardrailLevel(str, Enum):
    BLOCK = "BLOCK"
    WARN  = "WARN"
    INFO  = "INFO"


@dataclass
class GuardrailViolation:
    code:    str
    level:   GuardrailLevel
    message: str
    field:   str = ""   # which field triggered the violation


@dataclass
class GuardrailResult:
    passed:     bool
    violations: list[GuardrailViolation] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return any(v.level == GuardrailLevel.BLOCK for v in self.violations)

    @property
    def warnings(self) -> list[GuardrailViolation]:
        return [v for v in self.violations if v.level == GuardrailLevel.WARN]

    @property
    def infos(self) -> list[GuardrailViolation]:
        return [v for v in self.violations if v.level == GuardrailLevel.INFO]

    def summary(self) -> str:
        if not self.violations:
            return "All guardrails passed."
        return "\n".join(f"{v.level.value} [{v.code}] {v.message}" for v in self.violations)


def _result(violations: list[GuardrailViolation]) -> GuardrailResult:
    return GuardrailResult(
        passed=not any(v.level == GuardrailLevel.BLOCK for v in violations),
        violations=violations,
    )


def _count_violation(
    code: str, label: str, field_name: str, count: int, bounds: tuple[int, int],
) -> Optional[GuardrailViolation]:
    lo, hi = bounds
    if lo <= count <= hi:
        return None
    return GuardrailViolation(
        code=code, level=GuardrailLevel.WARN, field=field_name,
        message=f"{label} count is {count}; expected {lo}-{hi}.",
    )


# ─── Constant sets ────────────────────────────────────────────────────────────

MAX_LABEL_LENGTH    = 200
DURATION_RANGE      = (10, 480)   # minutes, whole session

_PII_PATTERNS: list[tuple[str, re.Pattern]] = [
    ("Email address", re.compile(r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b")),
    ("Phone number",  re.compile(r"\b(?:\+?[\d]{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]\d{3}[-.\s]\d{4}\b")),
]


# ─── Guardrail checks ─────────────────────────────────────────────────────────

class InputGuardrails:
    """G-01 – G-03: Validates the caller's TrainingRequest."""

    def check(self, request: TrainingRequest, char_budget: int = 2000) -> GuardrailResult:
        violations: list[GuardrailViolation] = []

        # G-01 Non-empty required fields
        for name in ("industry", "topic"):
            value = getattr(request, name) or ""
            if not value.strip():
                violations.append(GuardrailViolation(
                    code="G-01", level=GuardrailLevel.BLOCK, field=name,
                    message=f"{name.capitalize()} must not be empty.",
                ))
            # G-02 Length
            elif len(value) > MAX_LABEL_LENGTH:
                violations.append(GuardrailViolation(
                    code="G-02", level=GuardrailLevel.WARN, field=name,
                    message=f"{name.capitalize()} is {len(value)} characters; keep it under {MAX_LABEL_LENGTH}.",
                ))

        # G-03 Document budget
        doc = request.document_text or ""
        if len(doc.strip()) > char_budget:
            violations.append(GuardrailViolation(
                code="G-03", level=GuardrailLevel.INFO, field="document_text",
                message=(
                    f"Document has {len(doc.strip())} characters; only the first "
                    f"{char_budget} are sent to the model."
                ),
            ))

        content = OutputContentGuardrails()
        for name in ("industry", "topic", "document_text"):
            text = getattr(request, name) or ""
            violations.extend(content.check_text(text, name).violations)

        return _result(violations)


class PlanGuardrails:
    """G-04 – G-07: Checks a TrainingPlan against the requested ranges."""

    def check(self, plan: TrainingPlan) -> GuardrailResult:
        violations = [
            v for v in (
                _count_violation("G-04", "Learning objective", "learningObjectives",
                                 len(plan.learning_objectives), OBJECTIVES_RANGE),
                _count_violation("G-05", "Module", "modules",
                                 len(plan.modules), MODULES_RANGE),
                _count_violation("G-06", "Suggested enhancement", "suggestedEnhancements",
                                 len(plan.suggested_enhancements), ENHANCEMENTS_RANGE),
            )
            if v is not None
        ]

        # G-07 Realistic total duration
        total = plan.total_duration_minutes
        lo, hi = DURATION_RANGE
        if not (lo <= total <= hi):
            violations.append(GuardrailViolation(
                code="G-07", level=GuardrailLevel.WARN, field="modules",
                message=f"Total duration is {total} min; a short session is usually {lo}-{hi} min.",
            ))

        return _result(violations)


class KitGuardrails:
    """G-08 – G-11: Checks a GeneratedKit."""

    def check(self, kit: GeneratedKit) -> GuardrailResult:
        violations = [
            v for v in (
                _count_violation("G-08", "Slide", "slides", len(kit.slides), KIT_SLIDES_RANGE),
                _count_violation("G-09", "Flashcard", "flashcards",
                                 len(kit.flashcards), KIT_FLASHCARDS_RANGE),
            )
            if v is not None
        ]

        # G-10 Documents present
        for name, text in (
            ("handoutMarkdown", kit.handout_markdown),
            ("facilitatorGuideMarkdown", kit.facilitator_guide_markdown),
        ):
            if not text.strip():
                violations.append(GuardrailViolation(
                    code="G-10", level=GuardrailLevel.WARN, field=name,
                    message=f"{name} is empty.",
                ))

        # G-11 PII in generated text
        content = OutputContentGuardrails()
        for name, text in _kit_texts(kit):
            violations.extend(content.check_text(text, name).violations)

        return _result(violations)


def _kit_texts(kit: GeneratedKit):
    yield "handoutMarkdown", kit.handout_markdown
    yield "facilitatorGuideMarkdown", kit.facilitator_guide_markdown
    for i, s in enumerate(kit.slides):
        yield f"slides[{i}]", "\n".join([s.title, *s.content, s.speaker_notes])
    for i, c in enumerate(kit.flashcards):
        yield f"flashcards[{i}]", f"{c.front}\n{c.back}"


class OutputContentGuardrails:
    """G-11: PII heuristics over free text, caller-supplied or generated."""

    def check_text(self, text: str, field_name: str = "") -> GuardrailResult:
        violations: list[GuardrailViolation] = []
        for label, pattern in _PII_PATTERNS:
            if pattern.search(text):
                violations.append(GuardrailViolation(
                    code="G-11", level=GuardrailLevel.WARN, field=field_name,
                    message=f"PII detected in \"{field_name}\": {label}.",
                ))
        return _result(violations)


# ─── Convenience façade ───────────────────────────────────────────────────────

class GuardrailsPipeline:
    """
    Single entry-point that runs all applicable guardrails for a given stage.

    Usage::

        gp = GuardrailsPipeline()
        gp.check_input(TrainingRequest("Healthcare", "Patient Safety"))
        gp.check_plan(plan)
        gp.check_kit(kit)
    """

    def __init__(self):
        self.input_guard   = InputGuardrails()
        self.plan_guard    = PlanGuardrails()
        self.kit_guard     = KitGuardrails()

    def check_input(self, request: TrainingRequest, char_budget: int = 2000) -> GuardrailResult:
        return self.input_guard.check(request, char_budget=char_budget)

    def check_plan(self, plan: TrainingPlan) -> GuardrailResult:
        return self.plan_guard.check(plan)

    def check_kit(self, kit: GeneratedKit) -> GuardrailResult:
        return self.kit_guard.check(kit)

    def merge(self, *results: GuardrailResult) -> GuardrailResult:
        """Merge multiple GuardrailResult objects into one."""
        all_v = []
        for r in results:
            all_v.extend(r.violations)
        return _result(all_v)
