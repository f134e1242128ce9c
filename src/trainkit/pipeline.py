"""
pipeline.py — Plan → Kit orchestration with per-stage fallback
===============================================================
TrainingKitPipeline is what the surrounding application (HTTP service, UI)
talks to.  For each stage it decides *live* vs *fallback*, runs the
guardrails, and records a GenerationStep.

Source policy (per stage, independently):
  fallback  ← caller asked for it (use_fallback=True)
            ← FORCE_MOCK_MODE is set
            ← no API key configured and ALLOW_FALLBACK is true
  live      ← otherwise

Live failures (ConfigurationError / UpstreamError / ParseError) propagate
unchanged; offering the fallback path after a failure is the caller's call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from trainkit.agent_trace import GenerationStep, RunTrace, StepTimer
from trainkit.b1_plan_generator import PlanGenerator, clip_document
from trainkit.b2_kit_generator import KitGenerator
from trainkit.config import Settings, get_settings
from trainkit.errors import GuardrailBlockedError, TrainKitError
from trainkit.fallback_content import FallbackContentProvider, default_provider
from trainkit.guardrails import GuardrailResult, GuardrailsPipeline
from trainkit.models import GeneratedKit, GenerationSource, TrainingPlan, TrainingRequest

logger = logging.getLogger(__name__)

FALLBACK_INDUSTRY = "General"


@dataclass
class GenerationResult:
    value:      Any                 # TrainingPlan | GeneratedKit
    source:     GenerationSource
    guardrails: GuardrailResult
    step:       GenerationStep


class TrainingKitPipeline:
    """Stateless façade over PlanGenerator, KitGenerator and the fallback provider."""

    def __init__(
        self,
        settings: Settings | None = None,
        plan_generator: PlanGenerator | None = None,
        kit_generator: KitGenerator | None = None,
        fallback: FallbackContentProvider | None = None,
        guardrails: GuardrailsPipeline | None = None,
    ) -> None:
        self._settings   = settings or get_settings()
        self._plan_gen   = plan_generator or PlanGenerator(
            self._settings.openai, app_config=self._settings.app,
        )
        self._kit_gen    = kit_generator or KitGenerator(self._settings.openai)
        self._fallback   = fallback or default_provider()
        self._guardrails = guardrails or GuardrailsPipeline()

    @property
    def settings(self) -> Settings:
        return self._settings

    def choose_source(self, use_fallback: bool = False) -> GenerationSource:
        app = self._settings.app
        if use_fallback or app.force_mock_mode:
            return GenerationSource.FALLBACK
        if not self._settings.openai.is_configured and app.allow_fallback:
            return GenerationSource.FALLBACK
        return GenerationSource.LIVE

    # ── Stage 1 ───────────────────────────────────────────────────────────────

    def generate_plan(
        self,
        industry: str,
        topic: str,
        document_text: Optional[str] = None,
        *,
        use_fallback: bool = False,
        trace: RunTrace | None = None,
    ) -> GenerationResult:
        request = TrainingRequest(industry=industry, topic=topic, document_text=document_text)
        input_check = self._guardrails.check_input(
            request, char_budget=self._settings.app.document_char_budget,
        )
        if input_check.blocked:
            raise GuardrailBlockedError(input_check)

        source = self.choose_source(use_fallback)
        model  = self._plan_gen.model if source is GenerationSource.LIVE else "fallback-template"
        has_doc = clip_document(document_text, self._settings.app.document_char_budget) is not None
        summary = f"{industry.strip()} / {topic.strip()}" + (" + document" if has_doc else "")

        with StepTimer() as timer:
            try:
                if source is GenerationSource.FALLBACK:
                    plan = self._fallback.fallback_plan(industry.strip(), topic.strip())
                else:
                    plan = self._plan_gen.generate(industry, topic, document_text)
            except TrainKitError as exc:
                failure = exc
            else:
                failure = None

        if failure is not None:
            self._record_failure(trace, "plan", source, model, timer.elapsed_ms, summary, failure)
            raise failure

        checks = self._guardrails.merge(input_check, self._guardrails.check_plan(plan))
        step = self._step(
            "plan", source, model, timer.elapsed_ms, summary,
            f"{len(plan.modules)} modules, {plan.total_duration_minutes} min",
            checks,
        )
        if trace is not None:
            trace.append(step)
        return GenerationResult(value=plan, source=source, guardrails=checks, step=step)

    # ── Stage 2 ───────────────────────────────────────────────────────────────

    def generate_kit(
        self,
        plan: TrainingPlan,
        industry: Optional[str] = None,
        topic: Optional[str] = None,
        *,
        use_fallback: bool = False,
        trace: RunTrace | None = None,
    ) -> GenerationResult:
        source  = self.choose_source(use_fallback)
        model   = self._kit_gen.model if source is GenerationSource.LIVE else "fallback-template"
        summary = f"plan '{plan.title}' ({len(plan.modules)} modules)"

        with StepTimer() as timer:
            try:
                if source is GenerationSource.FALLBACK:
                    kit = self.fallback_kit(
                        (industry or "").strip() or FALLBACK_INDUSTRY,
                        (topic or "").strip() or plan.title,
                    )
                else:
                    kit = self._kit_gen.generate(plan)
            except TrainKitError as exc:
                failure = exc
            else:
                failure = None

        if failure is not None:
            self._record_failure(trace, "kit", source, model, timer.elapsed_ms, summary, failure)
            raise failure

        checks = self._guardrails.check_kit(kit)
        step = self._step(
            "kit", source, model, timer.elapsed_ms, summary,
            f"{len(kit.slides)} slides, {len(kit.flashcards)} flashcards",
            checks,
        )
        if trace is not None:
            trace.append(step)
        return GenerationResult(value=kit, source=source, guardrails=checks, step=step)

    def fallback_kit(self, industry: str, topic: str) -> GeneratedKit:
        return self._fallback.fallback_kit(industry, topic)

    # ── Internal helpers ─────────────────────────────────────────────────────

    def _step(
        self,
        stage: str,
        source: GenerationSource,
        model: str,
        elapsed_ms: float,
        input_summary: str,
        output_summary: str,
        checks: GuardrailResult,
    ) -> GenerationStep:
        warnings = [v.message for v in checks.warnings]
        for w in warnings:
            logger.warning("%s guardrail: %s", stage, w)
        return GenerationStep(
            stage          = stage,
            source         = source.value,
            model          = model,
            duration_ms    = elapsed_ms,
            status         = "warning" if warnings else "success",
            input_summary  = input_summary,
            output_summary = output_summary,
            warnings       = warnings,
            detail         = {"infos": [v.message for v in checks.infos]},
        )

    @staticmethod
    def _record_failure(
        trace: RunTrace | None,
        stage: str,
        source: GenerationSource,
        model: str,
        elapsed_ms: float,
        input_summary: str,
        exc: TrainKitError,
    ) -> None:
        logger.warning("%s generation failed: %s", stage, exc)
        if trace is None:
            return
        trace.append(GenerationStep(
            stage          = stage,
            source         = source.value,
            model          = model,
            duration_ms    = elapsed_ms,
            status         = "failed",
            input_summary  = input_summary,
            output_summary = type(exc).__name__,
            detail         = {"error": str(exc)},
        ))
