"""
agent_trace.py — Lightweight audit log for generation runs
==========================================================
Each pipeline stage (plan, kit) emits a GenerationStep.  A caller that wants
a timeline for the whole wizard session creates a RunTrace and passes it to
TrainingKitPipeline; the pipeline appends one step per call.  The trace is
owned by the caller — the pipeline keeps no reference to it.

Key fields
----------
  GenerationStep.stage        "plan" | "kit"
  GenerationStep.source       "live" | "fallback"
  GenerationStep.status       "success" | "warning" | "failed"
  GenerationStep.duration_ms  wall-clock milliseconds for the stage
  GenerationStep.warnings     guardrail WARN messages
  RunTrace.total_ms           sum of step durations
"""

from __future__ import annotations

import datetime
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class GenerationStep:
    """One stage's contribution inside a session."""
    stage:          str
    source:         str
    model:          str
    duration_ms:    float
    status:         str
    input_summary:  str
    output_summary: str
    warnings:       list[str] = field(default_factory=list)
    detail:         dict[str, Any] = field(default_factory=dict)


@dataclass
class RunTrace:
    """Full trace for one wizard session."""
    run_id:    str
    industry:  str
    topic:     str
    timestamp: str
    steps:     list[GenerationStep] = field(default_factory=list)

    @property
    def total_ms(self) -> float:
        return round(sum(s.duration_ms for s in self.steps), 1)

    def append(self, step: GenerationStep) -> None:
        self.steps.append(step)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["total_ms"] = self.total_ms
        return data


def new_trace(industry: str, topic: str) -> RunTrace:
    return RunTrace(
        run_id    = str(uuid.uuid4())[:8].upper(),
        industry  = industry,
        topic     = topic,
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )


class StepTimer:
    """Context manager measuring a stage in milliseconds."""

    def __enter__(self) -> "StepTimer":
        self._start = time.perf_counter()
        self.elapsed_ms = 0.0
        return self

    def __exit__(self, *exc) -> None:
        self.elapsed_ms = round((time.perf_counter() - self._start) * 1000, 1)
