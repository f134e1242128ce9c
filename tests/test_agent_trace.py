"""Tests for the run trace / step timer."""
import time

from trainkit.agent_trace import GenerationStep, RunTrace, StepTimer, new_trace


def _step(ms):
    return GenerationStep(
        stage="plan", source="live", model="gpt-4o-mini", duration_ms=ms,
        status="success", input_summary="in", output_summary="out",
    )


def test_new_trace_has_short_run_id():
    trace = new_trace("Healthcare", "Patient Safety")
    assert len(trace.run_id) == 8
    assert trace.run_id == trace.run_id.upper()
    assert trace.steps == []


def test_total_ms_sums_steps():
    trace = RunTrace(run_id="ABC", industry="i", topic="t", timestamp="now")
    trace.append(_step(10.0))
    trace.append(_step(5.5))
    assert trace.total_ms == 15.5


def test_to_dict_includes_total():
    trace = RunTrace(run_id="ABC", industry="i", topic="t", timestamp="now")
    trace.append(_step(3.0))
    data = trace.to_dict()
    assert data["total_ms"] == 3.0
    assert data["steps"][0]["stage"] == "plan"
    assert data["steps"][0]["warnings"] == []


def test_step_timer_measures():
    with StepTimer() as timer:
        time.sleep(0.01)
    assert timer.elapsed_ms >= 5
