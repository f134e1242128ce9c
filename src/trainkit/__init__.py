"""
trainkit — Corporate Training Kit Generator
===========================================
Turns an industry + topic (optionally an uploaded document's text) into a
training plan, then into a full training kit, via two JSON-mode LLM calls
with canned fallback content when the live service is skipped.

Module map
----------
  models.py               Pydantic wire models (TrainingPlan, GeneratedKit, …)
                          and the contracted count ranges.
  config.py               Settings loaded from .env; live / mock detection;
                          Rich logging setup.
  errors.py               ConfigurationError / UpstreamError / ParseError.
  completion_client.py    One JSON-mode chat completion via the openai SDK.

  b1_plan_generator.py    Block 1: industry + topic (+ document) → TrainingPlan.
  b2_kit_generator.py     Block 2: TrainingPlan → GeneratedKit.
  fallback_content.py     Curated kits + keyword-theme templates (no LLM).

  guardrails.py           BLOCK / WARN / INFO checks around each stage.
  agent_trace.py          GenerationStep / RunTrace audit log.
  pipeline.py             Live-vs-fallback selection per stage.
  api.py                  FastAPI service with permissive CORS.

Pipeline order
--------------
  InputGuardrails [G-01..G-03] → B1 (PlanGenerator | fallback_plan)
  → PlanGuardrails [G-04..G-07]
  ** caller reviews / edits the plan **
  → B2 (KitGenerator | fallback_kit) → KitGuardrails [G-08..G-10]
"""
__version__ = "0.1.0"
