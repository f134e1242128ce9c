"""
Factory helpers for building test objects and a fake completion endpoint.
Imported by conftest.py fixtures AND directly by test modules.
"""
import json
import sys
import os

# Ensure both src/ and tests/ are importable in all test files
_tests_dir = os.path.dirname(__file__)
_src_dir   = os.path.join(_tests_dir, "..", "src")
for _p in (_tests_dir, _src_dir):
    if _p not in sys.path:
        sys.path.insert(0, _p)

import httpx

from trainkit.b1_plan_generator import PlanGenerator
from trainkit.b2_kit_generator import KitGenerator
from trainkit.completion_client import CompletionClient
from trainkit.config import AppConfig, OpenAIConfig, Settings
from trainkit.models import TrainingPlan
from trainkit.pipeline import TrainingKitPipeline

TEST_API_KEY  = "sk-test-1234567890"
TEST_BASE_URL = "https://llm.test/v1"


# ─── Config ───────────────────────────────────────────────────────────────────

def make_config(api_key: str = TEST_API_KEY, **overrides) -> OpenAIConfig:
    return OpenAIConfig(api_key=api_key, base_url=TEST_BASE_URL, **overrides)


def make_settings(
    api_key: str = TEST_API_KEY,
    force_mock_mode: bool = False,
    allow_fallback: bool = True,
    document_char_budget: int = 2000,
) -> Settings:
    return Settings(
        openai=make_config(api_key),
        app=AppConfig(
            force_mock_mode      = force_mock_mode,
            allow_fallback       = allow_fallback,
            document_char_budget = document_char_budget,
        ),
    )


# ─── Payloads ─────────────────────────────────────────────────────────────────

def make_plan_payload(n_modules: int = 5, n_objectives: int = 4, n_enhancements: int = 3) -> dict:
    return {
        "title":          "Safe Medication Practice",
        "targetAudience": "Ward nurses and pharmacy technicians",
        "learningObjectives": [
            f"Objective {i}: apply the five rights check at step {i}" for i in range(1, n_objectives + 1)
        ],
        "modules": [
            {
                "title":           f"Module {i}: Medication round part {i}",
                "description":     f"Covers stage {i} of the medication round.",
                "durationMinutes": 20,
            }
            for i in range(1, n_modules + 1)
        ],
        "suggestedEnhancements": [f"Enhancement {i}" for i in range(1, n_enhancements + 1)],
    }


def make_plan(**kwargs) -> TrainingPlan:
    return TrainingPlan.model_validate(make_plan_payload(**kwargs))


def make_kit_payload(n_slides: int = 10, n_flashcards: int = 12) -> dict:
    return {
        "slides": [
            {
                "title":            f"Slide {i}",
                "content":          [f"Point {i}.1", f"Point {i}.2"],
                "speakerNotes":     f"Notes for slide {i}",
                "visualSearchTerm": "hospital ward",
            }
            for i in range(1, n_slides + 1)
        ],
        "flashcards": [
            {"front": f"Question {i}?", "back": f"Answer {i}."} for i in range(1, n_flashcards + 1)
        ],
        "handoutMarkdown":          "# Handout\n\n- Key point",
        "facilitatorGuideMarkdown": "# Facilitator Guide\n\n## Timing\n- 0-10 min: Welcome",
        "backgroundImagePrompt":    "Bright modern hospital ward",
    }


# ─── Fake completion endpoint ─────────────────────────────────────────────────

def completion_response(content, status_code: int = 200) -> httpx.Response:
    """A chat.completion body whose message content is *content* (dict → JSON text)."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(status_code, json={
        "id":      "chatcmpl-test",
        "object":  "chat.completion",
        "created": 1700000000,
        "model":   "gpt-4o-mini",
        "choices": [{
            "index":         0,
            "message":       {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {"prompt_tokens": 10, "completion_tokens": 10, "total_tokens": 20},
    })


def make_client(responder, config: OpenAIConfig | None = None):
    """
    Return (CompletionClient, requests) where every outbound request is
    answered by ``responder(request) -> httpx.Response`` and recorded.
    """
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return responder(request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return CompletionClient(config or make_config(), http_client=http_client), requests


def request_json(request: httpx.Request) -> dict:
    return json.loads(request.content)


def user_prompt(request: httpx.Request) -> str:
    messages = request_json(request)["messages"]
    return "\n".join(m["content"] for m in messages if m["role"] == "user")


def stage_responder(plan_payload: dict | None = None, kit_payload: dict | None = None):
    """Answer plan requests with a plan and kit requests with a kit."""
    plan_payload = plan_payload or make_plan_payload()
    kit_payload  = kit_payload or make_kit_payload()

    def responder(request: httpx.Request) -> httpx.Response:
        if "training kit" in user_prompt(request):
            return completion_response(kit_payload)
        return completion_response(plan_payload)

    return responder


# ─── Pipeline ─────────────────────────────────────────────────────────────────

def make_pipeline(responder=None, **settings_kwargs):
    """(TrainingKitPipeline, requests) with both generators on one fake endpoint."""
    settings = make_settings(**settings_kwargs)
    client, requests = make_client(responder or stage_responder(), settings.openai)
    pipeline = TrainingKitPipeline(
        settings,
        plan_generator=PlanGenerator(settings.openai, client=client, app_config=settings.app),
        kit_generator=KitGenerator(settings.openai, client=client),
    )
    return pipeline, requests
