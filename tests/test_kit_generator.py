"""
Block 2 (Kit Generator) tests — prompt coverage of the plan, request shape,
error mapping.
"""
import httpx
import pytest

from factories import (
    completion_response,
    make_client,
    make_config,
    make_kit_payload,
    make_plan,
    make_plan_payload,
    request_json,
    user_prompt,
)

from trainkit.b2_kit_generator import KitGenerator, build_kit_messages
from trainkit.errors import ConfigurationError, ParseError, UpstreamError
from trainkit.models import TrainingPlan


def _generator(responder, config=None):
    client, requests = make_client(responder, config)
    return KitGenerator(client.config, client=client), requests


def _ok(request):
    return completion_response(make_kit_payload())


class TestBuildKitMessages:
    def test_every_module_and_objective_verbatim(self):
        plan = make_plan()
        user = build_kit_messages(plan)[1]["content"]
        for m in plan.modules:
            assert m.title in user
            assert m.description in user
        for o in plan.learning_objectives:
            assert o in user
        assert plan.target_audience in user

    def test_requested_counts(self, plan):
        user = build_kit_messages(plan)[1]["content"]
        assert "8-12 slides" in user
        assert "10-15 flashcards" in user

    def test_module_durations_listed(self):
        user = build_kit_messages(make_plan())[1]["content"]
        assert "(20 min)" in user


class TestKitGenerator:
    def test_returns_kit(self, plan):
        gen, _ = _generator(_ok)
        kit = gen.generate(plan)
        assert len(kit.slides) == 10
        assert len(kit.flashcards) == 12
        assert kit.background_image_prompt == "Bright modern hospital ward"

    def test_body_has_max_tokens(self):
        gen, requests = _generator(_ok)
        gen.generate(make_plan())
        body = request_json(requests[0])
        assert body["max_tokens"] == 4000
        assert body["response_format"] == {"type": "json_object"}
        assert body["model"] == "gpt-4o-mini"
        assert len(requests) == 1

    def test_kit_model_and_budget_from_config(self):
        gen, requests = _generator(_ok, config=make_config(kit_model="gpt-4o", kit_max_tokens=2500))
        gen.generate(make_plan())
        body = request_json(requests[0])
        assert body["model"] == "gpt-4o"
        assert body["max_tokens"] == 2500

    def test_edited_plan_is_what_gets_sent(self):
        payload = make_plan_payload()
        payload["modules"][0]["title"] = "Edited by reviewer"
        gen, requests = _generator(_ok)
        gen.generate(TrainingPlan.model_validate(payload))
        assert "Edited by reviewer" in user_prompt(requests[0])

    def test_missing_key(self):
        gen, requests = _generator(_ok, config=make_config(api_key="your-key-here"))
        with pytest.raises(ConfigurationError):
            gen.generate(make_plan())
        assert requests == []

    def test_upstream_failure(self):
        gen, _ = _generator(lambda r: httpx.Response(503, text="unavailable"))
        with pytest.raises(UpstreamError) as info:
            gen.generate(make_plan())
        assert info.value.status_code == 503

    def test_truncated_json_is_parse_error(self):
        gen, _ = _generator(lambda r: completion_response('{"slides": [{"title": "A"'))
        with pytest.raises(ParseError):
            gen.generate(make_plan())

    def test_malformed_response_body_is_parse_error(self, plan):
        gen, _ = _generator(lambda r: httpx.Response(
            200, content=b'{"choices": [', headers={"content-type": "application/json"},
        ))
        with pytest.raises(ParseError):
            gen.generate(plan)

    def test_missing_flashcards_is_parse_error(self):
        payload = make_kit_payload()
        del payload["flashcards"]
        gen, _ = _generator(lambda r: completion_response(payload))
        with pytest.raises(ParseError):
            gen.generate(make_plan())
