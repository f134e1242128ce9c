"""
completion_client.py — single JSON-mode chat completion call
============================================================
Thin wrapper around the ``openai`` SDK shared by the Plan and Kit generators.

One call == one HTTP POST to ``{base_url}/chat/completions``:
  • body: model, role-tagged messages, temperature,
          response_format={"type": "json_object"}, optional max_tokens
  • credential travels only in the ``Authorization: Bearer`` header
  • SDK retries disabled — failures are surfaced, never retried here

Failures are translated into the pipeline's own taxonomy:
  missing / placeholder key      → ConfigurationError  (before any I/O)
  non-2xx status                 → UpstreamError(status_code, raw body)
  connection failure / timeout   → UpstreamError(None, message)
  body or content not JSON       → ParseError
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx
import openai
from openai import OpenAI

from trainkit.config import OpenAIConfig
from trainkit.errors import ConfigurationError, ParseError, UpstreamError

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Sends one JSON-mode chat completion and returns the decoded object.

    ``http_client`` lets callers (and tests) supply their own ``httpx.Client``,
    e.g. one built on ``httpx.MockTransport``.
    """

    def __init__(
        self,
        config: OpenAIConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._cfg         = config
        self._http_client = http_client
        self._client: Optional[OpenAI] = None

    @property
    def config(self) -> OpenAIConfig:
        return self._cfg

    def _sdk(self) -> OpenAI:
        if not self._cfg.is_configured:
            raise ConfigurationError(
                "OpenAI API key not configured. Set OPENAI_API_KEY "
                "(or enable FORCE_MOCK_MODE to use fallback content)."
            )
        if self._client is None:
            self._client = OpenAI(
                api_key=self._cfg.api_key,
                base_url=self._cfg.base_url,
                timeout=self._cfg.request_timeout,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def complete_json(
        self,
        messages: list[dict[str, str]],
        model: str,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """POST the messages and parse the assistant's reply as a JSON object."""
        client = self._sdk()

        kwargs: dict[str, Any] = {
            "model":           model,
            "messages":        messages,
            "temperature":     self._cfg.temperature,
            "response_format": {"type": "json_object"},
        }
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        try:
            response = client.chat.completions.create(**kwargs)
        except openai.APIStatusError as exc:
            body = exc.response.text if exc.response is not None else ""
            logger.warning("Completion API returned %s", exc.status_code)
            raise UpstreamError(exc.status_code, body) from exc
        except openai.APIConnectionError as exc:
            logger.warning("Completion API unreachable: %s", exc)
            raise UpstreamError(None, str(exc)) from exc
        except openai.APIResponseValidationError as exc:
            raise ParseError(f"Completion response did not match the API schema: {exc}") from exc
        except json.JSONDecodeError as exc:
            # 2xx whose body is not JSON at all
            raise ParseError(f"Completion response body is not valid JSON: {exc.msg}") from exc

        return _decode_content(response)


def _decode_content(response: Any) -> dict[str, Any]:
    """Second parse: the message content is itself a JSON document."""
    try:
        raw_json = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise ParseError("Completion response has no message content.") from exc

    if not raw_json:
        raise ParseError("Completion response has empty message content.")

    try:
        data = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Model output is not valid JSON: {exc.msg} (line {exc.lineno})") from exc

    if not isinstance(data, dict):
        raise ParseError(f"Model output is a JSON {type(data).__name__}, expected an object.")
    return data
