"""
Exception taxonomy shared by both generators and the HTTP layer.

  ConfigurationError     credential missing — surface to the operator, never retry
  UpstreamError          completion endpoint unreachable or returned non-2xx
  ParseError             2xx response whose payload is not the contracted JSON
  GuardrailBlockedError  input rejected by a BLOCK-level guardrail
"""

from __future__ import annotations

from typing import Optional


class TrainKitError(Exception):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(TrainKitError):
    pass


class UpstreamError(TrainKitError):
    """The completion service answered with a failure (or not at all).

    ``status_code`` is None for transport failures (DNS, refused, timeout).
    ``body`` is the raw response text, kept verbatim even when it is not JSON.
    """

    def __init__(self, status_code: Optional[int], body: str = "", message: str = "") -> None:
        self.status_code = status_code
        self.body        = body
        if not message:
            shown = status_code if status_code is not None else "no response"
            message = f"Completion API error: {shown} - {body[:500]}"
        super().__init__(message)


class ParseError(TrainKitError):
    pass


class GuardrailBlockedError(TrainKitError):
    """Raised by the pipeline when an input guardrail returns BLOCK."""

    def __init__(self, result) -> None:
        self.result = result
        super().__init__(result.summary())
