"""
config.py — Central settings for the TrainKit generation pipeline
=================================================================
All configuration is loaded from environment variables / .env file.
Copy .env.example → .env and fill in your values.

Live mode activates automatically when OPENAI_API_KEY contains a real
(non-placeholder) value and FORCE_MOCK_MODE is not set.

get_settings() is the only place that reads the process environment.
Generators receive an OpenAIConfig at construction time so tests can pass
fakes without touching os.environ.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv
from rich.logging import RichHandler

# Load .env into os.environ (no-op if already set, safe to call multiple times)
load_dotenv(override=False)


# ─── Helpers ────────────────────────────────────────────────────────────────

def _is_placeholder(value: str) -> bool:
    """Return True if the value looks like an unfilled template placeholder."""
    return not value or "<" in value or value.startswith("your-") or value == "PLACEHOLDER"


# ─── OpenAI-compatible completion endpoint ───────────────────────────────────

@dataclass(frozen=True)
class OpenAIConfig:
    api_key:         str
    base_url:        str   = "https://api.openai.com/v1"
    plan_model:      str   = "gpt-4o-mini"
    kit_model:       str   = "gpt-4o-mini"
    temperature:     float = 0.7
    kit_max_tokens:  int   = 4000
    request_timeout: float = 60.0

    @property
    def is_configured(self) -> bool:
        """True when the API key is a real (non-placeholder) value."""
        return bool(self.api_key) and not _is_placeholder(self.api_key)


# ─── App-level settings ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class AppConfig:
    force_mock_mode:      bool = False
    allow_fallback:       bool = True   # use canned content when credentials are missing
    document_char_budget: int  = 2000   # inline prefix of uploaded document text
    log_level:            str  = "INFO"


# ─── Master settings object ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Settings:
    openai: OpenAIConfig
    app:    AppConfig

    @property
    def live_mode(self) -> bool:
        """Automatically True when OpenAI creds are real and FORCE_MOCK_MODE is false."""
        return self.openai.is_configured and not self.app.force_mock_mode

    def status_summary(self) -> dict[str, str]:
        """Return a dict of service → status badge for health checks."""
        def badge(ok: bool) -> str:
            return "live" if ok else "not configured"

        return {
            "OpenAI":        badge(self.openai.is_configured),
            "Mode":          "live" if self.live_mode else "mock",
            "Plan model":    self.openai.plan_model,
            "Kit model":     self.openai.kit_model,
        }


def get_settings() -> Settings:
    """Load all configuration from environment variables."""
    _str   = lambda k, d="": os.getenv(k, d).strip()
    _int   = lambda k, d=0: int(os.getenv(k, str(d)) or d)
    _float = lambda k, d=0.0: float(os.getenv(k, str(d)) or d)
    _bool  = lambda k, d=False: os.getenv(k, str(d)).lower() in ("1", "true", "yes")

    return Settings(
        openai=OpenAIConfig(
            api_key         = _str("OPENAI_API_KEY"),
            base_url        = _str("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
            plan_model      = _str("OPENAI_PLAN_MODEL", "gpt-4o-mini"),
            kit_model       = _str("OPENAI_KIT_MODEL", "gpt-4o-mini"),
            temperature     = _float("OPENAI_TEMPERATURE", 0.7),
            kit_max_tokens  = _int("OPENAI_KIT_MAX_TOKENS", 4000),
            request_timeout = _float("OPENAI_TIMEOUT_SECONDS", 60.0),
        ),
        app=AppConfig(
            force_mock_mode      = _bool("FORCE_MOCK_MODE", False),
            allow_fallback       = _bool("ALLOW_FALLBACK", True),
            document_char_budget = _int("DOCUMENT_CHAR_BUDGET", 2000),
            log_level            = _str("LOG_LEVEL", "INFO").upper(),
        ),
    )


def get_config() -> OpenAIConfig:
    """Shortcut — returns just the OpenAI config block."""
    return get_settings().openai


# ─── Logging ─────────────────────────────────────────────────────────────────

def configure_logging(level: str | None = None) -> None:
    """Route the ``trainkit`` loggers through a Rich console handler."""
    level = (level or get_settings().app.log_level).upper()
    logger = logging.getLogger("trainkit")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(rich_tracebacks=True, show_path=False))
    logger.setLevel(level)
