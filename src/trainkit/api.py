"""
HTTP service exposing the Plan → Kit pipeline.

    POST /api/plan           {industry, topic, documentText?, useFallback?}   → TrainingPlan
    POST /api/kit            {plan, industry?, topic?, useFallback?}          → GeneratedKit
    POST /api/fallback-kit   {industry, topic}                                → GeneratedKit
    GET  /api/health

Run with:  uvicorn trainkit.api:app --port 8000

CORS is permissive: every response carries the CORS_HEADERS below and any
OPTIONS pre-flight is answered 204 with no body before routing.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from trainkit import __version__
from trainkit.config import configure_logging
from trainkit.errors import (
    ConfigurationError,
    GuardrailBlockedError,
    ParseError,
    UpstreamError,
)
from trainkit.models import TrainingPlan
from trainkit.pipeline import GenerationResult, TrainingKitPipeline

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin":  "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Client-Info, Apikey",
}


# ─── Request bodies ──────────────────────────────────────────────────────────

class PlanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    industry:      str
    topic:         str
    document_text: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("documentText", "fileContent", "document_text"),
    )
    use_fallback:  bool = Field(
        default=False, validation_alias=AliasChoices("useFallback", "use_fallback"),
    )


class KitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    plan:         TrainingPlan
    industry:     Optional[str] = None
    topic:        Optional[str] = None
    use_fallback: bool = Field(
        default=False, validation_alias=AliasChoices("useFallback", "use_fallback"),
    )


class FallbackKitRequest(BaseModel):
    industry: str
    topic:    str


# ─── Helpers ─────────────────────────────────────────────────────────────────

def get_pipeline(request: Request) -> TrainingKitPipeline:
    return request.app.state.pipeline


def _error(status_code: int, error: str, details=None, **extra) -> JSONResponse:
    body = {"error": error, "details": details}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=body)


def _generated(result: GenerationResult) -> JSONResponse:
    return JSONResponse(
        content=result.value.to_wire(),
        headers={
            "X-Generation-Source":  result.source.value,
            "X-Guardrail-Warnings": str(len(result.guardrails.warnings)),
        },
    )


# ─── App factory ─────────────────────────────────────────────────────────────

def create_app(pipeline: TrainingKitPipeline | None = None) -> FastAPI:
    pipeline = pipeline or TrainingKitPipeline()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # logging setup runs on server start
        configure_logging(pipeline.settings.app.log_level)
        logger.info("TrainKit service started (%s mode)", pipeline.settings.status_summary()["Mode"])
        yield

    app = FastAPI(
        title="TrainKit Generation Service",
        description="Turn an industry + topic into a training plan and a full training kit",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.pipeline = pipeline

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    # ── Error mapping ────────────────────────────────────────────────────────

    @app.exception_handler(ConfigurationError)
    async def on_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Configuration error: %s", exc)
        return _error(500, "Completion service is not configured", str(exc))

    @app.exception_handler(UpstreamError)
    async def on_upstream_error(request: Request, exc: UpstreamError):
        return _error(
            502, "Upstream completion service failed", exc.body,
            upstreamStatus=exc.status_code,
        )

    @app.exception_handler(ParseError)
    async def on_parse_error(request: Request, exc: ParseError):
        return _error(502, "Failed to parse generated content", str(exc))

    @app.exception_handler(GuardrailBlockedError)
    async def on_blocked(request: Request, exc: GuardrailBlockedError):
        return _error(
            400, "Request rejected by input checks",
            [v.message for v in exc.result.violations if v.level.value == "BLOCK"],
        )

    # ── Routes ───────────────────────────────────────────────────────────────

    @app.get("/api/health")
    def health(pipeline: TrainingKitPipeline = Depends(get_pipeline)):
        return {
            "status":   "ok",
            "version":  __version__,
            "services": pipeline.settings.status_summary(),
        }

    @app.post("/api/plan")
    def create_plan(body: PlanRequest, pipeline: TrainingKitPipeline = Depends(get_pipeline)):
        result = pipeline.generate_plan(
            body.industry, body.topic, body.document_text, use_fallback=body.use_fallback,
        )
        return _generated(result)

    @app.post("/api/kit")
    def create_kit(body: KitRequest, pipeline: TrainingKitPipeline = Depends(get_pipeline)):
        result = pipeline.generate_kit(
            body.plan, body.industry, body.topic, use_fallback=body.use_fallback,
        )
        return _generated(result)

    @app.post("/api/fallback-kit")
    def create_fallback_kit(
        body: FallbackKitRequest, pipeline: TrainingKitPipeline = Depends(get_pipeline),
    ):
        kit = pipeline.fallback_kit(body.industry, body.topic)
        return JSONResponse(content=kit.to_wire(), headers={"X-Generation-Source": "fallback"})

    return app


app = create_app()
