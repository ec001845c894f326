from __future__ import annotations

from datetime import UTC, datetime

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.exception_handlers import register_exception_handlers
from app.api.schemas import LivenessOut
from app.core.logging import setup_logging
from app.core.metrics import PrometheusMetricsMiddleware, metrics_router
from app.core.middleware.body_limit import BodySizeLimitMiddleware
from app.core.middleware.http_logging import HttpLoggingMiddleware
from app.core.middleware.rate_limit import RateLimitMiddleware
from app.core.middleware.security_headers import SecurityHeadersMiddleware
from app.core.rate_limit import InMemoryRateLimitStore, RateLimitStore
from app.core.settings import Settings, get_settings
from app.relay.router import router as relay_router

setup_logging()

_DOCS_PATHS = ("/swagger", "/swagger/oauth2-redirect", "/openapi.json")


def create_app(
    *,
    settings: Settings | None = None,
    rate_limit_store: RateLimitStore | None = None,
    llm_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if rate_limit_store is None:
        rate_limit_store = InMemoryRateLimitStore(
            window_seconds=settings.rate_limit_window_seconds,
            max_requests=settings.rate_limit_max_requests,
        )

    app = FastAPI(
        title="Question Relay API",
        version=settings.app_version,
        description=(
            "Relays a single question to an LLM chat-completion provider and returns a "
            "sanitized answer.\n\n"
            "Design principles:\n"
            "- Stateless: nothing is stored; only per-client rate-limit counters live in memory.\n"
            "- Questions are validated and filtered before any upstream call.\n"
            "- Logging and metrics use route templates and metadata only, never question "
            "or answer text."
        ),
        # Interactive docs are a development convenience only.
        docs_url="/swagger" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
        openapi_tags=[
            {
                "name": "health",
                "description": "Liveness probe for load balancers and monitoring.",
            },
            {
                "name": "relay",
                "description": "Ask a question and receive the provider's sanitized answer.",
            },
        ],
    )
    app.state.settings = settings
    app.state.rate_limit_store = rate_limit_store
    # Optional transport for the upstream client (e.g. an emulator or a test double).
    app.state.llm_transport = llm_transport

    # Starlette runs the last-added middleware first. Effective order, outermost first:
    # security headers, logging, metrics, CORS, body size, rate limit. Security headers
    # sit outside logging so they are stamped on the 500 that logging renders.
    app.add_middleware(
        RateLimitMiddleware,
        store=rate_limit_store,
        trust_proxy=settings.trust_proxy,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.allowed_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware, csp_exempt_paths=_DOCS_PATHS)

    register_exception_handlers(app)

    @app.get(
        "/test",
        response_model=LivenessOut,
        tags=["health"],
        summary="Liveness probe",
        description=(
            "Lightweight endpoint to verify the API process is running.\n\n"
            "It does not call the upstream provider, so it is safe for frequent uptime checks."
        ),
    )
    async def liveness() -> LivenessOut:
        return LivenessOut(
            status="success",
            message="Server is running",
            timestamp=datetime.now(tz=UTC).isoformat(),
            version=settings.app_version,
        )

    app.include_router(metrics_router)
    app.include_router(relay_router)
    return app


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,  # keep the JSON logging configured above
        proxy_headers=settings.trust_proxy,
    )


app = create_app()
