from __future__ import annotations
import time
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from jitsi_exporter.config import Settings, load_settings
from jitsi_exporter.routers import health, metrics
from jitsi_exporter.utils import slog


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the exporter app; settings are fixed here and read by handlers from app.state."""
    app = FastAPI(
        title="Jitsi Meet Metrics Exporter",
        docs_url=None,
        redoc_url=None,
    )
    app.state.settings = settings or load_settings()

    @app.middleware("http")
    async def _logging_middleware(request, call_next):
        start = time.perf_counter()
        req_id = slog.new_request_id()
        client_ip = request.client.host if request.client else None
        try:
            response = await call_next(request)
        except Exception as e:
            latency_ms = int((time.perf_counter() - start) * 1000)
            ctx = getattr(request.state, "log_context", {})
            slog.log_event(
                "request.error",
                request_id=req_id,
                path=str(request.url.path),
                method=request.method,
                latency_ms=latency_ms,
                client_ip=client_ip,
                error=str(e),
                **(ctx or {}),
            )
            raise
        latency_ms = int((time.perf_counter() - start) * 1000)
        ctx = getattr(request.state, "log_context", {}) or {}
        slog.finalize_request_log(
            request_id=req_id,
            method=request.method,
            path=str(request.url.path),
            status=response.status_code,
            latency_ms=latency_ms,
            client_ip=client_ip,
            ctx=ctx,
        )
        response.headers["X-Request-ID"] = req_id
        return response

    # Home -> the one page that matters
    @app.get("/", include_in_schema=False)
    def root():
        return RedirectResponse(url="/metrics")

    app.include_router(metrics.router)
    app.include_router(health.router)
    return app


_app: Optional[FastAPI] = None


def __getattr__(name: str):
    # `uvicorn jitsi_exporter.main:app` builds the env-configured app on first access only
    global _app
    if name == "app":
        if _app is None:
            _app = create_app()
        return _app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
