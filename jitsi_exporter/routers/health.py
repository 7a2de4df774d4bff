# =============================================
# File: jitsi_exporter/routers/health.py
# Purpose: Liveness + the exporter's own scrape statistics (JSON)
# =============================================
from __future__ import annotations
from fastapi import APIRouter, Request

from jitsi_exporter.utils import slog
from jitsi_exporter.utils.scrape_stats import snapshot

router = APIRouter(tags=["health"])


@router.get("/health")
def health(request: Request):
    settings = request.app.state.settings
    return {
        "status": "ok",
        "upstream": slog.redact_url(settings.videobridge_url),
        "scrapes": snapshot(),
    }
