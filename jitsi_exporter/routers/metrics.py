# =============================================
# File: jitsi_exporter/routers/metrics.py
# Purpose: Scrape the videobridge and expose its stats as Prometheus text
# =============================================
from __future__ import annotations
import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from jitsi_exporter.config import Settings
from jitsi_exporter.services.exposition import CONTENT_TYPE, render
from jitsi_exporter.services.scraper import ScrapeError, UpstreamBadStatus, scrape
from jitsi_exporter.utils import slog
from jitsi_exporter.utils.scrape_stats import record_scrape
from jitsi_exporter.utils.timing import stopwatch

router = APIRouter(tags=["metrics"])


# Sync endpoint: FastAPI runs it in the threadpool, so concurrent scrapes don't block each other.
@router.get("/metrics", response_class=PlainTextResponse)
def get_metrics(request: Request) -> PlainTextResponse:
    """One upstream GET, one decode, one render. Any scrape failure -> 500 with the error text."""
    settings: Settings = request.app.state.settings

    with stopwatch() as elapsed_ms:
        try:
            snapshot = scrape(settings)
        except ScrapeError as e:
            latency_ms = elapsed_ms()
            record_scrape(latency_ms, error_kind=e.kind)
            fields = {
                "kind": e.kind,
                "error": str(e),
                "upstream": slog.redact_url(settings.videobridge_url),
                "latency_ms": latency_ms,
            }
            if isinstance(e, UpstreamBadStatus):
                fields["status_code"] = e.status_code
            slog.log_event("scrape.error", level=logging.WARNING, **fields)
            request.state.log_context = {"scrape_error": e.kind}
            return PlainTextResponse(str(e), status_code=500)

        body = render(snapshot)
        record_scrape(elapsed_ms())

    request.state.log_context = {"scrape_error": None}
    return PlainTextResponse(body, media_type=CONTENT_TYPE)
