# =============================================
# File: jitsi_exporter/utils/slog.py
# Purpose: One-line JSON events for exporter requests and failed scrapes (caplog-friendly)
# =============================================
from __future__ import annotations
import json
import logging
import os
import uuid
from typing import Any, Dict
from urllib.parse import urlsplit, urlunsplit

_LOGGER_NAME = "jitsi_exporter"
_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_logger = logging.getLogger(_LOGGER_NAME)
if not _logger.handlers:
    _logger.setLevel(getattr(logging, _LEVEL, logging.INFO))
    _handler = logging.StreamHandler()
    # Emit the message as-is; we pre-format JSON strings ourselves
    _handler.setFormatter(logging.Formatter("%(message)s"))
    _logger.addHandler(_handler)
    _logger.propagate = True  # allow pytest caplog to capture


def set_level(level: str) -> None:
    _logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))


def redact_url(url: str) -> str:
    """Drop any user:password@ part before a URL lands in a log line."""
    parts = urlsplit(url or "")
    if parts.username is None and parts.password is None:
        return url
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return urlunsplit((parts.scheme, host, parts.path, parts.query, parts.fragment))


def new_request_id() -> str:
    return uuid.uuid4().hex


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    rec = {"event": event}
    rec.update(fields)
    _logger.log(level, json.dumps(rec, ensure_ascii=False))


def finalize_request_log(
    request_id: str,
    method: str,
    path: str,
    status: int,
    latency_ms: int,
    client_ip: str | None,
    ctx: Dict[str, Any] | None = None,
) -> None:
    payload: Dict[str, Any] = {
        "event": "request.completed",
        "request_id": request_id,
        "method": method,
        "path": path,
        "status": status,
        "latency_ms": latency_ms,
        "client_ip": client_ip or "",
    }
    if ctx:
        payload.update(ctx)
    _logger.info(json.dumps(payload, ensure_ascii=False))
