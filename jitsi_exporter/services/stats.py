# =============================================
# File: jitsi_exporter/services/stats.py
# Purpose: Videobridge /stats snapshot model + tolerant JSON decoding
# =============================================
from __future__ import annotations
import json
from typing import Any, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


class DecodeError(ValueError):
    """Raised when an upstream body cannot be turned into a StatisticsSnapshot."""


class StatisticsSnapshot(BaseModel):
    """
    One scrape of the videobridge /stats document.
    - Field names are the bridge's JSON keys, byte for byte.
    - Every field defaults to zero so absent keys are fine.
    - Unknown keys are ignored; wrong types are rejected (strict mode).
    - Out-of-range numbers (1e400 -> inf) are rejected like NaN/Infinity.
    """
    model_config = ConfigDict(strict=True, extra="ignore", frozen=True, allow_inf_nan=False)

    threads: int = 0
    bit_rate_download: int = 0
    bit_rate_upload: int = 0
    packet_rate_download: int = 0
    packet_rate_upload: int = 0
    loss_rate_download: float = 0.0
    loss_rate_upload: float = 0.0
    jitter_aggregate: float = 0.0
    rtt_aggregate: float = 0.0
    largest_conference: int = 0
    # decoded but never rendered
    conference_sizes: List[int] = Field(default_factory=list)
    audiochannels: int = 0
    videochannels: int = 0
    conferences: int = 0
    participants: int = 0
    videostreams: int = 0
    total_loss_controlled_participant_seconds: int = 0
    total_loss_limited_participant_seconds: int = 0
    total_loss_degraded_participant_seconds: int = 0
    total_conference_seconds: int = 0
    total_conferences_created: int = 0
    total_conferences_completed: int = 0
    total_failed_conferences: int = 0
    total_partially_failed_conferences: int = 0
    total_data_channel_messages_received: int = 0
    total_data_channel_messages_sent: int = 0
    total_colibri_web_socket_messages_received: int = 0
    total_colibri_web_socket_messages_sent: int = 0
    total_participants: int = 0

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null means "no value": keep the zero default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON number {name}")


def _describe(err: ValidationError) -> str:
    first = err.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "body"
    return f"field {loc}: {first.get('msg', 'invalid value')} (got {type(first.get('input')).__name__})"


def decode_snapshot(body: Union[bytes, str]) -> StatisticsSnapshot:
    """Parse a /stats body. Raises DecodeError on malformed JSON, non-objects or bad field types."""
    try:
        data = json.loads(body, parse_constant=_reject_constant)
    except RecursionError as e:
        raise DecodeError("invalid JSON: nesting too deep") from e
    except ValueError as e:
        raise DecodeError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return StatisticsSnapshot.model_validate(data)
    except ValidationError as e:
        raise DecodeError(_describe(e)) from e
