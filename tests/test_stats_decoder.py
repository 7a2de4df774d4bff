# =============================================
# File: tests/test_stats_decoder.py
# Purpose: /stats JSON -> StatisticsSnapshot (defaults, unknown keys, type errors)
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import json

import pytest

from jitsi_exporter.services.stats import DecodeError, StatisticsSnapshot, decode_snapshot

FULL_STATS = {
    "threads": 212,
    "bit_rate_download": 5321,
    "bit_rate_upload": 10233,
    "packet_rate_download": 612,
    "packet_rate_upload": 1180,
    "loss_rate_download": 0.0125,
    "loss_rate_upload": 0.5,
    "jitter_aggregate": 3.25,
    "rtt_aggregate": 48.75,
    "largest_conference": 9,
    "conference_sizes": [0, 2, 1, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    "audiochannels": 14,
    "videochannels": 11,
    "conferences": 4,
    "participants": 17,
    "videostreams": 31,
    "total_loss_controlled_participant_seconds": 1200,
    "total_loss_limited_participant_seconds": 30,
    "total_loss_degraded_participant_seconds": 5,
    "total_conference_seconds": 98211,
    "total_conferences_created": 402,
    "total_conferences_completed": 398,
    "total_failed_conferences": 3,
    "total_partially_failed_conferences": 7,
    "total_data_channel_messages_received": 88012,
    "total_data_channel_messages_sent": 90111,
    "total_colibri_web_socket_messages_received": 1502,
    "total_colibri_web_socket_messages_sent": 1499,
    "total_participants": 1630,
}


def test_full_document_populates_every_field():
    snap = decode_snapshot(json.dumps(FULL_STATS).encode("utf-8"))
    for key, value in FULL_STATS.items():
        assert getattr(snap, key) == value, key


def test_missing_fields_default_to_zero():
    snap = decode_snapshot(b'{"threads": 7}')
    assert snap.threads == 7
    assert snap.participants == 0
    assert snap.rtt_aggregate == 0.0
    assert isinstance(snap.rtt_aggregate, float)
    assert snap.conference_sizes == []


def test_empty_object_equals_default_snapshot():
    assert decode_snapshot("{}") == StatisticsSnapshot()


def test_unknown_fields_are_ignored():
    snap = decode_snapshot(b'{"conferences": 2, "graceful_shutdown": false, "version": "2.3.1", "nested": {"a": 1}}')
    assert snap.conferences == 2
    assert not hasattr(snap, "version")
    assert "graceful_shutdown" not in snap.model_dump()


def test_null_keeps_zero_default():
    snap = decode_snapshot(b'{"threads": null, "conference_sizes": null, "participants": 3}')
    assert snap.threads == 0
    assert snap.conference_sizes == []
    assert snap.participants == 3


def test_integer_accepted_for_float_field():
    snap = decode_snapshot(b'{"loss_rate_download": 1, "jitter_aggregate": 0}')
    assert snap.loss_rate_download == 1
    assert snap.jitter_aggregate == 0


@pytest.mark.parametrize(
    "body, field",
    [
        (b'{"threads": "7"}', "threads"),
        (b'{"participants": 1.5}', "participants"),
        (b'{"conferences": true}', "conferences"),
        (b'{"rtt_aggregate": "fast"}', "rtt_aggregate"),
        (b'{"videostreams": [1]}', "videostreams"),
        (b'{"conference_sizes": 3}', "conference_sizes"),
        (b'{"conference_sizes": [1, "two"]}', "conference_sizes"),
    ],
)
def test_type_mismatch_is_a_decode_error(body, field):
    with pytest.raises(DecodeError) as exc:
        decode_snapshot(body)
    assert field in str(exc.value)


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"not json",
        b'{"threads": 7',
        b'{"threads": NaN}',
        b"<html>502 Bad Gateway</html>",
    ],
)
def test_malformed_json_is_a_decode_error(body):
    with pytest.raises(DecodeError) as exc:
        decode_snapshot(body)
    assert "invalid JSON" in str(exc.value)


@pytest.mark.parametrize("body, kind", [(b"[1, 2]", "list"), (b"42", "int"), (b'"stats"', "str"), (b"null", "NoneType")])
def test_non_object_is_a_decode_error(body, kind):
    with pytest.raises(DecodeError) as exc:
        decode_snapshot(body)
    assert "expected a JSON object" in str(exc.value)
    assert kind in str(exc.value)


def test_decode_error_is_a_value_error():
    with pytest.raises(ValueError):
        decode_snapshot(b"[]")


def test_snapshot_is_immutable():
    snap = decode_snapshot(b'{"threads": 1}')
    with pytest.raises(Exception):
        snap.threads = 2


@pytest.mark.parametrize("body", [b'{"rtt_aggregate": 1e400}', b'{"loss_rate_upload": -1e400}', b'{"threads": 1e400}'])
def test_out_of_range_number_is_a_decode_error(body):
    with pytest.raises(DecodeError) as exc:
        decode_snapshot(body)
    field = json.loads(body.replace(b"1e400", b"0")).popitem()[0]
    assert field in str(exc.value)


def test_deep_nesting_is_a_decode_error():
    depth = 100000
    body = b'{"x": ' + b"[" * depth + b"]" * depth + b"}"
    with pytest.raises(DecodeError, match="nesting too deep"):
        decode_snapshot(body)


def test_trailing_data_after_object_is_a_decode_error():
    with pytest.raises(DecodeError, match="invalid JSON"):
        decode_snapshot(b'{"threads": 1} junk')
