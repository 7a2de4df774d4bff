# =============================================
# File: jitsi_exporter/services/exposition.py
# Purpose: Render a StatisticsSnapshot as Prometheus text exposition
# =============================================
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Literal, Tuple, Union

from .stats import StatisticsSnapshot

PREFIX = "jitsi_"
CONTENT_TYPE = "text/plain"


@dataclass(frozen=True)
class MetricSpec:
    field: str
    help: str
    type: Literal["gauge", "counter"]

    @property
    def name(self) -> str:
        return PREFIX + self.field


def _gauge(field: str, help: str) -> MetricSpec:
    return MetricSpec(field=field, help=help, type="gauge")


def _counter(field: str, help: str) -> MetricSpec:
    return MetricSpec(field=field, help=help, type="counter")


# Output order == declaration order. Help texts follow the bridge's own statistics docs.
METRICS: Tuple[MetricSpec, ...] = (
    _gauge("threads", "The number of Java threads that the video bridge is using."),
    _gauge("bit_rate_download", "The total incoming bitrate for the video bridge in kilobits per second."),
    _gauge("bit_rate_upload", "The total outgoing bitrate for the video bridge in kilobits per second."),
    _gauge("packet_rate_download", "The total incoming packet rate for the video bridge in packets per second."),
    _gauge("packet_rate_upload", "The total outgoing packet rate for the video bridge in packets per second."),
    _gauge(
        "loss_rate_download",
        "The fraction of lost incoming RTP packets. This is based on RTP sequence numbers and is relatively accurate.",
    ),
    _gauge(
        "loss_rate_upload",
        "The fraction of lost outgoing RTP packets. This is based on incoming RTCP Receiver Reports, and an attempt "
        "to subtract the fraction of packets that were not sent (i.e. were lost before they reached the bridge). "
        "Further, this is averaged over all streams of all users as opposed to all packets, so it is not correctly "
        "weighted. This is not accurate, but may be a useful metric nonetheless.",
    ),
    _gauge(
        "jitter_aggregate",
        "Experimental. An average value (in milliseconds) of the jitter calculated for incoming and outgoing "
        "streams. This hasn't been tested and it is currently not known whether the values are correct or not.",
    ),
    _gauge("rtt_aggregate", "An average value (in milliseconds) of the RTT across all streams."),
    _gauge("largest_conference", "The number of participants in the largest conference currently hosted on the bridge."),
    _gauge("audiochannels", "The current number of audio channels."),
    _gauge("videochannels", "The current number of video channels."),
    _gauge("conferences", "The current number of conferences."),
    _gauge("participants", "The current number of participants."),
    _gauge("videostreams", "An estimation of the number of current video streams forwarded by the bridge."),
    _counter(
        "total_loss_controlled_participant_seconds",
        "The total number of participant-seconds that are loss-controlled.",
    ),
    _counter("total_loss_limited_participant_seconds", "The total number of participant-seconds that are loss-limited."),
    _counter(
        "total_loss_degraded_participant_seconds",
        "The total number of participant-seconds that are loss-degraded.",
    ),
    _counter("total_conference_seconds", "The sum of the lengths of all completed conferences, in seconds."),
    _counter("total_conferences_created", "The total number of conferences created on the bridge."),
    _counter("total_conferences_completed", "The total number of conferences completed on the bridge."),
    _counter(
        "total_failed_conferences",
        "The total number of failed conferences on the bridge. A conference is marked as failed when all of its "
        "channels have failed. A channel is marked as failed if it had no payload activity.",
    ),
    _counter(
        "total_partially_failed_conferences",
        "The total number of partially failed conferences on the bridge. A conference is marked as partially failed "
        "when some of its channels has failed. A channel is marked as failed if it had no payload activity.",
    ),
    _counter("total_data_channel_messages_received", "The total number messages received through data channels."),
    _counter("total_data_channel_messages_sent", "The total number messages sent through data channels."),
    _counter(
        "total_colibri_web_socket_messages_received",
        "The total number messages received through COLIBRI web sockets.",
    ),
    _counter("total_colibri_web_socket_messages_sent", "The total number messages sent through COLIBRI web sockets."),
)


def format_value(value: Union[int, float]) -> str:
    """Python's default conversion: str() for ints, shortest round-trip repr for floats (0.0, 0.25, 1e+21)."""
    if isinstance(value, float):
        return repr(value)
    return str(int(value))


def render_metric(spec: MetricSpec, snapshot: StatisticsSnapshot) -> str:
    value = getattr(snapshot, spec.field)
    return (
        f"# HELP {spec.name} {spec.help}\n"
        f"# TYPE {spec.name} {spec.type}\n"
        f"{spec.name} {format_value(value)}\n"
    )


def render(snapshot: StatisticsSnapshot) -> str:
    """Full exposition body, one HELP/TYPE/value group per metric in METRICS order."""
    parts: List[str] = [render_metric(spec, snapshot) for spec in METRICS]
    return "".join(parts)
