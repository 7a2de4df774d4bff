# =============================================
# File: jitsi_exporter/services/scraper.py
# Purpose: One outbound GET to the videobridge /stats endpoint per scrape + error taxonomy
# =============================================
from __future__ import annotations
from typing import Optional

import requests
from requests.auth import HTTPBasicAuth

from ..config import Settings
from .stats import DecodeError, StatisticsSnapshot, decode_snapshot


class ScrapeError(Exception):
    """Base for every failure that turns a scrape into a 500."""
    kind = "scrape_error"


class UpstreamUnreachable(ScrapeError):
    kind = "unreachable"


class UpstreamBadStatus(ScrapeError):
    kind = "bad_status"

    def __init__(self, status_code: int):
        super().__init__(f"HTTP Status {status_code}")
        self.status_code = status_code


class MalformedUpstreamBody(ScrapeError):
    kind = "malformed_body"


def build_request(settings: Settings) -> requests.PreparedRequest:
    auth: Optional[HTTPBasicAuth] = None
    if settings.use_basic_auth:
        auth = HTTPBasicAuth(settings.user, settings.password)
    return requests.Request("GET", settings.videobridge_url, auth=auth).prepare()


def fetch_stats(settings: Settings) -> requests.Response:
    """
    Execute the upstream GET.
    - Network-level failures -> UpstreamUnreachable (underlying error text kept).
    - Any status other than 200 -> UpstreamBadStatus; the body is left unread.
    """
    try:
        prepared = build_request(settings)
    except requests.RequestException as e:
        # bad/unsupported URL: surfaced the same way as a failed connection
        raise UpstreamUnreachable(str(e)) from e

    with requests.Session() as session:
        # proxies / CA bundle from env; auth never comes from netrc
        env = session.merge_environment_settings(prepared.url, {}, None, None, None)
        try:
            resp = session.send(prepared, timeout=settings.timeout, **env)
        except requests.RequestException as e:
            raise UpstreamUnreachable(str(e)) from e

    if resp.status_code != 200:
        resp.close()
        raise UpstreamBadStatus(resp.status_code)
    return resp


def scrape(settings: Settings) -> StatisticsSnapshot:
    resp = fetch_stats(settings)
    try:
        return decode_snapshot(resp.content)
    except DecodeError as e:
        raise MalformedUpstreamBody(str(e)) from e
    finally:
        resp.close()
