# =============================================
# File: tests/conftest.py
# Purpose: Fake videobridge upstream (patches requests' transport) + clean scrape stats
# =============================================
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import json

import pytest
import requests

from jitsi_exporter.utils.scrape_stats import reset as scrape_stats_reset


class FakeUpstream:
    """Stands in for the videobridge: records every outbound request, replays a canned answer."""

    def __init__(self):
        self.calls = []
        self.status = 200
        self.body = b"{}"
        self.exc = None

    def respond(self, payload=None, status=200, body=None):
        self.status = status
        if body is not None:
            self.body = body if isinstance(body, bytes) else body.encode("utf-8")
        else:
            self.body = json.dumps(payload if payload is not None else {}).encode("utf-8")
        self.exc = None

    def fail(self, exc):
        self.exc = exc

    @property
    def last_request(self):
        return self.calls[-1][0]

    def send(self, session, request, **kwargs):
        self.calls.append((request, kwargs))
        if self.exc is not None:
            raise self.exc
        resp = requests.Response()
        resp.status_code = self.status
        resp._content = self.body
        resp._content_consumed = True
        resp.url = request.url
        resp.request = request
        resp.headers["Content-Type"] = "application/json"
        return resp


@pytest.fixture
def upstream(monkeypatch):
    fake = FakeUpstream()

    def _send(session, request, **kwargs):
        return fake.send(session, request, **kwargs)

    monkeypatch.setattr(requests.Session, "send", _send)
    return fake


@pytest.fixture(autouse=True)
def _clean_scrape_stats():
    scrape_stats_reset()
    yield
    scrape_stats_reset()
