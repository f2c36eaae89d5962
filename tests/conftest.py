"""Shared fixtures: canned responses and an in-memory transport."""

import pytest
import requests
from requests.structures import CaseInsensitiveDict


def build_response(status_code=200, body=b"", headers=None):
    resp = requests.Response()
    resp.status_code = status_code
    resp.headers = CaseInsensitiveDict(headers or {})
    resp._content = body.encode("utf-8") if isinstance(body, str) else body
    resp._content_consumed = True
    return resp


class BrokenRaw:
    """Raw stream whose reads always fail."""

    def read(self, *args, **kwargs):
        raise OSError("connection reset by peer")

    def close(self):
        pass


class FakeTransport:
    """Records sent requests and replays canned responses or exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def broken_response():
    def _make(status_code=200, headers=None):
        resp = requests.Response()
        resp.status_code = status_code
        resp.headers = CaseInsensitiveDict(headers or {})
        resp.raw = BrokenRaw()
        return resp

    return _make


@pytest.fixture
def fake_transport():
    return FakeTransport
