"""Shared fixtures: canned HTTP responses and a patched requests.request."""

from unittest.mock import patch

import pytest
import requests


def make_response(status_code: int, body: str = "", reason: str = "") -> requests.Response:
    """Build a real requests.Response carrying the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    return response


@pytest.fixture
def http():
    """Patch requests.request; set ``http.return_value`` to the canned response."""
    with patch("tchremote_lib.requests.request") as mock_request:
        mock_request.return_value = make_response(200)
        yield mock_request


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("TCH_ADDR", raising=False)
    monkeypatch.delenv("TCH_PLAYER_KEY", raising=False)
