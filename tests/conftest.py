# File: tests/conftest.py
from typing import Dict, List

import pytest
import requests

import rewriter
from app import app as flask_app

SAMPLE_HTML_WITH_YALE = """<!DOCTYPE html>
<html>
<head>
  <title>Yale University Test Page</title>
</head>
<body>
  <h1>Welcome to Yale University</h1>
  <p>Yale University is a private Ivy League research university.</p>
  <p>Visit the <a href="https://www.yale.edu/about">About Yale</a> page or read
     the <a href="https://news.yale.edu/">yale news</a>.</p>
</body>
</html>
"""


class FakeRemote:
    """Stands in for ``requests.get``: serves canned pages, records calls."""

    def __init__(self) -> None:
        self.pages: Dict[str, object] = {}
        self.calls: List[dict] = []

    def serve(self, url, body, status=200, content_type="text/html; charset=utf-8"):
        self.pages[url] = (status, body, content_type)

    def fail(self, url, exc):
        self.pages[url] = exc

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers or {}, "timeout": timeout})
        entry = self.pages.get(url)
        if entry is None:
            raise requests.ConnectionError(f"Connection refused: {url}")
        if isinstance(entry, Exception):
            raise entry

        status, body, content_type = entry
        resp = requests.Response()
        resp.status_code = status
        resp.url = url
        resp.headers["Content-Type"] = content_type
        resp._content = body.encode("utf-8") if isinstance(body, str) else body
        if "charset=" in content_type:
            resp.encoding = content_type.split("charset=", 1)[1]
        return resp


@pytest.fixture()
def remote(monkeypatch) -> FakeRemote:
    """Route every outbound request through a :class:`FakeRemote`."""
    fake = FakeRemote()
    monkeypatch.setattr(rewriter.requests, "get", fake.get)
    return fake


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setitem(flask_app.config, "TESTING", True)
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def sample_html() -> str:
    return SAMPLE_HTML_WITH_YALE
