import json

import pytest
import requests


@pytest.fixture
def make_response():
    """Build real requests.Response objects for stubbed HTTP calls."""

    def _make(status_code: int, content: bytes = b"", json_body=None) -> requests.Response:
        resp = requests.Response()
        resp.status_code = status_code
        if json_body is not None:
            resp._content = json.dumps(json_body).encode("utf-8")
            resp.headers["Content-Type"] = "application/json"
            resp.encoding = "utf-8"
        else:
            resp._content = content
        return resp

    return _make


@pytest.fixture
def record_posts(monkeypatch):
    """Replace requests.post with a recorder returning queued responses."""

    def _install(*responses):
        calls = []
        queue = list(responses)

        def fake_post(url, **kwargs):
            calls.append({"url": url, **kwargs})
            outcome = queue.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        monkeypatch.setattr(requests, "post", fake_post)
        return calls

    return _install
