import base64

import pytest
import requests

from gitsentry.client import GitHubClient, make_session, GITHUB_API
from gitsentry.errors import TransientSourceError, ContentResolutionError


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", headers=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self.headers = headers or {}

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.error:
            raise self.error
        return self.response


def test_session_headers():
    s = make_session("abc")
    assert s.headers["Authorization"] == "token abc"
    assert s.headers["Accept"] == "application/vnd.github.v3+json"
    assert "Authorization" not in make_session(None).headers


def test_relative_and_absolute_urls():
    session = FakeSession(FakeResponse(payload={"items": []}))
    client = GitHubClient(session=session)

    client.get("/search/code", params={"q": "x"})
    client.get("https://api.example.test/raw")

    assert session.requests[0][0] == f"{GITHUB_API}/search/code"
    assert session.requests[0][1] == {"q": "x"}
    assert session.requests[1][0] == "https://api.example.test/raw"


@pytest.mark.parametrize("response,error", [
    (FakeResponse(status_code=500, text="oops"), None),
    (FakeResponse(status_code=403, text="API rate limit exceeded"), None),
    (FakeResponse(payload=None, text="<html>"), None),
    (None, requests.ConnectionError("reset")),
])
def test_failures_are_transient_source_errors(response, error):
    client = GitHubClient(session=FakeSession(response, error))
    with pytest.raises(TransientSourceError):
        client.get("/gists/public")


def test_file_text_decodes_base64():
    body = base64.b64encode("password = hunter2\n".encode()).decode()
    client = GitHubClient(session=FakeSession(FakeResponse(payload={
        "encoding": "base64", "content": body, "size": 19})))
    assert client.get_file_text("https://api.github.com/repos/a/b/contents/x") == "password = hunter2\n"


def test_file_text_empty_body():
    client = GitHubClient(session=FakeSession(FakeResponse(payload={"content": ""})))
    assert client.get_file_text("https://api.github.com/x") == ""


def test_file_text_failure_is_resolution_error():
    client = GitHubClient(session=FakeSession(FakeResponse(status_code=404, text="Not Found")))
    with pytest.raises(ContentResolutionError):
        client.get_file_text("https://api.github.com/x")
