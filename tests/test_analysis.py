from datetime import datetime, timezone

from gitsentry.analysis import analyze_item, resolve_content
from gitsentry.errors import ContentResolutionError
from gitsentry.models import SNIPPET_LENGTH

from tests.helpers import FakeClient, code_item, gist_item

DOMAINS = ("acme.com",)


def test_code_item_with_domain_and_key_is_a_finding():
    item = code_item()
    client = FakeClient(files={item.content_url: "acme.com password123 api_key=sk_live_xxx"})

    findings = analyze_item(item, DOMAINS, client)

    assert len(findings) == 1
    f = findings[0]
    assert f.matched_domains == ("acme.com",)
    assert "GENERIC_API_KEY" in f.credential_kinds
    assert f.source_type == "code"
    assert f.source_id == "foo/bar"
    assert f.path == "config.py"
    assert client.file_calls == [item.content_url]


def test_gist_without_credentials_is_ignored():
    client = FakeClient()
    assert analyze_item(gist_item("visit acme.com for info"), DOMAINS, client) == []
    assert client.file_calls == []


def test_credentials_without_domain_are_ignored():
    assert analyze_item(gist_item("password = hunter2"), DOMAINS, FakeClient()) == []


def test_removing_credentials_removes_finding():
    with_key = gist_item("acme.com\napi_key = abc123")
    without_key = gist_item("acme.com\nsee docs")
    assert len(analyze_item(with_key, DOMAINS, FakeClient())) == 1
    assert analyze_item(without_key, DOMAINS, FakeClient()) == []


def test_domain_in_url_counts():
    item = code_item(repo="foo/acme.com-configs", url="https://github.com/foo/acme.com-configs")
    client = FakeClient(files={item.content_url: "db_password = hunter2"})

    findings = analyze_item(item, DOMAINS, client)

    assert len(findings) == 1
    assert findings[0].matched_domains == ("acme.com",)
    assert findings[0].credential_kinds == ("GENERIC_PASSWORD_KV",)


def test_resolution_failure_is_no_finding(reporter):
    item = code_item()
    client = FakeClient(files={item.content_url: ContentResolutionError("HTTP 502")})
    assert analyze_item(item, DOMAINS, client, reporter) == []


def test_unexpected_error_is_no_finding():
    item = code_item()
    client = FakeClient(files={item.content_url: RuntimeError("boom")})
    assert analyze_item(item, DOMAINS, client) == []


def test_snippet_is_bounded_and_timestamp_used():
    body = "acme.com token=" + "z" * 500
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    findings = analyze_item(gist_item(body), DOMAINS, FakeClient(), now=now)
    assert len(findings[0].snippet) == SNIPPET_LENGTH
    assert findings[0].timestamp == "2024-01-02T03:04:05+00:00"


def test_resolve_content_without_locator():
    assert resolve_content(code_item(content_url=None), FakeClient()) == ""
