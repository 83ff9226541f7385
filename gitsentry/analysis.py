"""
Per-item pipeline: resolve content, then require both a watched domain and a
credential signature before anything is reported.

``inspect_item`` does the slow part (fetch + detect) and is safe to run on a
worker thread; ``make_finding`` stamps the result and runs on the caller's
thread, so timestamps follow the order findings are consumed in.
"""

from datetime import datetime, timezone

from .errors import SentryError, AnalysisError, ContentResolutionError, SKIP_ITEM, handle
from .models import Detection, Finding, SNIPPET_LENGTH
from .patterns import scan_for_domains, url_domains, detect_credentials


def resolve_content(item, client):
    """Return the text of ``item``; code hits cost one extra fetch."""
    if item.kind == "code":
        if not item.content_url:
            return ""
        return client.get_file_text(item.content_url) or ""
    if item.kind == "gist":
        return item.content or ""
    raise AnalysisError(f"unknown item kind {item.kind!r}")


def _classify(item, content, domains):
    try:
        domain_hits = scan_for_domains(content, domains)
        for d in url_domains(item.url, domains):
            if d not in domain_hits:
                domain_hits.append(d)
        if not domain_hits:
            return None
        kinds = detect_credentials(content)
    except Exception as e:
        raise AnalysisError(f"detector failed on {item.source_id}/{item.location}: {e}") from e
    if not kinds:
        return None
    return Detection(tuple(domain_hits), tuple(kinds), content[:SNIPPET_LENGTH])


def inspect_item(item, domains, client, reporter=None):
    """Return a Detection for ``item``, or None.

    Resolution and detector failures are skipped per the error policy and
    only printed in verbose mode.
    """
    try:
        try:
            content = resolve_content(item, client)
        except AnalysisError:
            raise
        except Exception as e:
            raise ContentResolutionError(str(e)) from e
        return _classify(item, content, domains)
    except SentryError as e:
        if handle(e, reporter, f"      [!] Skipped {item.source_id}/{item.location}") == SKIP_ITEM:
            return None
        raise


def make_finding(item, detection, now=None):
    ts = now or datetime.now(timezone.utc)
    return Finding(
        timestamp=ts.isoformat(),
        source_type=item.kind,
        source_id=item.source_id,
        path=item.location,
        url=item.url,
        matched_domains=detection.matched_domains,
        credential_kinds=detection.credential_kinds,
        snippet=detection.snippet,
    )


def analyze_item(item, domains, client, reporter=None, now=None):
    """Turn one candidate item into zero or one Finding (as a list)."""
    detection = inspect_item(item, domains, client, reporter)
    if detection is None:
        return []
    return [make_finding(item, detection, now)]
