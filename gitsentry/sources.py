"""
Source connectors. Each exposes ``produce(domains)`` yielding candidate items.
"""

from .errors import SentryError, TransientSourceError, EMPTY_SOURCE, handle
from .models import CodeResult, GistResult

RESULTS_PER_PAGE = 30
QUERY_TERMS = ("password", "api_key")


class CodeSearchSource:
    """Runs ``<domain> <term>`` code searches for every watched domain.

    Search hits carry metadata only; ``content_url`` points at the
    contents-API object the analysis step fetches later.
    """

    name = "code"

    def __init__(self, client, per_page=RESULTS_PER_PAGE, query_terms=QUERY_TERMS, reporter=None):
        self.client = client
        self.per_page = per_page
        self.query_terms = tuple(query_terms)
        self.reporter = reporter

    def _search(self, query):
        data = self.client.get("/search/code", params={"q": query, "per_page": self.per_page})
        items = []
        for item in data.get("items") or []:
            repo = item.get("repository") or {}
            items.append(CodeResult(
                repository=repo.get("full_name", ""),
                path=item.get("path", ""),
                url=item.get("html_url", ""),
                content_url=item.get("url"),
            ))
        return items

    def produce(self, domains):
        for domain in domains:
            for term in self.query_terms:
                query = f"{domain} {term}"
                try:
                    batch = self._search(query)
                except (SentryError, AttributeError) as e:
                    if handle(e, self.reporter, f"    [!] Search error for '{query}'",
                              TransientSourceError) == EMPTY_SOURCE:
                        continue
                    raise
                yield from batch


class GistSource:
    """Expands one page of recent public gists into per-file items.

    Gists cannot be searched server side, so ``domains`` is not used to
    filter here; the analysis step does that.
    """

    name = "gists"

    def __init__(self, client, per_page=RESULTS_PER_PAGE, reporter=None):
        self.client = client
        self.per_page = per_page
        self.reporter = reporter

    def produce(self, domains):
        try:
            gists = self.client.get("/gists/public", params={"per_page": self.per_page})
            items = []
            for gist in gists or []:
                for filename, file_data in (gist.get("files") or {}).items():
                    items.append(GistResult(
                        gist_id=gist.get("id", ""),
                        filename=filename,
                        url=gist.get("html_url", ""),
                        content=(file_data or {}).get("content") or "",
                    ))
        except (SentryError, AttributeError, TypeError) as e:
            if handle(e, self.reporter, "    [!] Gists error", TransientSourceError) == EMPTY_SOURCE:
                return
            raise
        yield from items
