"""Fakes shared by the test modules."""

from gitsentry.errors import TransientSourceError
from gitsentry.models import CodeResult, GistResult


class FakeClient:
    """Answers ``get`` from canned responses keyed by (path, query)."""

    def __init__(self, responses=None, files=None):
        self.responses = responses or {}
        self.files = files or {}
        self.calls = []
        self.file_calls = []

    def get(self, path_or_url, params=None):
        q = (params or {}).get("q")
        self.calls.append((path_or_url, q))
        key = (path_or_url, q) if (path_or_url, q) in self.responses else path_or_url
        if key not in self.responses:
            raise TransientSourceError(f"HTTP 404 - {path_or_url}")
        value = self.responses[key]
        if isinstance(value, Exception):
            raise value
        return value

    def get_file_text(self, content_url):
        self.file_calls.append(content_url)
        value = self.files.get(content_url, "")
        if isinstance(value, Exception):
            raise value
        return value


class FakeSource:
    def __init__(self, name, items=None, error=None):
        self.name = name
        self.items = items or []
        self.error = error
        self.calls = 0

    def produce(self, domains):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return iter(self.items)


def code_item(repo="foo/bar", path="config.py", url=None, content_url="https://api.github.com/c/1"):
    return CodeResult(
        repository=repo,
        path=path,
        url=url or f"https://github.com/{repo}/blob/main/{path}",
        content_url=content_url,
    )


def gist_item(content, gist_id="g1", filename="notes.txt"):
    return GistResult(
        gist_id=gist_id,
        filename=filename,
        url=f"https://gist.github.com/someone/{gist_id}",
        content=content,
    )
