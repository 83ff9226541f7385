"""
Thin GitHub REST client: one pooled Session, JSON in, taxonomy errors out.
"""

import base64

import requests
from requests.adapters import HTTPAdapter, Retry

from .errors import TransientSourceError, ContentResolutionError

# -----------------------
# Config / Defaults
# -----------------------
GITHUB_API = "https://api.github.com"
USER_AGENT = "gitsentry/0.1"
REQUEST_TIMEOUT = 20
MAX_FILE_SIZE = 1024 * 1024


# -----------------------
# HTTP Session (reuse + retries + pooling)
# -----------------------
def make_session(github_token=None, pool_size=10) -> requests.Session:
    s = requests.Session()
    s.headers.update({
        "User-Agent": USER_AGENT,
        "Accept": "application/vnd.github.v3+json",
    })
    if github_token:
        s.headers["Authorization"] = f"token {github_token}"
    # 5xx only; 403/429 rate limiting is logged by the caller, not retried
    retry = Retry(
        total=3, connect=3, read=3,
        backoff_factor=0.6,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=pool_size, pool_maxsize=pool_size)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    return s


def decode_blob(blob):
    for enc in ('utf-8', 'latin-1'):
        try:
            return blob.decode(enc)
        except UnicodeDecodeError:
            continue
    return ""


class GitHubClient:
    """Read-only access to the GitHub API.

    ``get`` accepts either a path relative to ``base_url`` or an absolute URL
    (contents-API locators returned by code search are absolute). The client
    holds no per-call state, so one instance is shared by every connector and
    by the content-fetch workers.
    """

    def __init__(self, token=None, base_url=GITHUB_API, timeout=REQUEST_TIMEOUT,
                 session=None, pool_size=10):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else make_session(token, pool_size)

    def _url(self, path_or_url):
        if path_or_url.startswith(("http://", "https://")):
            return path_or_url
        return f"{self.base_url}/{path_or_url.lstrip('/')}"

    def get(self, path_or_url, params=None):
        url = self._url(path_or_url)
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransientSourceError(f"request to {url} failed: {e}") from e

        status = resp.status_code
        if status in (403, 429):
            remaining = resp.headers.get("X-RateLimit-Remaining")
            reset = resp.headers.get("X-RateLimit-Reset")
            if remaining == "0" or "rate limit" in resp.text.lower():
                raise TransientSourceError(f"HTTP {status} rate limited (reset at {reset})")
        if status < 200 or status >= 300:
            raise TransientSourceError(f"HTTP {status} - {resp.text[:200]}")

        try:
            return resp.json()
        except ValueError as e:
            raise TransientSourceError(f"could not decode JSON from {url}") from e

    def get_file_text(self, content_url):
        """Fetch a contents-API object and return its decoded text ("" if empty)."""
        try:
            data = self.get(content_url)
        except TransientSourceError as e:
            raise ContentResolutionError(str(e)) from e
        if not isinstance(data, dict):
            return ""
        size = data.get("size") or 0
        if size > MAX_FILE_SIZE:
            return ""
        content = data.get("content") or ""
        if not content:
            return ""
        if data.get("encoding") == "base64":
            try:
                blob = base64.b64decode(content)
            except ValueError as e:
                raise ContentResolutionError(f"bad base64 body at {content_url}") from e
            return decode_blob(blob[:MAX_FILE_SIZE])
        return content
