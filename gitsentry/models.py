"""Data carried between connectors, the analysis pipeline and the reporter."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Tuple

from .patterns import redact

SNIPPET_LENGTH = 200


@dataclass(frozen=True)
class CodeResult:
    """A code search hit. The body is not part of the search payload."""
    repository: str
    path: str
    url: str
    content_url: Optional[str]
    kind: str = field(default="code", init=False)

    @property
    def source_id(self) -> str:
        return self.repository

    @property
    def location(self) -> str:
        return self.path


@dataclass(frozen=True)
class GistResult:
    """One file of a public gist, with its content inline."""
    gist_id: str
    filename: str
    url: str
    content: str
    kind: str = field(default="gist", init=False)

    @property
    def source_id(self) -> str:
        return self.gist_id

    @property
    def location(self) -> str:
        return self.filename


@dataclass(frozen=True)
class Detection:
    """What the detector saw in one item, before it is stamped as a Finding."""
    matched_domains: Tuple[str, ...]
    credential_kinds: Tuple[str, ...]
    snippet: str


@dataclass(frozen=True)
class Finding:
    timestamp: str
    source_type: str
    source_id: str
    path: str
    url: str
    matched_domains: Tuple[str, ...]
    credential_kinds: Tuple[str, ...]
    snippet: str

    def __post_init__(self):
        if not self.matched_domains:
            raise ValueError("a finding needs at least one matched domain")
        if not self.credential_kinds:
            raise ValueError("a finding needs at least one credential kind")
        if len(self.snippet) > SNIPPET_LENGTH:
            object.__setattr__(self, "snippet", self.snippet[:SNIPPET_LENGTH])

    def to_dict(self, mask=False):
        d = asdict(self)
        d["matched_domains"] = list(self.matched_domains)
        d["credential_kinds"] = list(self.credential_kinds)
        if mask:
            d["snippet"] = redact(self.snippet)
        return d


@dataclass(frozen=True)
class TickResult:
    items_scanned: int = 0
    findings_count: int = 0
    failed_sources: Tuple[str, ...] = ()


@dataclass
class RunState:
    """Process-wide scan state. Only the Monitor mutates it."""
    is_running: bool = False
    last_check: Optional[str] = None
    findings: List[Finding] = field(default_factory=list)
