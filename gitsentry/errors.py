"""Failure classes and what a scan does when it meets each of them."""


class SentryError(Exception):
    pass


class TransientSourceError(SentryError):
    """A connector's API call failed (network, HTTP status, bad JSON)."""


class ConnectorError(SentryError):
    """A whole connector failed while producing items for a tick."""

    def __init__(self, source, cause):
        super().__init__(f"{source}: {cause}")
        self.source = source
        self.cause = cause


class ContentResolutionError(SentryError):
    """Fetching a single item's body failed."""


class AnalysisError(SentryError):
    """The detector could not process an item's content."""


EMPTY_SOURCE = "empty_source"
SKIP_ITEM = "skip_item"

# exception class -> (outcome, printed outside verbose mode)
ERROR_POLICY = {
    TransientSourceError:   (EMPTY_SOURCE, False),
    ConnectorError:         (EMPTY_SOURCE, True),
    ContentResolutionError: (SKIP_ITEM, False),
    AnalysisError:          (SKIP_ITEM, False),
}


def policy_for(exc, default=AnalysisError):
    """Look up the policy entry for ``exc``; unknown errors fall back to ``default``."""
    for cls in type(exc).__mro__:
        if cls in ERROR_POLICY:
            return ERROR_POLICY[cls]
    return ERROR_POLICY[default]


def handle(exc, reporter, message, default=AnalysisError):
    """Report ``exc`` according to its policy and return the outcome."""
    outcome, loud = policy_for(exc, default)
    if reporter is not None:
        line = f"{message}: {exc}"
        if loud:
            reporter.log(line)
        else:
            reporter.debug(line)
    return outcome
