"""
Scan orchestration: the tick, the schedule, and per-source failure isolation.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from .analysis import inspect_item, make_finding
from .client import GitHubClient
from .errors import ConnectorError, EMPTY_SOURCE, handle
from .models import RunState, TickResult
from .report import Reporter
from .sources import CodeSearchSource, GistSource, RESULTS_PER_PAGE

DEFAULT_INTERVAL = 30 * 60  # seconds
DEFAULT_THREADS = 6


class Monitor:
    """Watches GitHub for credential leaks mentioning a fixed set of domains.

    ``start()`` runs one tick straight away and then, unless ``once`` is set,
    keeps ticking every ``interval`` seconds until ``stop()``. The wait is
    measured from the end of a tick, so ticks never overlap.
    """

    def __init__(self, domains, client=None, sources=None, reporter=None,
                 interval=DEFAULT_INTERVAL, once=False, verbose=False,
                 threads=DEFAULT_THREADS, token=None, per_page=RESULTS_PER_PAGE):
        if isinstance(domains, str):
            raise TypeError("domains must be a sequence of strings, not a single string")
        domains = tuple(d.strip() for d in domains if d and d.strip())
        if not domains:
            raise ValueError("at least one domain to watch is required")
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.domains = domains
        self.interval = interval
        self.once = once
        self.verbose = verbose
        self.threads = max(1, int(threads))
        self.reporter = reporter if reporter is not None else Reporter(verbose=verbose)
        self.client = client if client is not None else GitHubClient(
            token=token, pool_size=max(10, self.threads * 2))
        if sources is None:
            sources = [
                CodeSearchSource(self.client, per_page=per_page, reporter=self.reporter),
                GistSource(self.client, per_page=per_page, reporter=self.reporter),
            ]
        self.sources = list(sources)
        self.state = RunState()
        self._stop_event = threading.Event()

    # -----------------------
    # Lifecycle
    # -----------------------
    def start(self, once=None):
        if once is not None:
            self.once = once
        if self._stop_event.is_set():
            raise RuntimeError("monitor was stopped; create a new one")
        self.state.is_running = True
        self.reporter.log("[*] Starting GitHub scanning...")
        self.reporter.log(f"[*] Watching: {', '.join(self.domains)}")

        self.tick()

        if self.once:
            self.reporter.log("\n[*] Single scan completed")
            self.reporter.summary(self.state.findings)
            self.state.is_running = False
            return

        minutes = self.interval / 60
        self.reporter.log(f"\n[*] Continuous monitoring active. Checking every {minutes:g} minutes...")
        self.reporter.log("    Press Ctrl+C to stop.\n")
        self.run_forever()

    def run_forever(self):
        """Sleep ``interval`` between ticks until ``stop()`` is called."""
        while not self._stop_event.wait(self.interval):
            self.tick()
        self.state.is_running = False

    def stop(self):
        # An in-flight tick still runs to completion
        self._stop_event.set()
        self.state.is_running = False

    @property
    def stopped(self):
        return self._stop_event.is_set()

    # -----------------------
    # Scanning
    # -----------------------
    def tick(self):
        now = datetime.now(timezone.utc)
        self.state.last_check = now.isoformat()
        self.reporter.log(f"\n[{self.state.last_check}] Scanning GitHub...")

        scanned = 0
        found = 0
        failed = []
        for source in self.sources:
            name = getattr(source, "name", repr(source))
            try:
                n, k = self._run_source(source)
            except Exception as e:
                failure = ConnectorError(name, e)
                if handle(failure, self.reporter, "  [!] Error scanning", ConnectorError) != EMPTY_SOURCE:
                    raise failure from e
                failed.append(name)
                continue
            scanned += n
            found += k

        self.reporter.log(f"  [+] Scanned {scanned} items, found {found} potential leak(s)")
        return TickResult(items_scanned=scanned, findings_count=found, failed_sources=tuple(failed))

    def _run_source(self, source):
        self.reporter.debug(f"  [*] Scanning source: {source.name}")
        items = list(source.produce(self.domains))

        found = 0
        for item, detection in zip(items, self._inspect_all(items)):
            if detection is None:
                continue
            # stamped here, in consumption order, not on the worker
            finding = make_finding(item, detection, datetime.now(timezone.utc))
            found += 1
            self.state.findings.append(finding)
            self.reporter.alert([finding])
        return len(items), found

    def _inspect_all(self, items):
        # map() hands results back in submission order
        def work(item):
            return inspect_item(item, self.domains, self.client, self.reporter)

        if self.threads == 1 or len(items) < 2:
            for item in items:
                yield work(item)
            return
        with ThreadPoolExecutor(max_workers=self.threads) as executor:
            yield from executor.map(work, items)
