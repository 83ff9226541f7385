"""
Command line entry point.
"""

import os
import sys
import argparse

from . import __version__
from .monitor import Monitor, DEFAULT_INTERVAL, DEFAULT_THREADS
from .report import Reporter, emit
from .sources import RESULTS_PER_PAGE


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        prog="gitsentry",
        description="gitsentry: watch public GitHub code and gists for leaked credentials",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    p.add_argument("domains", nargs="+", help="Domains to watch (e.g., acme.com)")
    p.add_argument("--token", default=os.environ.get("GITHUB_TOKEN"),
                   help="GitHub Personal Access Token (defaults to $GITHUB_TOKEN)")
    p.add_argument("--interval", type=float, default=DEFAULT_INTERVAL / 60, help="Minutes between scans")
    p.add_argument("--once", action="store_true", help="Run a single scan and exit")
    p.add_argument("--verbose", "-v", action="store_true", help="Print per-query and per-item errors")
    p.add_argument("--threads", type=int, default=DEFAULT_THREADS, help="Concurrent content fetch workers")
    p.add_argument("--per-page", type=int, default=RESULTS_PER_PAGE, help="Results per page (GitHub max 100)")
    p.add_argument("--output", default=None, help="Optional file mirroring console output")
    p.add_argument("--json", action="store_true", help="Print findings as JSON after the summary")
    p.add_argument("--fail-on-findings", action="store_true", help="Exit with code 2 if findings exist (CI-friendly)")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = p.parse_args(argv)
    if args.interval <= 0:
        p.error("--interval must be positive")
    if not 1 <= args.per_page <= 100:
        p.error("--per-page must be between 1 and 100")
    return args


def main(argv=None):
    args = parse_args(argv)

    output_handle = None
    if args.output:
        try:
            output_handle = open(args.output, 'w', encoding='utf-8')
            emit(f"[*] Output will be saved to: {args.output}", output_handle)
        except OSError as e:
            emit(f"[!] Error opening output file: {e}")
            output_handle = None

    reporter = Reporter(out=output_handle, verbose=args.verbose)
    if not args.token:
        reporter.log("[!] No GitHub token given; code search needs one and will fail")

    monitor = Monitor(
        args.domains,
        reporter=reporter,
        interval=args.interval * 60,
        once=args.once,
        verbose=args.verbose,
        threads=args.threads,
        token=args.token,
        per_page=args.per_page,
    )

    try:
        monitor.start()
    except KeyboardInterrupt:
        monitor.stop()
        reporter.log("\n[*] Stopping monitor...")
        reporter.summary(monitor.state.findings)
    finally:
        if output_handle:
            output_handle.close()
            print(f"[*] Results saved to {args.output}")

    findings = monitor.state.findings
    if args.json:
        print(Reporter.to_json(findings))

    if args.fail_on_findings and findings:
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
