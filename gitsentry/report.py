"""
Console alerting and end-of-run summary.
"""

import json
import threading

_OUTPUT_LOCK = threading.Lock()


def emit(message, file_handle=None):
    """Print ``message`` and mirror it to ``file_handle``, one writer at a time.

    The mirror is flushed per line so a long-running monitor can be tailed.
    """
    with _OUTPUT_LOCK:
        print(message, flush=True)
        if file_handle:
            file_handle.write(message + "\n")
            file_handle.flush()


class Reporter:
    """Renders findings as they are discovered and summarises a run.

    ``out`` is an optional open text file that mirrors everything printed.
    """

    def __init__(self, out=None, verbose=False):
        self.out = out
        self.verbose = verbose

    def log(self, message):
        emit(message, self.out)

    def debug(self, message):
        if self.verbose:
            emit(message, self.out)

    def alert(self, findings):
        for f in findings:
            self.log("\n[ALERT] Potential credential leak detected!")
            self.log("=" * 50)
            self.log(f"Type: {f.source_type}")
            self.log(f"Source: {f.source_id}")
            self.log(f"Path: {f.path}")
            self.log(f"URL: {f.url}")
            self.log(f"Matched Domains: {', '.join(f.matched_domains)}")
            self.log(f"Credential Types: {', '.join(f.credential_kinds)}")
            self.log(f"\nSnippet: {f.snippet}...")
            self.log("=" * 50)

    def summary(self, findings):
        self.log("\n=== Summary ===")
        self.log(f"Total findings: {len(findings)}")
        if findings:
            self.log("\nDetails:")
            for f in findings:
                self.log(f"  - [{f.timestamp}] {f.source_type}: {f.source_id} / {f.path}")

    @staticmethod
    def to_json(findings):
        return json.dumps([f.to_dict(mask=True) for f in findings], ensure_ascii=False)
