"""Reporter — the shared output sink for findings and scan diagnostics."""

from __future__ import annotations

import threading

from rich.console import Console

from regcheck.checks.manifest_checker import Finding


class Reporter:
    """Write whole lines to the findings and diagnostics consoles.

    Workers share one reporter. Each call writes exactly one line under a
    lock so output from different repositories never interleaves mid-line.
    """

    def __init__(
        self,
        console: Console | None = None,
        err_console: Console | None = None,
        quiet: bool = False,
    ):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)
        self.quiet = quiet
        self._lock = threading.Lock()

    def finding(self, finding: Finding) -> None:
        self._write(self.console, str(finding))

    def error(self, message: str) -> None:
        self._write(self.err_console, message)

    def progress(self, message: str) -> None:
        if not self.quiet:
            self._write(self.err_console, message)

    def _write(self, console: Console, line: str) -> None:
        with self._lock:
            console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)
