"""Scan coordinator — check every repository with a fixed pool of workers.

The producer puts every repository name on a shared FIFO queue followed by
one stop marker per worker. Workers pull names until they see a stop marker.
``scan`` returns once every worker has exited.

A failure in one repository is reported and that repository is abandoned;
it never stops the other workers.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass, field
from typing import Iterable

from regcheck.checks.manifest_checker import Finding, validate_manifest
from regcheck.errors import RegistryError, RepositoryScanError
from regcheck.registry import Namespace
from regcheck.scanner.reporter import Reporter

DEFAULT_WORKERS = 30

_STOP = object()


@dataclass
class ScanSummary:
    """Counters accumulated across all workers during one scan."""

    repositories: int = 0
    manifests: int = 0
    findings: int = 0
    failed: list[str] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add_manifest(self, finding_count: int) -> None:
        with self._lock:
            self.manifests += 1
            self.findings += finding_count

    def add_repository(self, failed_name: str | None = None) -> None:
        with self._lock:
            self.repositories += 1
            if failed_name is not None:
                self.failed.append(failed_name)

    def summary(self) -> str:
        return (
            f"checked {self.repositories} repositories ({len(self.failed)} failed), "
            f"{self.manifests} manifests, {self.findings} findings"
        )


class ScanCoordinator:
    """Runs the manifest checker over many repositories concurrently."""

    def __init__(self, namespace: Namespace, reporter: Reporter, workers: int = DEFAULT_WORKERS):
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.namespace = namespace
        self.reporter = reporter
        self.workers = workers

    def scan(self, repo_names: Iterable[str]) -> ScanSummary:
        """Check every named repository and block until all are done."""
        summary = ScanSummary()
        work: queue.Queue = queue.Queue(maxsize=self.workers)

        threads = [
            threading.Thread(
                target=self._worker,
                args=(work, summary),
                name=f"regcheck-worker-{i}",
                daemon=True,
            )
            for i in range(self.workers)
        ]
        for thread in threads:
            thread.start()

        for name in repo_names:
            work.put(name)
        for _ in threads:
            work.put(_STOP)

        for thread in threads:
            thread.join()

        return summary

    def check_repository(self, repo_name: str, summary: ScanSummary | None = None) -> list[Finding]:
        """Check every tagged manifest of one repository.

        Findings are reported as soon as each manifest is checked. Raises
        ``RepositoryScanError`` if the repository, its tags or one of its
        manifests cannot be fetched; remaining tags are then skipped.
        """
        try:
            repo = self.namespace.repository(repo_name)
        except RegistryError as e:
            raise RepositoryScanError(
                repo_name, f"unexpected error getting repository: {e}"
            ) from e

        try:
            tags = repo.tags()
        except RegistryError as e:
            raise RepositoryScanError(repo_name, f"unexpected error getting tags: {e}") from e

        self.reporter.progress(f"checking repo {repo_name} ({len(tags)} tags)")

        findings: list[Finding] = []
        for tag in tags:
            try:
                manifest = repo.manifest(tag)
            except RegistryError as e:
                raise RepositoryScanError(
                    repo_name, f"unexpected error getting manifest by tag: {e}"
                ) from e

            tag_findings = validate_manifest(repo_name, manifest)
            for finding in tag_findings:
                self.reporter.finding(finding)
            if summary is not None:
                summary.add_manifest(len(tag_findings))
            findings.extend(tag_findings)

        return findings

    def _worker(self, work: queue.Queue, summary: ScanSummary) -> None:
        while True:
            repo_name = work.get()
            if repo_name is _STOP:
                return
            try:
                self.check_repository(repo_name, summary)
            except RepositoryScanError as e:
                self.reporter.error(f"{repo_name}: {e}")
                summary.add_repository(failed_name=repo_name)
            except Exception as e:
                # Keep the worker alive so the queue is always drained.
                self.reporter.error(f"{repo_name}: unexpected error checking repository: {e!r}")
                summary.add_repository(failed_name=repo_name)
            else:
                summary.add_repository()
