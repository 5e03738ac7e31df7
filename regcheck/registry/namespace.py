"""Registry contracts consumed by the scanner.

``Namespace`` and ``Repository`` are structural protocols so that any
registry adapter (on-disk storage, in-memory, a test double) can be scanned
without inheriting from a base class. Implementations are shared across
scanner threads and must tolerate concurrent reads.
"""

from __future__ import annotations

import re
from typing import Protocol, runtime_checkable

from regcheck.errors import InvalidRepositoryNameError
from regcheck.models.manifest import Manifest

NAME_TOTAL_LENGTH_MAX = 255

_PATH_COMPONENT = r"[a-z0-9]+(?:(?:[._]|__|[-]*)[a-z0-9]+)*"
_NAME_RE = re.compile(rf"^{_PATH_COMPONENT}(?:/{_PATH_COMPONENT})*$")


@runtime_checkable
class Repository(Protocol):
    """An opened repository."""

    name: str

    def tags(self) -> list[str]:
        """Return every tag in the repository."""
        ...

    def manifest(self, tag: str) -> Manifest:
        """Fetch the manifest a tag currently points at."""
        ...


@runtime_checkable
class Namespace(Protocol):
    """A registry: a collection of repositories."""

    def repositories(self, limit: int) -> list[str]:
        """Return up to ``limit`` repository names in lexical order."""
        ...

    def repository(self, name: str) -> Repository:
        """Open a repository by name."""
        ...


def validate_repository_name(name: str) -> str:
    """Return ``name`` unchanged if it is a valid repository name."""
    if not name or len(name) > NAME_TOTAL_LENGTH_MAX or not _NAME_RE.match(name):
        raise InvalidRepositoryNameError(name)
    return name
