"""Repository-name sources: a plain-text list or the registry itself."""

from __future__ import annotations

from pathlib import Path

from regcheck.errors import RegistryError, RepositoryListError, RepositoryOverflowError
from regcheck.registry import Namespace

MAX_REPOSITORIES = 500_000


def read_repository_file(repos_path: str | Path) -> list[str]:
    """Read repository names, one per line.

    Blank lines are skipped and a leading ``+`` (a legacy marker) is dropped.
    """
    try:
        with open(repos_path) as f:
            lines = f.readlines()
    except OSError as e:
        raise RepositoryListError(f"could not open repos file: {e}") from e

    names = []
    for line in lines:
        name = line.strip()
        if name.startswith("+"):
            name = name[1:]
        if name:
            names.append(name)
    return names


def resolve_repositories(
    namespace: Namespace,
    repos_path: str | Path | None = None,
    limit: int = MAX_REPOSITORIES,
) -> list[str]:
    """Return the repository names to scan.

    A repository file, when given, takes precedence over listing the
    registry. Listing exactly ``limit`` names is treated as overflow since
    the registry almost certainly holds more.
    """
    if repos_path:
        names = read_repository_file(repos_path)
        if len(names) > limit:
            raise RepositoryOverflowError(
                f"too many repositories: {len(names)} listed, limit is {limit}"
            )
        return names

    try:
        names = namespace.repositories(limit)
    except RegistryError as e:
        raise RepositoryListError(f"unexpected error getting repo: {e}") from e

    if len(names) >= limit:
        raise RepositoryOverflowError(f"too many repositories (limit is {limit})")
    return names
