"""In-memory registry adapter.

Holds repositories as plain dicts. Used by the ``inmemory`` storage driver
(which always starts empty) and as a convenient fixture in tests.
"""

from __future__ import annotations

from regcheck.errors import RepositoryUnknownError, TagUnknownError
from regcheck.models.manifest import Manifest, parse_manifest
from regcheck.registry.namespace import validate_repository_name


class InMemoryRepository:
    def __init__(self, name: str, manifests: dict[str, Manifest | str | bytes | dict]):
        self.name = name
        self._manifests = manifests

    def tags(self) -> list[str]:
        return list(self._manifests)

    def manifest(self, tag: str) -> Manifest:
        if tag not in self._manifests:
            raise TagUnknownError(self.name, tag)
        stored = self._manifests[tag]
        if isinstance(stored, Manifest):
            return stored
        return parse_manifest(stored)


class InMemoryNamespace:
    """Registry backed by ``{repository: {tag: manifest}}``.

    Manifests may be given as ``Manifest`` objects or as raw schema 1 JSON
    (text, bytes or dict), which is parsed on fetch.
    """

    def __init__(self, repositories: dict[str, dict] | None = None):
        self._repositories: dict[str, dict] = dict(repositories or {})

    @classmethod
    def from_parameters(cls, parameters: dict) -> "InMemoryNamespace":
        return cls()

    def repositories(self, limit: int) -> list[str]:
        return sorted(self._repositories)[:limit]

    def repository(self, name: str) -> InMemoryRepository:
        validate_repository_name(name)
        if name not in self._repositories:
            raise RepositoryUnknownError(name)
        return InMemoryRepository(name, self._repositories[name])
