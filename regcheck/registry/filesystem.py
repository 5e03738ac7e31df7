"""Filesystem registry adapter.

Reads the directory layout a registry writes with its ``filesystem``
storage driver::

    <root>/docker/registry/v2/
        repositories/<name>/_manifests/tags/<tag>/current/link
        blobs/<algorithm>/<hex[:2]>/<hex>/data

The tag ``link`` file holds the digest of the manifest blob. Nothing is ever
written.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from regcheck.errors import RepositoryUnknownError, StorageError, TagUnknownError
from regcheck.models.manifest import Manifest, parse_manifest
from regcheck.registry.namespace import validate_repository_name

DEFAULT_ROOT_DIRECTORY = "/var/lib/registry"

_DIGEST_RE = re.compile(r"^([a-z0-9]+(?:[+._-][a-z0-9]+)*):([a-f0-9]{32,})$")


class FilesystemRepository:
    def __init__(self, name: str, path: Path, blobs: Path):
        self.name = name
        self._path = path
        self._blobs = blobs

    def tags(self) -> list[str]:
        tags_dir = self._path / "_manifests" / "tags"
        try:
            return sorted(p.name for p in tags_dir.iterdir() if p.is_dir())
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageError(f"cannot list tags of {self.name}: {e}") from e

    def manifest(self, tag: str) -> Manifest:
        link = self._path / "_manifests" / "tags" / tag / "current" / "link"
        try:
            digest = link.read_text(encoding="utf-8").strip()
        except FileNotFoundError as e:
            raise TagUnknownError(self.name, tag) from e
        except OSError as e:
            raise StorageError(f"cannot read tag link {link}: {e}") from e

        blob = self._blob_path(digest)
        try:
            content = blob.read_bytes()
        except OSError as e:
            raise StorageError(f"cannot read manifest blob {digest}: {e}") from e

        return parse_manifest(content)

    def _blob_path(self, digest: str) -> Path:
        match = _DIGEST_RE.match(digest)
        if not match:
            raise StorageError(f"invalid digest in tag link: {digest!r}")
        algorithm, hex_digest = match.groups()
        return self._blobs / algorithm / hex_digest[:2] / hex_digest / "data"


class FilesystemNamespace:
    """Read-only view of a registry's on-disk storage."""

    def __init__(self, root_directory: str | Path = DEFAULT_ROOT_DIRECTORY):
        self.root = Path(root_directory)
        base = self.root / "docker" / "registry" / "v2"
        self._repositories_dir = base / "repositories"
        self._blobs_dir = base / "blobs"

    @classmethod
    def from_parameters(cls, parameters: dict) -> "FilesystemNamespace":
        return cls(parameters.get("rootdirectory") or DEFAULT_ROOT_DIRECTORY)

    def repositories(self, limit: int) -> list[str]:
        if not self._repositories_dir.is_dir():
            return []

        names = []
        try:
            for dirpath, dirnames, _ in os.walk(self._repositories_dir, onerror=_raise):
                rel = Path(dirpath).relative_to(self._repositories_dir)
                if "_manifests" in dirnames and rel.parts:
                    names.append(rel.as_posix())
                # Repositories may nest, but never inside their own metadata.
                dirnames[:] = [d for d in dirnames if not d.startswith("_")]
        except OSError as e:
            raise StorageError(f"cannot walk repositories: {e}") from e

        return sorted(names)[:limit]

    def repository(self, name: str) -> FilesystemRepository:
        validate_repository_name(name)
        path = self._repositories_dir / name
        if not path.is_dir():
            raise RepositoryUnknownError(name)
        return FilesystemRepository(name, path, self._blobs_dir)


def _raise(error: OSError):
    raise error
