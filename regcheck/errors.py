"""Exception hierarchy for regcheck.

Two families matter to the command line:
- ``SetupError`` subclasses are fatal and end the process.
- ``RegistryError`` subclasses come from a registry adapter and only ever
  abandon the repository being scanned.
"""

from __future__ import annotations


class RegCheckError(Exception):
    """Base class for every error raised by regcheck."""


# ── Setup (fatal) ───────────────────────────────────────────────────


class SetupError(RegCheckError):
    """A problem that prevents a scan from starting at all."""


class ConfigurationError(SetupError):
    """The registry configuration file is missing or malformed."""


class StorageDriverError(SetupError):
    """The configured storage driver is unknown or cannot be constructed."""


class RepositoryListError(SetupError):
    """The repository names could not be obtained."""


class RepositoryOverflowError(SetupError):
    """More repositories than the scanner is allowed to handle."""


# ── Registry (per repository) ───────────────────────────────────────


class RegistryError(RegCheckError):
    """A registry adapter failed to answer a request."""


class InvalidRepositoryNameError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"invalid repository name: {name!r}")
        self.name = name


class RepositoryUnknownError(RegistryError):
    def __init__(self, name: str):
        super().__init__(f"repository name not known to registry: {name}")
        self.name = name


class TagUnknownError(RegistryError):
    def __init__(self, repository: str, tag: str):
        super().__init__(f"unknown tag={tag} in repository {repository}")
        self.repository = repository
        self.tag = tag


class ManifestInvalidError(RegistryError):
    """A stored manifest could not be parsed as a schema 1 manifest."""


class StorageError(RegistryError):
    """The underlying storage could not be read."""


# ── Scan ────────────────────────────────────────────────────────────


class RepositoryScanError(RegCheckError):
    """Scanning one repository failed; the rest of the scan carries on."""

    def __init__(self, repository: str, message: str):
        super().__init__(message)
        self.repository = repository
