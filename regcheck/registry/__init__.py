"""Registry adapters — read-only access to repositories, tags and manifests.

Adapters are looked up by storage driver name, the same name used in the
``storage`` section of a registry configuration file.
"""

from __future__ import annotations

from typing import Callable

from regcheck.errors import StorageDriverError
from regcheck.registry.filesystem import FilesystemNamespace
from regcheck.registry.inmemory import InMemoryNamespace
from regcheck.registry.namespace import Namespace, Repository

DRIVERS: dict[str, Callable[[dict], Namespace]] = {
    "filesystem": FilesystemNamespace.from_parameters,
    "inmemory": InMemoryNamespace.from_parameters,
}


def create_namespace(driver: str, parameters: dict | None = None) -> Namespace:
    """Construct the namespace for a storage driver."""
    factory = DRIVERS.get(driver)
    if factory is None:
        raise StorageDriverError(f"storage driver not registered: {driver}")
    try:
        return factory(parameters or {})
    except (TypeError, ValueError) as e:
        raise StorageDriverError(f"cannot create {driver} storage driver: {e}") from e


__all__ = [
    "DRIVERS",
    "FilesystemNamespace",
    "InMemoryNamespace",
    "Namespace",
    "Repository",
    "create_namespace",
]
