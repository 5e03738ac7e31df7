"""Registry configuration — read the storage section of a registry config file.

Only the pieces needed to open storage are interpreted: the ``version`` key
and the single storage driver section with its parameters. Parameters can be
overridden from the environment with ``REGISTRY_STORAGE_<DRIVER>_<PARAM>``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from regcheck.errors import ConfigurationError
from regcheck.registry import Namespace, create_namespace

SUPPORTED_VERSIONS = {"0.1"}

# Storage keys that configure the registry itself rather than a driver
RESERVED_STORAGE_KEYS = {"cache", "maintenance", "delete", "redirect"}

ENV_PREFIX = "REGISTRY_STORAGE_"


@dataclass
class RegistryConfig:
    """The storage-relevant part of a registry configuration."""

    version: str
    storage_type: str
    storage_parameters: dict = field(default_factory=dict)


def load_config(config_path: str | Path, environ: dict[str, str] | None = None) -> RegistryConfig:
    """Load and validate a registry configuration file."""
    path = Path(config_path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"error opening config file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"error parsing config file: {e}") from e

    return parse_config(data, environ=os.environ if environ is None else environ)


def parse_config(data: object, environ: dict[str, str] | None = None) -> RegistryConfig:
    """Validate an already-decoded configuration document."""
    if not isinstance(data, dict):
        raise ConfigurationError("error parsing config file: expected a mapping at top level")

    version = data.get("version")
    if version is None:
        raise ConfigurationError("error parsing config file: missing 'version'")
    version = str(version)
    if version not in SUPPORTED_VERSIONS:
        raise ConfigurationError(f"error parsing config file: unsupported version {version!r}")

    storage = data.get("storage")
    if not isinstance(storage, dict):
        raise ConfigurationError("error parsing config file: missing 'storage' section")

    drivers = [key for key in storage if key not in RESERVED_STORAGE_KEYS]
    if not drivers:
        raise ConfigurationError("error parsing config file: no storage driver configured")
    if len(drivers) > 1:
        raise ConfigurationError(
            f"error parsing config file: multiple storage drivers configured: {sorted(drivers)}"
        )

    storage_type = str(drivers[0])
    parameters = storage[drivers[0]] or {}
    if not isinstance(parameters, dict):
        raise ConfigurationError(
            f"error parsing config file: parameters for {storage_type} must be a mapping"
        )

    parameters = dict(parameters)
    parameters.update(_env_overrides(storage_type, environ or {}))

    return RegistryConfig(
        version=version,
        storage_type=storage_type,
        storage_parameters=parameters,
    )


def build_namespace(config: RegistryConfig) -> Namespace:
    """Open the registry storage described by ``config``."""
    return create_namespace(config.storage_type, config.storage_parameters)


def _env_overrides(storage_type: str, environ: dict[str, str]) -> dict[str, str]:
    prefix = f"{ENV_PREFIX}{storage_type.upper()}_"
    return {
        key[len(prefix):].lower(): value
        for key, value in environ.items()
        if key.startswith(prefix) and len(key) > len(prefix)
    }
