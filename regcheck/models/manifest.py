"""Schema 1 image manifest models.

Only the parts of a manifest that the integrity checks read are modelled:
the layer list and the history list. Signatures are ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field

from regcheck.errors import ManifestInvalidError

SCHEMA_VERSION = 1


@dataclass
class FSLayer:
    """Reference to one filesystem layer blob."""

    blob_sum: str


@dataclass
class HistoryEntry:
    """One build-history record; the payload is an opaque v1 image JSON."""

    v1_compatibility: str


@dataclass
class Manifest:
    """A schema 1 manifest as stored by the registry."""

    name: str = ""
    tag: str = ""
    architecture: str = ""
    schema_version: int = SCHEMA_VERSION
    fs_layers: list[FSLayer] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)


def parse_manifest(raw: str | bytes | dict) -> Manifest:
    """Parse a schema 1 manifest from JSON text or an already-decoded dict.

    Missing ``fsLayers`` or ``history`` parse as empty lists so that the
    checker can report them. Anything that is not a schema 1 manifest
    raises ``ManifestInvalidError``.
    """
    if isinstance(raw, dict):
        data = raw
    else:
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as e:
            raise ManifestInvalidError(f"manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestInvalidError("manifest must be a JSON object")

    version = data.get("schemaVersion", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise ManifestInvalidError(f"unsupported manifest schema version: {version}")

    layers = data.get("fsLayers") or []
    history = data.get("history") or []
    if not isinstance(layers, list):
        raise ManifestInvalidError("'fsLayers' must be a list")
    if not isinstance(history, list):
        raise ManifestInvalidError("'history' must be a list")

    fs_layers = []
    for i, layer in enumerate(layers):
        if not isinstance(layer, dict) or not isinstance(layer.get("blobSum", ""), str):
            raise ManifestInvalidError(f"fsLayers[{i}] is malformed")
        fs_layers.append(FSLayer(blob_sum=layer.get("blobSum", "")))

    entries = []
    for i, entry in enumerate(history):
        if not isinstance(entry, dict) or not isinstance(entry.get("v1Compatibility", ""), str):
            raise ManifestInvalidError(f"history[{i}] is malformed")
        entries.append(HistoryEntry(v1_compatibility=entry.get("v1Compatibility", "")))

    return Manifest(
        name=str(data.get("name", "")),
        tag=str(data.get("tag", "")),
        architecture=str(data.get("architecture", "")),
        schema_version=SCHEMA_VERSION,
        fs_layers=fs_layers,
        history=entries,
    )
