"""Manifest checker — verify that a manifest's image history is consistent.

Checks, in order:
- the manifest has at least one layer and one history entry
- layer and history counts match
- every history entry decodes to an image record
- every image's parent appears at or below it in the history

Nothing here raises on bad content. Every anomaly becomes a ``Finding``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from regcheck.models.manifest import Manifest


@dataclass(frozen=True)
class Finding:
    """An advisory diagnostic about one repository's manifest."""

    repository: str
    message: str

    def __str__(self) -> str:
        return f"{self.repository}: {self.message}"


@dataclass(frozen=True)
class _Image:
    id: str = ""
    parent: str = ""


def validate_manifest(repo_name: str, manifest: Manifest) -> list[Finding]:
    """Check a manifest's layers and history and return the findings.

    An empty list means the manifest is well formed.
    """
    findings: list[Finding] = []

    if not manifest.fs_layers or not manifest.history:
        findings.append(Finding(repo_name, "no layers present"))

    if len(manifest.fs_layers) != len(manifest.history):
        findings.append(Finding(repo_name, "mismatched layers and history"))

    images = []
    for entry in manifest.history:
        image, error = _decode_image(entry.v1_compatibility)
        if error:
            findings.append(Finding(repo_name, f"json unmarshal error: {error}"))
        images.append(image)

    # History is ordered child first, so a parent must be found at or
    # after the image's own position.
    for i, image in enumerate(images):
        if not image.parent:
            continue
        last_id = ""
        for candidate in images[i:]:
            last_id = candidate.id
            if last_id == image.parent:
                break
        if last_id != image.parent:
            findings.append(
                Finding(repo_name, f"parent not below in manifest (parent ID {image.parent})")
            )

    return findings


def _decode_image(blob: str) -> tuple[_Image, str]:
    """Decode a v1 compatibility blob, returning the image and an error message."""
    try:
        data = json.loads(blob, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        return _Image(), str(e)

    if data is None:
        return _Image(), ""
    if not isinstance(data, dict):
        return _Image(), f"cannot decode {type(data).__name__} into image record"

    fields = {}
    for key in ("id", "parent"):
        value = _lookup(data, key)
        if value is None:
            value = ""
        if not isinstance(value, str):
            return _Image(), f"image field '{key}' must be a string, got {type(value).__name__}"
        fields[key] = value

    return _Image(id=fields["id"], parent=fields["parent"]), ""


def _reject_constant(name: str):
    raise ValueError(f"invalid JSON value {name}")


def _lookup(data: dict, key: str):
    """Exact key first, otherwise the last key matching case-insensitively."""
    if key in data:
        return data[key]
    value = None
    for name, candidate in data.items():
        if name.lower() == key:
            value = candidate
    return value
