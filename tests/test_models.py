"""Tests for schema 1 manifest parsing."""

import json

import pytest

from regcheck.errors import ManifestInvalidError
from regcheck.models.manifest import FSLayer, HistoryEntry, Manifest, parse_manifest


def _raw_manifest(**overrides) -> dict:
    data = {
        "schemaVersion": 1,
        "name": "library/app",
        "tag": "1.0",
        "architecture": "amd64",
        "fsLayers": [{"blobSum": "sha256:aa"}, {"blobSum": "sha256:bb"}],
        "history": [
            {"v1Compatibility": '{"id": "child", "parent": "root"}'},
            {"v1Compatibility": '{"id": "root"}'},
        ],
        "signatures": [{"header": {}, "signature": "x", "protected": "y"}],
    }
    data.update(overrides)
    return data


def test_parse_from_json_text():
    manifest = parse_manifest(json.dumps(_raw_manifest()))
    assert manifest.name == "library/app"
    assert manifest.tag == "1.0"
    assert manifest.architecture == "amd64"
    assert manifest.fs_layers == [FSLayer("sha256:aa"), FSLayer("sha256:bb")]
    assert manifest.history[1] == HistoryEntry('{"id": "root"}')


def test_parse_from_bytes_and_dict_agree():
    raw = _raw_manifest()
    assert parse_manifest(json.dumps(raw).encode()) == parse_manifest(raw)


def test_missing_lists_parse_empty():
    raw = _raw_manifest()
    del raw["fsLayers"]
    raw["history"] = None
    manifest = parse_manifest(raw)
    assert manifest.fs_layers == []
    assert manifest.history == []


def test_rejects_invalid_json():
    with pytest.raises(ManifestInvalidError, match="not valid JSON"):
        parse_manifest("{{{")


def test_rejects_non_object():
    with pytest.raises(ManifestInvalidError):
        parse_manifest("[]")


def test_rejects_schema_2():
    with pytest.raises(ManifestInvalidError, match="schema version"):
        parse_manifest(_raw_manifest(schemaVersion=2))


def test_rejects_malformed_entries():
    with pytest.raises(ManifestInvalidError, match="history\\[0\\]"):
        parse_manifest(_raw_manifest(history=[{"v1Compatibility": 5}]))
    with pytest.raises(ManifestInvalidError, match="fsLayers\\[1\\]"):
        parse_manifest(_raw_manifest(fsLayers=[{"blobSum": "a"}, "b"]))
    with pytest.raises(ManifestInvalidError):
        parse_manifest(_raw_manifest(history={"v1Compatibility": "{}"}))


def test_default_manifest_is_empty():
    manifest = Manifest()
    assert manifest.schema_version == 1
    assert manifest.fs_layers == []


def test_rejects_deeply_nested_document():
    with pytest.raises(ManifestInvalidError, match="not valid JSON"):
        parse_manifest("[" * 100_000 + "]" * 100_000)
