"""Tests for the regcheck command line."""

import hashlib
import json
import tempfile
from pathlib import Path

import yaml
from click.testing import CliRunner

from regcheck.cli import main


def _manifest(history: list[dict], layers: int) -> bytes:
    return json.dumps(
        {
            "schemaVersion": 1,
            "fsLayers": [{"blobSum": f"sha256:{i:064x}"} for i in range(layers)],
            "history": [{"v1Compatibility": json.dumps(h)} for h in history],
        }
    ).encode()


def _build_registry(root: Path) -> None:
    """Create a filesystem registry with one clean and one broken repository."""
    v2 = root / "docker" / "registry" / "v2"
    tags = {
        ("library/good", "latest"): _manifest([{"id": "b", "parent": "a"}, {"id": "a"}], 2),
        ("library/bad", "1.0"): _manifest([{"id": "a"}, {"id": "b", "parent": "a"}], 3),
    }
    for (repo, tag), content in tags.items():
        digest = hashlib.sha256(content).hexdigest()
        blob = v2 / "blobs" / "sha256" / digest[:2] / digest / "data"
        blob.parent.mkdir(parents=True, exist_ok=True)
        blob.write_bytes(content)
        link = v2 / "repositories" / repo / "_manifests" / "tags" / tag / "current" / "link"
        link.parent.mkdir(parents=True)
        link.write_text(f"sha256:{digest}")


def _write_config(tmpdir: str, root: Path) -> str:
    path = Path(tmpdir) / "config.yml"
    with open(path, "w") as f:
        yaml.dump({"version": "0.1", "storage": {"filesystem": {"rootdirectory": str(root)}}}, f)
    return str(path)


def test_missing_config_prints_usage_and_exits_cleanly():
    result = CliRunner().invoke(main, [])
    assert result.exit_code == 0
    assert "must supply a config file with -config" in result.output
    assert "Usage:" in result.output


def test_scan_reports_findings():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "registry"
        _build_registry(root)
        config = _write_config(tmpdir, root)

        result = CliRunner().invoke(main, ["-config", config])

        assert result.exit_code == 0, result.output
        assert "library/bad: mismatched layers and history" in result.output
        assert "library/bad: parent not below in manifest (parent ID a)" in result.output
        assert "library/good:" not in result.output
        assert "checked 2 repositories (0 failed), 2 manifests, 2 findings" in result.output


def test_repos_file_limits_scan():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir) / "registry"
        _build_registry(root)
        config = _write_config(tmpdir, root)
        repos = Path(tmpdir) / "repos.txt"
        repos.write_text("+library/good\n\nmissing/repo\n")

        result = CliRunner().invoke(main, ["--config", config, "-repos", str(repos), "-q"])

        assert result.exit_code == 0, result.output
        assert "library/bad" not in result.output
        assert "missing/repo: unexpected error getting repository" in result.output
        assert "checking repo" not in result.output


def test_bad_config_exits_nonzero():
    result = CliRunner().invoke(main, ["-config", "/nonexistent/config.yml"])
    assert result.exit_code == 1
    assert "error: error opening config file" in result.output


def test_unknown_driver_exits_nonzero():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yml"
        path.write_text("version: 0.1\nstorage:\n  azure:\n    accountname: x\n")
        result = CliRunner().invoke(main, ["-config", str(path)])
        assert result.exit_code == 1
        assert "storage driver not registered: azure" in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
