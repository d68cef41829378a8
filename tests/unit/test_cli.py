"""
Unit tests for the CLI entry point.

This module tests the ``check`` and ``export`` commands through typer's runner.
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from postmeta import __version__
from postmeta.cli import app

runner = CliRunner()

QUIET = ["--log-level", "ERROR"]


@pytest.fixture
def valid_dir(write_post, content_dir: Path, example_post: str) -> Path:
    write_post("a.md", example_post)
    write_post("posts/b.md", example_post.replace("Example Post", "Second Post"))
    return content_dir


@pytest.fixture
def broken_dir(valid_dir: Path, write_post) -> Path:
    write_post("broken.md", "---\ntitle: Broken\n")
    write_post("no-title.md", "---\ndate: 2020-01-01\n---\n")
    return valid_dir


class TestVersion:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"postmeta v{__version__}" in result.stdout


class TestCheck:
    """Tests for the check command."""

    def test_valid_tree(self, valid_dir: Path):
        result = runner.invoke(app, ["check", str(valid_dir), "--json", *QUIET])
        assert result.exit_code == 0
        report = json.loads(result.stdout)
        assert report["summary"] == {"total": 2, "valid": 2, "failed": 0}

    def test_broken_tree(self, broken_dir: Path):
        result = runner.invoke(app, ["check", str(broken_dir), "--json", *QUIET])
        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert report["summary"] == {"total": 4, "valid": 2, "failed": 2}
        errors = {r["path"]: r["error"]["type"] for r in report["results"] if not r["ok"]}
        assert errors == {
            "broken.md": "MalformedMetadataError",
            "no-title.md": "ValidationError",
        }

    def test_table_output(self, broken_dir: Path):
        result = runner.invoke(app, ["check", str(broken_dir), *QUIET])
        assert result.exit_code == 1
        assert "broken.md" in result.stdout
        assert "4 documents, 2 valid, 2 failed" in result.stdout

    def test_sequential(self, broken_dir: Path):
        result = runner.invoke(
            app, ["check", str(broken_dir), "--json", "--sequential", *QUIET]
        )
        assert result.exit_code == 1
        assert json.loads(result.stdout)["summary"]["failed"] == 2

    def test_missing_root(self, tmp_path: Path):
        result = runner.invoke(app, ["check", str(tmp_path / "missing"), *QUIET])
        assert result.exit_code == 3

    def test_missing_config_file(self, valid_dir: Path, tmp_path: Path):
        result = runner.invoke(
            app,
            ["check", str(valid_dir), "--config", str(tmp_path / "nope.toml"), *QUIET],
        )
        assert result.exit_code == 2

    def test_invalid_log_level(self, valid_dir: Path):
        result = runner.invoke(app, ["check", str(valid_dir), "--log-level", "LOUD"])
        assert result.exit_code == 2

    def test_root_from_config(self, valid_dir: Path, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("POSTMETA_CONTENT_ROOT", raising=False)
        config = tmp_path / "postmeta.toml"
        config.write_text(
            f'[content]\nroot = "{valid_dir.as_posix()}"\nexclude = ["posts/*"]\n'
        )
        result = runner.invoke(app, ["check", "--config", str(config), "--json", *QUIET])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["total"] == 1


class TestExport:
    """Tests for the export command."""

    def test_exports_valid_documents(self, broken_dir: Path):
        result = runner.invoke(app, ["export", str(broken_dir), *QUIET])
        assert result.exit_code == 0
        documents = json.loads(result.stdout)
        assert [d["title"] for d in documents] == ["Example Post", "Second Post"]
        assert documents[0]["date"] == "2020-12-04"
        assert documents[0]["tags"] == ["fsharp", "tooling"]
        assert documents[1]["path"] == "posts/b.md"

    def test_strict(self, broken_dir: Path):
        result = runner.invoke(app, ["export", str(broken_dir), "--strict", *QUIET])
        assert result.exit_code == 1
