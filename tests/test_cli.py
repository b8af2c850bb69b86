"""Tests for the verbump CLI (``check`` and ``update`` commands).

The registry is replaced by an in-memory fetcher patched onto
:class:`NpmRegistryClient`, so no network access happens.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Generator
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from verbump.cli import cli, main
from verbump.exceptions import RegistryError
from verbump.core.registry import NpmRegistryClient


def packument(latest: str, *versions: str) -> Dict[str, Any]:
    return {
        "dist-tags": {"latest": latest},
        "versions": {v: {} for v in versions},
        "time": {v: "2024-01-01T00:00:00Z" for v in versions},
    }


REGISTRY = {
    "react": packument("18.2.0", "17.0.2", "17.1.0", "18.2.0"),
    "lodash": packument("4.17.21", "4.17.20", "4.17.21"),
    "typescript": packument("5.3.3", "5.3.2", "5.3.3"),
    "beta-pkg": packument("1.9.0", "1.8.0", "1.9.0"),
}

MANIFEST = """{
  "name": "demo",
  "dependencies": {
    "react": "^17.0.2",
    "my-lodash": "npm:lodash@~4.17.20"
  },
  "devDependencies": {
    "typescript": "5.3.3",
    "local": "file:../local"
  }
}
"""


async def fake_registry(self: NpmRegistryClient, name: str) -> Dict[str, Any]:
    if name not in REGISTRY:
        raise RegistryError(f"Package '{name}' not found on registry", package_name=name)
    return REGISTRY[name]


@pytest.fixture(autouse=True)
def offline_registry(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Serve packuments from REGISTRY and reset global CLI side effects."""
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("VERBUMP_CONFIG", raising=False)
    root = logging.getLogger("verbump")
    handlers, level = root.handlers[:], root.level
    with patch.object(NpmRegistryClient, "__call__", fake_registry):
        yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = True


@pytest.fixture
def manifest(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "package.json"
    path.write_text(MANIFEST, encoding="utf-8")
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.mark.unit
class TestCheckCommand:
    """Tests for ``verbump check``."""

    def test_json_output(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["--no-color", "check", "--format", "json"])

        assert result.exit_code == 1
        data = {entry["name"]: entry for entry in json.loads(result.stdout)}

        assert data["react"]["status"] == "upgrade"
        assert [u["new_version"] for u in data["react"]["upgrades"]] == [
            "^18.2.0",
            "^17.1.0",
        ]
        assert data["my-lodash"]["upgrades"] == [
            {"type": "latest", "target": "4.17.21", "new_version": "npm:lodash@~4.17.21"}
        ]
        assert data["typescript"]["status"] == "up-to-date"
        assert data["local"]["status"] == "unsupported"

    def test_outdated_only(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(
            cli, ["--no-color", "check", "--outdated-only", "--format", "json"]
        )

        names = [entry["name"] for entry in json.loads(result.stdout)]
        assert names == ["react", "my-lodash"]

    def test_simple_output(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["--no-color", "check", "--format", "simple"])

        assert "[upgrade] react" in result.stdout
        assert "latest 18.2.0 (^18.2.0)" in result.stdout
        assert "[unsupported] local" in result.stdout

    def test_table_output(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["--no-color", "check"])

        assert result.exit_code == 1
        assert "Dependency Upgrades" in result.stdout
        assert "have upgrades available" in result.stdout

    def test_up_to_date_exits_zero(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "package.json").write_text(
            '{"dependencies": {"typescript": "^5.3.3"}}', encoding="utf-8"
        )

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0
        assert "up to date" in result.stdout

    def test_missing_package_reported_as_error(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "package.json").write_text(
            '{"dependencies": {"left-padz": "1.0.0"}}', encoding="utf-8"
        )

        result = runner.invoke(cli, ["check", "--format", "json"])

        (entry,) = json.loads(result.stdout)
        assert result.exit_code == 0
        assert entry["status"] == "error"
        assert "left-padz" in entry["error"]

    def test_invalid_manifest(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "package.json").write_text("{not json", encoding="utf-8")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout

    def test_config_limits_sections(
        self, runner: CliRunner, manifest: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "verbump.toml").write_text(
            '[verbump]\ndependency_types = ["devDependencies"]\n', encoding="utf-8"
        )

        result = runner.invoke(cli, ["check", "--format", "json"])

        names = [entry["name"] for entry in json.loads(result.stdout)]
        assert names == ["typescript", "local"]
        assert result.exit_code == 0

    def test_invalid_config(self, runner: CliRunner, manifest: Path, tmp_path: Path) -> None:
        (tmp_path / "verbump.toml").write_text("[verbump]\nfoo = 1\n", encoding="utf-8")

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.stdout


@pytest.mark.unit
class TestUpdateCommand:
    """Tests for ``verbump update``."""

    def test_dry_run_leaves_file(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "--dry-run"])

        assert result.exit_code == 0
        assert "Dry run" in result.stdout
        assert manifest.read_text(encoding="utf-8") == MANIFEST

    def test_latest_with_yes(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "-y"])

        assert result.exit_code == 0
        document = json.loads(manifest.read_text(encoding="utf-8"))
        assert document["dependencies"] == {
            "react": "^18.2.0",
            "my-lodash": "npm:lodash@~4.17.21",
        }
        assert document["devDependencies"]["local"] == "file:../local"

    def test_minor_tier(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "--tier", "minor", "-y"])

        assert result.exit_code == 0
        document = json.loads(manifest.read_text(encoding="utf-8"))
        assert document["dependencies"]["react"] == "^17.1.0"
        assert document["dependencies"]["my-lodash"] == "npm:lodash@~4.17.20"

    def test_patch_tier_falls_back_to_latest(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "--tier", "patch", "-y"])

        assert result.exit_code == 0
        document = json.loads(manifest.read_text(encoding="utf-8"))
        assert document["dependencies"]["my-lodash"] == "npm:lodash@~4.17.21"
        assert document["dependencies"]["react"] == "^17.0.2"

    def test_package_filter(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "-p", "react", "-p", "ghost", "-y"])

        assert result.exit_code == 0
        assert "Package not found in manifest: ghost" in result.stdout
        document = json.loads(manifest.read_text(encoding="utf-8"))
        assert document["dependencies"]["react"] == "^18.2.0"
        assert document["dependencies"]["my-lodash"] == "npm:lodash@~4.17.20"

    def test_confirmation_declined(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update"], input="n\n")

        assert "Update cancelled" in result.stdout
        assert manifest.read_text(encoding="utf-8") == MANIFEST

    def test_backup(self, runner: CliRunner, manifest: Path, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["update", "-y", "--backup"])

        assert result.exit_code == 0
        backups = list(tmp_path.glob("package.*.backup.json"))
        assert len(backups) == 1
        assert backups[0].read_text(encoding="utf-8") == MANIFEST

    def test_nothing_to_do(self, runner: CliRunner, manifest: Path) -> None:
        result = runner.invoke(cli, ["update", "--tier", "prerelease"])

        assert result.exit_code == 0
        assert "No prerelease upgrades available" in result.stdout

    def test_downgrade_skipped_by_default(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "package.json"
        text = '{"dependencies": {"beta-pkg": "^2.0.0-beta.1", "react": "^17.0.2"}}'
        path.write_text(text, encoding="utf-8")

        result = runner.invoke(cli, ["update", "-y"])

        assert result.exit_code == 0
        assert "Skipping beta-pkg: 1.9.0 is older than 2.0.0-beta.1" in result.stdout
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["dependencies"] == {
            "beta-pkg": "^2.0.0-beta.1",
            "react": "^18.2.0",
        }

    def test_allow_downgrade(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "package.json"
        path.write_text('{"dependencies": {"beta-pkg": "^2.0.0-beta.1"}}', encoding="utf-8")

        result = runner.invoke(cli, ["update", "-y", "--allow-downgrade"])

        assert result.exit_code == 0
        assert "Skipping" not in result.stdout
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "dependencies": {"beta-pkg": "^1.9.0"}
        }

    def test_only_downgrades_is_nothing_to_do(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "package.json"
        text = '{"dependencies": {"beta-pkg": "^2.0.0-beta.1"}}'
        path.write_text(text, encoding="utf-8")

        result = runner.invoke(cli, ["update", "-y"])

        assert "No latest upgrades available" in result.stdout
        assert path.read_text(encoding="utf-8") == text

    def test_layout_and_line_endings_kept(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "package.json"
        original = (
            b'{\r\n  "files": ["dist", "lib"],\r\n  "author": "Ren\\u00e9",\r\n'
            b'  "dependencies": {\r\n    "react": "^17.0.2"\r\n  }\r\n}\r\n'
        )
        path.write_bytes(original)

        result = runner.invoke(cli, ["update", "-y"])

        assert result.exit_code == 0
        assert path.read_bytes() == original.replace(b"^17.0.2", b"^18.2.0")


@pytest.mark.unit
class TestMain:
    """Tests for verbump.cli.main exit code mapping."""

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        with patch("sys.argv", ["verbump", "--version"]):
            assert main() == 0

        assert "verbump" in capsys.readouterr().out

    def test_usage_error(self) -> None:
        with patch("sys.argv", ["verbump", "no-such-command"]):
            assert main() == 2

    def test_check_exit_code(self, manifest: Path) -> None:
        with patch("sys.argv", ["verbump", "check", "--format", "json"]):
            assert main() == 1

    def test_keyboard_interrupt(self) -> None:
        with patch("verbump.cli.cli", side_effect=KeyboardInterrupt):
            assert main() == 130
