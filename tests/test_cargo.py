"""Tests for cargo invocation."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from bikecase.errors import CargoError, WorkspaceError
from bikecase.services.cargo import cargo_metadata, cargo_program, run_cargo


def _metadata_json(root: Path, resolve_root: str | None = None) -> str:
    package_id = f"hello 0.1.0 (path+file://{root}/hello)"
    return json.dumps(
        {
            "packages": [
                {
                    "id": package_id,
                    "name": "hello",
                    "version": "0.1.0",
                    "manifest_path": f"{root}/hello/Cargo.toml",
                    "targets": [
                        {
                            "name": "hello",
                            "kind": ["bin"],
                            "crate_types": ["bin"],
                            "src_path": f"{root}/hello/src/main.rs",
                        }
                    ],
                }
            ],
            "workspace_members": [package_id],
            "workspace_root": str(root),
            "target_directory": f"{root}/target",
            "resolve": {"root": resolve_root, "nodes": []} if resolve_root else None,
            "version": 1,
        }
    )


@pytest.mark.unit
class TestCargoProgram:
    """Tests for cargo_program."""

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CARGO", raising=False)
        assert cargo_program() == "cargo"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CARGO", "/opt/cargo")
        assert cargo_program() == "/opt/cargo"


@pytest.mark.unit
class TestCargoMetadata:
    """Tests for cargo_metadata."""

    def test_parses_output(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CARGO", raising=False)
        completed = subprocess.CompletedProcess([], 0, stdout=_metadata_json(tmp_path), stderr="")
        with patch("bikecase.services.cargo.subprocess.run", return_value=completed) as run:
            metadata = cargo_metadata(Path("Cargo.toml"), "never", tmp_path)

        command = run.call_args.args[0]
        assert command[:3] == ["cargo", "metadata", "--no-deps"]
        assert "--frozen" in command
        assert command[-2:] == ["--manifest-path", str(tmp_path / "Cargo.toml")]
        assert metadata.workspace_root == tmp_path
        assert metadata.find_package("hello").directory == tmp_path / "hello"

    def test_nonzero_exit(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess([], 101, stdout="", stderr="error: no manifest")
        with (
            patch("bikecase.services.cargo.subprocess.run", return_value=completed),
            pytest.raises(CargoError, match="no manifest"),
        ):
            cargo_metadata(None, "auto", tmp_path)

    def test_cargo_not_found(self, tmp_path: Path) -> None:
        with (
            patch("bikecase.services.cargo.subprocess.run", side_effect=FileNotFoundError),
            pytest.raises(CargoError, match="Command not found"),
        ):
            cargo_metadata(None, "auto", tmp_path)

    def test_timeout(self, tmp_path: Path) -> None:
        error = subprocess.TimeoutExpired(["cargo"], 5)
        with (
            patch("bikecase.services.cargo.subprocess.run", side_effect=error),
            pytest.raises(CargoError, match="timed out"),
        ):
            cargo_metadata(None, "auto", tmp_path)

    def test_invalid_output(self, tmp_path: Path) -> None:
        completed = subprocess.CompletedProcess([], 0, stdout="{}", stderr="")
        with (
            patch("bikecase.services.cargo.subprocess.run", return_value=completed),
            pytest.raises(CargoError, match="could not parse"),
        ):
            cargo_metadata(None, "auto", tmp_path)

    def test_rejects_non_virtual_manifest(self, tmp_path: Path) -> None:
        stdout = _metadata_json(tmp_path, resolve_root="hello 0.1.0")
        completed = subprocess.CompletedProcess([], 0, stdout=stdout, stderr="")
        with (
            patch("bikecase.services.cargo.subprocess.run", return_value=completed),
            pytest.raises(WorkspaceError, match="virtual manifest"),
        ):
            cargo_metadata(None, "auto", tmp_path)


@pytest.mark.unit
class TestRunCargo:
    """Tests for run_cargo."""

    def test_dry_run_does_not_spawn(self) -> None:
        with patch("bikecase.services.cargo.subprocess.run") as run:
            assert run_cargo(["new", "x"], dry_run=True) == 0
        run.assert_not_called()

    def test_returns_exit_status(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CARGO", raising=False)
        completed = subprocess.CompletedProcess([], 3)
        with patch("bikecase.services.cargo.subprocess.run", return_value=completed) as run:
            assert run_cargo(["run"], check=False) == 3
        assert run.call_args.args[0] == ["cargo", "run"]

    def test_check_raises(self) -> None:
        completed = subprocess.CompletedProcess([], 1)
        with (
            patch("bikecase.services.cargo.subprocess.run", return_value=completed),
            pytest.raises(CargoError, match="exited with 1"),
        ):
            run_cargo(["new", "x"])
