"""
Tests for the command-line interface.

Runs main() against a temporary Equalizer APO config directory.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from eqplus import __version__
from eqplus.apo.filters import FilterKind
from eqplus.apo.parser import parse
from eqplus.config import DEFAULT_DEVICE_KEY, load_settings
from eqplus.main import main

GUID_A = "{0.0.0.00000000}.{aaaaaaaa-0000-0000-0000-000000000001}"


def run_cli(config_dir: Path, *args: str) -> int:
    return main(["--config-dir", str(config_dir), *args])


def read_bank(config_dir: Path, device: str = DEFAULT_DEVICE_KEY):
    text = (config_dir / "eqplus.txt").read_text(encoding="utf-8")
    return parse(text).get(device)


class TestGlobalOptions:
    """Tests for options that do not touch the config."""

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --version prints the version."""
        assert main(["--version"]) == 0
        assert capsys.readouterr().out.strip() == f"eq+ v{__version__}"

    def test_no_command(self) -> None:
        """Test running without a command is a usage error."""
        assert main([]) == 2

    def test_invalid_config_dir(self, tmp_path: Path) -> None:
        """Test engine errors become exit status 1."""
        assert run_cli(tmp_path, "init") == 1


class TestFilterCommands:
    """Tests for filter and preamp commands."""

    def test_init(self, apo_config_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test init creates eqplus.txt."""
        assert run_cli(apo_config_dir, "init") == 0
        assert (apo_config_dir / "eqplus.txt").exists()
        assert "1" in capsys.readouterr().out

    def test_add(self, apo_config_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test adding a filter with explicit values."""
        code = run_cli(
            apo_config_dir,
            "add",
            "--type",
            "low_shelf",
            "--freq",
            "105",
            "--gain",
            "6.5",
            "--q",
            "0.7",
        )

        assert code == 0
        assert "1" in capsys.readouterr().out
        f = read_bank(apo_config_dir).filters[0]
        assert f.kind is FilterKind.LOW_SHELF
        assert (f.frequency_hz, f.gain_db, f.q) == (105.0, 6.5, 0.7)

    def test_add_defaults_and_off(self, apo_config_dir: Path) -> None:
        """Test defaults are used and --off disables the filter."""
        assert run_cli(apo_config_dir, "add", "--off") == 0

        f = read_bank(apo_config_dir).filters[0]
        assert f.kind is FilterKind.PEAKING
        assert f.frequency_hz == 1000.0
        assert f.enabled is False

    def test_modify(self, apo_config_dir: Path) -> None:
        """Test modifying only the given values."""
        run_cli(apo_config_dir, "add", "--freq", "100", "--gain", "1")
        run_cli(apo_config_dir, "add", "--freq", "200", "--gain", "2")

        assert run_cli(apo_config_dir, "modify", "2", "--gain", "-3", "--off") == 0

        filters = read_bank(apo_config_dir).filters
        assert filters[0].gain_db == 1.0
        assert filters[1].frequency_hz == 200.0
        assert filters[1].gain_db == -3.0
        assert filters[1].enabled is False

    def test_remove(self, apo_config_dir: Path) -> None:
        """Test removing by position."""
        run_cli(apo_config_dir, "add", "--freq", "100")
        run_cli(apo_config_dir, "add", "--freq", "200")

        assert run_cli(apo_config_dir, "remove", "1") == 0
        assert [f.frequency_hz for f in read_bank(apo_config_dir).filters] == [200.0]

    def test_bad_position(self, apo_config_dir: Path) -> None:
        """Test a position outside the chain fails."""
        assert run_cli(apo_config_dir, "remove", "1") == 1
        assert run_cli(apo_config_dir, "modify", "0", "--gain", "1") == 1

    def test_preamp(self, apo_config_dir: Path) -> None:
        """Test setting the preamp."""
        assert run_cli(apo_config_dir, "preamp", "-3.0") == 0
        assert (apo_config_dir / "eqplus.txt").read_text(encoding="utf-8") == (
            "Preamp: -3.0dB\n"
        )

    def test_invalid_value(self, apo_config_dir: Path) -> None:
        """Test values the dialect cannot hold are rejected."""
        assert run_cli(apo_config_dir, "add", "--freq", "-5") == 1
        assert run_cli(apo_config_dir, "preamp", "nan") == 1


class TestDeviceCommands:
    """Tests for device bank commands."""

    def test_device_lifecycle(
        self, apo_config_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test filling, re-adding and removing a device bank."""
        assert run_cli(apo_config_dir, "add-device", GUID_A) == 0
        assert "saved once it has a preamp or a filter" in capsys.readouterr().out
        # Still empty, so nothing is written for it
        assert read_bank(apo_config_dir, GUID_A) is None

        assert run_cli(apo_config_dir, "preamp", "-2", "--device", GUID_A) == 0
        assert read_bank(apo_config_dir, GUID_A).preamp_db == -2.0

        assert run_cli(apo_config_dir, "add-device", GUID_A) == 1

        assert run_cli(apo_config_dir, "remove-device", GUID_A) == 0
        assert read_bank(apo_config_dir, GUID_A) is None

    def test_add_creates_device(self, apo_config_dir: Path) -> None:
        """Test adding a filter to a new device creates its section."""
        assert run_cli(apo_config_dir, "add", "--device", GUID_A, "--freq", "80") == 0
        assert read_bank(apo_config_dir, GUID_A).filters[0].frequency_hz == 80.0

    def test_unknown_device(self, apo_config_dir: Path) -> None:
        """Test edits of a device without a bank fail."""
        assert run_cli(apo_config_dir, "remove-device", GUID_A) == 1
        assert run_cli(apo_config_dir, "modify", "1", "--device", GUID_A) == 1
        assert run_cli(apo_config_dir, "add", "--device", "ALL") == 1


class TestShow:
    """Tests for the show command."""

    def test_text(self, apo_config_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the human-readable summary."""
        run_cli(apo_config_dir, "add", "--freq", "2500", "--gain", "3")
        capsys.readouterr()

        assert run_cli(apo_config_dir, "show") == 0
        out = capsys.readouterr().out
        assert "+0.0 dB" in out
        assert "1. [ON] peaking 2.5 kHz +3.0 dB" in out

    def test_json(self, apo_config_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Test the JSON output."""
        run_cli(apo_config_dir, "preamp", "-1")
        capsys.readouterr()

        assert run_cli(apo_config_dir, "show", "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data[DEFAULT_DEVICE_KEY]["eq"]["preamp"] == -1.0


class TestSetConfigDir:
    """Tests for saving the config directory."""

    def test_saves_setting(self, apo_config_dir: Path, tmp_path: Path) -> None:
        """Test a valid directory is stored and used afterwards."""
        settings_file = tmp_path / "settings.json"

        with patch("eqplus.config.SETTINGS_FILE", settings_file):
            assert main(["set-config-dir", str(apo_config_dir)]) == 0
            assert load_settings().config_dir == str(apo_config_dir)

            assert main(["preamp", "-5"]) == 0

        assert read_bank(apo_config_dir).preamp_db == -5.0

    def test_rejects_invalid(self, tmp_path: Path) -> None:
        """Test an invalid directory is not stored."""
        settings_file = tmp_path / "settings.json"

        with patch("eqplus.config.SETTINGS_FILE", settings_file):
            assert main(["set-config-dir", str(tmp_path / "nope")]) == 1

        assert not settings_file.exists()
