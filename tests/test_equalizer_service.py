"""
Tests for equalizer_service module.

Tests the command layer: every mutation updates the mapping and the
config file on disk.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import pytest

from eqplus.apo.errors import BadArgumentError, InvalidConfigDirectoryError
from eqplus.apo.filters import FilterKind, FilterParams
from eqplus.apo.parser import parse
from eqplus.config import DEFAULT_DEVICE_KEY, INCLUDE_LINE
from eqplus.services.config_persistence import ConfigPersistence
from eqplus.services.equalizer_service import DeviceInfo, EqualizerService

GUID_A = "{0.0.0.00000000}.{aaaaaaaa-0000-0000-0000-000000000001}"
GUID_B = "{0.0.0.00000000}.{bbbbbbbb-0000-0000-0000-000000000002}"


@pytest.fixture
def service(apo_config_dir: Path) -> EqualizerService:
    """Initialized service on a temporary config directory."""
    svc = EqualizerService(ConfigPersistence(apo_config_dir))
    svc.initialize()
    return svc


def read_eqplus(config_dir: Path) -> str:
    return (config_dir / "eqplus.txt").read_text(encoding="utf-8")


class TestDeviceInfo:
    """Tests for DeviceInfo dataclass."""

    def test_display_name(self) -> None:
        """Test parentheses are dropped and the GUID appended."""
        device = DeviceInfo(guid=GUID_A, name="Speakers (Realtek(R) Audio)")

        assert device.display_name == f"Speakers RealtekR Audio {GUID_A}"

    def test_display_name_default(self) -> None:
        """Test the default pseudo-device shows just its name."""
        assert DeviceInfo(guid="", name=DEFAULT_DEVICE_KEY).display_name == "all"

    def test_default_apo_flag(self) -> None:
        """Test devices default to not having APO installed."""
        assert DeviceInfo(guid=GUID_A, name="Headphones").apo_installed is False


class TestInitialize:
    """Tests for service initialization."""

    def test_invalid_dir(self, tmp_path: Path) -> None:
        """Test a directory without config.txt fails."""
        svc = EqualizerService(ConfigPersistence(tmp_path))

        with pytest.raises(InvalidConfigDirectoryError):
            svc.initialize()
        assert not (tmp_path / "eqplus.txt").exists()

    def test_creates_config_and_include(self, apo_config_dir: Path) -> None:
        """Test first start writes eqplus.txt and the include line."""
        svc = EqualizerService(ConfigPersistence(apo_config_dir))

        state = svc.initialize()

        assert state.device_keys() == [DEFAULT_DEVICE_KEY]
        assert read_eqplus(apo_config_dir) == "Preamp: 0.0dB\n"
        config_txt = (apo_config_dir / "config.txt").read_text(encoding="utf-8")
        assert config_txt.count(INCLUDE_LINE) == 1

    def test_include_added_once(self, apo_config_dir: Path) -> None:
        """Test repeated starts do not duplicate the include line."""
        for _ in range(3):
            EqualizerService(ConfigPersistence(apo_config_dir)).initialize()

        config_txt = (apo_config_dir / "config.txt").read_text(encoding="utf-8")
        assert config_txt.count(INCLUDE_LINE) == 1

    def test_loads_existing(self, apo_config_dir: Path, single_device_text: str) -> None:
        """Test an existing eqplus.txt is loaded."""
        (apo_config_dir / "eqplus.txt").write_text(single_device_text, encoding="utf-8")
        svc = EqualizerService(ConfigPersistence(apo_config_dir))

        state = svc.initialize()

        assert state.get(DEFAULT_DEVICE_KEY).preamp_db == -3.0


class TestCommands:
    """Tests for mutating commands."""

    def test_state_is_snapshot(self, service: EqualizerService) -> None:
        """Test changing a returned state does not touch the service."""
        state = service.get_state()
        state.set_preamp(DEFAULT_DEVICE_KEY, 9.0)

        assert service.get_state().get(DEFAULT_DEVICE_KEY).preamp_db == 0.0

    def test_add_filter_writes_file(
        self, service: EqualizerService, apo_config_dir: Path
    ) -> None:
        """Test adding a filter is written to disk."""
        f = FilterParams.create(frequency_hz=1000.0, gain_db=2.5, q=1.0)
        service.add_filter(DEFAULT_DEVICE_KEY, f)

        assert read_eqplus(apo_config_dir) == (
            "Preamp: 0.0dB\nFilter: 1 ON PK Fc 1000 Hz Gain 2.5 dB Q 1.0\n"
        )

    def test_modify_filter(self, service: EqualizerService, apo_config_dir: Path) -> None:
        """Test modifying keeps position and is written to disk."""
        a = FilterParams.create(frequency_hz=100.0)
        b = FilterParams.create(frequency_hz=200.0)
        service.add_filter(DEFAULT_DEVICE_KEY, a)
        service.add_filter(DEFAULT_DEVICE_KEY, b)

        service.modify_filter(
            DEFAULT_DEVICE_KEY, a.with_values(kind=FilterKind.NOTCH, enabled=False)
        )

        bank = parse(read_eqplus(apo_config_dir)).get(DEFAULT_DEVICE_KEY)
        assert [f.kind for f in bank.filters] == [FilterKind.NOTCH, FilterKind.PEAKING]
        assert bank.filters[0].enabled is False

    def test_remove_filter(self, service: EqualizerService, apo_config_dir: Path) -> None:
        """Test removing a filter is written to disk."""
        f = FilterParams.create()
        service.add_filter(DEFAULT_DEVICE_KEY, f)
        service.remove_filter(DEFAULT_DEVICE_KEY, f.id)

        assert service.get_state().get(DEFAULT_DEVICE_KEY).filters == []
        assert "Filter" not in read_eqplus(apo_config_dir)

    def test_modify_preamp(self, service: EqualizerService, apo_config_dir: Path) -> None:
        """Test preamp changes are written to disk."""
        service.modify_preamp(DEFAULT_DEVICE_KEY, -4.5)

        assert read_eqplus(apo_config_dir) == "Preamp: -4.5dB\n"

    def test_device_lifecycle(
        self, service: EqualizerService, apo_config_dir: Path
    ) -> None:
        """Test creating, filling and removing a device bank."""
        service.create_device(GUID_A)
        assert read_eqplus(apo_config_dir) == "Preamp: 0.0dB\n"

        service.modify_preamp(GUID_A, -2.0)
        assert f"Device: {GUID_A}" in read_eqplus(apo_config_dir)

        service.remove_device(GUID_A)
        assert GUID_A not in service.get_state()
        assert read_eqplus(apo_config_dir) == "Preamp: 0.0dB\n"

    def test_unknown_device(self, service: EqualizerService, apo_config_dir: Path) -> None:
        """Test commands on a missing device fail and write nothing."""
        before = read_eqplus(apo_config_dir)

        with pytest.raises(BadArgumentError):
            service.modify_preamp(GUID_B, 1.0)
        with pytest.raises(BadArgumentError):
            service.add_filter(GUID_B, FilterParams.create())

        assert read_eqplus(apo_config_dir) == before
        assert GUID_B not in service.get_state()

    def test_get_state_dict(self, service: EqualizerService) -> None:
        """Test the dictionary form of the state."""
        service.modify_preamp(DEFAULT_DEVICE_KEY, -1.0)

        data = service.get_state_dict()

        assert data[DEFAULT_DEVICE_KEY]["eq"]["preamp"] == -1.0

    def test_concurrent_commands(
        self, service: EqualizerService, apo_config_dir: Path
    ) -> None:
        """Test concurrent adds all land in memory and the file ends consistent."""
        filters = [FilterParams.create(frequency_hz=100.0 + i) for i in range(20)]
        threads = [
            threading.Thread(target=service.add_filter, args=(DEFAULT_DEVICE_KEY, f))
            for f in filters
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(service.get_state().get(DEFAULT_DEVICE_KEY).filters) == 20
        on_disk = parse(read_eqplus(apo_config_dir)).get(DEFAULT_DEVICE_KEY)
        assert len(on_disk.filters) == 20


class TestOrphanedDevices:
    """Tests for orphaned device detection."""

    def test_reports_and_keeps(
        self,
        service: EqualizerService,
        apo_config_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test orphans are reported with a warning but stay in the file."""
        service.create_device(GUID_A)
        service.modify_preamp(GUID_A, -1.0)
        service.create_device(GUID_B)
        service.modify_preamp(GUID_B, -2.0)

        with caplog.at_level(logging.WARNING):
            orphaned = service.orphaned_devices([DeviceInfo(guid=GUID_A, name="Speakers")])

        assert orphaned == [GUID_B]
        assert GUID_B in caplog.text
        assert f"Device: {GUID_B}" in read_eqplus(apo_config_dir)
