"""
Pytest configuration for eqplus tests.

Provides fixtures and configuration for all test modules.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def apo_config_dir(tmp_path: Path) -> Path:
    """Provide a temporary Equalizer APO config directory with config.txt."""
    config_dir = tmp_path / "EqualizerAPO" / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.txt").write_text("Preamp: -6 dB\n", encoding="utf-8")
    return config_dir


@pytest.fixture
def single_device_text() -> str:
    """Config text for the common single-device case."""
    return "Preamp: -3.0dB\nFilter: 1 ON PK Fc 1000 Hz Gain 2.5 dB Q 1.0\n"
