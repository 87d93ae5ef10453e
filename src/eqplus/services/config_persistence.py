#!/usr/bin/env python3
"""
Configuration persistence service.

Owns the Equalizer APO config directory: checks that it is valid, reads
and writes the eqplus companion file, and makes sure Equalizer APO's
main config.txt includes it. The engine itself never touches the disk.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from eqplus.apo.errors import EqPlusError, ErrorType, InvalidConfigDirectoryError
from eqplus.apo.mapping import DeviceFilterMapping
from eqplus.apo.parser import parse
from eqplus.apo.serializer import serialize
from eqplus.config import (
    APO_CONFIG_FILE,
    DEFAULT_APO_CONFIG_DIR,
    EQPLUS_CONFIG_FILE,
    INCLUDE_LINE,
)

logger = logging.getLogger(__name__)


class ConfigPersistence:
    """
    Reads and writes eqplus.txt inside an Equalizer APO config directory.

    All I/O failures are raised as EqPlusError with GENERIC_IO_ERROR.
    """

    def __init__(self, config_dir: Path | None = None) -> None:
        """
        Initialize the persistence service.

        Args:
            config_dir: Equalizer APO config directory.
                Defaults to the standard install location.
        """
        self._config_dir = Path(config_dir) if config_dir else DEFAULT_APO_CONFIG_DIR
        self._config_file = self._config_dir / EQPLUS_CONFIG_FILE
        self._apo_config_file = self._config_dir / APO_CONFIG_FILE

    @property
    def config_dir(self) -> Path:
        """Get the Equalizer APO config directory."""
        return self._config_dir

    @property
    def config_path(self) -> Path:
        """Get the full path to the eqplus config file."""
        return self._config_file

    @property
    def apo_config_path(self) -> Path:
        """Get the full path to Equalizer APO's config.txt."""
        return self._apo_config_file

    def config_exists(self) -> bool:
        """Check if the eqplus config file exists."""
        return self._config_file.exists()

    def check_config_dir(self) -> Path:
        """
        Check that the directory is an Equalizer APO config directory.

        Returns:
            Path to the config directory

        Raises:
            InvalidConfigDirectoryError: If the directory or config.txt is missing
        """
        logger.info("Checking config dir %s", self._config_dir)
        if not self._config_dir.is_dir() or not self._apo_config_file.exists():
            logger.warning("Invalid config directory: %s", self._config_dir)
            raise InvalidConfigDirectoryError(
                f"{self._config_dir} is not a valid EqualizerAPO config directory"
            )
        return self._config_dir

    def ensure_include_line(self) -> bool:
        """
        Make config.txt include the eqplus config file.

        Returns:
            True if the include line was added, False if it was already there
        """
        content = self._read(self._apo_config_file)
        if any(line.strip() == INCLUDE_LINE for line in content.splitlines()):
            logger.debug("Include line already present in %s", self._apo_config_file)
            return False

        separator = "" if not content or content.endswith("\n") else "\n"
        self._write(self._apo_config_file, f"{content}{separator}{INCLUDE_LINE}\n")
        logger.info("Added '%s' to %s", INCLUDE_LINE, self._apo_config_file)
        return True

    def load(self) -> DeviceFilterMapping:
        """
        Load the mapping, creating a default config file if none exists.

        Returns:
            Parsed or default mapping
        """
        if self.config_exists():
            mapping = parse(self._read(self._config_file))
            logger.info("%s loaded successfully", EQPLUS_CONFIG_FILE)
            return mapping

        mapping = DeviceFilterMapping.default()
        self.save(mapping)
        logger.info("%s initialized with defaults", EQPLUS_CONFIG_FILE)
        return mapping

    def save(self, mapping: DeviceFilterMapping) -> Path:
        """
        Serialize and save the mapping.

        Returns:
            Path to the saved config file
        """
        return self.write_text(serialize(mapping))

    def write_text(self, content: str) -> Path:
        """
        Replace the config file with already serialized content.

        Returns:
            Path to the saved config file
        """
        self._write(self._config_file, content)
        logger.debug("Config saved to: %s", self._config_file)
        return self._config_file

    def delete(self) -> bool:
        """
        Remove the eqplus config file.

        Returns:
            True if file was deleted, False if it didn't exist
        """
        if not self._config_file.exists():
            return False
        try:
            self._config_file.unlink()
        except OSError as e:
            raise EqPlusError(str(e), ErrorType.GENERIC_IO_ERROR) from e
        logger.info("Config deleted: %s", self._config_file)
        return True

    @staticmethod
    def _read(path: Path) -> str:
        try:
            # utf-8-sig drops the BOM Notepad puts in front of hand-edited files
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise EqPlusError(str(e), ErrorType.GENERIC_IO_ERROR) from e

    @staticmethod
    def _write(path: Path, content: str) -> None:
        # Write atomically
        tmp_file = path.with_suffix(".tmp")
        try:
            with open(tmp_file, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            shutil.move(str(tmp_file), str(path))
        except OSError as e:
            tmp_file.unlink(missing_ok=True)
            raise EqPlusError(str(e), ErrorType.GENERIC_IO_ERROR) from e
