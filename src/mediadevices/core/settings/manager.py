"""Settings manager for mediadevices.

This module provides the MediaDevicesSettings dataclass and the
SettingsManager class for persisting and loading it as JSON.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class MediaDevicesSettings:
    """Library settings."""

    log_level: str = "INFO"

    # Backends registered by discovery
    enable_screens: bool = True
    enable_cameras: bool = True
    enable_microphones: bool = True

    # Camera enumeration
    max_camera_index: int = 10  # Maximum device index to check
    max_consecutive_failures: int = 5  # Stop after this many consecutive failures

    # Samples per block returned by a microphone track read
    audio_block_size: int = 1024

    # Driver label -> selection priority
    priority_overrides: Dict[str, float] = field(default_factory=dict)


class SettingsManager:
    """Loads and saves MediaDevicesSettings in the user config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize settings manager.

        Args:
            config_dir: Optional custom config directory. If None, uses platform default.
        """
        if config_dir is None:
            config_dir = self._get_default_config_dir()

        self.config_dir = config_dir
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.settings_file = self.config_dir / "settings.json"

        logger.info(f"Settings manager initialized with config dir: {self.config_dir}")

    def _get_default_config_dir(self) -> Path:
        """Get platform-specific default config directory.

        Returns:
            Path to config directory
        """
        if sys.platform == "darwin":
            base = Path.home() / "Library" / "Application Support"
        elif sys.platform == "win32":
            base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

        return base / "mediadevices"

    def load_settings(self) -> MediaDevicesSettings:
        """Load settings from storage.

        Returns:
            Loaded settings, or defaults if the file doesn't exist

        Raises:
            ValueError: If settings file is corrupted or invalid
        """
        if not self.settings_file.exists():
            logger.info("Settings file not found, using default settings")
            return MediaDevicesSettings()

        try:
            with open(self.settings_file, "r", encoding="utf-8") as f:
                data = json.load(f)

            settings = self._deserialize_settings(data)
            logger.info("Settings loaded successfully")
            return settings

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse settings file: {e}")
            raise ValueError(f"Settings file is corrupted: {e}") from e
        except (TypeError, AttributeError, OSError) as e:
            logger.error(f"Failed to load settings: {e}")
            raise ValueError(f"Failed to load settings: {e}") from e

    def save_settings(self, settings: MediaDevicesSettings) -> None:
        """Save settings to storage.

        Args:
            settings: Settings to save

        Raises:
            IOError: If settings file cannot be written
        """
        try:
            data = self._serialize_settings(settings)

            # Write to temporary file first, then rename (atomic operation)
            temp_file = self.settings_file.with_suffix(".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

            temp_file.replace(self.settings_file)

            logger.info("Settings saved successfully")

        except OSError as e:
            logger.error(f"Failed to save settings: {e}")
            raise IOError(f"Failed to save settings: {e}") from e

    def _serialize_settings(self, settings: MediaDevicesSettings) -> Dict[str, Any]:
        return {
            "log_level": settings.log_level,
            "enable_screens": settings.enable_screens,
            "enable_cameras": settings.enable_cameras,
            "enable_microphones": settings.enable_microphones,
            "max_camera_index": settings.max_camera_index,
            "max_consecutive_failures": settings.max_consecutive_failures,
            "audio_block_size": settings.audio_block_size,
            "priority_overrides": dict(settings.priority_overrides),
        }

    def _deserialize_settings(self, data: Dict[str, Any]) -> MediaDevicesSettings:
        defaults = MediaDevicesSettings()
        return MediaDevicesSettings(
            log_level=data.get("log_level", defaults.log_level),
            enable_screens=data.get("enable_screens", defaults.enable_screens),
            enable_cameras=data.get("enable_cameras", defaults.enable_cameras),
            enable_microphones=data.get("enable_microphones", defaults.enable_microphones),
            max_camera_index=data.get("max_camera_index", defaults.max_camera_index),
            max_consecutive_failures=data.get(
                "max_consecutive_failures", defaults.max_consecutive_failures
            ),
            audio_block_size=data.get("audio_block_size", defaults.audio_block_size),
            priority_overrides={
                str(label): float(priority)
                for label, priority in data.get("priority_overrides", {}).items()
            },
        )
