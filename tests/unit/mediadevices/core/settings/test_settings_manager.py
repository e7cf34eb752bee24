"""Unit tests for SettingsManager."""

import json
import tempfile
from pathlib import Path

import pytest

from mediadevices.core.settings import MediaDevicesSettings, SettingsManager


class TestSettingsManager:
    """Test suite for SettingsManager."""

    @pytest.fixture
    def temp_config_dir(self):
        """Create a temporary config directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def settings_manager(self, temp_config_dir):
        """Create a SettingsManager with temporary config directory."""
        return SettingsManager(config_dir=temp_config_dir)

    def test_initialization(self, temp_config_dir):
        manager = SettingsManager(config_dir=temp_config_dir)
        assert manager.config_dir == temp_config_dir
        assert manager.settings_file == temp_config_dir / "settings.json"

    def test_creates_missing_config_dir(self, temp_config_dir):
        config_dir = temp_config_dir / "nested" / "mediadevices"
        SettingsManager(config_dir=config_dir)
        assert config_dir.is_dir()

    def test_load_settings_default(self, settings_manager):
        settings = settings_manager.load_settings()
        assert settings == MediaDevicesSettings()

    def test_save_and_load_settings(self, settings_manager):
        settings = MediaDevicesSettings(
            log_level="DEBUG",
            enable_cameras=False,
            max_camera_index=4,
            audio_block_size=512,
            priority_overrides={"USB Microphone": 0.1},
        )

        settings_manager.save_settings(settings)
        loaded = settings_manager.load_settings()

        assert loaded == settings
        assert not settings_manager.settings_file.with_suffix(".tmp").exists()

    def test_partial_file_uses_defaults(self, settings_manager):
        settings_manager.settings_file.write_text(
            json.dumps({"enable_screens": False}), encoding="utf-8"
        )

        loaded = settings_manager.load_settings()

        assert loaded.enable_screens is False
        assert loaded.max_consecutive_failures == 5
        assert loaded.priority_overrides == {}

    def test_corrupted_file(self, settings_manager):
        settings_manager.settings_file.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="corrupted"):
            settings_manager.load_settings()

    def test_default_config_dir_on_linux(self, monkeypatch, temp_config_dir):
        monkeypatch.setattr("sys.platform", "linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_config_dir))

        manager = SettingsManager()

        assert manager.config_dir == temp_config_dir / "mediadevices"
