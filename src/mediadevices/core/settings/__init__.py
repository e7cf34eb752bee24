"""Settings management for mediadevices."""

from mediadevices.core.settings.manager import MediaDevicesSettings, SettingsManager

__all__ = ["MediaDevicesSettings", "SettingsManager"]
