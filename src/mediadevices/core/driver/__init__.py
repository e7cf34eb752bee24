"""Capture drivers and the registry they are queried through."""

from mediadevices.core.driver.base import AudioRecorder, Driver, VideoRecorder
from mediadevices.core.driver.camera import CameraDriver
from mediadevices.core.driver.discovery import register_default_drivers
from mediadevices.core.driver.filters import (
    FilterFn,
    filter_all,
    filter_and,
    filter_audio_recorder,
    filter_device_type,
    filter_id,
    filter_not,
    filter_video_recorder,
)
from mediadevices.core.driver.manager import DriverManager, get_manager
from mediadevices.core.driver.microphone import MicrophoneDriver
from mediadevices.core.driver.screen import ScreenDriver

__all__ = [
    "AudioRecorder",
    "CameraDriver",
    "Driver",
    "DriverManager",
    "FilterFn",
    "MicrophoneDriver",
    "ScreenDriver",
    "VideoRecorder",
    "filter_all",
    "filter_and",
    "filter_audio_recorder",
    "filter_device_type",
    "filter_id",
    "filter_not",
    "filter_video_recorder",
    "get_manager",
    "register_default_drivers",
]
