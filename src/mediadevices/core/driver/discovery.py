"""Discovery of the built-in capture drivers.

Each backend is enumerated independently; a backend that fails to
enumerate is logged and skipped so the others still register. No device is
left open by discovery.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from mediadevices.core.driver.base import Driver
from mediadevices.core.driver.camera import CameraDriver
from mediadevices.core.driver.manager import DriverManager, get_manager
from mediadevices.core.driver.microphone import MicrophoneDriver
from mediadevices.core.driver.screen import ScreenDriver
from mediadevices.core.models import PRIORITY_NORMAL
from mediadevices.core.settings.manager import MediaDevicesSettings, SettingsManager

logger = logging.getLogger(__name__)


def discover_screens(settings: MediaDevicesSettings) -> List[Driver]:
    """Create a driver for every physical monitor.

    Args:
        settings: Library settings

    Returns:
        One ScreenDriver per monitor
    """
    logger.info("Discovering screens...")
    drivers: List[Driver] = []

    try:
        import mss

        with mss.mss() as sct:
            # Monitor 0 is the "all monitors" virtual screen, skip it
            for i, monitor in enumerate(sct.monitors[1:], start=1):
                label = f"Screen {i}"
                drivers.append(
                    ScreenDriver(i, label=label, priority=_priority(settings, label))
                )
                logger.debug(f"Found screen: {label} ({monitor['width']}x{monitor['height']})")

    except Exception as e:
        logger.error(f"Error enumerating screens: {e}", exc_info=True)

    logger.info(f"Found {len(drivers)} screen(s)")
    return drivers


def discover_cameras(settings: MediaDevicesSettings) -> List[Driver]:
    """Create a driver for every camera OpenCV can open.

    Indices are probed in order; probing stops after
    settings.max_consecutive_failures indices in a row fail to open.

    Args:
        settings: Library settings

    Returns:
        One CameraDriver per camera
    """
    logger.info("Discovering cameras...")
    drivers: List[Driver] = []

    try:
        import cv2

        consecutive_failures = 0
        for i in range(settings.max_camera_index):
            cap = cv2.VideoCapture(i)
            try:
                opened = cap.isOpened()
            finally:
                cap.release()

            if opened:
                consecutive_failures = 0
                label = f"Camera {i}"
                drivers.append(CameraDriver(i, label=label, priority=_priority(settings, label)))
                logger.debug(f"Found camera: {label}")
            else:
                consecutive_failures += 1
                if consecutive_failures >= settings.max_consecutive_failures:
                    logger.debug(
                        f"Stopping camera search after {consecutive_failures} "
                        f"consecutive failures at index {i}"
                    )
                    break

    except Exception as e:
        logger.error(f"Error enumerating cameras: {e}", exc_info=True)

    logger.info(f"Found {len(drivers)} camera(s)")
    return drivers


def discover_microphones(settings: MediaDevicesSettings) -> List[Driver]:
    """Create a driver for every audio input device.

    Args:
        settings: Library settings

    Returns:
        One MicrophoneDriver per device with input channels
    """
    logger.info("Discovering microphones...")
    drivers: List[Driver] = []

    try:
        import sounddevice as sd

        for i, device_info in enumerate(sd.query_devices()):
            # Only include input devices
            if device_info["max_input_channels"] <= 0:
                continue

            label = device_info["name"]
            drivers.append(
                MicrophoneDriver(
                    i,
                    label=label,
                    max_input_channels=device_info["max_input_channels"],
                    default_sample_rate=int(device_info["default_samplerate"]),
                    default_latency=device_info.get("default_low_input_latency"),
                    priority=_priority(settings, label),
                    block_size=settings.audio_block_size,
                )
            )
            logger.debug(f"Found microphone: {label}")

    except Exception as e:
        logger.error(f"Error enumerating microphones: {e}", exc_info=True)

    logger.info(f"Found {len(drivers)} microphone(s)")
    return drivers


def register_default_drivers(
    manager: Optional[DriverManager] = None,
    settings: Optional[MediaDevicesSettings] = None,
) -> List[Driver]:
    """Discover the built-in drivers and register them.

    Drivers whose id is already registered are skipped, so calling this
    again only adds newly attached devices.

    Args:
        manager: Target registry (default: the process-wide manager)
        settings: Library settings (default: the settings saved in the user
            config directory)

    Returns:
        The drivers that were registered
    """
    manager = manager if manager is not None else get_manager()
    settings = settings if settings is not None else SettingsManager().load_settings()

    discovered: List[Driver] = []
    if settings.enable_cameras:
        discovered.extend(discover_cameras(settings))
    if settings.enable_microphones:
        discovered.extend(discover_microphones(settings))
    if settings.enable_screens:
        discovered.extend(discover_screens(settings))

    registered = []
    for driver in discovered:
        if driver.id in manager:
            logger.debug(f"Driver already registered, skipping: {driver.id}")
            continue
        manager.register(driver)
        registered.append(driver)

    return registered


def _priority(settings: MediaDevicesSettings, label: str) -> float:
    return settings.priority_overrides.get(label, PRIORITY_NORMAL)
