"""Composable predicates for querying drivers.

Filters are plain callables taking a Driver and returning a bool, combined
with filter_and / filter_not.
"""

from __future__ import annotations

from typing import Callable

from mediadevices.core.driver.base import AudioRecorder, Driver, VideoRecorder
from mediadevices.core.models import DeviceType

FilterFn = Callable[[Driver], bool]


def filter_all() -> FilterFn:
    """Match every driver."""
    return lambda d: True


def filter_video_recorder() -> FilterFn:
    """Match drivers that can record video."""
    return lambda d: isinstance(d, VideoRecorder)


def filter_audio_recorder() -> FilterFn:
    """Match drivers that can record audio."""
    return lambda d: isinstance(d, AudioRecorder)


def filter_device_type(device_type: DeviceType) -> FilterFn:
    """Match drivers whose hardware is of the given type."""
    return lambda d: d.info().device_type == device_type


def filter_id(driver_id: str) -> FilterFn:
    """Match the driver with the given identifier."""
    return lambda d: d.id == driver_id


def filter_and(*filters: FilterFn) -> FilterFn:
    """Match drivers accepted by every given filter."""
    return lambda d: all(f(d) for f in filters)


def filter_not(f: FilterFn) -> FilterFn:
    """Match drivers rejected by the given filter."""
    return lambda d: not f(d)
