"""Screen driver backed by mss."""

from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from mediadevices.core.driver.base import Driver, Reader, VideoRecorder
from mediadevices.core.errors import DeviceOpenError
from mediadevices.core.models import PRIORITY_NORMAL, DeviceType, DriverInfo
from mediadevices.core.prop.media import Media, Video

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_RATE = 60.0
SCREEN_FRAME_FORMAT = "BGRA"


class ScreenDriver(Driver, VideoRecorder):
    """Video capture of one monitor through mss.

    Monitor indices follow mss: 0 is the virtual screen spanning every
    monitor, 1..N are the physical monitors.
    """

    def __init__(
        self,
        monitor_index: int,
        label: Optional[str] = None,
        priority: float = PRIORITY_NORMAL,
        driver_id: Optional[str] = None,
        refresh_rate: float = DEFAULT_REFRESH_RATE,
    ):
        super().__init__(
            DriverInfo(label or f"Screen {monitor_index}", DeviceType.SCREEN, priority),
            driver_id or f"screen_{monitor_index}",
        )
        self._monitor_index = monitor_index
        self._refresh_rate = refresh_rate
        self._sct = None

    def _open(self) -> None:
        import mss

        sct = mss.mss()
        if self._monitor_index >= len(sct.monitors):
            sct.close()
            raise DeviceOpenError(f"Monitor not available: {self._monitor_index}", self.id)
        self._sct = sct

    def _close(self) -> None:
        if self._sct is not None:
            self._sct.close()
            self._sct = None

    def _properties(self) -> List[Media]:
        monitor = self._sct.monitors[self._monitor_index]
        return [
            Media(
                device_id=self.id,
                video=Video(
                    width=monitor["width"],
                    height=monitor["height"],
                    frame_rate=self._refresh_rate,
                    frame_format=SCREEN_FRAME_FORMAT,
                ),
            )
        ]

    def _video_record(self, media: Media) -> Reader:
        sct = self._sct
        monitor = dict(sct.monitors[self._monitor_index])

        def read():
            return np.array(sct.grab(monitor))

        return read
