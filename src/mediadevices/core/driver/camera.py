"""Camera driver backed by OpenCV."""

from __future__ import annotations

import logging
from typing import List, Optional

from mediadevices.core.driver.base import Driver, Reader, VideoRecorder
from mediadevices.core.errors import DeviceOpenError, DeviceReadError
from mediadevices.core.models import PRIORITY_NORMAL, DeviceType, DriverInfo
from mediadevices.core.prop.media import Media, Video

logger = logging.getLogger(__name__)

# Common resolutions for UVC devices
COMMON_RESOLUTIONS = [
    (640, 480),
    (1280, 720),
    (1920, 1080),
    (3840, 2160),
]
DEFAULT_CAMERA_FPS = 30.0
CAMERA_FRAME_FORMAT = "BGR"


class CameraDriver(Driver, VideoRecorder):
    """Video capture from a UVC camera through cv2.VideoCapture."""

    def __init__(
        self,
        index: int,
        label: Optional[str] = None,
        priority: float = PRIORITY_NORMAL,
        driver_id: Optional[str] = None,
    ):
        """Initialize the CameraDriver.

        Args:
            index: OpenCV device index
            label: Human-readable label (default: "Camera <index>")
            priority: Selection priority
            driver_id: Identifier (default: "camera_<index>")
        """
        super().__init__(
            DriverInfo(label or f"Camera {index}", DeviceType.CAMERA, priority),
            driver_id or f"camera_{index}",
        )
        self._index = index
        self._cap = None

    def _open(self) -> None:
        import cv2

        cap = cv2.VideoCapture(self._index)
        if not cap.isOpened():
            cap.release()
            raise DeviceOpenError(f"Failed to open camera: {self._index}", self.id)
        self._cap = cap

    def _close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None

    def _properties(self) -> List[Media]:
        import cv2

        width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        fps = float(self._cap.get(cv2.CAP_PROP_FPS)) or DEFAULT_CAMERA_FPS

        # Offer the common resolutions that fit within the native one
        current = (width, height)
        resolutions = [r for r in COMMON_RESOLUTIONS if r[0] * r[1] <= width * height]
        if current not in resolutions:
            resolutions.append(current)

        return [
            Media(
                device_id=self.id,
                video=Video(width=w, height=h, frame_rate=fps, frame_format=CAMERA_FRAME_FORMAT),
            )
            for w, h in resolutions
        ]

    def _video_record(self, media: Media) -> Reader:
        import cv2

        cap = self._cap
        if media.video.width:
            cap.set(cv2.CAP_PROP_FRAME_WIDTH, media.video.width)
        if media.video.height:
            cap.set(cv2.CAP_PROP_FRAME_HEIGHT, media.video.height)
        if media.video.frame_rate:
            cap.set(cv2.CAP_PROP_FPS, media.video.frame_rate)

        def read():
            ok, frame = cap.read()
            if not ok or frame is None:
                raise DeviceReadError(f"Failed to read frame from camera {self._index}", self.id)
            return frame

        return read
