"""Driver interface for capture hardware.

A driver wraps one physical (or virtual) device. It owns the device's
open/closed state and reports the configuration sets the device can produce.
Concrete backends implement the underscore hooks; the public methods enforce
the state machine:

    closed --open()--> opened --*_record()--> running
       ^                  |                      |
       +-----close()------+----------close()-----+
"""

from __future__ import annotations

import logging
import threading
import uuid
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import numpy as np

from mediadevices.core.errors import (
    DeviceCloseError,
    DeviceError,
    DeviceOpenError,
    DeviceStateError,
)
from mediadevices.core.models import DeviceState, DriverInfo
from mediadevices.core.prop.media import Media

logger = logging.getLogger(__name__)

Reader = Callable[[], np.ndarray]


class Driver(ABC):
    """Abstract base class for capture drivers."""

    def __init__(self, info: DriverInfo, driver_id: Optional[str] = None):
        """Initialize the driver in the closed state.

        Args:
            info: Static driver information
            driver_id: Stable identifier; a random one is generated if omitted
        """
        self._id = driver_id or str(uuid.uuid4())
        self._info = info
        self._state = DeviceState.CLOSED
        self._lock = threading.RLock()

    @property
    def id(self) -> str:
        """Driver identifier."""
        return self._id

    def info(self) -> DriverInfo:
        """Get static driver information."""
        return self._info

    def status(self) -> DeviceState:
        """Get the current driver state."""
        with self._lock:
            return self._state

    def open(self) -> None:
        """Open the device.

        Raises:
            DeviceOpenError: If the driver is not closed or the backend fails
        """
        with self._lock:
            if self._state != DeviceState.CLOSED:
                raise DeviceOpenError(
                    f"Cannot open driver {self._id} in state {self._state.value}", self._id
                )
            try:
                self._open()
            except DeviceError:
                raise
            except Exception as e:
                raise DeviceOpenError(f"Failed to open driver {self._id}: {e}", self._id) from e
            self._state = DeviceState.OPENED
            logger.debug(f"Opened driver: {self._info.label} ({self._id})")

    def close(self) -> None:
        """Close the device, stopping any recording.

        Raises:
            DeviceCloseError: If the driver is already closed or the backend fails
        """
        with self._lock:
            if self._state == DeviceState.CLOSED:
                raise DeviceCloseError(f"Driver {self._id} is already closed", self._id)
            try:
                self._close()
            except DeviceError:
                raise
            except Exception as e:
                raise DeviceCloseError(f"Failed to close driver {self._id}: {e}", self._id) from e
            finally:
                self._state = DeviceState.CLOSED
            logger.debug(f"Closed driver: {self._info.label} ({self._id})")

    def properties(self) -> List[Media]:
        """Get the configuration sets the device supports.

        Returns:
            Configuration sets in the order the backend reports them

        Raises:
            DeviceStateError: If the driver is closed
            DeviceError: If the backend fails to report its configurations
        """
        with self._lock:
            if self._state == DeviceState.CLOSED:
                raise DeviceStateError(
                    f"Properties of driver {self._id} are unavailable while closed", self._id
                )
            try:
                return list(self._properties())
            except DeviceError:
                raise
            except Exception as e:
                raise DeviceError(
                    f"Failed to read properties of driver {self._id}: {e}", self._id
                ) from e

    def _record(self, start: Callable[[Media], Reader], media: Media) -> Reader:
        with self._lock:
            if self._state != DeviceState.OPENED:
                raise DeviceStateError(
                    f"Cannot record from driver {self._id} in state {self._state.value}",
                    self._id,
                )
            try:
                reader = start(media)
            except DeviceError:
                raise
            except Exception as e:
                raise DeviceError(f"Failed to start driver {self._id}: {e}", self._id) from e
            self._state = DeviceState.RUNNING
            logger.info(f"Recording from {self._info.label} with\n{media}")
            return reader

    @abstractmethod
    def _open(self) -> None:
        """Acquire the backend handle."""

    @abstractmethod
    def _close(self) -> None:
        """Release the backend handle."""

    @abstractmethod
    def _properties(self) -> List[Media]:
        """Read supported configuration sets from the open backend."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, label={self._info.label!r})"


class VideoRecorder(ABC):
    """Capability mixin for drivers that produce video frames."""

    def video_record(self, media: Media) -> Reader:
        """Start recording video at the selected configuration.

        Args:
            media: Selected configuration

        Returns:
            Callable returning the next frame as an HxWxC array
        """
        return self._record(self._video_record, media)  # type: ignore[attr-defined]

    @abstractmethod
    def _video_record(self, media: Media) -> Reader:
        """Configure the backend and return a frame reader."""


class AudioRecorder(ABC):
    """Capability mixin for drivers that produce audio samples."""

    def audio_record(self, media: Media) -> Reader:
        """Start recording audio at the selected configuration.

        Args:
            media: Selected configuration

        Returns:
            Callable returning the next block as a (frames, channels) array
        """
        return self._record(self._audio_record, media)  # type: ignore[attr-defined]

    @abstractmethod
    def _audio_record(self, media: Media) -> Reader:
        """Configure the backend and return a sample reader."""
