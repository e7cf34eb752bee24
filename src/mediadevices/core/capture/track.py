"""Capture tracks bound to a running driver.

A track owns its driver from construction until stop(): construction opens
the driver and starts recording at the selected configuration, stop()
closes it again.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Type

from mediadevices.core.capture.constraints import MediaTrackConstraints
from mediadevices.core.driver.base import AudioRecorder, Driver, Reader, VideoRecorder
from mediadevices.core.errors import DeviceError, DeviceStateError, TrackConstructionError
from mediadevices.core.models import AudioChunk, TrackKind, VideoFrame
from mediadevices.core.prop.media import Media

logger = logging.getLogger(__name__)


class Track(ABC):
    """A capture handle to one driver running at one configuration."""

    kind: TrackKind

    def __init__(self, driver: Driver, constraints: MediaTrackConstraints, reader: Reader):
        """Initialize the track.

        Args:
            driver: Running driver owned by this track
            constraints: Constraints with selected_media set
            reader: Callable returning the next block of raw data
        """
        self._driver = driver
        self._constraints = constraints
        self._reader = reader
        self._stopped = False
        self._count = 0
        self._ended_callbacks: List[Callable[[Track], None]] = []
        self._lock = threading.Lock()

    @property
    def id(self) -> str:
        """Track identifier (the id of its driver)."""
        return self._driver.id

    @property
    def driver(self) -> Driver:
        """Driver bound to this track."""
        return self._driver

    @property
    def constraints(self) -> MediaTrackConstraints:
        """Constraints this track was selected with."""
        return self._constraints

    @property
    def selected_media(self) -> Media:
        """Configuration the driver is running at."""
        return self._constraints.selected_media or Media()

    @property
    def stopped(self) -> bool:
        """Whether stop() has been called."""
        return self._stopped

    def on_ended(self, callback: Callable[[Track], None]) -> None:
        """Register a callback to be called once when the track stops.

        Args:
            callback: Function called with this track
        """
        if callback not in self._ended_callbacks:
            self._ended_callbacks.append(callback)

    def stop(self) -> None:
        """Stop the track and release its driver.

        Calling stop() more than once has no further effect.
        """
        with self._lock:
            if self._stopped:
                return
            self._stopped = True

        try:
            self._driver.close()
        except DeviceError as e:
            logger.warning(f"Error closing driver for track {self.id}: {e}")

        logger.info(f"Stopped {self.kind.value} track: {self.id}")

        for callback in self._ended_callbacks:
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in track ended callback: {e}", exc_info=True)

    def _read_raw(self):
        if self._stopped:
            raise DeviceStateError(f"Track {self.id} is stopped", self.id)
        data = self._reader()
        self._count += 1
        return data

    @abstractmethod
    def read(self):
        """Read the next frame or chunk from the driver."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, stopped={self._stopped})"


class VideoTrack(Track):
    """Track delivering video frames."""

    kind = TrackKind.VIDEO

    def read(self) -> VideoFrame:
        """Read the next video frame.

        Returns:
            VideoFrame wrapping the driver's image array

        Raises:
            DeviceStateError: If the track is stopped
            DeviceReadError: If the driver fails to deliver a frame
        """
        image = self._read_raw()
        return VideoFrame(
            image=image,
            timestamp=datetime.now(),
            source_id=self.id,
            frame_number=self._count,
        )


class AudioTrack(Track):
    """Track delivering audio chunks."""

    kind = TrackKind.AUDIO

    def read(self) -> AudioChunk:
        """Read the next audio chunk.

        Returns:
            AudioChunk wrapping the driver's (frames, channels) array

        Raises:
            DeviceStateError: If the track is stopped
            DeviceReadError: If the driver fails to deliver samples
        """
        data = self._read_raw()
        audio = self.selected_media.audio
        return AudioChunk(
            data=data,
            sample_rate=audio.sample_rate or 0,
            channels=data.shape[1] if data.ndim > 1 else 1,
            timestamp=datetime.now(),
            source_id=self.id,
            chunk_number=self._count,
        )


def new_video_track(driver: Driver, constraints: MediaTrackConstraints) -> VideoTrack:
    """Open a driver and start it as a video track.

    Raises:
        TrackConstructionError: If the driver cannot be opened or started
    """
    return _new_track(driver, constraints, VideoRecorder, VideoTrack)


def new_audio_track(driver: Driver, constraints: MediaTrackConstraints) -> AudioTrack:
    """Open a driver and start it as an audio track.

    Raises:
        TrackConstructionError: If the driver cannot be opened or started
    """
    return _new_track(driver, constraints, AudioRecorder, AudioTrack)


def _new_track(driver, constraints, recorder_cls: Type, track_cls: Type[Track]):
    label = driver.info().label
    kind = track_cls.kind.value

    try:
        driver.open()
    except DeviceError as e:
        raise TrackConstructionError(f"Failed to open {label} for {kind} track: {e}") from e

    if not isinstance(driver, recorder_cls):
        _close_quietly(driver)
        raise TrackConstructionError(f"Driver {label} is not a {kind} recorder")

    media = constraints.selected_media or Media()
    try:
        if track_cls is VideoTrack:
            reader = driver.video_record(media)
        else:
            reader = driver.audio_record(media)
    except DeviceError as e:
        _close_quietly(driver)
        raise TrackConstructionError(f"Failed to start {label} for {kind} track: {e}") from e

    logger.info(f"Created {kind} track: {label} ({driver.id})")
    return track_cls(driver, constraints, reader)


def _close_quietly(driver: Driver) -> None:
    try:
        driver.close()
    except DeviceError as e:
        logger.warning(f"Error closing driver {driver.id}: {e}")
