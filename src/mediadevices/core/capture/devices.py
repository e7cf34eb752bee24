"""Entry points for requesting capture by constraints.

MediaDevices resolves each requested kind of media to the best fitting
registered driver, builds one track per kind and returns them as a
MediaStream. Either every requested track is built or none is: on any
failure the tracks built so far are stopped before the error propagates.

References:
    https://developer.mozilla.org/en-US/docs/Web/API/MediaDevices/getUserMedia
    https://developer.mozilla.org/en-US/docs/Web/API/MediaDevices/getDisplayMedia
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from mediadevices.core.capture.constraints import (
    ConstraintsBuilder,
    MediaStreamConstraints,
    MediaTrackConstraints,
)
from mediadevices.core.capture.selector import select_best_driver
from mediadevices.core.capture.stream import MediaStream
from mediadevices.core.capture.track import Track, new_audio_track, new_video_track
from mediadevices.core.driver.filters import (
    filter_all,
    filter_and,
    filter_audio_recorder,
    filter_device_type,
    filter_not,
    filter_video_recorder,
)
from mediadevices.core.driver.manager import DriverManager, get_manager
from mediadevices.core.models import DeviceType, MediaDeviceInfo, MediaDeviceKind

logger = logging.getLogger(__name__)


class MediaDevices:
    """Constraint-based access to the drivers of a registry."""

    def __init__(self, manager: Optional[DriverManager] = None):
        """Initialize MediaDevices.

        Args:
            manager: Driver registry (default: the process-wide manager)
        """
        self._manager = manager if manager is not None else get_manager()

    @property
    def manager(self) -> DriverManager:
        """Driver registry used for selection."""
        return self._manager

    def get_user_media(self, constraints: MediaStreamConstraints) -> MediaStream:
        """Capture from cameras and microphones.

        Video is resolved before audio. Screens are never selected here.

        Args:
            constraints: Requested kinds of media

        Returns:
            MediaStream with one track per requested kind

        Raises:
            NotFoundError: If no driver fits a requested kind
            TrackConstructionError: If the selected driver cannot be started
            SessionAssemblyError: If the stream cannot be assembled
        """
        steps: List[Callable[[], Track]] = []
        if constraints.video is not None:
            steps.append(lambda: self._select_video(constraints.video))
        if constraints.audio is not None:
            steps.append(lambda: self._select_audio(constraints.audio))
        return self._assemble(steps)

    def get_display_media(self, constraints: MediaStreamConstraints) -> MediaStream:
        """Capture the contents of a screen.

        Only the video builder is used; screen audio is not supported.

        Args:
            constraints: Requested kinds of media

        Returns:
            MediaStream with the screen video track, if video was requested

        Raises:
            NotFoundError: If no screen fits the video constraints
            TrackConstructionError: If the selected screen cannot be started
            SessionAssemblyError: If the stream cannot be assembled
        """
        if constraints.audio is not None:
            logger.debug("Ignoring audio constraints for display media")

        steps: List[Callable[[], Track]] = []
        if constraints.video is not None:
            steps.append(lambda: self._select_screen(constraints.video))
        return self._assemble(steps)

    def enumerate_devices(self) -> List[MediaDeviceInfo]:
        """List every known capture device without opening any of them.

        Returns:
            MediaDeviceInfo per video or audio recorder, in registry order
        """
        is_video = filter_video_recorder()
        is_audio = filter_audio_recorder()

        devices = []
        for d in self._manager.query(filter_all()):
            if is_video(d):
                kind = MediaDeviceKind.VIDEO_INPUT
            elif is_audio(d):
                kind = MediaDeviceKind.AUDIO_INPUT
            else:
                continue

            info = d.info()
            devices.append(
                MediaDeviceInfo(
                    device_id=d.id,
                    kind=kind,
                    label=info.label,
                    device_type=info.device_type,
                )
            )
        return devices

    def _assemble(self, steps: List[Callable[[], Track]]) -> MediaStream:
        tracks: List[Track] = []
        try:
            for step in steps:
                tracks.append(step())
            stream = MediaStream(*tracks)
        except BaseException as e:
            logger.error(f"Failed to assemble media stream: {e!r}")
            self._clean_tracks(tracks)
            raise

        logger.info(f"Media stream ready with {len(tracks)} track(s)")
        return stream

    def _clean_tracks(self, tracks: List[Track]) -> None:
        for track in tracks:
            track.stop()

    def _select_video(self, builder: ConstraintsBuilder) -> Track:
        video_filter = filter_and(
            filter_video_recorder(),
            filter_not(filter_device_type(DeviceType.SCREEN)),
        )
        d, c = select_best_driver(video_filter, _build(builder), self._manager)
        return new_video_track(d, c)

    def _select_audio(self, builder: ConstraintsBuilder) -> Track:
        d, c = select_best_driver(filter_audio_recorder(), _build(builder), self._manager)
        return new_audio_track(d, c)

    def _select_screen(self, builder: ConstraintsBuilder) -> Track:
        screen_filter = filter_and(
            filter_video_recorder(),
            filter_device_type(DeviceType.SCREEN),
        )
        d, c = select_best_driver(screen_filter, _build(builder), self._manager)
        return new_video_track(d, c)


def _build(builder: ConstraintsBuilder) -> MediaTrackConstraints:
    constraints = MediaTrackConstraints()
    builder(constraints)
    return constraints


def get_user_media(
    constraints: MediaStreamConstraints, manager: Optional[DriverManager] = None
) -> MediaStream:
    """Capture from cameras and microphones; see MediaDevices.get_user_media."""
    return MediaDevices(manager).get_user_media(constraints)


def get_display_media(
    constraints: MediaStreamConstraints, manager: Optional[DriverManager] = None
) -> MediaStream:
    """Capture a screen; see MediaDevices.get_display_media."""
    return MediaDevices(manager).get_display_media(constraints)


def enumerate_devices(manager: Optional[DriverManager] = None) -> List[MediaDeviceInfo]:
    """List known capture devices; see MediaDevices.enumerate_devices."""
    return MediaDevices(manager).enumerate_devices()
