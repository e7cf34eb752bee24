"""Constraint-based capture: driver selection, tracks and streams."""

from mediadevices.core.capture.constraints import MediaStreamConstraints, MediaTrackConstraints
from mediadevices.core.capture.devices import (
    MediaDevices,
    enumerate_devices,
    get_display_media,
    get_user_media,
)
from mediadevices.core.capture.prober import query_driver_properties
from mediadevices.core.capture.selector import select_best_driver
from mediadevices.core.capture.stream import MediaStream
from mediadevices.core.capture.track import (
    AudioTrack,
    Track,
    VideoTrack,
    new_audio_track,
    new_video_track,
)

__all__ = [
    "AudioTrack",
    "MediaDevices",
    "MediaStream",
    "MediaStreamConstraints",
    "MediaTrackConstraints",
    "Track",
    "VideoTrack",
    "enumerate_devices",
    "get_display_media",
    "get_user_media",
    "new_audio_track",
    "new_video_track",
    "query_driver_properties",
    "select_best_driver",
]
