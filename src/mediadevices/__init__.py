"""Capture audio, video and screens by declarative constraints.

Example:
    >>> from mediadevices import MediaStreamConstraints, get_user_media, prop
    >>> from mediadevices.core.driver import register_default_drivers
    >>> register_default_drivers()
    >>> def video(c):
    ...     c.width = prop.Int(1280)
    ...     c.height = prop.Int(720)
    >>> stream = get_user_media(MediaStreamConstraints(video=video))
    >>> frame = stream.get_video_tracks()[0].read()
    >>> stream.stop()
"""

from mediadevices.core import prop
from mediadevices.core.capture import (
    AudioTrack,
    MediaDevices,
    MediaStream,
    MediaStreamConstraints,
    MediaTrackConstraints,
    Track,
    VideoTrack,
    enumerate_devices,
    get_display_media,
    get_user_media,
)
from mediadevices.core.errors import (
    Candidate,
    DeviceCloseError,
    DeviceError,
    DeviceOpenError,
    DeviceReadError,
    DeviceStateError,
    MediaDevicesError,
    NotFoundError,
    SessionAssemblyError,
    TrackConstructionError,
)
from mediadevices.core.models import (
    AudioChunk,
    DeviceState,
    DeviceType,
    DriverInfo,
    MediaDeviceInfo,
    MediaDeviceKind,
    TrackKind,
    VideoFrame,
)
from mediadevices.core.version import __version__

__all__ = [
    "AudioChunk",
    "AudioTrack",
    "Candidate",
    "DeviceCloseError",
    "DeviceError",
    "DeviceOpenError",
    "DeviceReadError",
    "DeviceState",
    "DeviceStateError",
    "DeviceType",
    "DriverInfo",
    "MediaDeviceInfo",
    "MediaDeviceKind",
    "MediaDevices",
    "MediaDevicesError",
    "MediaStream",
    "MediaStreamConstraints",
    "MediaTrackConstraints",
    "NotFoundError",
    "SessionAssemblyError",
    "Track",
    "TrackConstructionError",
    "TrackKind",
    "VideoFrame",
    "VideoTrack",
    "__version__",
    "enumerate_devices",
    "get_display_media",
    "get_user_media",
    "prop",
]
