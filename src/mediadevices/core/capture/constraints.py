"""Per-track and per-stream capture constraints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from mediadevices.core.prop.constraints import MediaConstraints
from mediadevices.core.prop.media import Media


@dataclass
class MediaTrackConstraints(MediaConstraints):
    """Constraints for one track plus the configuration selected for it.

    selected_media stays None until a driver has been matched; afterwards it
    is the exact configuration the driver is started with.
    """

    selected_media: Optional[Media] = None


ConstraintsBuilder = Callable[[MediaTrackConstraints], None]


@dataclass
class MediaStreamConstraints:
    """Requested kinds of media for a stream.

    Each builder receives a fresh MediaTrackConstraints and fills in the
    constraints for that kind; a kind without a builder is not requested.

    Example:
        >>> def video(c):
        ...     c.width = Int(1280)
        ...     c.frame_rate = FloatRanged(min=15)
        >>> MediaStreamConstraints(video=video)
    """

    video: Optional[ConstraintsBuilder] = None
    audio: Optional[ConstraintsBuilder] = None
