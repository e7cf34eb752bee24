"""Core data models for the mediadevices library.

This module contains the enums and dataclasses shared by the driver layer,
the constraint matcher and the capture tracks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

import numpy as np

# ============================================================================
# Device Priorities
# ============================================================================

# Subtracted from the fitness distance of every configuration a device offers,
# so a higher priority wins between otherwise equally fitting devices.
PRIORITY_LOW = -0.1
PRIORITY_NORMAL = 0.0
PRIORITY_HIGH = 0.1


# ============================================================================
# Basic Enums
# ============================================================================


class DeviceType(Enum):
    """Type of capture hardware behind a driver."""

    CAMERA = "camera"
    MICROPHONE = "microphone"
    SCREEN = "screen"


class DeviceState(Enum):
    """Open/closed state of a driver."""

    CLOSED = "closed"
    OPENED = "opened"
    RUNNING = "running"


class MediaDeviceKind(Enum):
    """Kind reported by device enumeration."""

    VIDEO_INPUT = "videoinput"
    AUDIO_INPUT = "audioinput"


class TrackKind(Enum):
    """Kind of media carried by a track."""

    VIDEO = "video"
    AUDIO = "audio"


# ============================================================================
# Device Metadata Models
# ============================================================================


@dataclass(frozen=True)
class DriverInfo:
    """Static information about a driver."""

    label: str
    device_type: DeviceType
    priority: float = PRIORITY_NORMAL


@dataclass(frozen=True)
class MediaDeviceInfo:
    """Entry returned by device enumeration."""

    device_id: str
    kind: MediaDeviceKind
    label: str
    device_type: DeviceType


# ============================================================================
# Capture Data Models
# ============================================================================


@dataclass
class VideoFrame:
    """Captured video frame with metadata."""

    image: np.ndarray
    timestamp: datetime
    source_id: str
    frame_number: int
    width: int = field(init=False)
    height: int = field(init=False)

    def __post_init__(self):
        """Derive dimensions from the image array."""
        self.height, self.width = self.image.shape[:2]


@dataclass
class AudioChunk:
    """Captured audio chunk with metadata."""

    data: np.ndarray
    sample_rate: int
    channels: int
    timestamp: datetime
    source_id: str
    chunk_number: int

    def get_duration_ms(self) -> float:
        """Get chunk duration in milliseconds.

        Returns:
            Duration in milliseconds, 0.0 if the sample rate is unknown
        """
        if self.sample_rate <= 0:
            return 0.0
        return len(self.data) / self.sample_rate * 1000
