"""Concrete configuration sets offered by capture devices.

A Media value describes one way a device can be driven (a resolution and
frame rate for a camera, a sample rate and channel layout for a microphone).
Fields a device does not report stay None.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mediadevices.core.prop.constraints import MediaConstraints


@dataclass
class Video:
    """Video part of a configuration set."""

    width: Optional[int] = None
    height: Optional[int] = None
    frame_rate: Optional[float] = None
    frame_format: Optional[str] = None


@dataclass
class Audio:
    """Audio part of a configuration set."""

    channel_count: Optional[int] = None
    sample_rate: Optional[int] = None
    sample_size: Optional[int] = None
    latency: Optional[float] = None  # seconds
    is_big_endian: Optional[bool] = None
    is_float: Optional[bool] = None
    is_interleaved: Optional[bool] = None


@dataclass
class Media:
    """A configuration set: device id plus its video and audio properties."""

    device_id: Optional[str] = None
    video: Video = field(default_factory=Video)
    audio: Audio = field(default_factory=Audio)

    def merge(self, other: Media) -> None:
        """Copy every field that is set on other onto this configuration.

        Args:
            other: Configuration whose set fields take precedence
        """
        if other.device_id is not None:
            self.device_id = other.device_id
        for part_name in ("video", "audio"):
            target = getattr(self, part_name)
            source = getattr(other, part_name)
            for f in fields(source):
                value = getattr(source, f.name)
                if value is not None:
                    setattr(target, f.name, value)

    def merge_constraints(self, constraints: MediaConstraints) -> None:
        """Write the concrete value of every constraint that has one.

        Exact, ideal and ranged-with-ideal constraints yield a value;
        one-of and unbounded constraints leave the field untouched.

        Args:
            constraints: Requested constraints
        """
        for name, constraint in constraints.items():
            value, ok = constraint.value()
            if not ok:
                continue
            if name == "device_id":
                self.device_id = value
            elif hasattr(self.video, name):
                setattr(self.video, name, value)
            else:
                setattr(self.audio, name, value)

    def get(self, name: str):
        """Look up a property by its flat field name.

        Args:
            name: Field name such as "width" or "sample_rate"

        Returns:
            The field value, or None if unset
        """
        if name == "device_id":
            return self.device_id
        if hasattr(self.video, name):
            return getattr(self.video, name)
        return getattr(self.audio, name)

    def __str__(self) -> str:
        lines = []
        if self.device_id is not None:
            lines.append(f"DeviceID: {self.device_id}")
        for part_name in ("video", "audio"):
            part = getattr(self, part_name)
            for f in fields(part):
                value = getattr(part, f.name)
                if value is not None:
                    lines.append(f"{_title(f.name)}: {value}")
        return "\n".join(lines) if lines else "(empty)"


def _title(name: str) -> str:
    return "".join(word.capitalize() for word in name.split("_"))
