"""Exception hierarchy for the mediadevices library."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from mediadevices.core.prop.constraints import MediaConstraints
    from mediadevices.core.prop.media import Media


class MediaDevicesError(Exception):
    """Base class for every error raised by this library."""


# ============================================================================
# Selection Errors
# ============================================================================


@dataclass(frozen=True)
class Candidate:
    """A configuration that was considered and rejected during selection."""

    driver_id: str
    label: str
    media: "Media"


class NotFoundError(MediaDevicesError):
    """No (driver, configuration) pair satisfied the requested constraints.

    Attributes:
        candidates: Every configuration that was discovered, in scan order
        constraints: Snapshot of the request that could not be satisfied
    """

    def __init__(
        self,
        candidates: List[Candidate],
        constraints: Optional["MediaConstraints"] = None,
    ):
        self.candidates = list(candidates)
        self.constraints = constraints
        super().__init__(self._render())

    def _render(self) -> str:
        found = "\n\n".join(str(c.media) for c in self.candidates)
        return (
            "failed to find the best driver that fits the constraints:\n"
            "============ Found Properties ============\n\n"
            f"{found}\n\n"
            "=============== Constraints ==============\n\n"
            f"{self.constraints}\n"
        )


# ============================================================================
# Device Errors
# ============================================================================


class DeviceError(MediaDevicesError):
    """A driver operation failed."""

    def __init__(self, message: str, driver_id: Optional[str] = None):
        super().__init__(message)
        self.driver_id = driver_id


class DeviceOpenError(DeviceError):
    """A driver could not be opened."""


class DeviceCloseError(DeviceError):
    """A driver could not be closed."""


class DeviceStateError(DeviceError):
    """An operation was attempted in the wrong driver state."""


class DeviceReadError(DeviceError):
    """A running driver failed to deliver data."""


# ============================================================================
# Assembly Errors
# ============================================================================


class TrackConstructionError(MediaDevicesError):
    """A track could not be bound to its selected driver."""


class SessionAssemblyError(MediaDevicesError):
    """The media stream could not be assembled from its tracks."""
