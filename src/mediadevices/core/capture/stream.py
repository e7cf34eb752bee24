"""Media stream: an ordered collection of capture tracks."""

from __future__ import annotations

import logging
import threading
from typing import Iterator, List

from mediadevices.core.capture.track import AudioTrack, Track, VideoTrack
from mediadevices.core.errors import SessionAssemblyError

logger = logging.getLogger(__name__)


class MediaStream:
    """Ordered collection of tracks returned by a capture request.

    The stream owns its tracks; stop() stops every one of them.
    """

    def __init__(self, *tracks: Track):
        """Initialize the stream.

        Args:
            *tracks: Tracks in insertion order

        Raises:
            SessionAssemblyError: If two tracks share an id
        """
        self._tracks: dict[str, Track] = {}
        self._lock = threading.RLock()
        for track in tracks:
            if track.id in self._tracks:
                raise SessionAssemblyError(f"Duplicate track in stream: {track.id}")
            self._tracks[track.id] = track

        logger.debug(f"MediaStream created with {len(self._tracks)} track(s)")

    def get_tracks(self) -> List[Track]:
        """Get every track in insertion order."""
        with self._lock:
            return list(self._tracks.values())

    def get_video_tracks(self) -> List[VideoTrack]:
        """Get the video tracks in insertion order."""
        return [t for t in self.get_tracks() if isinstance(t, VideoTrack)]

    def get_audio_tracks(self) -> List[AudioTrack]:
        """Get the audio tracks in insertion order."""
        return [t for t in self.get_tracks() if isinstance(t, AudioTrack)]

    def add_track(self, track: Track) -> None:
        """Add a track to the stream.

        Raises:
            ValueError: If a track with the same id is already present
        """
        with self._lock:
            if track.id in self._tracks:
                raise ValueError(f"Track already in stream: {track.id}")
            self._tracks[track.id] = track
            logger.debug(f"Added track to stream: {track.id}")

    def remove_track(self, track: Track) -> None:
        """Remove a track from the stream without stopping it.

        Raises:
            KeyError: If the track is not in the stream
        """
        with self._lock:
            if track.id not in self._tracks:
                raise KeyError(f"Track not found: {track.id}")
            del self._tracks[track.id]
            logger.debug(f"Removed track from stream: {track.id}")

    def stop(self) -> None:
        """Stop every track in the stream."""
        for track in self.get_tracks():
            track.stop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tracks)

    def __iter__(self) -> Iterator[Track]:
        return iter(self.get_tracks())

    def __contains__(self, track: Track) -> bool:
        with self._lock:
            return track.id in self._tracks

    def __repr__(self) -> str:
        with self._lock:
            return f"MediaStream(tracks={len(self._tracks)})"
