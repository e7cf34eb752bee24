"""Microphone driver backed by sounddevice."""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from mediadevices.core.driver.base import AudioRecorder, Driver, Reader
from mediadevices.core.models import PRIORITY_NORMAL, DeviceType, DriverInfo
from mediadevices.core.prop.media import Audio, Media

logger = logging.getLogger(__name__)

COMMON_SAMPLE_RATES = [8000, 16000, 22050, 44100, 48000]
DEFAULT_BLOCK_SIZE = 1024
SAMPLE_SIZE_BITS = 32  # float32 samples


class MicrophoneDriver(Driver, AudioRecorder):
    """Audio capture from a PortAudio input device.

    Recorded blocks are float32, interleaved, shaped (frames, channels).
    """

    def __init__(
        self,
        device_index: int,
        label: str,
        max_input_channels: int,
        default_sample_rate: int,
        default_latency: Optional[float] = None,
        priority: float = PRIORITY_NORMAL,
        driver_id: Optional[str] = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ):
        super().__init__(
            DriverInfo(label, DeviceType.MICROPHONE, priority),
            driver_id or f"audio_{device_index}",
        )
        self._device_index = device_index
        self._max_input_channels = max_input_channels
        self._default_sample_rate = default_sample_rate
        self._default_latency = default_latency
        self._block_size = block_size
        self._stream = None

    def _open(self) -> None:
        import sounddevice as sd

        sd.check_input_settings(device=self._device_index)

    def _close(self) -> None:
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.stop()
        finally:
            stream.close()

    def _properties(self) -> List[Media]:
        sample_rates = [r for r in COMMON_SAMPLE_RATES if r <= self._default_sample_rate]
        if self._default_sample_rate not in sample_rates:
            sample_rates.append(self._default_sample_rate)

        return [
            Media(
                device_id=self.id,
                audio=Audio(
                    channel_count=channels,
                    sample_rate=rate,
                    sample_size=SAMPLE_SIZE_BITS,
                    latency=self._default_latency,
                    is_big_endian=sys.byteorder == "big",
                    is_float=True,
                    is_interleaved=True,
                ),
            )
            for rate in sample_rates
            for channels in range(1, self._max_input_channels + 1)
        ]

    def _audio_record(self, media: Media) -> Reader:
        import sounddevice as sd

        stream = sd.InputStream(
            device=self._device_index,
            channels=media.audio.channel_count or 1,
            samplerate=media.audio.sample_rate or self._default_sample_rate,
            blocksize=self._block_size,
            dtype="float32",
        )
        try:
            stream.start()
        except Exception:
            stream.close()
            raise
        self._stream = stream
        block_size = self._block_size
        label = self.info().label

        def read():
            data, overflowed = stream.read(block_size)
            if overflowed:
                logger.warning(f"Audio input overflow on {label}")
            return data

        return read
