"""Shared fixtures: an isolated driver registry and in-memory fake drivers."""

from typing import List, Optional

import numpy as np
import pytest

from mediadevices.core.driver.base import AudioRecorder, Driver, VideoRecorder
from mediadevices.core.driver.manager import DriverManager
from mediadevices.core.models import DeviceType, DriverInfo
from mediadevices.core.prop.media import Audio, Media, Video


class FakeDriverMixin:
    """Records backend calls and injects failures."""

    def _init_fake(self, props, fail_open, fail_close, fail_record, fail_properties):
        self.props = list(props)
        self.fail_open = fail_open
        self.fail_close = fail_close
        self.fail_record = fail_record
        self.fail_properties = fail_properties
        self.open_calls = 0
        self.close_calls = 0
        self.properties_calls = 0
        self.recorded_with: Optional[Media] = None

    def _open(self):
        self.open_calls += 1
        if self.fail_open:
            raise RuntimeError("device busy")

    def _close(self):
        self.close_calls += 1
        if self.fail_close:
            raise RuntimeError("device stuck")

    def _properties(self) -> List[Media]:
        self.properties_calls += 1
        if self.fail_properties:
            raise RuntimeError("properties unavailable")
        return self.props


class FakeVideoDriver(FakeDriverMixin, Driver, VideoRecorder):
    def __init__(
        self,
        label,
        props,
        device_type=DeviceType.CAMERA,
        priority=0.0,
        driver_id=None,
        fail_open=False,
        fail_close=False,
        fail_record=False,
        fail_properties=False,
    ):
        Driver.__init__(self, DriverInfo(label, device_type, priority), driver_id or label)
        self._init_fake(props, fail_open, fail_close, fail_record, fail_properties)

    def _video_record(self, media):
        self.recorded_with = media
        if self.fail_record:
            raise RuntimeError("cannot start")
        width = media.video.width or 4
        height = media.video.height or 3
        return lambda: np.zeros((height, width, 3), dtype=np.uint8)


class FakeAudioDriver(FakeDriverMixin, Driver, AudioRecorder):
    def __init__(
        self,
        label,
        props,
        priority=0.0,
        driver_id=None,
        fail_open=False,
        fail_close=False,
        fail_record=False,
        fail_properties=False,
    ):
        Driver.__init__(
            self, DriverInfo(label, DeviceType.MICROPHONE, priority), driver_id or label
        )
        self._init_fake(props, fail_open, fail_close, fail_record, fail_properties)

    def _audio_record(self, media):
        self.recorded_with = media
        if self.fail_record:
            raise RuntimeError("cannot start")
        channels = media.audio.channel_count or 1
        return lambda: np.zeros((256, channels), dtype=np.float32)


class FakePlainDriver(FakeDriverMixin, Driver):
    """A driver that records neither video nor audio."""

    def __init__(self, label, props=(), driver_id=None):
        Driver.__init__(self, DriverInfo(label, DeviceType.CAMERA), driver_id or label)
        self._init_fake(props, False, False, False, False)


def video_media(width, height, frame_rate=30.0, frame_format="BGR"):
    return Media(
        video=Video(width=width, height=height, frame_rate=frame_rate, frame_format=frame_format)
    )


def audio_media(sample_rate, channel_count=1):
    return Media(audio=Audio(sample_rate=sample_rate, channel_count=channel_count, is_float=True))


@pytest.fixture
def manager():
    """Create an empty, isolated DriverManager."""
    return DriverManager()


@pytest.fixture
def make_camera(manager):
    """Factory registering a fake camera (or screen) driver."""

    def factory(label, props=None, register=True, **kwargs):
        if props is None:
            props = [video_media(640, 480)]
        driver = FakeVideoDriver(label, props, **kwargs)
        if register:
            manager.register(driver)
        return driver

    return factory


@pytest.fixture
def make_screen(make_camera):
    """Factory registering a fake screen driver."""

    def factory(label, props=None, **kwargs):
        if props is None:
            props = [video_media(1920, 1080, 60.0, "BGRA")]
        return make_camera(label, props, device_type=DeviceType.SCREEN, **kwargs)

    return factory


@pytest.fixture
def make_microphone(manager):
    """Factory registering a fake microphone driver."""

    def factory(label, props=None, register=True, **kwargs):
        if props is None:
            props = [audio_media(48000)]
        driver = FakeAudioDriver(label, props, **kwargs)
        if register:
            manager.register(driver)
        return driver

    return factory


@pytest.fixture
def make_plain_driver(manager):
    """Factory registering a fake driver with no recorder capability."""

    def factory(label, props=()):
        driver = FakePlainDriver(label, props)
        manager.register(driver)
        return driver

    return factory


@pytest.fixture
def media_factories():
    """Helpers building configuration sets."""
    return video_media, audio_media
