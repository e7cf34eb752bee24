"""Unit tests for the OpenCV, mss and sounddevice drivers and their discovery.

The backend modules are replaced in sys.modules so no hardware (or native
library) is touched.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from mediadevices.core.driver.camera import CameraDriver
from mediadevices.core.driver.discovery import (
    discover_cameras,
    discover_microphones,
    discover_screens,
    register_default_drivers,
)
from mediadevices.core.driver.microphone import MicrophoneDriver
from mediadevices.core.driver.screen import ScreenDriver
from mediadevices.core.driver import discovery as discovery_module
from mediadevices.core.errors import (
    DeviceCloseError,
    DeviceError,
    DeviceOpenError,
    DeviceReadError,
)
from mediadevices.core.models import DeviceState, DeviceType
from mediadevices.core.prop.media import Audio, Media, Video
from mediadevices.core.settings import MediaDevicesSettings


def make_fake_cv2(opened_indices, width=1920, height=1080, fps=30):
    cv2 = MagicMock()
    cv2.CAP_PROP_FRAME_WIDTH = 3
    cv2.CAP_PROP_FRAME_HEIGHT = 4
    cv2.CAP_PROP_FPS = 5
    captures = []

    def factory(index):
        cap = MagicMock()
        cap.isOpened.return_value = index in opened_indices
        cap.get.side_effect = lambda prop: {3: width, 4: height, 5: fps}.get(prop, 0)
        cap.read.return_value = (True, np.zeros((height, width, 3), dtype=np.uint8))
        captures.append(cap)
        return cap

    cv2.VideoCapture.side_effect = factory
    cv2.captures = captures
    return cv2


def make_fake_mss(monitors):
    mss = MagicMock()
    sct = MagicMock()
    sct.monitors = monitors
    sct.__enter__.return_value = sct
    sct.grab.side_effect = lambda m: np.zeros((m["height"], m["width"], 4), dtype=np.uint8)
    mss.mss.return_value = sct
    mss.sct = sct
    return mss


def make_fake_sounddevice(devices):
    sd = MagicMock()
    sd.query_devices.return_value = devices
    stream = MagicMock()
    stream.read.return_value = (np.zeros((1024, 2), dtype=np.float32), False)
    sd.InputStream.return_value = stream
    sd.stream = stream
    return sd


MONITORS = [
    {"left": 0, "top": 0, "width": 4480, "height": 1440},  # Virtual "all monitors"
    {"left": 0, "top": 0, "width": 1920, "height": 1080},
    {"left": 1920, "top": 0, "width": 2560, "height": 1440},
]

AUDIO_DEVICES = [
    {
        "name": "Built-in Microphone",
        "max_input_channels": 2,
        "default_samplerate": 48000.0,
        "default_low_input_latency": 0.01,
    },
    {"name": "Built-in Output", "max_input_channels": 0, "default_samplerate": 48000.0},
    {"name": "USB Microphone", "max_input_channels": 1, "default_samplerate": 44100.0},
]


class TestCameraDriver:
    """Test suite for CameraDriver with a mocked cv2 module."""

    def test_properties_offer_resolutions_up_to_native(self):
        cv2 = make_fake_cv2({0})
        with patch.dict("sys.modules", {"cv2": cv2}):
            driver = CameraDriver(0)
            driver.open()
            props = driver.properties()
            driver.close()

        sizes = [(p.video.width, p.video.height) for p in props]
        assert sizes == [(640, 480), (1280, 720), (1920, 1080)]
        assert all(p.video.frame_rate == 30.0 for p in props)
        assert all(p.device_id == "camera_0" for p in props)
        cv2.captures[0].release.assert_called_once()

    def test_open_failure_releases_capture(self):
        cv2 = make_fake_cv2(set())
        with patch.dict("sys.modules", {"cv2": cv2}):
            driver = CameraDriver(3)
            with pytest.raises(DeviceOpenError):
                driver.open()

        assert driver.status() == DeviceState.CLOSED
        cv2.captures[0].release.assert_called_once()

    def test_record_applies_selected_configuration(self):
        cv2 = make_fake_cv2({0})
        with patch.dict("sys.modules", {"cv2": cv2}):
            driver = CameraDriver(0)
            driver.open()
            read = driver.video_record(Media(video=Video(width=1280, height=720, frame_rate=15.0)))
            frame = read()

        cap = cv2.captures[0]
        cap.set.assert_any_call(3, 1280)
        cap.set.assert_any_call(4, 720)
        cap.set.assert_any_call(5, 15.0)
        assert frame.shape == (1080, 1920, 3)

    def test_read_failure(self):
        cv2 = make_fake_cv2({0})
        with patch.dict("sys.modules", {"cv2": cv2}):
            driver = CameraDriver(0)
            driver.open()
            read = driver.video_record(Media())
            cv2.captures[0].read.return_value = (False, None)
            with pytest.raises(DeviceReadError):
                read()


class TestScreenDriver:
    """Test suite for ScreenDriver with a mocked mss module."""

    def test_properties_and_capture(self):
        mss = make_fake_mss(MONITORS)
        with patch.dict("sys.modules", {"mss": mss}):
            driver = ScreenDriver(2)
            driver.open()
            props = driver.properties()
            read = driver.video_record(props[0])
            frame = read()
            driver.close()

        assert len(props) == 1
        assert (props[0].video.width, props[0].video.height) == (2560, 1440)
        assert props[0].video.frame_format == "BGRA"
        assert frame.shape == (1440, 2560, 4)
        mss.sct.close.assert_called_once()

    def test_missing_monitor(self):
        mss = make_fake_mss(MONITORS)
        with patch.dict("sys.modules", {"mss": mss}):
            driver = ScreenDriver(5)
            with pytest.raises(DeviceOpenError):
                driver.open()
        mss.sct.close.assert_called_once()


class TestMicrophoneDriver:
    """Test suite for MicrophoneDriver with a mocked sounddevice module."""

    @pytest.fixture
    def driver(self):
        return MicrophoneDriver(
            0,
            label="Built-in Microphone",
            max_input_channels=2,
            default_sample_rate=44100,
            default_latency=0.01,
            block_size=1024,
        )

    def test_properties(self, driver):
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        with patch.dict("sys.modules", {"sounddevice": sd}):
            driver.open()
            props = driver.properties()

        sd.check_input_settings.assert_called_once_with(device=0)
        pairs = [(p.audio.sample_rate, p.audio.channel_count) for p in props]
        assert pairs == [
            (8000, 1),
            (8000, 2),
            (16000, 1),
            (16000, 2),
            (22050, 1),
            (22050, 2),
            (44100, 1),
            (44100, 2),
        ]
        assert all(p.audio.is_float and p.audio.latency == 0.01 for p in props)

    def test_record_and_close(self, driver):
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        with patch.dict("sys.modules", {"sounddevice": sd}):
            driver.open()
            read = driver.audio_record(Media(audio=Audio(channel_count=2, sample_rate=16000)))
            data = read()
            driver.close()

        sd.InputStream.assert_called_once_with(
            device=0, channels=2, samplerate=16000, blocksize=1024, dtype="float32"
        )
        sd.stream.start.assert_called_once()
        sd.stream.read.assert_called_once_with(1024)
        sd.stream.stop.assert_called_once()
        sd.stream.close.assert_called_once()
        assert data.shape == (1024, 2)

    def test_stream_closed_when_start_fails(self, driver):
        """A stream that fails to start is closed before the error propagates."""
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        sd.stream.start.side_effect = OSError("Device unavailable")
        with patch.dict("sys.modules", {"sounddevice": sd}):
            driver.open()
            with pytest.raises(DeviceError, match="Device unavailable"):
                driver.audio_record(Media(audio=Audio(channel_count=1, sample_rate=16000)))
            driver.close()

        sd.stream.close.assert_called_once()
        sd.stream.stop.assert_not_called()
        assert driver.status() == DeviceState.CLOSED

    def test_stream_closed_when_stop_fails(self, driver):
        """Closing the driver releases the stream even if stopping it fails."""
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        sd.stream.stop.side_effect = OSError("Stream stuck")
        with patch.dict("sys.modules", {"sounddevice": sd}):
            driver.open()
            driver.audio_record(Media(audio=Audio(channel_count=1, sample_rate=16000)))
            with pytest.raises(DeviceCloseError):
                driver.close()

        sd.stream.close.assert_called_once()
        assert driver.status() == DeviceState.CLOSED

    def test_invalid_device(self, driver):
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        sd.check_input_settings.side_effect = ValueError("no such device")
        with patch.dict("sys.modules", {"sounddevice": sd}):
            with pytest.raises(DeviceOpenError):
                driver.open()


class TestDiscovery:
    """Test suite for built-in driver discovery."""

    @pytest.fixture
    def settings(self):
        return MediaDevicesSettings(max_camera_index=10, max_consecutive_failures=5)

    def test_discover_screens_skips_virtual_monitor(self, settings):
        with patch.dict("sys.modules", {"mss": make_fake_mss(MONITORS)}):
            drivers = discover_screens(settings)

        assert [d.id for d in drivers] == ["screen_1", "screen_2"]
        assert all(d.info().device_type == DeviceType.SCREEN for d in drivers)
        assert all(d.status() == DeviceState.CLOSED for d in drivers)

    def test_discover_cameras_stops_after_consecutive_failures(self, settings):
        cv2 = make_fake_cv2({0})
        with patch.dict("sys.modules", {"cv2": cv2}):
            drivers = discover_cameras(settings)

        assert [d.id for d in drivers] == ["camera_0"]
        # Index 0 opens, indices 1-5 fail
        assert cv2.VideoCapture.call_count == 6
        for cap in cv2.captures:
            cap.release.assert_called_once()

    def test_discover_microphones_only_inputs(self, settings):
        with patch.dict("sys.modules", {"sounddevice": make_fake_sounddevice(AUDIO_DEVICES)}):
            drivers = discover_microphones(settings)

        assert [d.id for d in drivers] == ["audio_0", "audio_2"]
        assert [d.info().label for d in drivers] == ["Built-in Microphone", "USB Microphone"]

    def test_failing_backend_is_skipped(self, settings):
        sd = make_fake_sounddevice(AUDIO_DEVICES)
        sd.query_devices.side_effect = OSError("PortAudio library not found")
        with patch.dict("sys.modules", {"sounddevice": sd}):
            assert discover_microphones(settings) == []

    def test_register_default_drivers(self, manager, settings):
        settings.priority_overrides = {"USB Microphone": 0.1}
        modules = {
            "cv2": make_fake_cv2({0}),
            "mss": make_fake_mss(MONITORS),
            "sounddevice": make_fake_sounddevice(AUDIO_DEVICES),
        }
        with patch.dict("sys.modules", modules):
            registered = register_default_drivers(manager, settings)
            again = register_default_drivers(manager, settings)

        assert [d.id for d in registered] == [
            "camera_0",
            "audio_0",
            "audio_2",
            "screen_1",
            "screen_2",
        ]
        assert again == []
        assert len(manager) == 5
        assert manager.get("audio_2").info().priority == 0.1
        assert manager.get("audio_0").info().priority == 0.0

    def test_register_respects_disabled_backends(self, manager):
        settings = MediaDevicesSettings(enable_cameras=False, enable_microphones=False)
        with patch.dict("sys.modules", {"mss": make_fake_mss(MONITORS)}):
            registered = register_default_drivers(manager, settings)

        assert [d.id for d in registered] == ["screen_1", "screen_2"]

    def test_register_loads_saved_settings(self, manager, monkeypatch):
        """Without explicit settings, discovery uses the saved settings file."""
        saved = MediaDevicesSettings(enable_cameras=False, enable_microphones=False)
        settings_manager = MagicMock()
        settings_manager.return_value.load_settings.return_value = saved
        monkeypatch.setattr(discovery_module, "SettingsManager", settings_manager)

        with patch.dict("sys.modules", {"mss": make_fake_mss(MONITORS)}):
            registered = register_default_drivers(manager)

        settings_manager.return_value.load_settings.assert_called_once()
        assert [d.id for d in registered] == ["screen_1", "screen_2"]
