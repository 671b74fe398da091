"""Tests for the capture devices and JPEG normalisation."""

from __future__ import annotations

import base64
import io

import numpy as np
import pytest
from PIL import Image

from app.config import Settings
from app.infrastructure.capture import (
    BrowserMediaCapture,
    CaptureError,
    NativeCapture,
    normalize_image_bytes,
    select_capture_device,
)


def _png_bytes(color=(30, 160, 60)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 8), color + (255,)).save(buffer, format="PNG")
    return buffer.getvalue()


def _decoded(image) -> Image.Image:
    return Image.open(io.BytesIO(base64.b64decode(image.data)))


def test_files_are_normalised_to_jpeg():
    image = normalize_image_bytes(_png_bytes())

    assert image.content_type == "image/jpeg"
    assert image.as_data_url().startswith("data:image/jpeg;base64,")
    decoded = _decoded(image)
    assert decoded.format == "JPEG"
    assert decoded.mode == "RGB"


def test_unreadable_file_is_rejected():
    with pytest.raises(CaptureError):
        normalize_image_bytes(b"not an image")
    with pytest.raises(CaptureError):
        normalize_image_bytes(b"")


def test_browser_capture_requires_a_running_stream_and_a_frame():
    device = BrowserMediaCapture()

    with pytest.raises(CaptureError, match="not started"):
        device.capture()
    with pytest.raises(CaptureError):
        device.push_frame(_png_bytes())

    device.start()
    with pytest.raises(CaptureError, match="No frame"):
        device.capture()

    device.push_frame(_png_bytes())
    assert _decoded(device.capture()).size == (8, 8)

    device.stop()
    assert device.is_streaming is False


class FakeCamera:
    def __init__(self, opened: bool = True, frame=None) -> None:
        self.opened = opened
        self.frame = frame
        self.released = False

    def isOpened(self) -> bool:
        return self.opened

    def read(self):
        return (self.frame is not None, self.frame)

    def release(self) -> None:
        self.released = True


def test_native_capture_reads_a_frame_from_the_camera():
    frame = np.zeros((6, 4, 3), dtype=np.uint8)
    frame[:, :, 0] = 255
    camera = FakeCamera(frame=frame)
    device = NativeCapture(0, capture_factory=lambda index: camera)

    device.start()
    image = device.capture()
    device.stop()

    decoded = _decoded(image)
    assert decoded.size == (4, 6)
    red, green, blue = decoded.getpixel((1, 1))
    assert blue > red
    assert camera.released is True


def test_native_capture_reports_a_missing_camera():
    camera = FakeCamera(opened=False)
    device = NativeCapture(0, capture_factory=lambda index: camera)

    with pytest.raises(CaptureError, match="Camera not available"):
        device.start()
    assert camera.released is True
    assert device.is_streaming is False


def test_native_capture_reports_read_failures():
    device = NativeCapture(0, capture_factory=lambda index: FakeCamera(frame=None))
    device.start()

    with pytest.raises(CaptureError, match="Failed to capture"):
        device.capture()


def test_select_capture_device_honours_the_configured_backend():
    assert isinstance(select_capture_device(Settings(capture_backend="browser")), BrowserMediaCapture)
    assert isinstance(select_capture_device(Settings(capture_backend="native")), NativeCapture)


def test_auto_selection_looks_for_a_camera(monkeypatch):
    monkeypatch.setattr(
        "app.infrastructure.capture._native_camera_present", lambda index: False
    )

    assert isinstance(select_capture_device(Settings(capture_backend="auto")), BrowserMediaCapture)
