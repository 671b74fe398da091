"""Still image capture from the browser media stream or a local camera."""

from __future__ import annotations

import base64
import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable

import cv2
from PIL import Image, UnidentifiedImageError

from app.config import Settings
from app.domain.entities import CapturedImage

logger = logging.getLogger(__name__)

JPEG_QUALITY = 90


class CaptureError(RuntimeError):
    """Raised when no image can be obtained from the capture device."""


def encode_jpeg(image: Image.Image) -> CapturedImage:
    """Return ``image`` as a base64 JPEG at the capture quality."""

    if image.mode != "RGB":
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=JPEG_QUALITY)
    return CapturedImage(data=base64.b64encode(buffer.getvalue()).decode("ascii"))


def normalize_image_bytes(raw: bytes) -> CapturedImage:
    if not raw:
        raise CaptureError("Image is empty")
    try:
        with Image.open(io.BytesIO(raw)) as image:
            image.load()
            return encode_jpeg(image)
    except (UnidentifiedImageError, OSError) as exc:
        raise CaptureError("File is not a supported image") from exc


class CaptureDevice(ABC):
    """Single capture interface over the available camera variants."""

    kind: str = ""

    def __init__(self) -> None:
        self._streaming = False

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def capture(self) -> CapturedImage:
        """Grab the current frame as an encoded still image."""

    def accept_file(self, raw: bytes) -> CapturedImage:
        """Use a user-selected image file instead of a live frame."""

        return normalize_image_bytes(raw)


class BrowserMediaCapture(CaptureDevice):
    """Frames are pushed by the client while its media stream is open."""

    kind = "browser"

    def __init__(self) -> None:
        super().__init__()
        self._latest_frame: bytes | None = None

    def start(self) -> None:
        self._streaming = True
        self._latest_frame = None
        logger.info("Browser media capture started")

    def stop(self) -> None:
        self._streaming = False
        self._latest_frame = None

    def push_frame(self, raw: bytes) -> None:
        if not self._streaming:
            raise CaptureError("Camera is not started")
        if not raw:
            raise CaptureError("Frame is empty")
        self._latest_frame = raw

    def capture(self) -> CapturedImage:
        if not self._streaming:
            raise CaptureError("Camera is not started")
        if self._latest_frame is None:
            raise CaptureError("No frame received from the camera yet")
        return normalize_image_bytes(self._latest_frame)


class NativeCapture(CaptureDevice):
    """Camera attached to the host, read through OpenCV."""

    kind = "native"

    def __init__(
        self,
        device_index: int = 0,
        *,
        capture_factory: Callable[[int], Any] = cv2.VideoCapture,
    ) -> None:
        super().__init__()
        self._device_index = device_index
        self._capture_factory = capture_factory
        self._camera: Any = None

    def start(self) -> None:
        if self._camera is not None:
            return
        camera = self._capture_factory(self._device_index)
        if not camera.isOpened():
            camera.release()
            raise CaptureError("Camera not available in this environment.")
        self._camera = camera
        self._streaming = True
        logger.info("Native camera %s opened", self._device_index)

    def stop(self) -> None:
        if self._camera is not None:
            self._camera.release()
            self._camera = None
        self._streaming = False

    def capture(self) -> CapturedImage:
        if self._camera is None:
            raise CaptureError("Camera is not started")
        ok, frame = self._camera.read()
        if not ok or frame is None:
            raise CaptureError("Failed to capture photo on device.")
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        return encode_jpeg(Image.fromarray(rgb))


def _native_camera_present(device_index: int) -> bool:
    return Path(f"/dev/video{device_index}").exists()


def select_capture_device(settings: Settings) -> CaptureDevice:
    """Pick the capture variant for this environment."""

    backend = settings.capture_backend
    if backend == "auto":
        backend = "native" if _native_camera_present(settings.camera_device_index) else "browser"
    if backend == "native":
        device: CaptureDevice = NativeCapture(settings.camera_device_index)
    else:
        device = BrowserMediaCapture()
    logger.info("Using %s capture device", device.kind)
    return device


__all__ = [
    "BrowserMediaCapture",
    "CaptureDevice",
    "CaptureError",
    "JPEG_QUALITY",
    "NativeCapture",
    "encode_jpeg",
    "normalize_image_bytes",
    "select_capture_device",
]
