"""
Host surfaces the lens controller talks to: where images and status text are
shown, and where camera frames come from.
"""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from PIL import Image

from core.image_codec import decode_base64


class DisplaySurface(ABC):
    """Image panel, status text and busy spinner of the lens UI."""

    @abstractmethod
    def show_image(self, image: Image.Image) -> None:
        pass

    @abstractmethod
    def show_text(self, text: str) -> None:
        pass

    @abstractmethod
    def set_busy(self, busy: bool) -> None:
        pass


class LensDisplay(DisplaySurface):
    """In-memory display that keeps whatever was last shown."""

    def __init__(self):
        self.image: Optional[Image.Image] = None
        self.text: str = ""
        self.busy: bool = False

    def show_image(self, image: Image.Image) -> None:
        self.image = image

    def show_text(self, text: str) -> None:
        self.text = text

    def set_busy(self, busy: bool) -> None:
        self.busy = busy


class CameraSource(ABC):
    @abstractmethod
    async def capture(self) -> Image.Image:
        """Acquire one frame from the camera."""


class CameraUnavailable(Exception):
    pass


class UploadedFrameCamera(CameraSource):
    """
    Camera backed by frames pushed from a client over HTTP.

    Each frame is consumed by exactly one capture.
    """

    def __init__(self):
        self._frames: "asyncio.Queue[str]" = asyncio.Queue()

    def push_frame(self, image_data: str) -> None:
        self._frames.put_nowait(image_data)

    async def capture(self) -> Image.Image:
        try:
            image_data = self._frames.get_nowait()
        except asyncio.QueueEmpty:
            raise CameraUnavailable("No camera frame available")
        return decode_base64(image_data)
