"""Error types raised by the remote image and storage clients."""
from typing import Optional


class LensError(Exception):
    """Base class for every failure raised by the lens clients."""


class TransportFailure(LensError):
    """Network-level failure talking to a remote endpoint."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Request failed: {cause}")


class ApiError(LensError):
    """Remote endpoint answered with an unexpected HTTP status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"API error ({status}): {body}")

    def __repr__(self) -> str:
        return f"ApiError({self.status}, {self.body!r})"


class DecodeFailure(LensError):
    """Bytes could not be turned into an image."""


class EncodeFailure(LensError):
    """An image could not be encoded to base64."""


class NoCandidates(LensError):
    def __init__(self, message: str = "No image generated in response"):
        super().__init__(message)


class NoImageData(LensError):
    def __init__(self, message: str = "No image data found in response"):
        super().__init__(message)


class NoResultImage(LensError):
    def __init__(self, message: str = "No edited image returned from Nano Banana API"):
        super().__init__(message)


class DownloadFailure(LensError):
    """Secondary fetch of a result image URL failed."""

    def __init__(self, url: str, reason: Optional[str] = None):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download edited image from {url}: {reason}")
