from __future__ import annotations

__all__ = [
    "CaptureError",
    "InvalidResolution",
    "NoActiveCamera",
    "IOFailure",
    "RenderError",
]


class CaptureError(RuntimeError):
    """Base class for failures surfaced to whoever triggered a capture."""


class InvalidResolution(CaptureError):
    """Raised when a width or height resolves to zero or less."""


class NoActiveCamera(CaptureError):
    """Raised when no viewport camera is available to render from."""


class IOFailure(CaptureError):
    """Raised when the output directory or image file cannot be written."""


class RenderError(CaptureError):
    """Raised on misuse of render targets (released texture, missing active target)."""
