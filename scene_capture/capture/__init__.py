"""
Capture package for scene capture.
Resolution resolving, off-screen capture to PNG and the session a host drives.
"""

from .resolution import CaptureConfig, Resolution, resolve, viewport_aspect
from .offscreen import CaptureResult, capture
from .session import CaptureSession, ResolvedFields

__all__ = [
    "CaptureConfig",
    "Resolution",
    "resolve",
    "viewport_aspect",
    "CaptureResult",
    "capture",
    "CaptureSession",
    "ResolvedFields",
]
