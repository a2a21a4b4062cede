"""
Scene capture: render a viewport camera off-screen at a chosen resolution and
save the frame as a PNG.

Import submodules directly, e.g.:
  from scene_capture.capture.resolution import CaptureConfig, resolve
  from scene_capture.capture.session import CaptureSession
  from scene_capture.render.camera import SceneCamera, ViewportRegistry
"""

__version__ = "0.1.0"

__all__: list[str] = []
