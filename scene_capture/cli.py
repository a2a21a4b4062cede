# scene_capture/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Resolve capture sizes and render scene files to PNG from a terminal.
Thin wrapper around the capture session and the reference scene camera.
"""

import json
import re
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import click

from scene_capture.capture.resolution import CaptureConfig
from scene_capture.capture.session import CaptureSession
from scene_capture.errors import CaptureError
from scene_capture.render.camera import SceneCamera, ViewportRegistry
from scene_capture.render.scene import Scene, load_scene
from scene_capture.utils.config import ResolutionPreset, get_settings
from scene_capture.utils.logger import bind, get_logger, set_log_level, unbind


# -------- helpers --------

_VIEWPORT = re.compile(r"^\s*(\d+)\s*[xX]\s*(\d+)\s*$")
PRESET_CHOICES = [p.value for p in ResolutionPreset]


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _parse_viewport(ctx, param, value: Optional[str]) -> Optional[Tuple[int, int]]:
    if value is None:
        return None
    m = _VIEWPORT.match(value)
    if not m or int(m.group(1)) <= 0 or int(m.group(2)) <= 0:
        raise click.BadParameter("expected WIDTHxHEIGHT, e.g. 1600x900")
    return int(m.group(1)), int(m.group(2))


def _build_session(
    preset: Optional[str],
    width: Optional[str],
    height: Optional[str],
    lock: Optional[bool],
    viewport: Optional[Tuple[int, int]],
    scene: Optional[Scene] = None,
    output_dir: Optional[str] = None,
) -> CaptureSession:
    s = get_settings()
    vw, vh = viewport or (s.VIEWPORT_WIDTH, s.VIEWPORT_HEIGHT)
    camera = SceneCamera(scene, pixel_width=vw, pixel_height=vh, background=s.background_rgb())
    config = CaptureConfig(
        preset=preset or s.DEFAULT_PRESET,
        custom_width=width,
        custom_height=height,
        lock_to_viewport_aspect=s.LOCK_TO_VIEWPORT_ASPECT if lock is None else lock,
    )
    return CaptureSession(ViewportRegistry(camera), config=config, output_dir=output_dir, settings=s)


def capture_options(func):
    """Options shared by `resolve` and `capture`, mapped onto CaptureConfig."""
    decorators = [
        click.option("--preset", type=click.Choice(PRESET_CHOICES, case_sensitive=False), default=None,
                     help="Resolution preset (default: DEFAULT_PRESET setting)"),
        click.option("--width", type=str, default=None, help="Custom width (Custom preset only)"),
        click.option("--height", type=str, default=None,
                     help="Custom height (Custom preset only; ignored with --lock)"),
        click.option("--lock/--no-lock", default=None, help="Derive height from the viewport aspect ratio"),
        click.option("--viewport", type=str, default=None, callback=_parse_viewport,
                     help="Viewport size as WIDTHxHEIGHT (default: VIEWPORT_WIDTH x VIEWPORT_HEIGHT)"),
    ]
    for dec in reversed(decorators):
        func = dec(func)
    return func


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="scene-capture")
def cli(log_level: Optional[str]):
    _ = get_settings()
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    data = {k: (str(v) if isinstance(v, Path) else getattr(v, "value", v)) for k, v in s.model_dump().items()}
    _echo_json(data)


@cli.command("presets")
def cmd_presets():
    """List resolution presets and their reference widths."""
    for p in ResolutionPreset:
        width = p.reference_width
        click.echo(f" - {p.value:<6} {width if width is not None else '(width/height fields)'}")


@cli.command("resolve")
@capture_options
def cmd_resolve(preset, width, height, lock, viewport):
    """Print the capture size the given selections resolve to."""
    session = _build_session(preset, width, height, lock, viewport)
    try:
        size = session.resolve()
    except CaptureError as e:
        click.echo(f"ERR {e}")
        sys.exit(1)
    click.echo(str(size))


@cli.command("capture")
@capture_options
@click.option("--scene", "scene_file", type=click.Path(dir_okay=False, exists=True), default=None,
              help="YAML scene to render (default: empty scene)")
@click.option("--out", "output_dir", type=click.Path(file_okay=False), default=None,
              help="Output directory (default: OUTPUT_DIR setting)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the capture result as JSON")
def cmd_capture(preset, width, height, lock, viewport, scene_file, output_dir, as_json):
    """
    Render the scene off-screen and save it as a PNG.

    Examples:
      scene-capture capture --preset 4K
      scene-capture capture --preset Custom --width 800 --height 600 --scene scenes/demo.yaml
    """
    log = get_logger(__name__)
    try:
        scene = load_scene(scene_file) if scene_file else None
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"ERR {e}")
        sys.exit(1)

    session = _build_session(preset, width, height, lock, viewport, scene=scene, output_dir=output_dir)
    bind(capture_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))
    try:
        result = session.capture()
    except CaptureError as e:
        log.error(f"Capture failed: {e}")
        click.echo(f"ERR {e}")
        sys.exit(1)
    finally:
        unbind("capture_id")

    if as_json:
        _echo_json(result.to_dict())
    else:
        click.echo(f"OK  {result.path} ({result.width}x{result.height})")


def main() -> None:
    cli(prog_name="scene-capture")


if __name__ == "__main__":
    main()
