from __future__ import annotations

"""Scene description
-------------------
Pydantic models for what the reference camera draws (clear colour plus
depth-tested rectangles) and a YAML loader for scene files.
"""

import re
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


def hex_to_rgb(value: str) -> tuple[int, int, int]:
    m = _HEX_COLOR.match(value.strip())
    if not m:
        raise ValueError(f"Expected a #rrggbb colour, got {value!r}")
    h = m.group(1)
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


class SceneRect(BaseModel):
    """Axis-aligned quad in normalized viewport coordinates (origin top-left)."""

    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)
    width: float = Field(..., gt=0.0, le=1.0)
    height: float = Field(..., gt=0.0, le=1.0)
    color: str = Field(default="#ffffff")
    depth: float = Field(default=0.5, ge=0.0, lt=1.0, description="Smaller is closer to the camera")

    @field_validator("color")
    @classmethod
    def _valid_color(cls, v: str) -> str:
        hex_to_rgb(v)
        return v

    @property
    def rgb(self) -> tuple[int, int, int]:
        return hex_to_rgb(self.color)

    def pixel_bounds(self, width: int, height: int) -> tuple[int, int, int, int]:
        """Return (left, top, right, bottom) clamped to a width x height target."""
        left = min(width, max(0, round(self.x * width)))
        top = min(height, max(0, round(self.y * height)))
        right = min(width, max(left, round((self.x + self.width) * width)))
        bottom = min(height, max(top, round((self.y + self.height) * height)))
        return left, top, right, bottom


class Scene(BaseModel):
    background: Optional[str] = Field(default=None, description="Overrides the camera clear colour")
    rects: list[SceneRect] = Field(default_factory=list)

    @field_validator("background")
    @classmethod
    def _valid_background(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            hex_to_rgb(v)
        return v


def load_scene(path: Path | str) -> Scene:
    """Load a scene from a YAML file. An empty file is an empty scene."""
    scene_path = Path(path)
    if not scene_path.exists():
        raise FileNotFoundError(f"Scene file not found: {scene_path}")
    try:
        data = yaml.safe_load(scene_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as ye:
        raise ValueError(f"YAML parse error in {scene_path}: {ye}") from ye

    if data is None:
        return Scene()
    if not isinstance(data, dict):
        raise ValueError(f"Scene file {scene_path} must contain a mapping/object.")
    try:
        return Scene.model_validate(data)
    except ValidationError as ve:
        lines = [f"Invalid scene '{scene_path}':"]
        for e in ve.errors():
            loc = ".".join(str(p) for p in e.get("loc", []))
            lines.append(f"  - {loc}: {e.get('msg', 'invalid value')}")
        raise ValueError("\n".join(lines)) from ve


__all__ = ["Scene", "SceneRect", "hex_to_rgb", "load_scene"]
