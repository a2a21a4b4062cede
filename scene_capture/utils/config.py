# scene_capture/utils/config.py
from __future__ import annotations

import functools
import re
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# ---------- Enums ----------

class ResolutionPreset(str, Enum):
    """Selectable capture resolutions. Every preset except Custom has a fixed width."""

    HD = "HD"
    FHD = "FHD"
    QHD = "QHD"
    UHD_4K = "4K"
    UHD_8K = "8K"
    Custom = "Custom"

    @property
    def reference_width(self) -> Optional[int]:
        return _REFERENCE_WIDTHS.get(self)

    @classmethod
    def parse(cls, value: "ResolutionPreset | str") -> "ResolutionPreset":
        """Accept enum members, their values/names in any case, and the `_FHD` style names."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lstrip("_").upper()
        for member in cls:
            if key in (member.value.upper(), member.name.upper()):
                return member
        raise ValueError(f"Unknown resolution preset: {value!r}")

    @classmethod
    def _missing_(cls, value):
        try:
            return cls.parse(value)
        except ValueError:
            return None


_REFERENCE_WIDTHS = {
    ResolutionPreset.HD: 1280,
    ResolutionPreset.FHD: 1920,
    ResolutionPreset.QHD: 2560,
    ResolutionPreset.UHD_4K: 3840,
    ResolutionPreset.UHD_8K: 7680,
}


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_HEX_COLOR = re.compile(r"^#?([0-9a-fA-F]{6})$")


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Configuration for scene capture.

    Precedence: environment variables, then `.env` in the working directory,
    then the defaults below.
    """

    # ---- Output ----
    PROJECT_ROOT: Path = Field(default_factory=lambda: Path.cwd())
    OUTPUT_DIR: Path = Field(default=Path("Assets/Screenshots"), description="Relative paths resolve under PROJECT_ROOT")

    # ---- Capture defaults ----
    DEFAULT_PRESET: ResolutionPreset = Field(default=ResolutionPreset.FHD)
    LOCK_TO_VIEWPORT_ASPECT: bool = Field(default=False)

    # ---- Headless viewport used by the CLI ----
    VIEWPORT_WIDTH: int = Field(default=1600, ge=1, le=16384)
    VIEWPORT_HEIGHT: int = Field(default=900, ge=1, le=16384)
    BACKGROUND_COLOR: str = Field(default="#314d79", description="Clear colour as #rrggbb")

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./scene-capture.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DEFAULT_PRESET", mode="before")
    @classmethod
    def _coerce_preset(cls, v):
        return ResolutionPreset.parse(v)

    @field_validator("OUTPUT_DIR", mode="after")
    @classmethod
    def _anchor_output_dir(cls, v: Path, info: ValidationInfo) -> Path:
        if v.is_absolute():
            return v
        root = info.data.get("PROJECT_ROOT") or Path.cwd()
        return Path(root) / v

    @field_validator("LOG_FILE", mode="after")
    @classmethod
    def _absolutize_log_file(cls, v: Path) -> Path:
        return v if v.is_absolute() else Path.cwd() / v

    @field_validator("BACKGROUND_COLOR")
    @classmethod
    def _hex_color(cls, v: str) -> str:
        m = _HEX_COLOR.match(v.strip())
        if not m:
            raise ValueError("BACKGROUND_COLOR must look like #rrggbb")
        return "#" + m.group(1).lower()

    def background_rgb(self) -> tuple[int, int, int]:
        h = self.BACKGROUND_COLOR.lstrip("#")
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` to reload after changing the environment.
    """
    return Settings()
