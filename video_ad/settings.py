"""Typed render settings resolved once from the YAML config."""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

from config_loader import AppConfig

_HEX_COLOR = re.compile(r"^#(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")

RASTERIZERS = ("svg", "pillow")


@dataclass(frozen=True)
class FontPaths:
    serif: Optional[Path] = None
    serif_bold: Optional[Path] = None
    sans: Optional[Path] = None
    sans_bold: Optional[Path] = None

    def lookup(self, family: str, bold: bool) -> Optional[Path]:
        """Pick a font file by the generic family at the end of a CSS font list."""
        generic = family.split(",")[-1].strip().lower()
        if generic == "sans-serif":
            return (self.sans_bold if bold else None) or self.sans
        return (self.serif_bold if bold else None) or self.serif


@dataclass(frozen=True)
class LayoutSettings:
    width: int = 1920
    height: int = 1080
    fps: int = 25
    background: str = "#0A0A0A"
    accent: str = "#C9A84C"
    brand_name: str = "MEDICI"
    brand_url: str = "medici.codes"
    serif_family: str = "Georgia, serif"
    sans_family: str = "Inter, sans-serif"
    decorations: bool = False
    fonts: FontPaths = field(default_factory=FontPaths)


@dataclass(frozen=True)
class EncoderSettings:
    ffmpeg_path: str = "ffmpeg"
    codec: str = "libx264"
    preset: str = "fast"
    crf: int = 20
    pix_fmt: str = "yuv420p"


@dataclass(frozen=True)
class VideoAdSettings:
    """Everything a render job needs; never read from process globals."""

    output_dir: Path
    temp_dir: Path
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    encoder: EncoderSettings = field(default_factory=EncoderSettings)
    rasterizer: str = "svg"
    workers: int = 0
    progress_interval: int = 25

    @property
    def worker_count(self) -> int:
        if self.workers > 0:
            return self.workers
        return os.cpu_count() or 1

    def with_overrides(
        self,
        *,
        rasterizer: Optional[str] = None,
        workers: Optional[int] = None,
    ) -> "VideoAdSettings":
        changes: Dict[str, Any] = {}
        if rasterizer:
            changes["rasterizer"] = _normalize_rasterizer(rasterizer)
        if workers is not None:
            changes["workers"] = max(0, int(workers))
        return replace(self, **changes) if changes else self


def _to_int(value: Any, default: int, *, minimum: Optional[int] = None) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        parsed = default
    if minimum is not None:
        parsed = max(minimum, parsed)
    return parsed


def _to_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in {"true", "1", "yes", "on"}:
            return True
        if lower in {"false", "0", "no", "off"}:
            return False
    if isinstance(value, (int, float)):
        return bool(value)
    return default


def _to_color(value: Any, default: str) -> str:
    if value is None or value == "":
        return default
    text = str(value).strip()
    if not _HEX_COLOR.match(text):
        raise ValueError(f"Expected #RGB, #RRGGBB or #RRGGBBAA color, got: {value}")
    return text.upper()


def _to_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _resolve_font(base: Path, value: Any) -> Optional[Path]:
    if not value:
        return None
    candidate = Path(str(value)).expanduser()
    if candidate.is_absolute():
        return candidate
    if candidate.exists():
        return candidate.resolve()
    return (base / candidate).resolve()


def _normalize_rasterizer(value: Any) -> str:
    name = str(value or "svg").strip().lower()
    if name not in RASTERIZERS:
        raise ValueError(f"Unknown rasterizer '{value}'. Choose one of: {', '.join(RASTERIZERS)}")
    return name


def load_video_ad_settings(config: AppConfig) -> VideoAdSettings:
    """Build typed settings from the loaded config, applying defaults for missing keys."""
    video_cfg = config.section("video")
    brand_cfg = config.section("brand")
    colors_cfg = config.section("colors")
    fonts_cfg = config.section("fonts")
    render_cfg = config.section("render")
    layout_cfg = config.section("layout")
    defaults = LayoutSettings()
    encoder_defaults = EncoderSettings()
    base = config.project_root

    fonts = FontPaths(
        serif=_resolve_font(base, fonts_cfg.get("serif")),
        serif_bold=_resolve_font(base, fonts_cfg.get("serif_bold")),
        sans=_resolve_font(base, fonts_cfg.get("sans")),
        sans_bold=_resolve_font(base, fonts_cfg.get("sans_bold")),
    )

    layout = LayoutSettings(
        width=_to_int(video_cfg.get("width"), defaults.width, minimum=16),
        height=_to_int(video_cfg.get("height"), defaults.height, minimum=16),
        fps=_to_int(video_cfg.get("fps"), defaults.fps, minimum=1),
        background=_to_color(colors_cfg.get("background"), defaults.background),
        accent=_to_color(colors_cfg.get("accent"), defaults.accent),
        brand_name=_to_text(brand_cfg.get("name"), defaults.brand_name),
        brand_url=_to_text(brand_cfg.get("url"), defaults.brand_url),
        serif_family=_to_text(fonts_cfg.get("serif_family"), defaults.serif_family),
        sans_family=_to_text(fonts_cfg.get("sans_family"), defaults.sans_family),
        decorations=_to_bool(layout_cfg.get("decorations"), defaults.decorations),
        fonts=fonts,
    )

    encoder = EncoderSettings(
        ffmpeg_path=_to_text(video_cfg.get("ffmpeg_path"), encoder_defaults.ffmpeg_path),
        codec=_to_text(video_cfg.get("codec"), encoder_defaults.codec),
        preset=_to_text(video_cfg.get("preset"), encoder_defaults.preset),
        crf=_to_int(video_cfg.get("crf"), encoder_defaults.crf, minimum=0),
        pix_fmt=_to_text(video_cfg.get("pix_fmt"), encoder_defaults.pix_fmt),
    )

    return VideoAdSettings(
        output_dir=config.output_dir,
        temp_dir=config.temp_dir,
        layout=layout,
        encoder=encoder,
        rasterizer=_normalize_rasterizer(render_cfg.get("rasterizer", "svg")),
        workers=_to_int(render_cfg.get("workers"), 0, minimum=0),
        progress_interval=_to_int(render_cfg.get("progress_interval"), 25, minimum=1),
    )


__all__ = [
    "FontPaths",
    "LayoutSettings",
    "EncoderSettings",
    "VideoAdSettings",
    "RASTERIZERS",
    "load_video_ad_settings",
]
