"""Scene rasterizers: turn one Scene into one PNG frame on disk.

Two backends share the same contract:

- ``svg``: serialize the scene to SVG markup and rasterize it with CairoSVG.
- ``pillow``: paint the same elements with Pillow, one alpha layer per element.

Both skip elements whose opacity is not positive.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFont

from logging_utils import get_logger

from .errors import RasterizationFailure
from .scene import CircleElement, DrawableElement, LineElement, RectElement, Scene, TextElement, scene_to_svg
from .settings import FontPaths, VideoAdSettings

logger = get_logger(__name__)

_PIL_ANCHORS = {"start": "ls", "middle": "ms", "end": "rs"}

RGBA = Tuple[int, int, int, int]


class Rasterizer(ABC):
    """Port for the external rasterization engine."""

    name: str = ""

    @abstractmethod
    def rasterize(self, scene: Scene, destination: Path) -> Path:
        """Write ``scene`` as a PNG at ``destination`` and return the path."""


class SvgRasterizer(Rasterizer):
    name = "svg"

    def rasterize(self, scene: Scene, destination: Path) -> Path:
        markup = scene_to_svg(scene)
        try:
            import cairosvg  # needs the native cairo library
        except (ImportError, OSError) as exc:
            raise RasterizationFailure(
                "cairosvg is not available; install it or set render.rasterizer to 'pillow'"
            ) from exc

        try:
            cairosvg.svg2png(
                bytestring=markup.encode("utf-8"),
                write_to=str(destination),
                output_width=scene.width,
                output_height=scene.height,
            )
        except Exception as exc:
            raise RasterizationFailure(f"cairosvg failed for {destination.name}: {exc}") from exc
        return destination


class PillowRasterizer(Rasterizer):
    name = "pillow"

    def __init__(self, fonts: FontPaths | None = None) -> None:
        self.fonts = fonts or FontPaths()
        # FreeType faces are not shared between worker threads
        self._local = threading.local()

    def rasterize(self, scene: Scene, destination: Path) -> Path:
        try:
            canvas = Image.new("RGBA", (scene.width, scene.height), _rgba(scene.background))
            for element in scene.visible_elements():
                canvas = self._composite(canvas, element)
            canvas.save(destination, format="PNG", compress_level=6)
        except (OSError, ValueError) as exc:
            raise RasterizationFailure(f"Pillow failed for {destination.name}: {exc}") from exc
        return destination

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _composite(self, canvas: Image.Image, element: DrawableElement) -> Image.Image:
        layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer, "RGBA")
        fill = _rgba(element.color)

        if isinstance(element, TextElement):
            self._draw_text(draw, element, fill)
        elif isinstance(element, RectElement):
            box = _box(element.x, element.y, element.width, element.height)
            if element.corner_radius > 0:
                draw.rounded_rectangle(box, radius=int(round(element.corner_radius)), fill=fill)
            else:
                draw.rectangle(box, fill=fill)
        elif isinstance(element, LineElement):
            draw.line(
                [(element.x1, element.y1), (element.x2, element.y2)],
                fill=fill,
                width=max(1, int(round(element.stroke_width))),
            )
        elif isinstance(element, CircleElement):
            box = [element.cx - element.r, element.cy - element.r, element.cx + element.r, element.cy + element.r]
            if element.stroke_only:
                draw.ellipse(box, outline=fill, width=max(1, int(round(element.stroke_width))))
            else:
                draw.ellipse(box, fill=fill)
        else:
            raise ValueError(f"Unsupported scene element: {element!r}")

        opacity = min(1.0, element.opacity)
        if opacity < 1.0:
            alpha = layer.getchannel("A").point(lambda a: int(round(a * opacity)))
            layer.putalpha(alpha)
        return Image.alpha_composite(canvas, layer)

    def _draw_text(self, draw: ImageDraw.ImageDraw, element: TextElement, fill: RGBA) -> None:
        bold = element.weight.lower() in {"bold", "700", "800", "900"}
        size = max(1, int(round(element.size)))
        font, has_bold_face = self._font(element.font_family, bold, size)
        # No bold face on disk: thicken the regular face instead
        stroke = max(1, size // 40) if bold and not has_bold_face else 0
        anchor = element.anchor if element.anchor in _PIL_ANCHORS else "middle"

        if isinstance(font, ImageFont.FreeTypeFont):
            draw.text(
                (element.x, element.y),
                element.content,
                font=font,
                fill=fill,
                anchor=_PIL_ANCHORS[anchor],
                stroke_width=stroke,
                stroke_fill=fill,
            )
            return

        left, _top, right, bottom = draw.textbbox((0, 0), element.content, font=font)
        width = right - left
        dx = {"start": 0.0, "middle": width / 2, "end": float(width)}[anchor]
        draw.text((element.x - dx, element.y - bottom), element.content, font=font, fill=fill)

    def _font(self, family: str, bold: bool, size: int):
        cache: Dict[Tuple[str, bool, int], tuple] = getattr(self._local, "fonts", None)
        if cache is None:
            cache = self._local.fonts = {}
        key = (family, bold, size)
        if key in cache:
            return cache[key]

        path = self.fonts.lookup(family, bold)
        has_bold_face = bold and path is not None and path != self.fonts.lookup(family, False)
        font = None
        if path is not None:
            try:
                font = ImageFont.truetype(str(path), size=size)
            except OSError:
                logger.warning("Could not load font %s; using fallback", path)
                has_bold_face = False
        if font is None:
            fallback = "DejaVuSans-Bold.ttf" if bold else "DejaVuSans.ttf"
            try:
                font = ImageFont.truetype(fallback, size=size)
                has_bold_face = bold
            except OSError:
                font = ImageFont.load_default(size=size)
                has_bold_face = False

        cache[key] = (font, has_bold_face)
        return cache[key]


def _rgba(color: str) -> RGBA:
    try:
        value = ImageColor.getrgb(color)
    except ValueError as exc:
        raise ValueError(f"Unsupported color: {color!r}") from exc
    if len(value) == 3:
        return (value[0], value[1], value[2], 255)
    return value  # type: ignore[return-value]


def _box(x: float, y: float, width: float, height: float) -> list:
    # Pillow boxes include their right/bottom edge; SVG rects do not
    return [x, y, x + max(width - 1, 0), y + max(height - 1, 0)]


def make_rasterizer(settings: VideoAdSettings) -> Rasterizer:
    if settings.rasterizer == "pillow":
        return PillowRasterizer(settings.layout.fonts)
    return SvgRasterizer()


__all__ = ["Rasterizer", "SvgRasterizer", "PillowRasterizer", "make_rasterizer"]
