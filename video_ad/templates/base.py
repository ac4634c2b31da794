"""Base class shared by the animated video templates."""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from ..errors import InvalidTemplateOptions
from ..scene import CircleElement, DrawableElement, LineElement, RectElement, Scene, TextElement
from ..settings import LayoutSettings
from ..timing import fade_out

END_FADE_SECONDS = 0.5
TOP_BAR_HEIGHT = 4


class VideoTemplate(ABC):
    """A named animation: (elapsed time, options) -> Scene.

    Subclasses declare ``name``, ``description``, ``default_duration`` and
    ``options_type`` and implement :meth:`build_scene`. Scene building must be a
    pure function of its arguments so frames can be rendered in any order.
    """

    name: str = ""
    description: str = ""
    default_duration: float = 6.0
    options_type: Any = None
    # durations at or below this value are rejected
    min_duration: float = 0.0

    def __init__(self, layout: LayoutSettings) -> None:
        self.layout = layout

    @property
    def required_options(self) -> Tuple[str, ...]:
        return tuple(self.options_type.required)

    def parse_options(self, values: Optional[Mapping[str, Any]]) -> Any:
        return self.options_type.from_mapping(values or {})

    def resolve_duration(self, duration: Optional[float]) -> float:
        if duration is None:
            return float(self.default_duration)
        try:
            value = float(duration)
        except (TypeError, ValueError) as exc:
            raise InvalidTemplateOptions(
                f"Duration must be a number of seconds, got {duration!r}", template=self.name
            ) from exc
        if not math.isfinite(value) or value <= self.min_duration:
            raise InvalidTemplateOptions(
                f"Duration must be greater than {self.min_duration:g}s, got {duration!r}",
                template=self.name,
            )
        return value

    @abstractmethod
    def build_scene(self, elapsed: float, options: Any, duration: float) -> Scene:
        """Return the scene visible ``elapsed`` seconds into a clip of ``duration`` seconds."""

    # ------------------------------------------------------------------
    # Shared building blocks
    # ------------------------------------------------------------------

    @staticmethod
    def global_fade(elapsed: float, duration: float) -> float:
        return fade_out(elapsed, duration - END_FADE_SECONDS, END_FADE_SECONDS)

    def make_scene(self, elements: Sequence[DrawableElement]) -> Scene:
        layout = self.layout
        return Scene(
            width=layout.width,
            height=layout.height,
            background=layout.background,
            elements=tuple(self.chrome()) + tuple(elements),
        )

    def chrome(self) -> List[DrawableElement]:
        layout = self.layout
        w, h = layout.width, layout.height
        elements: List[DrawableElement] = [
            RectElement(x=0, y=0, width=w, height=TOP_BAR_HEIGHT, color=layout.accent),
        ]
        if layout.decorations:
            elements += [
                CircleElement(cx=60, cy=60, r=30, color=layout.accent, opacity=0.15, stroke_only=True, stroke_width=0.5),
                CircleElement(cx=w - 60, cy=h - 60, r=30, color=layout.accent, opacity=0.15, stroke_only=True, stroke_width=0.5),
                LineElement(x1=40, y1=40, x2=100, y2=40, color=layout.accent, opacity=0.1, stroke_width=0.5),
                LineElement(x1=w - 100, y1=h - 40, x2=w - 40, y2=h - 40, color=layout.accent, opacity=0.1, stroke_width=0.5),
            ]
        return elements

    def text(
        self,
        content: str,
        x: float,
        y: float,
        size: float,
        color: str,
        opacity: float,
        *,
        anchor: str = "middle",
        weight: str = "normal",
        sans: bool = False,
    ) -> TextElement:
        family = self.layout.sans_family if sans else self.layout.serif_family
        return TextElement(
            content=content,
            x=x,
            y=y,
            size=size,
            color=color,
            opacity=opacity,
            anchor=anchor,
            weight=weight,
            font_family=family,
        )

    def watermark(self, size: float, fade: float) -> TextElement:
        layout = self.layout
        return self.text(
            layout.brand_name,
            layout.width - 60,
            layout.height - 40,
            size,
            layout.accent,
            0.5 * fade,
            anchor="end",
        )


__all__ = ["VideoTemplate", "END_FADE_SECONDS", "TOP_BAR_HEIGHT"]
