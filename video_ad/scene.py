"""Backend-independent scene description and its SVG serialization.

A scene is the ordered list of drawable elements for one frame. Order is paint
order: later elements are drawn over earlier ones. Elements whose opacity is
not positive are dropped before rasterization, so they never touch the
anti-aliased edges of their neighbours.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, List, Tuple, Union
from xml.sax.saxutils import escape

from .timing import clamp01

SVG_NS = "http://www.w3.org/2000/svg"

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


@dataclass(frozen=True)
class TextElement:
    kind: ClassVar[str] = "text"

    content: str
    x: float
    y: float
    size: float
    color: str
    opacity: float = 1.0
    anchor: str = "middle"
    weight: str = "normal"
    font_family: str = "Georgia, serif"

    @property
    def visible(self) -> bool:
        return self.opacity > 0


@dataclass(frozen=True)
class RectElement:
    kind: ClassVar[str] = "rect"

    x: float
    y: float
    width: float
    height: float
    color: str
    opacity: float = 1.0
    corner_radius: float = 0.0

    @property
    def visible(self) -> bool:
        return self.opacity > 0


@dataclass(frozen=True)
class LineElement:
    kind: ClassVar[str] = "line"

    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    opacity: float = 1.0
    stroke_width: float = 1.0

    @property
    def visible(self) -> bool:
        return self.opacity > 0


@dataclass(frozen=True)
class CircleElement:
    kind: ClassVar[str] = "circle"

    cx: float
    cy: float
    r: float
    color: str
    opacity: float = 1.0
    stroke_only: bool = False
    stroke_width: float = 1.0

    @property
    def visible(self) -> bool:
        return self.opacity > 0


DrawableElement = Union[TextElement, RectElement, LineElement, CircleElement]

TEXT_ANCHORS = ("start", "middle", "end")


@dataclass(frozen=True)
class Scene:
    width: int
    height: int
    background: str
    elements: Tuple[DrawableElement, ...] = field(default_factory=tuple)

    def visible_elements(self) -> List[DrawableElement]:
        """Elements to paint, in paint order, with zero-opacity ones removed."""
        return [element for element in self.elements if element.visible]


def escape_text(text: str) -> str:
    """Escape the five XML-reserved characters."""
    return escape(str(text), _ENTITIES)


def _num(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def _opacity(value: float) -> str:
    return f"{clamp01(value):.3f}"


def element_to_svg(element: DrawableElement) -> str:
    if isinstance(element, TextElement):
        anchor = element.anchor if element.anchor in TEXT_ANCHORS else "middle"
        return (
            f'<text x="{_num(element.x)}" y="{_num(element.y)}" '
            f'font-family="{escape_text(element.font_family)}" font-size="{_num(element.size)}" '
            f'font-weight="{escape_text(element.weight)}" fill="{escape_text(element.color)}" '
            f'opacity="{_opacity(element.opacity)}" text-anchor="{anchor}">'
            f"{escape_text(element.content)}</text>"
        )
    if isinstance(element, RectElement):
        radius = f' rx="{_num(element.corner_radius)}"' if element.corner_radius > 0 else ""
        return (
            f'<rect x="{_num(element.x)}" y="{_num(element.y)}" '
            f'width="{_num(element.width)}" height="{_num(element.height)}"{radius} '
            f'fill="{escape_text(element.color)}" opacity="{_opacity(element.opacity)}"/>'
        )
    if isinstance(element, LineElement):
        return (
            f'<line x1="{_num(element.x1)}" y1="{_num(element.y1)}" '
            f'x2="{_num(element.x2)}" y2="{_num(element.y2)}" '
            f'stroke="{escape_text(element.color)}" stroke-width="{_num(element.stroke_width)}" '
            f'opacity="{_opacity(element.opacity)}"/>'
        )
    if isinstance(element, CircleElement):
        if element.stroke_only:
            paint = (
                f'fill="none" stroke="{escape_text(element.color)}" '
                f'stroke-width="{_num(element.stroke_width)}"'
            )
        else:
            paint = f'fill="{escape_text(element.color)}"'
        return (
            f'<circle cx="{_num(element.cx)}" cy="{_num(element.cy)}" r="{_num(element.r)}" '
            f'{paint} opacity="{_opacity(element.opacity)}"/>'
        )
    raise TypeError(f"Unsupported scene element: {element!r}")


def scene_to_svg(scene: Scene) -> str:
    """Serialize a scene to standalone SVG markup for the rasterizer."""
    body = [
        f'<rect width="{scene.width}" height="{scene.height}" fill="{escape_text(scene.background)}"/>'
    ]
    body.extend(element_to_svg(element) for element in scene.visible_elements())
    inner = "\n  ".join(body)
    return (
        f'<svg width="{scene.width}" height="{scene.height}" '
        f'viewBox="0 0 {scene.width} {scene.height}" xmlns="{SVG_NS}">\n'
        f"  {inner}\n"
        "</svg>\n"
    )


__all__ = [
    "TextElement",
    "RectElement",
    "LineElement",
    "CircleElement",
    "DrawableElement",
    "Scene",
    "escape_text",
    "element_to_svg",
    "scene_to_svg",
]
