"""Animated video templates and their registry."""
from __future__ import annotations

from typing import Dict, List, Type

from ..errors import TemplateNotFound
from ..settings import LayoutSettings
from .base import VideoTemplate
from .intro import IntroTemplate
from .kinetic import KineticTemplate
from .options import IntroOptions, KineticOptions, TemplateOptions, TestimonialOptions
from .testimonial import TestimonialTemplate

_REGISTRY: Dict[str, Type[VideoTemplate]] = {
    cls.name: cls for cls in (IntroTemplate, KineticTemplate, TestimonialTemplate)
}


def available_templates() -> List[str]:
    return list(_REGISTRY.keys())


def get_template(name: str, layout: LayoutSettings) -> VideoTemplate:
    """Instantiate the template called ``name`` or raise :class:`TemplateNotFound`."""
    key = (name or "").strip().lower()
    template_cls = _REGISTRY.get(key)
    if template_cls is None:
        raise TemplateNotFound(name, available_templates())
    return template_cls(layout)


__all__ = [
    "VideoTemplate",
    "IntroTemplate",
    "KineticTemplate",
    "TestimonialTemplate",
    "IntroOptions",
    "KineticOptions",
    "TestimonialOptions",
    "TemplateOptions",
    "available_templates",
    "get_template",
]
