"""Per-template option types.

Each template owns one frozen options dataclass. ``from_mapping`` rejects keys
the template does not understand, fails on missing required fields and fills
documented defaults for the rest, so nothing silently defaults deep inside
scene building.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Iterable, Mapping, Optional, Tuple, Union

from ..errors import InvalidTemplateOptions


def _present(values: Mapping[str, Any]) -> dict:
    return {key: value for key, value in values.items() if value is not None}


def _check_keys(
    template: str,
    values: Mapping[str, Any],
    allowed: Iterable[str],
    required: Iterable[str],
) -> None:
    allowed_set = set(allowed)
    unknown = sorted(key for key in values if key not in allowed_set)
    if unknown:
        raise InvalidTemplateOptions(
            f"Unsupported option(s) {', '.join(unknown)}; accepted: {', '.join(sorted(allowed_set))}",
            template=template,
        )
    missing = [key for key in required if key not in values]
    if missing:
        raise InvalidTemplateOptions(
            f"Missing required option(s): {', '.join(missing)}",
            template=template,
        )


def _text(template: str, key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidTemplateOptions(
            f"Option '{key}' must be text, got {type(value).__name__}",
            template=template,
        )
    if not value.strip():
        raise InvalidTemplateOptions(f"Option '{key}' must not be blank", template=template)
    return value


def _optional_text(template: str, key: str, value: Any) -> Optional[str]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return _text(template, key, value)


def _field_names(cls) -> Tuple[str, ...]:
    return tuple(f.name for f in fields(cls))


@dataclass(frozen=True)
class IntroOptions:
    template: ClassVar[str] = "intro"
    required: ClassVar[Tuple[str, ...]] = ()

    headline: str = "Growth, engineered."
    subtitle: str = "medici.codes"

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "IntroOptions":
        present = _present(values)
        _check_keys(cls.template, present, _field_names(cls), cls.required)
        defaults = cls()
        return cls(
            headline=_text(cls.template, "headline", present.get("headline", defaults.headline)),
            subtitle=_text(cls.template, "subtitle", present.get("subtitle", defaults.subtitle)),
        )


@dataclass(frozen=True)
class KineticOptions:
    template: ClassVar[str] = "kinetic"
    required: ClassVar[Tuple[str, ...]] = ("texts",)

    texts: Tuple[str, ...]

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "KineticOptions":
        present = _present(values)
        _check_keys(cls.template, present, _field_names(cls), cls.required)
        raw = present["texts"]
        if isinstance(raw, str):
            phrases: Tuple[Any, ...] = (raw,)
        elif isinstance(raw, (list, tuple)):
            phrases = tuple(raw)
        else:
            raise InvalidTemplateOptions(
                f"Option 'texts' must be a list of phrases, got {type(raw).__name__}",
                template=cls.template,
            )
        if not phrases:
            raise InvalidTemplateOptions("At least one phrase is required in 'texts'", template=cls.template)
        return cls(texts=tuple(_text(cls.template, "texts", phrase) for phrase in phrases))


@dataclass(frozen=True)
class TestimonialOptions:
    __test__ = False  # keep pytest from collecting this as a test class

    template: ClassVar[str] = "testimonial"
    required: ClassVar[Tuple[str, ...]] = ("headline",)

    headline: str
    body: Optional[str] = None
    cta: Optional[str] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TestimonialOptions":
        present = _present(values)
        _check_keys(cls.template, present, _field_names(cls), cls.required)
        return cls(
            headline=_text(cls.template, "headline", present["headline"]),
            body=_optional_text(cls.template, "body", present.get("body")),
            cta=_optional_text(cls.template, "cta", present.get("cta")),
        )


TemplateOptions = Union[IntroOptions, KineticOptions, TestimonialOptions]

__all__ = ["IntroOptions", "KineticOptions", "TestimonialOptions", "TemplateOptions"]
