"""Exception hierarchy for render jobs."""
from __future__ import annotations

from typing import Optional, Sequence


class VideoAdError(RuntimeError):
    """Base class for failures that abort a render job."""

    def __init__(
        self,
        message: str,
        *,
        template: Optional[str] = None,
        frame_index: Optional[int] = None,
    ) -> None:
        self.template = template
        self.frame_index = frame_index
        super().__init__(self._with_context(message))

    def _with_context(self, message: str) -> str:
        context = []
        if self.template:
            context.append(f"template={self.template}")
        if self.frame_index is not None:
            context.append(f"frame={self.frame_index}")
        if not context:
            return message
        return f"{message} ({', '.join(context)})"


class TemplateNotFound(VideoAdError, LookupError):
    def __init__(self, name: str, available: Sequence[str]) -> None:
        self.name = name
        self.available = tuple(available)
        super().__init__(
            f"Unknown template: {name!r}. Available: {', '.join(self.available) or 'none'}"
        )


class InvalidTemplateOptions(VideoAdError, ValueError):
    """Missing, unknown or malformed template options."""


class RasterizationFailure(VideoAdError):
    """Scene markup could not be rasterized or the frame could not be written."""


class EncoderFailure(VideoAdError):
    def __init__(
        self,
        message: str,
        *,
        template: Optional[str] = None,
        returncode: Optional[int] = None,
        stderr_tail: Sequence[str] = (),
    ) -> None:
        self.returncode = returncode
        self.stderr_tail = tuple(stderr_tail)
        super().__init__(message, template=template)


class FilesystemError(VideoAdError):
    """Scratch directory or output file could not be created, moved or removed."""


__all__ = [
    "VideoAdError",
    "TemplateNotFound",
    "InvalidTemplateOptions",
    "RasterizationFailure",
    "EncoderFailure",
    "FilesystemError",
]
