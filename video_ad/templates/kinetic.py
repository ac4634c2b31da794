"""Kinetic typography: phrases ease in one slice at a time, the last one emphasised."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..scene import DrawableElement, Scene
from ..timing import ease_out_cubic, envelope, lerp
from .base import VideoTemplate
from .options import KineticOptions

LEAD_IN = 0.3
ENTRANCE = 0.2
EXIT = 0.15
RISE_PX = 20.0


@dataclass(frozen=True)
class PhraseWindow:
    """Time slice owned by one phrase: visible on [start, end)."""

    index: int
    start: float
    end: float

    def alpha(self, t: float) -> float:
        if self.start <= t < self.start + ENTRANCE:
            return ease_out_cubic((t - self.start) / ENTRANCE)
        if self.start + ENTRANCE <= t < self.end - EXIT:
            return 1.0
        if self.end - EXIT <= t < self.end:
            return 1.0 - (t - (self.end - EXIT)) / EXIT
        return 0.0

    def y_offset(self, t: float) -> float:
        if self.start <= t < self.start + ENTRANCE:
            return lerp(RISE_PX, 0.0, ease_out_cubic((t - self.start) / ENTRANCE))
        return 0.0


def phrase_windows(count: int, duration: float) -> List[PhraseWindow]:
    """Split ``duration - 1`` seconds into ``count`` equal, adjacent slices."""
    interval = (duration - 1.0) / count
    windows = []
    for idx in range(count):
        start = idx * interval + LEAD_IN
        windows.append(PhraseWindow(index=idx, start=start, end=start + interval))
    return windows


class KineticTemplate(VideoTemplate):
    name = "kinetic"
    description = "Kinetic typography: words slam in sequence"
    default_duration = 8.0
    min_duration = 1.0
    options_type = KineticOptions

    def build_scene(self, elapsed: float, options: KineticOptions, duration: float) -> Scene:
        layout = self.layout
        t = elapsed
        fade = self.global_fade(t, duration)
        last = len(options.texts) - 1

        elements: List[DrawableElement] = []
        # Slices are adjacent but not forced exclusive; a seam may show two phrases.
        for window, phrase in zip(phrase_windows(len(options.texts), duration), options.texts):
            emphasised = window.index == last
            elements.append(
                self.text(
                    phrase,
                    layout.width / 2,
                    layout.height / 2 + 20 + window.y_offset(t),
                    80 if emphasised else 64,
                    layout.accent if emphasised else "white",
                    envelope(window.alpha(t), fade),
                    weight="bold" if emphasised else "normal",
                )
            )

        elements.append(self.watermark(18, fade))
        return self.make_scene(elements)
