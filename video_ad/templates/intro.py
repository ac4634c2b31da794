"""Brand reveal: headline, subtitle and brand mark fade in one after another."""
from __future__ import annotations

from ..scene import Scene
from ..timing import envelope, fade_in
from .base import VideoTemplate
from .options import IntroOptions


class IntroTemplate(VideoTemplate):
    name = "intro"
    description = "Brand reveal: headline and subtitle fade in"
    default_duration = 6.0
    options_type = IntroOptions

    def build_scene(self, elapsed: float, options: IntroOptions, duration: float) -> Scene:
        layout = self.layout
        t = elapsed
        w, h = layout.width, layout.height
        fade = self.global_fade(t, duration)

        return self.make_scene(
            [
                self.text(options.headline, w / 2, h / 2 - 20, 72, "white", envelope(fade_in(t, 0.8, 0.6), fade)),
                self.text(
                    options.subtitle, w / 2, h / 2 + 60, 28, "#AAAAAA",
                    envelope(fade_in(t, 1.8, 0.6), fade), sans=True,
                ),
                self.text(layout.brand_name, w / 2, h - 80, 24, layout.accent, envelope(fade_in(t, 3.0, 0.5), fade)),
                self.text(layout.brand_url, w / 2, h - 50, 16, "#666666", envelope(fade_in(t, 3.3, 0.5), fade)),
            ]
        )
