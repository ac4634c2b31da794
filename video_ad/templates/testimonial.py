"""Quote card: accent bar, headline, optional body and a call-to-action pill."""
from __future__ import annotations

from typing import List

from ..scene import DrawableElement, RectElement, Scene
from ..timing import envelope, fade_in
from .base import VideoTemplate
from .options import TestimonialOptions

# Fixed geometry; the accent bar does not follow text length.
BAR_BOX = (80, 320, 4, 160)
TEXT_X = 120
CTA_BOX = (120, 500, 280, 52)
CTA_RADIUS = 26


class TestimonialTemplate(VideoTemplate):
    __test__ = False

    name = "testimonial"
    description = "Quote card with CTA button"
    default_duration = 7.0
    options_type = TestimonialOptions

    def build_scene(self, elapsed: float, options: TestimonialOptions, duration: float) -> Scene:
        layout = self.layout
        t = elapsed
        fade = self.global_fade(t, duration)
        elements: List[DrawableElement] = []

        bar_x, bar_y, bar_w, bar_h = BAR_BOX
        elements.append(
            RectElement(
                x=bar_x, y=bar_y, width=bar_w, height=bar_h,
                color=layout.accent, opacity=envelope(fade_in(t, 0.4, 0.3), fade),
            )
        )

        elements.append(
            self.text(options.headline, TEXT_X, 380, 52, "white", envelope(fade_in(t, 0.8, 0.6), fade), anchor="start")
        )
        if options.body:
            elements.append(
                self.text(options.body, TEXT_X, 440, 26, "#AAAAAA", envelope(fade_in(t, 1.5, 0.6), fade), anchor="start")
            )

        if options.cta:
            cta_alpha = envelope(fade_in(t, 2.8, 0.4), fade)
            x, y, w, h = CTA_BOX
            elements.append(
                RectElement(x=x, y=y, width=w, height=h, color=layout.accent, opacity=cta_alpha, corner_radius=CTA_RADIUS)
            )
            elements.append(
                self.text(
                    options.cta, x + w / 2, y + 32, 20, layout.background, cta_alpha,
                    weight="bold", sans=True,
                )
            )

        elements.append(self.watermark(20, fade))
        return self.make_scene(elements)
