from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from video_ad.errors import InvalidTemplateOptions, TemplateNotFound, VideoAdError
from video_ad.scene import CircleElement, LineElement, RectElement, TextElement
from video_ad.settings import LayoutSettings
from video_ad.templates import (
    IntroTemplate,
    KineticOptions,
    KineticTemplate,
    TestimonialOptions,
    TestimonialTemplate,
    available_templates,
    get_template,
)
from video_ad.templates.kinetic import phrase_windows

LAYOUT = LayoutSettings()


def _texts(scene) -> list:
    return [element for element in scene.elements if isinstance(element, TextElement)]


def test_registry_lists_all_templates() -> None:
    assert available_templates() == ["intro", "kinetic", "testimonial"]
    assert isinstance(get_template("intro", LAYOUT), IntroTemplate)
    assert isinstance(get_template("  Kinetic ", LAYOUT), KineticTemplate)
    assert isinstance(get_template("testimonial", LAYOUT), TestimonialTemplate)


def test_unknown_template_lists_alternatives() -> None:
    with pytest.raises(TemplateNotFound) as excinfo:
        get_template("outro", LAYOUT)

    message = str(excinfo.value)
    assert "outro" in message
    assert "intro, kinetic, testimonial" in message
    assert isinstance(excinfo.value, VideoAdError)
    assert isinstance(excinfo.value, LookupError)


def test_required_options_per_template() -> None:
    assert get_template("intro", LAYOUT).required_options == ()
    assert get_template("kinetic", LAYOUT).required_options == ("texts",)
    assert get_template("testimonial", LAYOUT).required_options == ("headline",)


def test_intro_defaults_fill_missing_options() -> None:
    options = get_template("intro", LAYOUT).parse_options({})
    assert options.headline == "Growth, engineered."
    assert options.subtitle == "medici.codes"


def test_unknown_option_key_is_rejected() -> None:
    with pytest.raises(InvalidTemplateOptions) as excinfo:
        get_template("intro", LAYOUT).parse_options({"headline": "Hi", "colour": "red"})
    assert "colour" in str(excinfo.value)
    assert excinfo.value.template == "intro"


def test_testimonial_requires_headline() -> None:
    template = get_template("testimonial", LAYOUT)
    with pytest.raises(InvalidTemplateOptions):
        template.parse_options({"body": "AI-powered"})
    with pytest.raises(InvalidTemplateOptions):
        template.parse_options({"headline": "   "})


def test_testimonial_blank_body_and_cta_are_omitted() -> None:
    options = TestimonialOptions.from_mapping({"headline": "10x faster", "body": "", "cta": None})
    assert options == TestimonialOptions(headline="10x faster")


@pytest.mark.parametrize("texts", [[], [""], ["ok", "  "], 42])
def test_kinetic_rejects_bad_phrase_lists(texts) -> None:
    with pytest.raises(InvalidTemplateOptions):
        KineticOptions.from_mapping({"texts": texts})


def test_kinetic_accepts_single_string() -> None:
    assert KineticOptions.from_mapping({"texts": "Solo"}).texts == ("Solo",)


def test_duration_resolution() -> None:
    kinetic = get_template("kinetic", LAYOUT)
    assert kinetic.resolve_duration(None) == 8.0
    assert kinetic.resolve_duration(3) == 3.0
    for bad in (1.0, 0.5, -2, float("nan"), float("inf"), "soon"):
        with pytest.raises(InvalidTemplateOptions):
            kinetic.resolve_duration(bad)

    intro = get_template("intro", LAYOUT)
    assert intro.resolve_duration(None) == 6.0
    with pytest.raises(InvalidTemplateOptions):
        intro.resolve_duration(0)


def test_every_scene_starts_with_top_bar() -> None:
    cases = [
        ("intro", {}),
        ("kinetic", {"texts": ["A", "B"]}),
        ("testimonial", {"headline": "H", "body": "B", "cta": "C"}),
    ]
    for name, raw in cases:
        template = get_template(name, LAYOUT)
        options = template.parse_options(raw)
        scene = template.build_scene(1.0, options, template.default_duration)
        bar = scene.elements[0]
        assert isinstance(bar, RectElement)
        assert (bar.x, bar.y, bar.width, bar.height) == (0, 0, 1920, 4)
        assert bar.color == "#C9A84C"
        assert (scene.width, scene.height, scene.background) == (1920, 1080, "#0A0A0A")


def test_intro_staggers_fade_ins() -> None:
    template = get_template("intro", LAYOUT)
    options = template.parse_options({"headline": "Hello", "subtitle": "world"})

    start = template.build_scene(0.0, options, 6.0)
    assert [element.opacity for element in _texts(start)] == [0.0, 0.0, 0.0, 0.0]
    assert len(start.visible_elements()) == 1

    mid = _texts(template.build_scene(3.0, options, 6.0))
    assert [element.content for element in mid] == ["Hello", "world", "MEDICI", "medici.codes"]
    assert mid[0].opacity == pytest.approx(1.0)
    assert mid[1].opacity == pytest.approx(1.0)
    assert mid[2].opacity == pytest.approx(0.0)
    assert (mid[0].x, mid[0].y, mid[0].size) == (960, 520, 72)
    assert mid[1].font_family == LAYOUT.sans_family

    end = template.build_scene(6.0, options, 6.0)
    assert all(element.opacity == pytest.approx(0.0) for element in _texts(end))


def test_intro_global_fade_out() -> None:
    template = get_template("intro", LAYOUT)
    options = template.parse_options({})
    headline = _texts(template.build_scene(5.75, options, 6.0))[0]
    assert headline.opacity == pytest.approx(0.5)


def test_kinetic_windows_split_duration_evenly() -> None:
    windows = phrase_windows(3, 8.0)
    slice_len = 7.0 / 3
    for idx, window in enumerate(windows):
        assert window.start == pytest.approx(idx * slice_len + 0.3)
        assert window.end == pytest.approx(window.start + slice_len)
    assert windows[1].start == pytest.approx(windows[0].end)


def test_kinetic_phrase_entrance_and_emphasis() -> None:
    template = get_template("kinetic", LAYOUT)
    options = template.parse_options({"texts": ["A", "B", "C"]})
    slice_len = 7.0 / 3

    # halfway through B's entrance
    t = 0.3 + slice_len + 0.1
    a, b, c, watermark = _texts(template.build_scene(t, options, 8.0))
    assert a.opacity == 0.0
    assert b.opacity == pytest.approx(0.875)
    assert b.y == pytest.approx(560 + 20 * (1 - 0.875))
    assert c.opacity == 0.0
    assert (b.size, b.color, b.weight) == (64, "white", "normal")
    assert watermark.content == "MEDICI"
    assert watermark.anchor == "end"
    assert watermark.opacity == pytest.approx(0.5)

    # C holds fully visible, emphasised
    t = 0.3 + 2 * slice_len + 1.0
    c = _texts(template.build_scene(t, options, 8.0))[2]
    assert c.opacity == pytest.approx(1.0)
    assert (c.size, c.color, c.weight) == (80, "#C9A84C", "bold")
    assert c.y == pytest.approx(560)


def test_kinetic_phrase_fades_out_at_end_of_its_slice() -> None:
    template = get_template("kinetic", LAYOUT)
    options = template.parse_options({"texts": ["A", "B", "C"]})
    first, second, _third = phrase_windows(3, 8.0)
    end = first.end

    a, b = _texts(template.build_scene(end - 0.075, options, 8.0))[:2]
    assert a.opacity == pytest.approx(0.5)
    assert b.opacity == 0.0

    a, b = _texts(template.build_scene(end + 0.001, options, 8.0))[:2]
    assert a.opacity == 0.0
    # the next phrase starts exactly where the previous slice ends
    assert second.start == pytest.approx(end)
    assert b.opacity > 0.0


def test_kinetic_nothing_visible_before_lead_in() -> None:
    template = get_template("kinetic", LAYOUT)
    options = template.parse_options({"texts": ["A", "B"]})
    phrases = _texts(template.build_scene(0.1, options, 8.0))[:2]
    assert [phrase.opacity for phrase in phrases] == [0.0, 0.0]


def test_testimonial_without_cta_has_no_button() -> None:
    template = get_template("testimonial", LAYOUT)
    options = template.parse_options({"headline": "10x faster"})
    scene = template.build_scene(4.0, options, 7.0)

    rects = [element for element in scene.elements if isinstance(element, RectElement)]
    assert len(rects) == 2  # top bar and accent bar
    assert all(rect.corner_radius == 0 for rect in rects)
    contents = [element.content for element in _texts(scene)]
    assert contents == ["10x faster", "MEDICI"]


def test_testimonial_cta_pill_and_label() -> None:
    template = get_template("testimonial", LAYOUT)
    options = template.parse_options({"headline": "10x faster", "body": "AI-powered", "cta": "Book a call"})
    scene = template.build_scene(4.0, options, 7.0)

    bar = scene.elements[1]
    assert (bar.x, bar.y, bar.width, bar.height) == (80, 320, 4, 160)
    pill = next(e for e in scene.elements if isinstance(e, RectElement) and e.corner_radius > 0)
    assert (pill.x, pill.y, pill.width, pill.height, pill.corner_radius) == (120, 500, 280, 52, 26)
    assert pill.opacity == pytest.approx(1.0)

    headline, body, label, watermark = _texts(scene)
    assert (headline.x, headline.y, headline.anchor) == (120, 380, "start")
    assert (body.x, body.y, body.size) == (120, 440, 26)
    assert (label.content, label.x, label.y) == ("Book a call", 260, 532)
    assert label.color == "#0A0A0A"
    assert label.weight == "bold"
    assert label.font_family == LAYOUT.sans_family
    assert watermark.size == 20


def test_decorations_are_opt_in() -> None:
    plain = get_template("intro", LAYOUT)
    decorated = get_template("intro", LayoutSettings(decorations=True))
    options = plain.parse_options({})

    plain_scene = plain.build_scene(2.0, options, 6.0)
    decorated_scene = decorated.build_scene(2.0, options, 6.0)

    assert not any(isinstance(e, (CircleElement, LineElement)) for e in plain_scene.elements)
    circles = [e for e in decorated_scene.elements if isinstance(e, CircleElement)]
    lines = [e for e in decorated_scene.elements if isinstance(e, LineElement)]
    assert len(circles) == 2 and len(lines) == 2
    assert all(circle.stroke_only for circle in circles)
    assert len(decorated_scene.elements) == len(plain_scene.elements) + 4


def test_scenes_are_pure_functions_of_time() -> None:
    template = get_template("kinetic", LAYOUT)
    options = template.parse_options({"texts": ["A", "B", "C"]})
    assert template.build_scene(3.3, options, 8.0) == template.build_scene(3.3, options, 8.0)
