"""CLI entrypoint for the video ad renderer."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from config_loader import load_config
from logging_utils import configure_logging, get_logger

from .errors import VideoAdError
from .job import RenderJob, RenderJobController
from .settings import RASTERIZERS, LayoutSettings, load_video_ad_settings
from .templates import available_templates, get_template

logger = get_logger(__name__)

OPTION_FLAGS = ("headline", "subtitle", "texts", "body", "cta")

EXAMPLES = (
    'python -m video_ad.main --template intro --headline "Growth, engineered." --subtitle "medici.codes"',
    'python -m video_ad.main --template kinetic --texts "AI-First" "10x Output" "Growth, engineered."',
    'python -m video_ad.main --template testimonial --headline "10x faster" --body "AI-powered" --cta "Book a call"',
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render short promotional video clips from animated templates.")
    parser.add_argument("--template", help=f"Template name ({', '.join(available_templates())}).")
    parser.add_argument("--headline", help="Headline text (intro, testimonial).")
    parser.add_argument("--subtitle", help="Subtitle text (intro).")
    parser.add_argument("--texts", nargs="+", help="Phrases shown in sequence (kinetic).")
    parser.add_argument("--body", help="Body text under the headline (testimonial).")
    parser.add_argument("--cta", help="Call-to-action button label (testimonial).")
    parser.add_argument("--duration", type=float, help="Clip length in seconds; defaults per template.")
    parser.add_argument("--output", help="Output video path (.mp4). Defaults to <output_dir>/<template>-<timestamp>.mp4")
    parser.add_argument("--config", default="config.yaml", help="Path to configuration file (default: config.yaml)")
    parser.add_argument("--rasterizer", choices=RASTERIZERS, help="Override the configured rasterizer.")
    parser.add_argument("--workers", type=int, help="Frame rendering threads (0 = one per CPU).")
    parser.add_argument(
        "--preview-frame",
        dest="preview_frame",
        type=int,
        help="Render only this frame index as PNG + SVG (beside --output, else in the output directory) and exit.",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Collect only the template option flags the user actually passed."""
    return {name: getattr(args, name) for name in OPTION_FLAGS if getattr(args, name, None) is not None}


def print_catalogue(stream=None) -> None:
    stream = stream or sys.stdout
    layout = LayoutSettings()
    lines: List[str] = ["Video Ad Generator", "", "Templates:"]
    for name in available_templates():
        template = get_template(name, layout)
        required = ", ".join(template.required_options) or "none"
        lines.append(f"  {name:<12} {template.description} (required: {required}; default {template.default_duration:g}s)")
    lines += ["", "Examples:"]
    lines += [f"  {example}" for example in EXAMPLES]
    print("\n".join(lines), file=stream)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.template:
        print_catalogue()
        return 0

    try:
        app_config = load_config(Path(args.config))
    except (FileNotFoundError, ValueError) as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return 1

    configure_logging(app_config.logging_level, app_config.log_file)
    logger.debug("Loaded config:\n%s", app_config.dumps())

    try:
        settings = load_video_ad_settings(app_config).with_overrides(
            rasterizer=args.rasterizer,
            workers=args.workers,
        )
    except ValueError as exc:
        logger.error("Invalid settings in %s: %s", app_config.config_path, exc)
        return 1

    job = RenderJob(
        template_name=args.template,
        options=options_from_args(args),
        duration=args.duration,
        output_path=Path(args.output) if args.output else None,
    )
    controller = RenderJobController(settings)
    logger.info("Generating %s video", job.template_name)

    try:
        if args.preview_frame is not None:
            png_path, svg_path = controller.preview_frame(job, args.preview_frame)
            print(f"Preview saved: {png_path}")
            print(f"Markup saved: {svg_path}")
            return 0
        result = controller.run(job)
    except VideoAdError as exc:
        logger.error("%s failed: %s", type(exc).__name__, exc)
        return 1

    print(f"Video saved: {result.output_path}")
    print(f"   Size: {result.size_mb:.1f} MB")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
