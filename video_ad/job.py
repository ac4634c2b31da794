"""End-to-end render jobs: template -> frames -> encoder -> output file."""
from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple

from logging_utils import get_logger

from .encoder import Encoder, FFmpegEncoder
from .errors import EncoderFailure, FilesystemError, InvalidTemplateOptions
from .rasterizer import Rasterizer, make_rasterizer
from .scene import scene_to_svg
from .sequencer import FrameSequencer, frame_filename
from .settings import VideoAdSettings
from .templates import VideoTemplate, get_template

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderJob:
    template_name: str
    options: Mapping[str, Any] = field(default_factory=dict)
    # None selects the template's default duration / an auto-named output file
    duration: Optional[float] = None
    output_path: Optional[Path] = None

    def __post_init__(self) -> None:
        # detach from the caller's mapping
        object.__setattr__(self, "options", MappingProxyType(dict(self.options or {})))


@dataclass(frozen=True)
class RenderResult:
    output_path: Path
    size_bytes: int
    frame_count: int
    template_name: str
    duration: float

    @property
    def size_mb(self) -> float:
        return self.size_bytes / 1024 / 1024


@contextmanager
def scratch_directory(root: Path, label: str) -> Iterator[Path]:
    """Create a unique job-scoped frame directory and always remove it afterwards."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    try:
        root.mkdir(parents=True, exist_ok=True)
        path = Path(tempfile.mkdtemp(prefix=f"_frames_{label}_{stamp}_", dir=root))
    except OSError as exc:
        raise FilesystemError(f"Could not create scratch directory under {root}: {exc}", template=label) from exc

    logger.debug("Scratch directory created: %s", path)
    try:
        yield path
    finally:
        _remove_tree(path)


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        logger.warning("Could not remove scratch directory %s: %s", path, exc)
        return
    logger.debug("Scratch directory removed: %s", path)


def _remove_file(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("Could not remove partial output %s: %s", path, exc)


class RenderJobController:
    """Run render jobs against one settings object and a pair of engine ports."""

    def __init__(
        self,
        settings: VideoAdSettings,
        *,
        rasterizer: Optional[Rasterizer] = None,
        encoder: Optional[Encoder] = None,
    ) -> None:
        self.settings = settings
        self.rasterizer = rasterizer or make_rasterizer(settings)
        self.encoder = encoder or FFmpegEncoder(settings.encoder)

    def run(self, job: RenderJob) -> RenderResult:
        template, options, duration = self.prepare(job)
        sequencer = self._sequencer(template)
        frame_count = sequencer.frame_count(duration)
        output_path = self._resolve_output_path(job, template.name)

        logger.info(
            "Render start | template=%s duration=%.2fs frames=%d rasterizer=%s output=%s",
            template.name,
            duration,
            frame_count,
            self.rasterizer.name,
            output_path,
        )
        with scratch_directory(self.settings.temp_dir, template.name) as scratch:
            frames = sequencer.render(options, duration, scratch)
            logger.info("Encoding video | template=%s frames=%d", template.name, len(frames))
            self._encode(template.name, frames, duration, output_path)

        result = RenderResult(
            output_path=output_path,
            size_bytes=output_path.stat().st_size,
            frame_count=frame_count,
            template_name=template.name,
            duration=duration,
        )
        logger.info("Render done | %s (%.1f MB)", result.output_path, result.size_mb)
        return result

    def prepare(self, job: RenderJob) -> Tuple[VideoTemplate, Any, float]:
        """Resolve and validate everything a job needs before touching the filesystem."""
        template = get_template(job.template_name, self.settings.layout)
        options = template.parse_options(job.options)
        duration = template.resolve_duration(job.duration)
        return template, options, duration

    def preview_frame(self, job: RenderJob, frame_index: int, destination_dir: Optional[Path] = None) -> Tuple[Path, Path]:
        """Render a single frame as PNG plus its SVG markup, without encoding."""
        template, options, duration = self.prepare(job)
        count = self._sequencer(template).frame_count(duration)
        if not 0 <= frame_index < count:
            raise InvalidTemplateOptions(
                f"Frame {frame_index} is outside 0..{count - 1}", template=template.name
            )

        if destination_dir is not None:
            target_dir = destination_dir
        elif job.output_path is not None:
            target_dir = Path(job.output_path).expanduser().parent
        else:
            target_dir = self.settings.output_dir
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(f"Could not create {target_dir}: {exc}", template=template.name) from exc

        scene = template.build_scene(frame_index / self.settings.layout.fps, options, duration)
        stem = f"preview-{template.name}-{frame_filename(frame_index)[:-4]}"
        svg_path = target_dir / f"{stem}.svg"
        png_path = target_dir / f"{stem}.png"
        svg_path.write_text(scene_to_svg(scene), encoding="utf-8")
        self.rasterizer.rasterize(scene, png_path)
        logger.info("Preview written: %s", png_path)
        return png_path, svg_path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _sequencer(self, template: VideoTemplate) -> FrameSequencer:
        return FrameSequencer(
            template,
            self.rasterizer,
            fps=self.settings.layout.fps,
            workers=self.settings.worker_count,
            progress_interval=self.settings.progress_interval,
        )

    def _resolve_output_path(self, job: RenderJob, template_name: str) -> Path:
        if job.output_path is not None:
            output_path = Path(job.output_path).expanduser()
            if not output_path.suffix:
                output_path = output_path.with_suffix(".mp4")
        else:
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
            output_path = self.settings.output_dir / f"{template_name}-{stamp}.mp4"
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(
                f"Could not create output directory {output_path.parent}: {exc}", template=template_name
            ) from exc
        return output_path.resolve()

    def _encode(self, template_name: str, frames: Sequence[Path], duration: float, output_path: Path) -> None:
        # The declared output path only ever holds a complete encode.
        partial = output_path.with_name(f".{output_path.stem}.partial{output_path.suffix}")
        try:
            self.encoder.encode(frames, self.settings.layout.fps, duration, partial)
            os.replace(partial, output_path)
        except EncoderFailure as exc:
            if exc.template is not None:
                raise
            raise EncoderFailure(
                str(exc),
                template=template_name,
                returncode=exc.returncode,
                stderr_tail=exc.stderr_tail,
            ) from exc
        except OSError as exc:
            raise FilesystemError(f"Could not move encoded video to {output_path}: {exc}", template=template_name) from exc
        finally:
            _remove_file(partial)


__all__ = ["RenderJob", "RenderResult", "RenderJobController", "scratch_directory"]
