"""Drive a fixed-rate time grid over a clip and rasterize one frame per step."""
from __future__ import annotations

import math
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from logging_utils import get_logger

from .errors import InvalidTemplateOptions, RasterizationFailure
from .progress import FrameProgress

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .rasterizer import Rasterizer
    from .templates.base import VideoTemplate

logger = get_logger(__name__)

FRAME_PREFIX = "frame_"
FRAME_DIGITS = 6
FRAME_PATTERN = f"{FRAME_PREFIX}%0{FRAME_DIGITS}d.png"
MAX_FRAMES = 10**FRAME_DIGITS - 1


@dataclass(frozen=True)
class TimeSample:
    index: int
    elapsed: float


def total_frames(duration: float, fps: int) -> int:
    """``round(duration * fps)`` with halves rounded up."""
    return int(math.floor(duration * fps + 0.5))


def frame_filename(index: int) -> str:
    return f"{FRAME_PREFIX}{index:0{FRAME_DIGITS}d}.png"


def time_samples(duration: float, fps: int) -> Iterator[TimeSample]:
    for index in range(total_frames(duration, fps)):
        yield TimeSample(index=index, elapsed=index / fps)


class FrameSequencer:
    """Render every frame of a clip into a scratch directory.

    Frames are independent, so they are rendered on a bounded thread pool; the
    returned list is in frame order regardless of completion order.
    """

    def __init__(
        self,
        template: "VideoTemplate",
        rasterizer: "Rasterizer",
        *,
        fps: int,
        workers: int = 1,
        progress_interval: int = 25,
    ) -> None:
        self.template = template
        self.rasterizer = rasterizer
        self.fps = fps
        self.workers = max(1, workers)
        self.progress_interval = progress_interval

    def frame_count(self, duration: float) -> int:
        count = total_frames(duration, self.fps)
        if count < 1:
            raise InvalidTemplateOptions(
                f"Duration {duration:g}s is shorter than one frame at {self.fps} fps",
                template=self.template.name,
            )
        if count > MAX_FRAMES:
            raise InvalidTemplateOptions(
                f"Duration {duration:g}s needs {count} frames; the limit is {MAX_FRAMES}",
                template=self.template.name,
            )
        return count

    def render_frame(self, sample: TimeSample, options: Any, duration: float, scratch_dir: Path) -> Path:
        scene = self.template.build_scene(sample.elapsed, options, duration)
        destination = scratch_dir / frame_filename(sample.index)
        try:
            path = self.rasterizer.rasterize(scene, destination)
        except (RasterizationFailure, OSError, ValueError) as exc:
            raise RasterizationFailure(
                f"Could not render {destination.name}: {exc}",
                template=self.template.name,
                frame_index=sample.index,
            ) from exc
        logger.debug("Frame %d @ %.3fs -> %s", sample.index, sample.elapsed, path.name)
        return path

    def render(self, options: Any, duration: float, scratch_dir: Path) -> List[Path]:
        count = self.frame_count(duration)
        progress = FrameProgress(count, label=self.template.name, interval=self.progress_interval)
        frames: List[Optional[Path]] = [None] * count

        logger.info(
            "Rendering %d frames | template=%s fps=%d workers=%d",
            count,
            self.template.name,
            self.fps,
            self.workers,
        )
        pool = ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="frame")
        try:
            futures: Dict[Future, int] = {
                pool.submit(self.render_frame, sample, options, duration, scratch_dir): sample.index
                for sample in time_samples(duration, self.fps)
            }
            for future in as_completed(futures):
                frames[futures[future]] = future.result()
                progress.advance()
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)

        return [frame for frame in frames if frame is not None]


__all__ = [
    "FRAME_PATTERN",
    "MAX_FRAMES",
    "TimeSample",
    "FrameSequencer",
    "frame_filename",
    "time_samples",
    "total_frames",
]
