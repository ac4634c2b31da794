from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import List, Optional, Sequence

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from video_ad.encoder import Encoder
from video_ad.errors import EncoderFailure, RasterizationFailure
from video_ad.rasterizer import Rasterizer
from video_ad.scene import Scene
from video_ad.settings import LayoutSettings, VideoAdSettings


class RecordingRasterizer(Rasterizer):
    """Writes a placeholder file per frame and remembers every scene it saw."""

    name = "fake"

    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.fail_on = fail_on
        self.scenes: dict = {}
        self._lock = threading.Lock()

    def rasterize(self, scene: Scene, destination: Path) -> Path:
        if destination.name == self.fail_on:
            raise RasterizationFailure("cannot paint this one")
        destination.write_bytes(b"\x89PNG fake")
        with self._lock:
            self.scenes[destination.name] = scene
        return destination


class RecordingEncoder(Encoder):
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[dict] = []

    def encode(self, frames: Sequence[Path], fps: int, duration: float, output_path: Path) -> Path:
        self.calls.append(
            {
                "frames": list(frames),
                "existing": [frame for frame in frames if frame.is_file()],
                "fps": fps,
                "duration": duration,
                "output_path": output_path,
            }
        )
        if self.error is not None:
            # a half-written file must never reach the declared output path
            output_path.write_bytes(b"truncated")
            raise self.error
        output_path.write_bytes(b"\x00\x00\x00\x18ftypmp42" + b"\x00" * 64)
        return output_path


@pytest.fixture
def small_layout() -> LayoutSettings:
    return LayoutSettings(width=64, height=36, fps=5)


@pytest.fixture
def settings(tmp_path: Path, small_layout: LayoutSettings) -> VideoAdSettings:
    return VideoAdSettings(
        output_dir=tmp_path / "out",
        temp_dir=tmp_path / "scratch",
        layout=small_layout,
        workers=2,
        progress_interval=5,
    )


@pytest.fixture
def failing_encoder() -> RecordingEncoder:
    return RecordingEncoder(error=EncoderFailure("ffmpeg failed with exit code 1: boom", returncode=1))
