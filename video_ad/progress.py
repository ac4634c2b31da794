"""Coarse progress reporting for frame rendering."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from logging import Logger

from logging_utils import get_logger

_logger = get_logger(__name__)


def format_hms(seconds: float) -> str:
    if seconds < 0:
        seconds = 0
    seconds = int(round(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


@dataclass
class FrameProgress:
    """Coarse progress log for frame rendering: one line every ``interval`` frames."""

    total_frames: int
    label: str = "Render"
    interval: int = 25
    width: int = 24
    logger: Logger = field(default=_logger, repr=False)

    def __post_init__(self) -> None:
        self.start_time = time.time()
        self.completed = 0
        self.interval = max(1, self.interval)

    def advance(self, count: int = 1) -> None:
        before = self.completed
        self.completed = min(self.total_frames, self.completed + count)
        crossed = self.completed // self.interval > before // self.interval
        if crossed or self.completed == self.total_frames:
            self._report()

    def _report(self) -> None:
        total = max(self.total_frames, 1)
        frac = self.completed / total
        filled = int(round(self.width * frac))
        bar = "█" * filled + "·" * (self.width - filled)
        elapsed = time.time() - self.start_time
        # Simple ETA estimate; guard for small frac
        eta = 0.0 if frac <= 0.0001 else elapsed * (1.0 / frac - 1.0)
        self.logger.info(
            "[%s] %3d%% | %d/%d frames | %s elapsed | ETA %s | %s",
            bar,
            int(frac * 100),
            self.completed,
            self.total_frames,
            format_hms(elapsed),
            format_hms(eta),
            self.label,
        )
