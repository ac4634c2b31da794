"""
Procedural video ad renderer.

Templates describe each frame as a scene of text and shapes; frames are
rasterized into a scratch directory and encoded to MP4 with ffmpeg.
"""

from __future__ import annotations

__all__ = [
    "RenderJob",
    "RenderJobController",
    "RenderResult",
    "VideoAdError",
]

from .errors import VideoAdError
from .job import RenderJob, RenderJobController, RenderResult
