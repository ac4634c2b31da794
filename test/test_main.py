from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from conftest import RecordingEncoder, RecordingRasterizer

from video_ad import main as main_module
from video_ad.job import RenderJobController

CONFIG = """
output:
  directory: out
  temp_directory: scratch
logging:
  level: WARNING
video:
  width: 64
  height: 36
  fps: 5
render:
  rasterizer: pillow
  workers: 1
"""


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(main_module, "configure_logging", lambda *args, **kwargs: None)
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def test_no_template_prints_catalogue(capsys: pytest.CaptureFixture[str]) -> None:
    assert main_module.main([]) == 0
    out = capsys.readouterr().out
    for name in ("intro", "kinetic", "testimonial"):
        assert name in out
    assert "required: texts" in out
    assert "required: headline" in out


def test_options_from_args_keeps_only_passed_flags() -> None:
    args = main_module.build_parser().parse_args(
        ["--template", "kinetic", "--texts", "AI-First", "10x Output", "--duration", "4"]
    )
    assert main_module.options_from_args(args) == {"texts": ["AI-First", "10x Output"]}
    assert args.duration == 4.0


def test_unknown_template_exits_nonzero(config_path: Path) -> None:
    assert main_module.main(["--template", "outro", "--config", str(config_path)]) == 1
    assert not (config_path.parent / "scratch").exists()


def test_invalid_options_exit_nonzero(config_path: Path) -> None:
    code = main_module.main(["--template", "testimonial", "--body", "no headline", "--config", str(config_path)])
    assert code == 1


def test_missing_config_exits_nonzero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main_module.main(["--template", "intro", "--config", str(tmp_path / "nope.yaml")]) == 1
    assert "Config error" in capsys.readouterr().err


def test_render_reports_saved_video(
    config_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def controller(settings):
        assert settings.rasterizer == "pillow"
        return RenderJobController(settings, rasterizer=RecordingRasterizer(), encoder=RecordingEncoder())

    monkeypatch.setattr(main_module, "RenderJobController", controller)
    output = config_path.parent / "ad.mp4"

    code = main_module.main(
        [
            "--template", "intro",
            "--headline", "Hello",
            "--duration", "1",
            "--output", str(output),
            "--config", str(config_path),
        ]
    )

    assert code == 0
    assert output.is_file()
    out = capsys.readouterr().out
    assert f"Video saved: {output.resolve()}" in out
    assert "Size:" in out


def test_preview_frame_flag(config_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        main_module,
        "RenderJobController",
        lambda settings: RenderJobController(settings, rasterizer=RecordingRasterizer(), encoder=RecordingEncoder()),
    )
    code = main_module.main(
        ["--template", "kinetic", "--texts", "One", "--preview-frame", "3", "--config", str(config_path)]
    )
    assert code == 0
    preview_dir = config_path.parent / "out"
    assert (preview_dir / "preview-kinetic-frame_000003.png").is_file()
    assert (preview_dir / "preview-kinetic-frame_000003.svg").is_file()
