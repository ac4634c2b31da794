"""Configuration loader for the video ad renderer."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

try:
    import yaml  # type: ignore
except ModuleNotFoundError as exc:  # pragma: no cover - import guard
    raise RuntimeError(
        "PyYAML is required. Please install it with `pip install pyyaml`."
    ) from exc


@dataclass
class AppConfig:
    """Raw configuration plus the directories every run needs."""

    raw: Dict[str, Any]
    config_path: Path
    project_root: Path
    output_dir: Path
    temp_dir: Path
    log_file: Path

    @property
    def logging_level(self) -> str:
        level = self.raw.get("logging", {}).get("level") or "INFO"
        return str(level).upper()

    def section(self, name: str) -> Dict[str, Any]:
        """Return a top-level mapping section, or an empty dict when absent or malformed."""
        value = self.raw.get(name)
        return value if isinstance(value, dict) else {}

    def to_debug_dict(self) -> Dict[str, Any]:
        return {
            "config_path": str(self.config_path),
            "output_dir": str(self.output_dir),
            "temp_dir": str(self.temp_dir),
            "log_file": str(self.log_file),
        }

    def dumps(self) -> str:
        """Return a JSON string for diagnostics."""
        return json.dumps(self.to_debug_dict(), ensure_ascii=False, indent=2)


def load_config(path: Path | str, project_root: Path | None = None) -> AppConfig:
    """Load the YAML config and resolve output, scratch and log locations."""
    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")

    return build_app_config(raw, config_path=config_path, project_root=project_root)


def build_app_config(
    raw: Dict[str, Any],
    *,
    config_path: Path,
    project_root: Path | None = None,
) -> AppConfig:
    """Resolve directories for an already-parsed config mapping."""
    root = project_root.resolve() if project_root else config_path.parent

    output_cfg = raw.get("output", {}) if isinstance(raw.get("output"), dict) else {}
    logging_cfg = raw.get("logging", {}) if isinstance(raw.get("logging"), dict) else {}

    output_dir = (root / output_cfg.get("directory", "assets/videos")).resolve()
    temp_dir = (root / output_cfg.get("temp_directory", "temp/video_ad")).resolve()
    log_file = (root / logging_cfg.get("file", "logs/video_ad.log")).resolve()

    return AppConfig(
        raw=raw,
        config_path=config_path,
        project_root=root,
        output_dir=output_dir,
        temp_dir=temp_dir,
        log_file=log_file,
    )
