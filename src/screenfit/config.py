"""
Configuration loading/saving.

Pure functions operating on dataclasses, TOML on disk.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from pathlib import Path

import rtoml

from .types import AppConfig


DEFAULT_CONFIG_PATH = Path.home() / ".screenfit" / "config.toml"


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return DEFAULT_CONFIG_PATH


def create_default_app_config() -> AppConfig:
    """
    Create the default application configuration.
    """
    return AppConfig()


def load_app_config(path: Path) -> AppConfig:
    """
    Load application configuration from a TOML file.

    Missing keys take their defaults; unknown keys are ignored.

    Args:
        path: Path to config.toml file

    Returns:
        AppConfig dataclass
    """
    data = rtoml.load(Path(path))

    # Settings may live at the top level or under [display] / [export]
    flat = {}
    for key, value in data.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value

    defaults = create_default_app_config()
    known = {f.name: getattr(defaults, f.name) for f in fields(AppConfig)}

    return AppConfig(
        line_thickness=float(flat.get("line_thickness", known["line_thickness"])),
        point_radius=float(flat.get("point_radius", known["point_radius"])),
        export_dir=str(flat.get("export_dir", known["export_dir"])),
        frame_interval_ms=int(flat.get("frame_interval_ms", known["frame_interval_ms"])),
        fullscreen=bool(flat.get("fullscreen", known["fullscreen"])),
        log_level=str(flat.get("log_level", known["log_level"])).upper(),
    )


def load_app_config_or_default(path: Path | None = None) -> AppConfig:
    """
    Load configuration, falling back to defaults if the file is missing.
    """
    path = Path(path) if path is not None else get_default_config_path()
    if not path.exists():
        return create_default_app_config()
    return load_app_config(path)


def save_app_config(config: AppConfig, path: Path) -> None:
    """
    Save application configuration to a TOML file.

    Args:
        config: AppConfig dataclass
        path: Path to save config.toml
    """
    values = asdict(config)
    data = {
        "log_level": values["log_level"],
        "display": {
            "line_thickness": values["line_thickness"],
            "point_radius": values["point_radius"],
            "frame_interval_ms": values["frame_interval_ms"],
            "fullscreen": values["fullscreen"],
        },
        "export": {
            "export_dir": values["export_dir"],
        },
    }

    # Ensure parent directory exists
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        rtoml.dump(data, f)
