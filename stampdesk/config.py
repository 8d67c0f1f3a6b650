"""
Application settings with optional JSON overrides.
"""
import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional, Union

from .utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


@dataclass(frozen=True)
class StamperSettings:
    """Tunable values for rendering, stamp sizing, history and export."""
    display_scale: float = 1.5

    # Stamp sizes are in display units
    min_stamp_size: float = 50
    max_stamp_size: float = 300
    stamp_size_step: float = 10
    default_stamp_size: float = 150

    history_limit: Optional[int] = 100

    # Passed straight to fitz.Document.tobytes
    export_garbage: int = 3
    export_deflate: bool = True

    stamps_dir: str = "resources/stamps"
    log_level: str = "INFO"

    def __post_init__(self):
        if self.display_scale <= 0:
            raise ValueError(f"display_scale must be positive, got {self.display_scale}")
        if self.min_stamp_size > self.max_stamp_size:
            raise ValueError("min_stamp_size must not exceed max_stamp_size")


def default_settings_path() -> Path:
    """Location of the optional user settings file."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings(path: Optional[Union[str, Path]] = None) -> StamperSettings:
    """
    Load settings, applying overrides from a JSON file when it exists.

    Args:
        path: Settings file to read. Defaults to the user config directory.

    Returns:
        Settings with any valid overrides applied
    """
    settings = StamperSettings()
    settings_path = Path(path) if path is not None else default_settings_path()

    if not settings_path.exists():
        return settings

    try:
        with open(settings_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Could not read settings from %s: %s", settings_path, e)
        return settings

    if not isinstance(data, dict):
        logger.error("Settings file %s must contain a JSON object", settings_path)
        return settings

    known = {f.name for f in fields(StamperSettings)}
    overrides = {}
    for key, value in data.items():
        if key in known:
            overrides[key] = value
        else:
            logger.warning("Ignoring unknown setting %r", key)

    try:
        return replace(settings, **overrides)
    except (TypeError, ValueError) as e:
        logger.error("Invalid settings in %s: %s", settings_path, e)
        return settings
