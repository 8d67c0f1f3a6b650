"""
Resource loading utilities for handling bundled and development resources.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Stampdesk"

# Package directory, used when running from source
_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def get_resource_path(relative_path: str) -> str:
    """
    Get the absolute path to a resource file.

    Handles both running from source and running bundled with PyInstaller.

    Args:
        relative_path: Path of the resource relative to the package root

    Returns:
        Absolute path to the resource
    """
    if hasattr(sys, '_MEIPASS'):
        base_path = Path(sys._MEIPASS) / "stampdesk"
    else:
        base_path = _PACKAGE_ROOT

    return str(base_path / relative_path)


def get_config_dir(app_name: str = APP_NAME) -> Path:
    """
    Get the configuration directory for storing settings.

    The directory is not created; settings are optional.

    Args:
        app_name: Name of the application

    Returns:
        Path to the config directory
    """
    if os.name == 'nt':  # Windows
        base_dir = Path(os.environ.get('APPDATA', os.path.expanduser('~')))
        return base_dir / app_name / "config"
    elif sys.platform == 'darwin':  # macOS
        return Path.home() / "Library" / "Preferences" / app_name
    else:  # Linux
        return Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / ".config")) / app_name
