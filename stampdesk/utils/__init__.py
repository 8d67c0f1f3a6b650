"""
Utility functions and helpers.
"""
from .logging_setup import setup_logging
from .resource_loader import (
    get_resource_path,
    get_config_dir,
)

__all__ = [
    'setup_logging',
    'get_resource_path',
    'get_config_dir',
]
