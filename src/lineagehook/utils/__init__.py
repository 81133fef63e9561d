"""Utility functions for lineagehook."""

from lineagehook.utils.config import (
    ConfigSettings,
    HookSettings,
    find_config_file,
    load_config,
)
from lineagehook.utils.file_utils import read_bytes

__all__ = [
    "ConfigSettings",
    "HookSettings",
    "find_config_file",
    "load_config",
    "read_bytes",
]
