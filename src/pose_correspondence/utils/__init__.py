"""
Utility Functions Module

This module provides common utilities used across the project.
- Logging setup
- YAML configuration
- Export of accepted offsets to JSON
"""

from .logging import setup_logger, set_package_level
from .config import AppConfig, load_config
from .export import (
    ExportRecord,
    export_offsets_to_json,
    load_offsets_from_json,
)

__all__ = [
    "setup_logger",
    "set_package_level",
    "AppConfig",
    "load_config",
    "ExportRecord",
    "export_offsets_to_json",
    "load_offsets_from_json",
]
