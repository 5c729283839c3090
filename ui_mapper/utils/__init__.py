"""Utility functions for the UI Mapper framework.

This sub-package provides utility functions for:
- File and path operations
- Detection payload validation
"""

from .file_utils import ensure_directory, export_stem, get_timestamp_ms, load_json, save_json
from .validation import validate_box_values, validate_detection_entry, validate_label

__all__ = [
    "ensure_directory",
    "export_stem",
    "get_timestamp_ms",
    "save_json",
    "load_json",
    "validate_box_values",
    "validate_detection_entry",
    "validate_label",
]
