"""
Input validation utilities.

Provides validation functions for input files and text arguments.
"""

import os
from pathlib import Path
from typing import Optional, Tuple


def validate_file(path: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a readable input file.

    Args:
        path: Path to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not path:
        return False, "Path cannot be empty"

    try:
        path_obj = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        return False, f"Invalid path format: {e}"

    if not path_obj.exists():
        return False, f"Path does not exist: {path}"

    if not path_obj.is_file():
        return False, f"Path is not a file: {path}"

    if not os.access(path_obj, os.R_OK):
        return False, f"Path is not readable: {path}"

    return True, None


def validate_text(text: str, min_size: int) -> Tuple[bool, Optional[str]]:
    """
    Check that a text is long enough to yield at least one n-gram edge.

    Args:
        text: Input text.
        min_size: Smallest n-gram size in use.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not text:
        return False, "Text cannot be empty"

    if len(text) <= min_size:
        return False, f"Text shorter than {min_size + 1} characters yields no edges"

    return True, None


def resolve_text(value: str, from_file: bool) -> Tuple[Optional[str], Optional[str]]:
    """
    Return ``value`` itself, or the contents of the file it names.

    Returns:
        Tuple of (text, error_message).
    """
    if not from_file:
        return value, None

    is_valid, error = validate_file(value)
    if not is_valid:
        return None, error

    try:
        return Path(value).read_text(encoding="utf-8"), None
    except (OSError, UnicodeDecodeError) as e:
        return None, f"Cannot read {value}: {e}"
