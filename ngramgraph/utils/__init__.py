"""
Utility functions and helpers.
"""

from ngramgraph.utils.logging_config import setup_logging, get_logger
from ngramgraph.utils.validation import validate_file, validate_text, resolve_text

__all__ = [
    "setup_logging",
    "get_logger",
    "validate_file",
    "validate_text",
    "resolve_text",
]
