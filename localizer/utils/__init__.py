"""Utility modules."""

from .colors import Colors
from .validators import (
    is_valid_locale_code,
    is_valid_namespace,
    is_valid_key_path,
    is_safe_file_name,
)
from .logging import configure_logging, get_logger, reset_logger

__all__ = [
    'Colors',
    'is_valid_locale_code',
    'is_valid_namespace',
    'is_valid_key_path',
    'is_safe_file_name',
    'configure_logging',
    'get_logger',
    'reset_logger',
]
