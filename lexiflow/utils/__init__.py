"""Utils module."""

from .helpers import (
    atomic_write_text,
    deck_name_from_path,
    ensure_dir,
    file_extension,
)
from .parsing import TabularParser
from .logger import setup_logger

__all__ = [
    'atomic_write_text',
    'deck_name_from_path',
    'ensure_dir',
    'file_extension',
    'TabularParser',
    'setup_logger',
]
