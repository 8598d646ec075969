"""Utility functions."""

import os
import uuid
from pathlib import Path
from typing import Union


def ensure_dir(path: Union[str, Path]) -> None:
    """Ensure directory exists."""
    Path(path).mkdir(parents=True, exist_ok=True)


def file_extension(path: Union[str, Path]) -> str:
    """Lower-cased extension without the dot ("" if none)."""
    return Path(path).suffix.lower().lstrip(".")


def deck_name_from_path(path: Union[str, Path]) -> str:
    """Default display name for a deck: the file name without extension."""
    return Path(path).stem


def atomic_write_text(path: Union[str, Path], text: str) -> None:
    """
    Write text through a temp file and rename it over the target.

    Either the whole new content lands or the old file stays untouched.

    Raises:
        OSError: if the write or the rename fails
    """
    target = Path(path)
    temp_file = target.with_name(f".{target.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        with open(temp_file, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(temp_file, target)
    except OSError:
        if temp_file.exists():
            temp_file.unlink()
        raise
