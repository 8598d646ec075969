"""Global settings and configuration."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv

# Load from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)

from .themes import DEFAULT_THEME


@dataclass
class Config:
    """Application-wide configuration."""

    APP_NAME: str = "LexiFlow"

    # Cross-platform paths using pathlib
    # BASE_DIR is the project root (parent of lexiflow/)
    BASE_DIR: Path = Path(__file__).parent.parent.parent.resolve()

    # Settings, imported decks etc. live under the user's home by default
    DATA_DIR: str = os.environ.get(
        "LEXIFLOW_DATA_DIR", str(Path.home() / ".lexiflow")
    )
    IMPORT_DIR: str = os.environ.get(
        "LEXIFLOW_IMPORT_DIR", str(Path(DATA_DIR) / "decks")
    )
    SETTINGS_FILE: str = str(Path(DATA_DIR) / "settings.json")

    # Import rules
    SUPPORTED_EXTENSIONS: Tuple[str, ...] = ("csv", "txt")
    MAX_RECENT_DECKS: int = 10

    # Column auto-detection (case-insensitive substring of the header)
    TERM_HEADER_HINT: str = "term"
    DEFINITION_HEADER_HINT: str = "definition"

    FAVORITES_DECK_NAME: str = "Favorites"
    DEFAULT_THEME: str = DEFAULT_THEME

    LOG_LEVEL: str = os.environ.get("LEXIFLOW_LOG_LEVEL", "INFO")
