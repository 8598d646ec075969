"""Services layer for deck data and study session state."""

from .repository import DeckRepository
from .deck_library import RecentDeckLibrary
from .session_store import FavoritesSnapshot, StudySessionStore
from .importer import FileImporter

__all__ = [
    "DeckRepository",
    "RecentDeckLibrary",
    "FavoritesSnapshot",
    "StudySessionStore",
    "FileImporter",
]
