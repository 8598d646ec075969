"""Recently opened decks list."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..config import Config
from ..models import RecentDeck
from ..utils.helpers import deck_name_from_path


class RecentDeckLibrary:
    """
    Most-recently-imported deck list, capped at ``Config.MAX_RECENT_DECKS``.

    Only new paths go to the front. Re-opening a known deck refreshes its
    timestamp where it already sits and keeps its (possibly renamed)
    display name.
    """

    def __init__(self, decks: Optional[Iterable[RecentDeck]] = None, limit: int = Config.MAX_RECENT_DECKS):
        self.limit = limit
        self._decks: List[RecentDeck] = list(decks or [])[:limit]

    @property
    def decks(self) -> List[RecentDeck]:
        return list(self._decks)

    def __len__(self) -> int:
        return len(self._decks)

    def __contains__(self, path: str) -> bool:
        return self.find(path) is not None

    def find(self, path: str) -> Optional[RecentDeck]:
        return next((deck for deck in self._decks if deck.path == path), None)

    def touch(self, path: str) -> str:
        """
        Record that ``path`` was opened.

        Returns:
            The deck's display name
        """
        existing = self.find(path)
        if existing is not None:
            existing.last_opened = datetime.now()
            return existing.name

        deck = RecentDeck(path=path, name=deck_name_from_path(path))
        self._decks.insert(0, deck)
        del self._decks[self.limit:]
        return deck.name

    def rename(self, path: str, name: str) -> bool:
        deck = self.find(path)
        if deck is None:
            return False
        deck.name = name
        return True

    def remove(self, path: str) -> bool:
        before = len(self._decks)
        self._decks = [deck for deck in self._decks if deck.path != path]
        return len(self._decks) != before

    def to_list(self) -> List[Dict[str, str]]:
        return [deck.to_dict() for deck in self._decks]

    @classmethod
    def from_list(cls, items: Iterable[Dict[str, Any]], limit: int = Config.MAX_RECENT_DECKS) -> "RecentDeckLibrary":
        """Build from persisted dicts, skipping entries without a path."""
        decks = [RecentDeck.from_dict(item) for item in items if isinstance(item, dict) and item.get("path")]
        return cls(decks, limit=limit)
