"""Data models for LexiFlow."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List


def _new_card_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Card:
    """A single term/definition study unit."""

    term: str
    definition: str

    # Identity token: regenerated every time cards are rebuilt from the table
    uuid: str = field(default_factory=_new_card_id)

    @property
    def key(self) -> str:
        """Content key, stable across reloads."""
        return card_key(self.term, self.definition)

    def copy(self) -> "Card":
        """Same content, fresh identity token."""
        return Card(self.term, self.definition)

    def to_dict(self) -> Dict[str, str]:
        return {"term": self.term, "definition": self.definition}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(str(data.get("term", "")), str(data.get("definition", "")))


def card_key(term: str, definition: str) -> str:
    """Build the `term|definition` key used for starring and saved orders."""
    return f"{term}|{definition}"


@dataclass
class TabularData:
    """Header row plus rectangular data rows."""

    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def width(self) -> int:
        return len(self.headers)

    @property
    def is_empty(self) -> bool:
        return not self.headers


class ColumnRole(Enum):
    """Which card field a table column feeds."""
    TERM = "term"
    DEFINITION = "definition"


@dataclass
class RecentDeck:
    """Entry of the recently opened decks list."""

    path: str
    name: str
    last_opened: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, str]:
        return {
            "path": self.path,
            "name": self.name,
            "last_opened": self.last_opened.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecentDeck":
        raw_time = data.get("last_opened")
        try:
            last_opened = datetime.fromisoformat(raw_time) if raw_time else datetime.now()
        except (TypeError, ValueError):
            last_opened = datetime.now()
        return cls(path=str(data["path"]), name=str(data.get("name", "")), last_opened=last_opened)
