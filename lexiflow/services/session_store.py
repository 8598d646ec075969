"""
Study Session Store - all deck and study state behind the UI.

The UI reads derived properties (``current_card``, ``filtered_list_cards``,
``is_starred``...) and calls the mutators below. Mutators only touch
memory; the keys they change are written out by ``persist()``, which the
UI calls once after each action.
"""

import random
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union

from ..config import Config, SettingsManager, THEME_CONFIG, get_theme
from ..models import Card, ColumnRole, RecentDeck, TabularData
from ..utils.helpers import ensure_dir, file_extension
from ..utils.logger import setup_logger
from .deck_library import RecentDeckLibrary
from .repository import DeckRepository

logger = setup_logger(__name__)

# Settings keys written by persist()
LAST_DECK_PATH = "LAST_DECK_PATH"
RECENT_DECKS = "RECENT_DECKS"
STARRED_CARD_KEYS = "STARRED_CARD_KEYS"
STARRED_CARDS = "STARRED_CARDS"
CUSTOM_CARD_ORDERS = "CUSTOM_CARD_ORDERS"
THEME_NAME = "THEME_NAME"

PERSISTED_KEYS = (
    LAST_DECK_PATH,
    RECENT_DECKS,
    STARRED_CARD_KEYS,
    STARRED_CARDS,
    CUSTOM_CARD_ORDERS,
    THEME_NAME,
)


@dataclass
class FavoritesSnapshot:
    """Deck state put aside while the favorites deck is studied."""

    deck_path: str
    deck_name: str
    all_cards: List[Card] = field(default_factory=list)
    active_cards: List[Card] = field(default_factory=list)
    list_mode_cards: List[Card] = field(default_factory=list)


class StudySessionStore:
    """
    Single owner of the loaded deck and the study session.

    No method raises: failures set ``error_message`` and return False.

    Usage:
        store = StudySessionStore(SettingsManager())
        store.restore()
        store.import_file("~/Downloads/spanish.csv")
        store.save_and_generate()
        store.next_card()
        store.persist()
    """

    def __init__(
        self,
        settings: Optional[SettingsManager] = None,
        import_dir: Optional[Union[str, Path]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            settings: Key-value backend for cross-launch state (None = memory only)
            import_dir: Where imported files are copied (defaults to Config.IMPORT_DIR)
            rng: Random source for shuffles
        """
        self.settings = settings
        self.import_dir = Path(import_dir or Config.IMPORT_DIR)
        self._random = rng or random.Random()

        # Deck
        self._repository: Optional[DeckRepository] = None
        self._library = RecentDeckLibrary()
        self.deck_path: str = ""
        self.current_deck_name: str = ""
        self.term_column: int = 0
        self.definition_column: int = 1
        # Mapping as it was before the first unsaved column delete
        self._mapping_before_edit: Optional[Tuple[int, int]] = None

        # Cards
        self.all_cards: List[Card] = []
        self.active_cards: List[Card] = []
        self.list_mode_cards: List[Card] = []
        self._import_order: List[Card] = []
        self._custom_orders: Dict[str, List[str]] = {}

        # Session
        self.current_index: int = 0
        self.revealed_card_ids: Set[str] = set()
        self.search_query: str = ""
        self.error_message: Optional[str] = None
        self.is_setup_mode: bool = False

        # Study options and per-card transient state
        self.is_term_first: bool = True
        self.is_typing_mode: bool = False
        self.is_flipped: bool = False
        self.typing_input: str = ""
        self.is_correct: bool = False

        # Favorites
        self.starred_card_keys: Set[str] = set()
        self.starred_cards: List[Card] = []
        self.studying_favorites: bool = False
        self._favorites_snapshot: Optional[FavoritesSnapshot] = None

        self.theme_name: str = Config.DEFAULT_THEME

        self._pending_keys: Set[str] = set()
        self._change_callbacks: List[Callable[[], None]] = []

    # =========================================================================
    # DERIVED STATE
    # =========================================================================

    @property
    def table(self) -> Optional[TabularData]:
        """The editable source table, None when no deck is open."""
        return self._repository.table if self._repository else None

    @property
    def has_deck(self) -> bool:
        return self._repository is not None

    @property
    def is_dirty(self) -> bool:
        """Check for unsaved table edits."""
        return self._repository.is_dirty if self._repository else False

    @property
    def needs_save_prompt(self) -> bool:
        """Leaving the editor now would drop edits: ask save or discard."""
        return self.is_setup_mode and self.is_dirty

    @property
    def current_card(self) -> Optional[Card]:
        if 0 <= self.current_index < len(self.active_cards):
            return self.active_cards[self.current_index]
        return None

    @property
    def filtered_list_cards(self) -> List[Card]:
        """List mode cards matching the search query (all when the query is empty)."""
        if not self.search_query:
            return list(self.list_mode_cards)
        query = self.search_query.casefold()
        return [
            card for card in self.list_mode_cards
            if query in card.term.casefold() or query in card.definition.casefold()
        ]

    @property
    def recent_decks(self) -> List[RecentDeck]:
        return self._library.decks

    @property
    def favorites_count(self) -> int:
        return len(self.starred_card_keys)

    @property
    def theme(self) -> Dict[str, str]:
        return get_theme(self.theme_name)

    @property
    def saved_order(self) -> Optional[List[str]]:
        """Custom card order saved for the open deck, if any."""
        order = self._custom_orders.get(self.deck_path)
        return list(order) if order is not None else None

    def is_starred(self, card: Card) -> bool:
        return card.key in self.starred_card_keys

    def is_revealed(self, card: Card) -> bool:
        return card.uuid in self.revealed_card_ids

    # =========================================================================
    # CHANGE NOTIFICATION & PERSISTENCE
    # =========================================================================

    def on_change(self, callback: Callable[[], None]) -> None:
        """
        Register a callback for state changes.

        Args:
            callback: Function to call after every mutation
        """
        self._change_callbacks.append(callback)

    def _notify_change(self) -> None:
        """Notify all registered callbacks of a state change."""
        for callback in self._change_callbacks:
            try:
                callback()
            except Exception:
                logger.exception("Change callback %r failed", callback)

    def _mark(self, *keys: str) -> None:
        self._pending_keys.update(keys)

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._pending_keys)

    def _persisted_value(self, key: str) -> Any:
        if key == LAST_DECK_PATH:
            return self.deck_path
        if key == RECENT_DECKS:
            return self._library.to_list()
        if key == STARRED_CARD_KEYS:
            return sorted(self.starred_card_keys)
        if key == STARRED_CARDS:
            return [card.to_dict() for card in self.starred_cards]
        if key == CUSTOM_CARD_ORDERS:
            return {path: list(keys) for path, keys in self._custom_orders.items()}
        if key == THEME_NAME:
            return self.theme_name
        raise KeyError(key)

    def persist(self) -> None:
        """Write every persisted key changed since the last call."""
        if not self._pending_keys:
            return
        if self.settings is not None:
            values = {key: self._persisted_value(key) for key in PERSISTED_KEYS if key in self._pending_keys}
            self.settings.update(values)
            logger.debug("Persisted %s", ", ".join(sorted(values)))
        self._pending_keys.clear()

    def restore(self) -> None:
        """
        Load cross-launch state from settings and reopen the last deck.

        A last deck whose file disappeared is skipped silently.
        """
        if self.settings is None:
            return

        self._library = RecentDeckLibrary.from_list(self.settings.get(RECENT_DECKS, []))
        self.starred_card_keys = {key for key in self.settings.get(STARRED_CARD_KEYS, []) if isinstance(key, str)}
        self.starred_cards = [
            Card.from_dict(item) for item in self.settings.get(STARRED_CARDS, []) if isinstance(item, dict)
        ]
        orders = self.settings.get(CUSTOM_CARD_ORDERS, {})
        self._custom_orders = {
            str(path): [str(key) for key in keys]
            for path, keys in orders.items() if isinstance(keys, list)
        }
        theme_name = self.settings.get(THEME_NAME, Config.DEFAULT_THEME)
        self.theme_name = theme_name if theme_name in THEME_CONFIG else Config.DEFAULT_THEME

        last_path = self.settings.get(LAST_DECK_PATH, "")
        if last_path and Path(last_path).is_file():
            self.load_from_path(last_path)
        else:
            self._notify_change()

    # =========================================================================
    # LOADING & COLUMN MAPPING
    # =========================================================================

    def load_from_path(self, path: Union[str, Path]) -> bool:
        """
        Open a deck file and generate its cards.

        On failure only ``error_message`` changes.

        Returns:
            True if the file held at least a header line
        """
        repository = DeckRepository(path)
        if not repository.load():
            self.error_message = "No data found in CSV."
            self._notify_change()
            return False

        self._repository = repository
        self.deck_path = str(path)
        self._mapping_before_edit = None
        self.error_message = None
        self.current_deck_name = self._library.touch(self.deck_path)
        self._mark(LAST_DECK_PATH, RECENT_DECKS)

        self._auto_detect_columns()
        self._regenerate_cards()
        self._notify_change()
        return True

    def _auto_detect_columns(self) -> None:
        headers = [header.lower() for header in self._repository.headers]
        self.term_column = next(
            (i for i, header in enumerate(headers) if Config.TERM_HEADER_HINT in header), 0
        )
        self.definition_column = next(
            (i for i, header in enumerate(headers) if Config.DEFINITION_HEADER_HINT in header),
            1 if len(headers) > 1 else 0,
        )

    def auto_detect_columns(self) -> None:
        """Pick term/definition columns from the header names."""
        if self._repository is None:
            return
        self._auto_detect_columns()
        self._notify_change()

    def remap_column(self, role: ColumnRole, index: int) -> bool:
        """
        Point a card field at another column. Call ``regenerate_cards``
        afterwards to rebuild the cards.
        """
        if self._repository is None or not 0 <= index < self._repository.table.width:
            return False
        if role is ColumnRole.TERM:
            self.term_column = index
        else:
            self.definition_column = index
        self._notify_change()
        return True

    def _build_cards(self) -> List[Card]:
        cards = []
        term_idx, def_idx = self.term_column, self.definition_column
        for row in self._repository.rows:
            if term_idx >= len(row) or def_idx >= len(row):
                continue
            term, definition = row[term_idx], row[def_idx]
            if term and definition:
                cards.append(Card(term, definition))
        return cards

    @staticmethod
    def _apply_saved_order(cards: List[Card], saved_keys: List[str]) -> List[Card]:
        """Saved keys first in saved order, unknown cards after them in row order."""
        positions: Dict[str, int] = {}
        for position, key in enumerate(saved_keys):
            positions.setdefault(key, position)
        known = sorted((card for card in cards if card.key in positions), key=lambda card: positions[card.key])
        unknown = [card for card in cards if card.key not in positions]
        return known + unknown

    def _regenerate_cards(self) -> None:
        cards = self._build_cards()
        self._import_order = list(cards)

        saved_keys = self._custom_orders.get(self.deck_path)
        if saved_keys:
            cards = self._apply_saved_order(cards, saved_keys)

        self.all_cards = cards
        self.list_mode_cards = list(cards)
        self.is_setup_mode = False
        self._restart_session()
        logger.debug("Generated %d cards from %s", len(cards), self.deck_path)

    def regenerate_cards(self) -> None:
        """Rebuild cards from the table with the current column mapping."""
        if self._repository is None:
            return
        self._regenerate_cards()
        self._notify_change()

    # =========================================================================
    # TABLE EDITING (SETUP MODE)
    # =========================================================================

    def enter_setup_mode(self) -> None:
        if self._repository is None:
            return
        self.is_setup_mode = True
        self._notify_change()

    def exit_setup_mode(self) -> None:
        """Leave the editor without saving (callers check ``needs_save_prompt`` first)."""
        self.is_setup_mode = False
        self._notify_change()

    def add_row(self) -> int:
        """Append an empty row. Returns its index, or -1 with no deck open."""
        if self._repository is None:
            return -1
        index = self._repository.add_row()
        self._notify_change()
        return index

    def delete_row(self, index: int) -> bool:
        if self._repository is None or not self._repository.delete_row(index):
            return False
        self._notify_change()
        return True

    @staticmethod
    def _shift_mapping(mapped: int, deleted: int) -> int:
        if mapped == deleted:
            return 0
        if mapped > deleted:
            return mapped - 1
        return mapped

    def delete_column(self, index: int) -> bool:
        """
        Delete a column and keep the term/definition mapping pointing at
        the same data: a deleted mapped column falls back to 0, later
        columns move down by one.
        """
        if self._repository is None:
            return False
        mapping = (self.term_column, self.definition_column)
        if not self._repository.delete_column(index):
            return False
        if self._mapping_before_edit is None:
            self._mapping_before_edit = mapping
        self.term_column = self._shift_mapping(self.term_column, index)
        self.definition_column = self._shift_mapping(self.definition_column, index)
        self._notify_change()
        return True

    def set_cell(self, row: int, column: int, text: str) -> bool:
        if self._repository is None or not self._repository.update_cell(row, column, text):
            return False
        self._notify_change()
        return True

    def set_header(self, column: int, text: str) -> bool:
        if self._repository is None or not self._repository.update_header(column, text):
            return False
        self._notify_change()
        return True

    def save_table(self) -> bool:
        """
        Write the table over the deck file.

        On failure the dirty flag stays set and ``error_message`` explains why.
        """
        if self._repository is None:
            return False
        if not self._repository.save():
            self.error_message = f"Failed to save CSV: {self._repository.last_error}"
            self._notify_change()
            return False
        self._mapping_before_edit = None
        self._notify_change()
        return True

    def save_and_generate(self) -> bool:
        """Save the table, then rebuild cards from it."""
        if not self.save_table():
            return False
        self.regenerate_cards()
        return True

    def discard_changes(self) -> None:
        """
        Drop unsaved edits by re-reading the deck file, then leave the editor.

        Column deletes shifted the mapping, so it goes back to what it was
        before the first of them.
        """
        if self._repository is not None and self._repository.is_dirty:
            if not self._repository.load():
                self.error_message = "No data found in CSV."
            elif self._mapping_before_edit is not None:
                self.term_column, self.definition_column = self._mapping_before_edit
                self._mapping_before_edit = None
        self.is_setup_mode = False
        self._notify_change()

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    def _reset_card_state(self) -> None:
        self.is_flipped = False
        self.typing_input = ""
        self.is_correct = False

    def _restart_session(self) -> None:
        self.active_cards = list(self.list_mode_cards)
        self.revealed_card_ids = set()
        self.current_index = 0
        self._reset_card_state()

    def restart_session(self) -> None:
        """Start over from the first card in list mode order."""
        self._restart_session()
        self._notify_change()

    def next_card(self) -> None:
        """Advance; past the last card the session restarts."""
        if self.current_index < len(self.active_cards) - 1:
            self.current_index += 1
            self._reset_card_state()
        else:
            self._restart_session()
        self._notify_change()

    def previous_card(self) -> None:
        """Step back, stopping at the first card."""
        if self.current_index > 0:
            self.current_index -= 1
        self._reset_card_state()
        self._notify_change()

    def flip(self) -> None:
        if self.is_typing_mode:
            return
        self.is_flipped = not self.is_flipped
        self._notify_change()

    # =========================================================================
    # SHUFFLE & ORDERING
    # =========================================================================

    def shuffle_active(self) -> None:
        """Shuffle the flashcard session only; list order and saved order stay."""
        self._random.shuffle(self.active_cards)
        self.current_index = 0
        self._reset_card_state()
        self._notify_change()

    def shuffle_list_mode(self) -> None:
        """Shuffle list mode, study in the same order, and remember it for this deck."""
        self._random.shuffle(self.list_mode_cards)
        self.active_cards = list(self.list_mode_cards)
        self.revealed_card_ids = set()
        self.current_index = 0
        self._reset_card_state()

        if self.deck_path and not self.studying_favorites:
            self._custom_orders[self.deck_path] = [card.key for card in self.list_mode_cards]
            self._mark(CUSTOM_CARD_ORDERS)
        self._notify_change()

    def reset_list_order(self) -> None:
        """Back to import order; forgets the saved order for this deck."""
        if self.studying_favorites:
            base = list(self.starred_cards)
        else:
            base = list(self._import_order)
            if self._custom_orders.pop(self.deck_path, None) is not None:
                self._mark(CUSTOM_CARD_ORDERS)

        self.all_cards = base
        self.list_mode_cards = list(base)
        self._restart_session()
        self._notify_change()

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def _find_card(self, card_id: str) -> Optional[Card]:
        for cards in (self.list_mode_cards, self.all_cards):
            for card in cards:
                if card.uuid == card_id:
                    return card
        return None

    def toggle_star(self, card_id: str) -> bool:
        """
        Star or unstar the card with this identity token.

        Starring stores a copy with its own identity, so favorites outlive
        the deck the card came from.

        Returns:
            False if no card has that id
        """
        card = self._find_card(card_id)
        if card is None:
            return False

        key = card.key
        if key in self.starred_card_keys:
            self.starred_card_keys.discard(key)
            self.starred_cards = [starred for starred in self.starred_cards if starred.key != key]
        else:
            self.starred_card_keys.add(key)
            self.starred_cards.append(card.copy())

        self._mark(STARRED_CARD_KEYS, STARRED_CARDS)
        self._notify_change()
        return True

    def enter_favorites(self) -> None:
        """Study the starred cards; the open deck is put aside for ``exit_favorites``."""
        if not self.starred_cards:
            return

        if not self.studying_favorites and self.deck_path:
            self._favorites_snapshot = FavoritesSnapshot(
                deck_path=self.deck_path,
                deck_name=self.current_deck_name,
                all_cards=list(self.all_cards),
                active_cards=list(self.active_cards),
                list_mode_cards=list(self.list_mode_cards),
            )

        self.studying_favorites = True
        self.current_deck_name = Config.FAVORITES_DECK_NAME
        self.all_cards = list(self.starred_cards)
        self.active_cards = list(self.starred_cards)
        self.list_mode_cards = list(self.starred_cards)
        self.revealed_card_ids = set()
        self.current_index = 0
        self._reset_card_state()
        self._notify_change()

    def exit_favorites(self) -> None:
        """Leave favorites and bring back the deck saved by ``enter_favorites``."""
        self.studying_favorites = False

        snapshot = self._favorites_snapshot
        if snapshot is not None:
            self.deck_path = snapshot.deck_path
            recent = self._library.find(snapshot.deck_path)
            self.current_deck_name = recent.name if recent else snapshot.deck_name
            self.all_cards = snapshot.all_cards
            self.active_cards = snapshot.active_cards
            self.list_mode_cards = snapshot.list_mode_cards
            self.revealed_card_ids = set()
            # Position carries over, kept inside the restored deck
            self.current_index = min(self.current_index, max(len(self.active_cards) - 1, 0))
            self._reset_card_state()
            self._favorites_snapshot = None

        self._notify_change()

    # =========================================================================
    # LIST MODE REVEALS & SEARCH
    # =========================================================================

    def toggle_reveal(self, card_id: str) -> None:
        if card_id in self.revealed_card_ids:
            self.revealed_card_ids.discard(card_id)
        else:
            self.revealed_card_ids.add(card_id)
        self._notify_change()

    def reveal_all(self) -> None:
        self.revealed_card_ids.update(card.uuid for card in self.list_mode_cards)
        self._notify_change()

    def clear_all_reveals(self) -> None:
        self.revealed_card_ids = set()
        self._notify_change()

    def set_search_query(self, query: str) -> None:
        self.search_query = query
        self._notify_change()

    # =========================================================================
    # TYPED ANSWERS
    # =========================================================================

    def toggle_typing_mode(self) -> None:
        self.is_typing_mode = not self.is_typing_mode
        self._reset_card_state()
        self._notify_change()

    def set_term_first(self, term_first: bool) -> None:
        """Choose which side is shown first (and so which side is typed)."""
        self.is_term_first = term_first
        self._reset_card_state()
        self._notify_change()

    def check_answer(self) -> bool:
        """
        Compare the typed answer with the hidden side of the current card.

        Exact match after trimming the input and case folding both sides.
        """
        card = self.current_card
        if card is None:
            self.is_correct = False
            return False
        target = card.definition if self.is_term_first else card.term
        self.is_correct = self.typing_input.strip().casefold() == target.casefold()
        return self.is_correct

    def set_typing_input(self, text: str) -> bool:
        self.typing_input = text
        result = self.check_answer()
        self._notify_change()
        return result

    # =========================================================================
    # DECK LIBRARY
    # =========================================================================

    def rename_current_deck(self, name: str) -> None:
        self.current_deck_name = name
        if self._library.rename(self.deck_path, name):
            self._mark(RECENT_DECKS)
        self._notify_change()

    def delete_deck(self, path: str) -> None:
        """Forget a deck (the file stays on disk); closes it if it is open."""
        if self._library.remove(path):
            self._mark(RECENT_DECKS)
        if self._custom_orders.pop(path, None) is not None:
            self._mark(CUSTOM_CARD_ORDERS)
        if path == self.deck_path:
            self.reset_to_empty()
        else:
            self._notify_change()

    def reset_to_empty(self) -> None:
        """
        Close the open deck.

        Leaves favorites mode but keeps any pending favorites snapshot.
        """
        self._repository = None
        self.deck_path = ""
        self.current_deck_name = ""
        self.all_cards = []
        self.active_cards = []
        self.list_mode_cards = []
        self._import_order = []
        self.revealed_card_ids = set()
        self.current_index = 0
        self._reset_card_state()
        self.is_setup_mode = False
        self.studying_favorites = False
        self._mark(LAST_DECK_PATH)
        self._notify_change()

    # =========================================================================
    # IMPORT
    # =========================================================================

    def is_supported_file(self, path: Union[str, Path]) -> bool:
        """Check the extension allow-list; sets ``error_message`` when rejected."""
        extension = file_extension(path)
        if extension in Config.SUPPORTED_EXTENSIONS:
            return True
        self.error_message = f"Unsupported file type: {extension}. Please use CSV."
        logger.warning("Rejected import of %s", path)
        self._notify_change()
        return False

    def import_destination(self, path: Union[str, Path]) -> Path:
        """Where an imported file is copied (same name inside the import dir)."""
        return self.import_dir / Path(path).name

    def report_import_failure(self, error: Exception) -> None:
        self.error_message = f"Failed to import file: {error}"
        logger.error("Import failed: %s", error)
        self._notify_change()

    def open_imported(self, destination: Union[str, Path]) -> bool:
        """Load a freshly copied file and open the column editor on it."""
        if not self.load_from_path(destination):
            return False
        self.is_setup_mode = True
        self._notify_change()
        return True

    def import_file(self, path: Union[str, Path]) -> bool:
        """
        Import a file picked or dropped by the user.

        The file is copied into the import directory (replacing a file of
        the same name) and opened from there in setup mode.
        """
        source = Path(path)
        if not self.is_supported_file(source):
            return False

        destination = self.import_destination(source)
        try:
            ensure_dir(self.import_dir)
            if source.resolve() != destination.resolve():
                shutil.copyfile(source, destination)
        except OSError as e:
            self.report_import_failure(e)
            return False

        logger.info("Imported %s", source.name)
        return self.open_imported(destination)

    # =========================================================================
    # THEME & ERRORS
    # =========================================================================

    def set_theme(self, name: str) -> bool:
        if name not in THEME_CONFIG:
            return False
        self.theme_name = name
        self._mark(THEME_NAME)
        self._notify_change()
        return True

    def clear_error(self) -> None:
        self.error_message = None
        self._notify_change()
