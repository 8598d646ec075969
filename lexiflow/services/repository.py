"""
Deck table repository.

Owns the editable table behind one deck file and the unsaved-changes
flag. Cards are generated from this table by the session store.
"""

from pathlib import Path
from typing import List, Optional, Union

from ..models import TabularData
from ..utils.helpers import atomic_write_text
from ..utils.logger import setup_logger
from ..utils.parsing import TabularParser

logger = setup_logger(__name__)


class DeckRepository:
    """
    Comma-separated deck file with in-memory edits.

    Every edit marks the repository dirty; ``save`` writes the whole table
    back to ``path`` and clears the flag.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize deck repository.

        Args:
            path: Path to the deck file
        """
        self.path = Path(path)
        self._table: TabularData = TabularData()
        self._dirty: bool = False
        self.last_error: Optional[str] = None

    @property
    def is_dirty(self) -> bool:
        """Check for unsaved changes."""
        return self._dirty

    @property
    def table(self) -> TabularData:
        """The live table (edit it through the repository methods)."""
        return self._table

    @property
    def headers(self) -> List[str]:
        return self._table.headers

    @property
    def rows(self) -> List[List[str]]:
        return self._table.rows

    def load(self) -> bool:
        """
        Load the table from disk.

        Returns:
            False if the file was unreadable or held no header line; the
            current table is left untouched in that case.
        """
        data = TabularParser.parse_file(self.path)
        if data.is_empty:
            logger.warning("No data found in %s", self.path)
            return False

        self._table = data
        self._dirty = False
        logger.info("Loaded %s (%d columns, %d rows)", self.path.name, data.width, len(data.rows))
        return True

    def save(self) -> bool:
        """Write the table back to its file, replacing it atomically."""
        try:
            atomic_write_text(self.path, TabularParser.serialize(self._table))
        except OSError as e:
            self.last_error = str(e)
            logger.error("Error saving %s: %s", self.path, e)
            return False

        self.last_error = None
        self._dirty = False
        logger.info("Saved %s", self.path.name)
        return True

    def add_row(self) -> int:
        """Append an all-empty row as wide as the header. Returns its index."""
        self._table.rows.append([""] * self._table.width)
        self._dirty = True
        return len(self._table.rows) - 1

    def delete_row(self, index: int) -> bool:
        """Delete row at index."""
        if index < 0 or index >= len(self._table.rows):
            return False
        del self._table.rows[index]
        self._dirty = True
        return True

    def delete_column(self, index: int) -> bool:
        """Delete a column from the header and from every row that has it."""
        if index < 0 or index >= self._table.width:
            return False
        del self._table.headers[index]
        for row in self._table.rows:
            if index < len(row):
                del row[index]
        self._dirty = True
        return True

    def update_cell(self, row: int, column: int, value: str) -> bool:
        """Replace one cell's text."""
        if row < 0 or row >= len(self._table.rows):
            return False
        cells = self._table.rows[row]
        if column < 0 or column >= len(cells):
            return False
        cells[column] = value
        self._dirty = True
        return True

    def update_header(self, column: int, value: str) -> bool:
        """Rename a column."""
        if column < 0 or column >= self._table.width:
            return False
        self._table.headers[column] = value
        self._dirty = True
        return True
