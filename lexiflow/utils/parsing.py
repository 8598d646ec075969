"""Delimited-text parsing for deck tables."""

from pathlib import Path
from typing import List, Union

from ..models import TabularData
from .logger import setup_logger

logger = setup_logger(__name__)


class TabularParser:
    """
    Naive comma-separated table parser.

    No quoting or escaping: every comma splits a field. Ragged rows are
    coerced to the header width instead of being rejected.
    """

    DELIMITER = ","

    @classmethod
    def split_line(cls, line: str) -> List[str]:
        """
        Split one line into trimmed fields.

        Trailing empty fields left by trailing commas are dropped, but a
        row is never reduced below one field.
        """
        parts = [part.strip() for part in line.split(cls.DELIMITER)]
        while len(parts) > 1 and not parts[-1]:
            parts.pop()
        return parts

    @classmethod
    def parse(cls, content: str) -> TabularData:
        """
        Parse raw text into headers plus rows of equal width.

        Args:
            content: Raw file content, any newline convention

        Returns:
            TabularData (empty headers if nothing usable was found)
        """
        lines: List[List[str]] = []

        for line in content.splitlines():
            if not line.strip():
                continue
            parts = cls.split_line(line)
            if len(parts) == 1 and not parts[0]:
                continue
            lines.append(parts)

        if not lines:
            return TabularData()

        headers = lines[0]
        width = len(headers)

        rows = []
        for parts in lines[1:]:
            row = parts[:width]
            row.extend([""] * (width - len(row)))
            rows.append(row)

        return TabularData(headers=headers, rows=rows)

    @classmethod
    def parse_file(cls, path: Union[str, Path]) -> TabularData:
        """
        Read and parse a file.

        An unreadable file gives an empty table; callers check
        ``is_empty`` to detect the failure.
        """
        try:
            content = Path(path).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            return TabularData()
        return cls.parse(content)

    @classmethod
    def serialize(cls, data: TabularData) -> str:
        """
        Join headers and rows back into text, one newline-terminated line each.

        Fields containing a comma are written as-is and will split on the
        next parse.
        """
        lines = [cls.DELIMITER.join(data.headers)]
        lines.extend(cls.DELIMITER.join(row) for row in data.rows)
        return "".join(f"{line}\n" for line in lines)
