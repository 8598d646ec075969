"""Async import of dropped files."""

import asyncio
import os
import uuid
from pathlib import Path
from typing import Optional, Union

import aiofiles

from ..utils.helpers import ensure_dir
from ..utils.logger import setup_logger
from .session_store import StudySessionStore

logger = setup_logger(__name__)

CHUNK_SIZE = 64 * 1024


class FileImporter:
    """
    Bring drag-and-drop files into the store.

    Drops arrive out-of-band; each one is handled under a single lock so
    that the copy and the store transition (set path, load, enter setup
    mode) of one drop never interleave with another.
    """

    def __init__(self, store: StudySessionStore):
        self.store = store
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        """Get or create the import lock (lazy, bound to the running loop)."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def _copy(self, source: Path, destination: Path) -> None:
        """Copy through a temp file so a failed copy never leaves half a deck."""
        ensure_dir(destination.parent)
        temp_path = destination.with_name(f".{destination.name}.{uuid.uuid4().hex[:8]}.tmp")
        try:
            async with aiofiles.open(source, "rb") as src, aiofiles.open(temp_path, "wb") as dst:
                while True:
                    chunk = await src.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    await dst.write(chunk)
            os.replace(temp_path, destination)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise

    async def import_dropped(self, path: Union[str, Path]) -> bool:
        """
        Import one dropped file.

        Returns:
            True if the deck was copied and loaded
        """
        source = Path(path)
        async with self._get_lock():
            if not self.store.is_supported_file(source):
                return False

            destination = self.store.import_destination(source)
            try:
                if not (destination.exists() and source.resolve() == destination.resolve()):
                    await self._copy(source, destination)
            except OSError as e:
                self.store.report_import_failure(e)
                return False

            logger.info("Imported dropped file %s", source.name)
            return self.store.open_imported(destination)
