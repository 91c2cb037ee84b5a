"""Single-slot storage for the last good timetable.

The data source only needs load() and save(); it is handed a cache instead
of reaching for a global store, so tests can use InMemoryTimetableCache.
"""

import os
import tempfile
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from schoolwatch.logging import get_logger
from schoolwatch.models import TimetableSnapshot

logger = get_logger(__name__)


class TimetableCache(Protocol):
    """One slot holding the most recently fetched TimetableSnapshot."""

    def load(self) -> TimetableSnapshot | None: ...

    def save(self, snapshot: TimetableSnapshot) -> None: ...


class InMemoryTimetableCache:
    """Process-local cache slot."""

    def __init__(self, snapshot: TimetableSnapshot | None = None) -> None:
        self.snapshot = snapshot
        self.save_count = 0

    def load(self) -> TimetableSnapshot | None:
        return self.snapshot

    def save(self, snapshot: TimetableSnapshot) -> None:
        self.snapshot = snapshot
        self.save_count += 1


class FileTimetableCache:
    """Keeps the cached timetable as one JSON file on disk.

    The file holds the API's wire format, so a cached blob decodes with the
    same schema as a fresh payload. Writes replace the whole file atomically;
    there is no expiry.
    """

    def __init__(self, state_dir: str = "data/state", key: str = "cachedTimetable") -> None:
        """Initialize FileTimetableCache.

        Args:
            state_dir: Directory holding the cache file (created if missing).
            key: Slot name; the file is ``<state_dir>/<key>.json``.
        """
        self.state_dir = Path(state_dir)
        self.cache_file = self.state_dir / f"{key}.json"

        self.state_dir.mkdir(parents=True, exist_ok=True)

        logger.debug("timetable_cache_initialized", cache_file=str(self.cache_file))

    def load(self) -> TimetableSnapshot | None:
        """Read the cached snapshot.

        Returns:
            The snapshot, or None if the slot is empty or unreadable.
        """
        if not self.cache_file.exists():
            logger.debug("timetable_cache_load", result="missing")
            return None

        try:
            snapshot = TimetableSnapshot.model_validate_json(
                self.cache_file.read_bytes()
            )
        except (OSError, ValidationError) as e:
            logger.warning(
                "timetable_cache_unreadable",
                cache_file=str(self.cache_file),
                error=str(e),
            )
            return None

        logger.debug(
            "timetable_cache_load", result="hit", update_date=snapshot.last_updated
        )
        return snapshot

    def save(self, snapshot: TimetableSnapshot) -> None:
        """Overwrite the slot with ``snapshot``.

        Readers see either the previous file or the new one, never a partial write.
        """
        fd, tmp_path = tempfile.mkstemp(
            dir=self.state_dir, prefix=f".{self.cache_file.stem}-", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot.to_wire_json())
            os.replace(tmp_path, self.cache_file)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

        logger.info(
            "timetable_cache_saved",
            path=str(self.cache_file),
            update_date=snapshot.last_updated,
        )

    def clear(self) -> None:
        """Delete the cache file, leaving the slot empty."""
        if self.cache_file.exists():
            self.cache_file.unlink()
            logger.info("timetable_cache_cleared", path=str(self.cache_file))
        else:
            logger.debug("timetable_cache_clear_skipped", reason="file_not_found")
