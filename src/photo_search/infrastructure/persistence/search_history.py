"""
Search History Persistence.

Provides:
- SearchHistoryStore: the contract used by the image search manager
- InMemorySearchHistoryStore: process-lifetime store (tests, ephemeral servers)
- JsonSearchHistoryStore: JSON file under a data directory

Ordering rules shared by both stores:
- History is newest first, one entry per title (the newest one wins)
- The most recent search is the newest entry, or None when the store is
  empty or the newest entry has an empty title
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from photo_search.domain.entities.search_history import SearchHistoryEntry
from photo_search.shared.exceptions import PersistenceError

logger = logging.getLogger(__name__)


@runtime_checkable
class SearchHistoryStore(Protocol):
    def add_recent_search(self, entry: SearchHistoryEntry) -> None: ...

    def get_search_history(self) -> list[SearchHistoryEntry]: ...

    def get_most_recent_search(self) -> SearchHistoryEntry | None: ...


def _newest_first(entries: list[SearchHistoryEntry]) -> list[SearchHistoryEntry]:
    # sorted() is stable: for equal timestamps the later insertion wins
    return sorted(reversed(entries), key=lambda e: e.date_created, reverse=True)


def _unique_titles(entries: list[SearchHistoryEntry]) -> list[SearchHistoryEntry]:
    seen: set[str] = set()
    unique: list[SearchHistoryEntry] = []
    for entry in _newest_first(entries):
        if entry.title in seen:
            continue
        seen.add(entry.title)
        unique.append(entry)
    return unique


def _most_recent(entries: list[SearchHistoryEntry]) -> SearchHistoryEntry | None:
    ordered = _newest_first(entries)
    if not ordered or not ordered[0].title:
        return None
    return ordered[0]


class InMemorySearchHistoryStore:
    """Search history kept in memory only."""

    def __init__(self, entries: list[SearchHistoryEntry] | None = None) -> None:
        self._entries: list[SearchHistoryEntry] = list(entries or [])

    def add_recent_search(self, entry: SearchHistoryEntry) -> None:
        self._entries.append(entry)

    def get_search_history(self) -> list[SearchHistoryEntry]:
        return _unique_titles(self._entries)

    def get_most_recent_search(self) -> SearchHistoryEntry | None:
        return _most_recent(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class JsonSearchHistoryStore:
    """
    Search history persisted as a JSON list in ``<data_dir>/search_history.json``.

    Every call reads the file, so several processes sharing the data
    directory see each other's searches. Read and write failures raise
    PersistenceError chained to the underlying exception.
    """

    FILE_NAME = "search_history.json"

    def __init__(self, data_dir: str | Path) -> None:
        """
        Args:
            data_dir: Directory holding the history file. Created on first write.
        """
        self.data_dir = Path(data_dir).expanduser()

    @property
    def history_file(self) -> Path:
        return self.data_dir / self.FILE_NAME

    def _load(self) -> list[SearchHistoryEntry]:
        path = self.history_file
        if not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            if not isinstance(raw, list):
                raise PersistenceError(f"{path} does not contain a list", operation="load")
            return [SearchHistoryEntry.from_dict(item) for item in raw]
        except PersistenceError:
            raise
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Failed to load search history: {e}", operation="load") from e

    def _save(self, entries: list[SearchHistoryEntry]) -> None:
        path = self.history_file
        tmp_path = path.with_suffix(".json.tmp")
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump([e.to_dict() for e in entries], f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
        except OSError as e:
            raise PersistenceError(f"Failed to save search history: {e}", operation="save") from e

    def add_recent_search(self, entry: SearchHistoryEntry) -> None:
        entries = self._load()
        entries.append(entry)
        self._save(entries)
        logger.debug(f"Saved search {entry.title!r} ({len(entries)} stored)")

    def get_search_history(self) -> list[SearchHistoryEntry]:
        return _unique_titles(self._load())

    def get_most_recent_search(self) -> SearchHistoryEntry | None:
        return _most_recent(self._load())

    def clear(self) -> None:
        self._save([])
