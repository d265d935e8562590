"""
Domain Entity: SearchHistoryEntry

A past search term as stored by the local search history.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class SearchHistoryEntry:
    """A committed search. Equality is by value over all fields."""

    title: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    date_created: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date_created": self.date_created.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchHistoryEntry:
        """
        Build an entry from its persisted form.

        Raises:
            KeyError: If a required field is missing
            ValueError: If ``date_created`` is not ISO-8601
        """
        created = datetime.fromisoformat(data["date_created"])
        if created.tzinfo is None:
            created = created.replace(tzinfo=UTC)
        return cls(title=data["title"], id=data["id"], date_created=created)
