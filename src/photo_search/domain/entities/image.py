"""
Domain Entity: ImageResult

Backend-neutral photo search result.
Pure domain entity: no source-specific factory methods.
Source mapping is handled by Infrastructure layer mappers.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum


class ImageSource(str, Enum):
    """Image provenance identifier. Other providers are carried as plain strings."""

    FLICKR = "flickr"
    MOCK = "mock"


@dataclass(frozen=True)
class ImageSize:
    """Pixel dimensions, either of which may be unknown."""

    width: int | None = None
    height: int | None = None

    @property
    def aspect_ratio(self) -> float | None:
        if self.width and self.height and self.width > 0 and self.height > 0:
            return self.width / self.height
        return None


@dataclass
class ImageResult:
    """
    A single photo returned by an image search backend.

    Only ``id`` carries meaning for caching and deduplication; the
    remaining fields are display data.
    """

    id: str
    title: str
    thumbnail_url: str
    original_url: str | None = None
    size: ImageSize | None = None
    source: ImageSource | str = ImageSource.FLICKR

    @property
    def best_url(self) -> str:
        """Largest available rendition."""
        return self.original_url or self.thumbnail_url

    def to_dict(self) -> dict:
        """Serialize to dictionary (auto-tracks new fields)."""
        return dataclasses.asdict(self)
