"""
Image search backend contract.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from photo_search.domain.entities.page import SearchResponse


@runtime_checkable
class ImageSearchBackend(Protocol):
    """
    A remote photo catalog that can be searched page by page.

    Implementations raise ``APIError`` subclasses for transport failures and
    ``DataError`` subclasses for payloads they cannot decode.
    """

    async def search_images(self, query: str, page: int, per_page: int) -> SearchResponse: ...
