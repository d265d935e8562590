"""
Flickr Photo Search Client

Wraps the ``flickr.photos.search`` REST method and maps Flickr payloads
onto the backend-neutral ImageResult / SearchResponse entities.

API Documentation: https://www.flickr.com/services/api/flickr.photos.search.html

Notes:
- ``total`` may arrive as a number or a string
- Dimension extras (``o_width``, ``width_q`` ...) may also be strings
- ``url_q`` / ``url_o`` are only present when requested through ``extras``
  and when the owner allows it; static URLs are built as a fallback
- The API is known to repeat photo ids within and across pages
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from photo_search.domain.entities.image import ImageResult, ImageSize, ImageSource
from photo_search.domain.entities.page import PageInfo, SearchResponse
from photo_search.shared.exceptions import (
    ConfigurationError,
    FlickrAPIError,
    InvalidResponseError,
    ParseError,
)

from .base_client import BaseAPIClient

logger = logging.getLogger(__name__)

# API endpoints
FLICKR_REST_URL = "https://api.flickr.com/services/rest"
FLICKR_STATIC_HOST = "https://live.staticflickr.com"

SEARCH_METHOD = "flickr.photos.search"
SEARCH_EXTRAS = "url_q,url_o,o_dims"

# Size suffixes: q=150 square, m=240, n=320, z=640, b=1024
THUMBNAIL_SUFFIX = "q"
ORIGINAL_SUFFIX = "b"


def build_static_url(server: str, photo_id: str, secret: str, size_suffix: str) -> str:
    """https://live.staticflickr.com/{server-id}/{id}_{secret}_{size-suffix}.jpg"""
    return f"{FLICKR_STATIC_HOST}/{server}/{photo_id}_{secret}_{size_suffix}.jpg"


def _flexible_int(value: Any) -> int | None:
    """Decode an int that may arrive as a JSON number or a numeric string."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class FlickrClient(BaseAPIClient):
    """
    Flickr image search backend.

    Usage:
        async with FlickrClient(api_key="...") as client:
            response = await client.search_images("golden retriever", page=1, per_page=20)
    """

    _service_name = "Flickr"

    def __init__(
        self,
        api_key: str,
        timeout: float = 30.0,
        min_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            api_key: Flickr API key used to authorize requests
            timeout: Request timeout in seconds
            min_interval: Minimum seconds between requests
            transport: Optional httpx transport (for tests)

        Raises:
            ConfigurationError: If no API key is supplied
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError("A Flickr API key is required (set FLICKR_API_KEY)")
        super().__init__(
            base_url=FLICKR_REST_URL,
            timeout=timeout,
            min_interval=min_interval,
            headers={"Accept": "application/json"},
            transport=transport,
        )
        self._api_key = api_key.strip()

    def _search_params(self, query: str, page: int, per_page: int) -> dict[str, str]:
        return {
            "method": SEARCH_METHOD,
            "text": query,
            "page": str(page),
            "per_page": str(per_page),
            "format": "json",
            "nojsoncallback": "1",
            "extras": SEARCH_EXTRAS,
            "api_key": self._api_key,
        }

    async def search_images(self, query: str, page: int, per_page: int) -> SearchResponse:
        """
        Fetch one page of photos for ``query``.

        Args:
            query: Free-text search query
            page: 1-based page index
            per_page: Page size

        Returns:
            SearchResponse with mapped images and paging metadata

        Raises:
            APIError: Transport failures and Flickr error envelopes
            DataError: Payloads that cannot be decoded
        """
        logger.debug(f"Flickr search: text={query!r} page={page} per_page={per_page}")
        envelope = await self._make_request("", params=self._search_params(query, page, per_page))
        photos = self._validate_envelope(envelope)
        return self._map_photos(photos)

    @staticmethod
    def _validate_envelope(envelope: Any) -> dict[str, Any]:
        """Return the ``photos`` payload of an ``ok`` envelope, raise otherwise."""
        if not isinstance(envelope, dict):
            raise ParseError("Envelope is not a JSON object", source="Flickr")

        if envelope.get("stat") != "ok":
            code = _flexible_int(envelope.get("code"))
            raise FlickrAPIError(code if code is not None else -1, envelope.get("message"))

        photos = envelope.get("photos")
        if not isinstance(photos, dict):
            raise InvalidResponseError("missing 'photos' payload", source="Flickr")
        return photos

    @classmethod
    def _map_photos(cls, photos: dict[str, Any]) -> SearchResponse:
        page = _flexible_int(photos.get("page"))
        pages = _flexible_int(photos.get("pages"))
        per_page = _flexible_int(photos.get("perpage"))
        if page is None or pages is None or per_page is None:
            raise ParseError("'page', 'pages' and 'perpage' must be integers", source="Flickr")

        items = photos.get("photo")
        if not isinstance(items, list):
            raise ParseError("'photo' must be a list", source="Flickr")

        page_info = PageInfo(
            page=page,
            per_page=per_page,
            total=_flexible_int(photos.get("total")) or 0,
            pages=pages,
        )
        return SearchResponse(
            page=page_info,
            items=[cls._map_to_image_result(item) for item in items],
        )

    @staticmethod
    def _map_to_image_result(item: Any) -> ImageResult:
        """
        Map a Flickr photo object to the domain entity.

        Prefers the ``extras`` URLs and falls back to static URLs built from
        server/id/secret. Dimensions prefer the original size over the thumbnail.
        """
        if not isinstance(item, dict):
            raise ParseError("photo entry is not an object", source="Flickr")

        try:
            photo_id = str(item["id"])
            secret = str(item["secret"])
            server = str(item["server"])
        except KeyError as e:
            raise ParseError(f"photo is missing field {e.args[0]!r}", source="Flickr") from e

        title = item.get("title")
        thumbnail_url = item.get("url_q") or build_static_url(server, photo_id, secret, THUMBNAIL_SUFFIX)
        original_url = item.get("url_o") or build_static_url(server, photo_id, secret, ORIGINAL_SUFFIX)

        original_width = _flexible_int(item.get("o_width"))
        original_height = _flexible_int(item.get("o_height"))
        size = ImageSize(
            width=original_width if original_width is not None else _flexible_int(item.get("width_q")),
            height=original_height if original_height is not None else _flexible_int(item.get("height_q")),
        )

        return ImageResult(
            id=photo_id,
            title=title if isinstance(title, str) else "",
            thumbnail_url=thumbnail_url,
            original_url=original_url,
            size=size,
            source=ImageSource.FLICKR,
        )
