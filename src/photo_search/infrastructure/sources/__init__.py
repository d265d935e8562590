"""
Image search backends.

Contains:
- backend: the ImageSearchBackend contract
- base_client: shared httpx plumbing
- flickr: Flickr REST implementation
"""

from .backend import ImageSearchBackend
from .base_client import BaseAPIClient
from .flickr import FlickrClient

__all__ = [
    "BaseAPIClient",
    "FlickrClient",
    "ImageSearchBackend",
]
