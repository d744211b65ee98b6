"""
Album loaders for Album-Atlas.
"""

from .base import BaseAlbumLoader, get_loader, list_loaders, register_loader
from .ndjson import NdjsonAlbumLoader

__all__ = [
    "BaseAlbumLoader",
    "get_loader",
    "list_loaders",
    "register_loader",
    "NdjsonAlbumLoader",
]
