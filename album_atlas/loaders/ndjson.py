"""
Newline-delimited JSON album loader.
One album record per line, as exported by the album scraper.
"""

from pathlib import Path
from typing import Optional

from album_atlas.core.album import Album
from album_atlas.core.errors import AlbumLoadError
from .base import BaseAlbumLoader, register_loader
import config


@register_loader("ndjson")
class NdjsonAlbumLoader(BaseAlbumLoader):
    """
    Loader for NDJSON album exports.

    Expected record keys:
    - id, globalId, artistId, artist, release, position
    - releaseDate (ISO-8601), releaseType
    - primaryGenres, secondaryGenres, descriptors (string lists)
    - avgRating, ratingCount, reviewCount
    """

    def __init__(self, path: Optional[Path] = None, encoding: str = "utf-8"):
        """
        Initialize the NDJSON loader.

        Args:
            path: Path to the NDJSON file (defaults to config.ALBUMS_NDJSON_PATH)
            encoding: File encoding
        """
        self.path = Path(path) if path else config.ALBUMS_NDJSON_PATH
        self.encoding = encoding

    @property
    def name(self) -> str:
        return f"ndjson_{self.path.stem}"

    def load(self) -> list[Album]:
        if not self.path.exists():
            raise AlbumLoadError(f"Album file not found: {self.path}")

        try:
            with self.path.open("rb") as f:
                albums = self.validate(f, encoding=self.encoding)
        except OSError as e:
            raise AlbumLoadError(f"Failed to read {self.path}: {e}") from e

        if not albums:
            raise AlbumLoadError(f"No valid album records in {self.path}")

        return albums

    def exists(self) -> bool:
        """Check if the album file exists."""
        return self.path.exists()
