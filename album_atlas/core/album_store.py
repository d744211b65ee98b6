"""
AlbumStore: in-memory album collection for Album-Atlas.
Loads albums through a loader, builds reverse indices, and serves read-only selectors.
"""

import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from album_atlas.core.album import Album
from album_atlas.core.errors import AlbumLoadError
from album_atlas.core.seeded import seeded_hash

if TYPE_CHECKING:
    from album_atlas.loaders.base import BaseAlbumLoader

logger = logging.getLogger(__name__)


class AlbumStore:
    """
    Indexed, immutable album collection.

    Responsibilities:
    - Load albums via a loader
    - Index albums by global id, artist, primary genre and descriptor
    - Provide selector lookups used by the view builders and the recommender

    Selectors never raise on unknown ids: they return None or an empty list.
    """

    def __init__(self, loader: Optional["BaseAlbumLoader"] = None):
        """
        Initialize the AlbumStore.

        Args:
            loader: Album loader (defaults to NdjsonAlbumLoader)
        """
        if loader is None:
            from album_atlas.loaders.ndjson import NdjsonAlbumLoader
            loader = NdjsonAlbumLoader()
        self.loader = loader

        # Populated after initialization
        self.items_df: Optional[pd.DataFrame] = None

        self._by_id: Mapping[str, Album] = MappingProxyType({})
        self._artists: Mapping[str, tuple[str, ...]] = MappingProxyType({})
        self._genres: Mapping[str, tuple[str, ...]] = MappingProxyType({})
        self._descriptors: Mapping[str, tuple[str, ...]] = MappingProxyType({})

        self._initialized = False

    @classmethod
    def from_albums(cls, albums: Iterable[Album]) -> "AlbumStore":
        """Build an initialized store from already validated albums."""
        store = cls.__new__(cls)
        store.loader = None
        store._initialized = False
        store._index(list(albums))
        store._initialized = True
        return store

    @property
    def is_initialized(self) -> bool:
        """Check if the store has been initialized."""
        return self._initialized

    def initialize(self, progress_callback: Optional[Callable[[str], None]] = None) -> None:
        """
        Load albums and build indices.

        Args:
            progress_callback: Optional callable(message: str) for progress updates

        Raises:
            AlbumLoadError: If the loader cannot produce any album
        """
        if self._initialized:
            return

        def log(msg: str):
            if progress_callback:
                progress_callback(msg)
            logger.info(msg)

        log(f"Loading {self.loader.name}...")
        try:
            albums = self.loader.load()
        except AlbumLoadError:
            logger.exception("Album load failed")
            raise

        log("Building indices...")
        self._index(albums)

        self._initialized = True
        log(f"Ready! {len(self._by_id)} albums loaded.")

    def reload(self, progress_callback: Optional[Callable[[str], None]] = None) -> None:
        """Rebuild the collection and all indices from the loader."""
        self._initialized = False
        self.initialize(progress_callback)

    def _index(self, albums: list[Album]) -> None:
        """Build id map, reverse indices and the DataFrame view wholesale."""
        by_id: dict[str, Album] = {}
        artists: dict[str, list[str]] = {}
        genres: dict[str, list[str]] = {}
        descriptors: dict[str, list[str]] = {}

        for album in albums:
            by_id[album.global_id] = album
            artists.setdefault(album.artist_id, []).append(album.global_id)
            for genre in album.primary_genres:
                genres.setdefault(genre, []).append(album.global_id)
            for descriptor in album.descriptors:
                descriptors.setdefault(descriptor, []).append(album.global_id)

        self._by_id = MappingProxyType(by_id)
        self._artists = MappingProxyType({k: tuple(v) for k, v in artists.items()})
        self._genres = MappingProxyType({k: tuple(v) for k, v in genres.items()})
        self._descriptors = MappingProxyType({k: tuple(v) for k, v in descriptors.items()})

        self.items_df = pd.DataFrame(
            [album.to_row() for album in by_id.values()],
            columns=list(Album.model_fields.keys()),
        )

    def _map_ids(self, ids: Iterable[str]) -> list[Album]:
        return [self._by_id[i] for i in ids if i in self._by_id]

    # -------------------------------------------------------------------------
    # Selectors
    # -------------------------------------------------------------------------

    def all_albums(self) -> list[Album]:
        return list(self._by_id.values())

    def get_album(self, global_id: str) -> Optional[Album]:
        return self._by_id.get(global_id)

    def albums_by_artist(self, artist_id: str) -> list[Album]:
        return self._map_ids(self._artists.get(artist_id, ()))

    def albums_by_genre(self, genre: str) -> list[Album]:
        return self._map_ids(self._genres.get(genre, ()))

    def albums_by_descriptor(self, descriptor: str) -> list[Album]:
        return self._map_ids(self._descriptors.get(descriptor, ()))

    def genres_for_album(self, global_id: str) -> list[str]:
        album = self._by_id.get(global_id)
        return list(album.primary_genres) if album else []

    def all_artist_ids(self) -> list[str]:
        return list(self._artists.keys())

    def all_genres(self) -> list[str]:
        return list(self._genres.keys())

    def all_descriptors(self) -> list[str]:
        return list(self._descriptors.keys())

    def random_n(self, n: int, seed: str = "") -> list[Album]:
        """
        Pick ``n`` distinct albums, reproducibly for a given seed string.

        Args:
            n: Number of albums (capped at the collection size)
            seed: Any string; the same seed always yields the same picks
        """
        albums = self.all_albums()
        k = max(0, min(n, len(albums)))
        if k == 0:
            return []
        rng = np.random.default_rng(seeded_hash(seed))
        picks = rng.choice(len(albums), size=k, replace=False)
        return [albums[int(i)] for i in picks]

    def search(self, query: str, limit: int = 30) -> list[Album]:
        """
        Case-insensitive substring match on title and artist name.

        Title matches come first, then artist matches; ties by rating count.
        """
        query = query.strip()
        if not query or self.items_df is None or self.items_df.empty:
            return []

        df = self.items_df
        in_title = df["title"].str.contains(query, case=False, regex=False)
        in_artist = df["artist_name"].str.contains(query, case=False, regex=False)

        matches = df[in_title | in_artist].assign(_rank=np.where(in_title[in_title | in_artist], 0, 1))
        matches = matches.sort_values(["_rank", "rating_count"], ascending=[True, False], kind="stable")

        return self._map_ids(matches["global_id"].head(max(0, limit)))

    # -------------------------------------------------------------------------
    # Utility methods
    # -------------------------------------------------------------------------

    def get_all_items(self) -> pd.DataFrame:
        """Get all albums as a DataFrame."""
        return self.items_df.copy() if self.items_df is not None else pd.DataFrame()

    @property
    def n_albums(self) -> int:
        """Number of albums in the store."""
        return len(self._by_id)
