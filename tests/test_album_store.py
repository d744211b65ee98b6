"""Tests for AlbumStore indices and selectors."""

import pytest

from album_atlas.core.album_store import AlbumStore
from album_atlas.core.errors import AlbumLoadError
from album_atlas.loaders.ndjson import NdjsonAlbumLoader
from conftest import album_record


class TestSelectors:
    """Lookups over an initialized store."""

    def test_get_album(self, store):
        assert store.get_album("kid-a").title == "Kid A"
        assert store.get_album("nope") is None

    def test_reverse_indices(self, store):
        assert {a.global_id for a in store.albums_by_artist("radiohead")} == {
            "seed", "kid-a", "bends", "in-rainbows",
        }
        assert [a.global_id for a in store.albums_by_genre("Shoegaze")] == ["loveless"]
        assert {a.global_id for a in store.albums_by_descriptor("warm")} == {"in-rainbows", "blue-train"}

    def test_genre_index_uses_primary_genres_only(self, store):
        assert "loveless" not in {a.global_id for a in store.albums_by_genre("Alternative Rock")}

    def test_unknown_keys_return_empty(self, store):
        assert store.albums_by_artist("nobody") == []
        assert store.albums_by_genre("polka") == []
        assert store.genres_for_album("nope") == []

    def test_counts(self, store):
        assert store.n_albums == 6
        assert len(store.all_artist_ids()) == 3
        assert "Hard Bop" in store.all_genres()
        assert len(store.get_all_items()) == 6


class TestRandomPicks:
    """Seeded random selection."""

    def test_same_seed_same_picks(self, store):
        assert store.random_n(3, "abc") == store.random_n(3, "abc")

    def test_distinct_and_capped(self, store):
        picks = store.random_n(50, "abc")
        assert len(picks) == store.n_albums
        assert len({a.global_id for a in picks}) == store.n_albums

    def test_zero(self, store):
        assert store.random_n(0, "abc") == []


class TestSearch:
    """Substring search on title and artist."""

    def test_case_insensitive_title(self, store):
        assert [a.global_id for a in store.search("kid")] == ["kid-a"]

    def test_title_matches_before_artist_matches(self, store):
        results = [a.global_id for a in store.search("ra")]
        # "In Rainbows" and "Blue Train" match on title, the other Radiohead albums on artist
        assert results == ["in-rainbows", "blue-train", "seed", "kid-a", "bends"]

    def test_artist_matches_by_popularity(self, store):
        results = [a.global_id for a in store.search("radiohead")]
        assert results == ["seed", "in-rainbows", "kid-a", "bends"]

    def test_limit_and_blank_query(self, store):
        assert len(store.search("radiohead", limit=2)) == 2
        assert store.search("   ") == []


class TestInitialize:
    """Loading through a loader."""

    def test_initialize_with_progress(self, ndjson_file):
        path = ndjson_file([album_record("a"), album_record("b")])
        store = AlbumStore(loader=NdjsonAlbumLoader(path))
        messages = []

        store.initialize(progress_callback=messages.append)

        assert store.is_initialized
        assert store.n_albums == 2
        assert messages[-1] == "Ready! 2 albums loaded."

    def test_initialize_is_idempotent(self, ndjson_file):
        store = AlbumStore(loader=NdjsonAlbumLoader(ndjson_file([album_record("a")])))
        store.initialize()
        messages = []
        store.initialize(progress_callback=messages.append)
        assert messages == []

    def test_reload_rebuilds(self, ndjson_file):
        path = ndjson_file([album_record("a")])
        store = AlbumStore(loader=NdjsonAlbumLoader(path))
        store.initialize()
        ndjson_file([album_record("a"), album_record("b")])
        store.reload()
        assert store.n_albums == 2

    def test_missing_file_raises(self, tmp_path):
        store = AlbumStore(loader=NdjsonAlbumLoader(tmp_path / "missing.ndjson"))
        with pytest.raises(AlbumLoadError, match="not found"):
            store.initialize()
        assert not store.is_initialized
