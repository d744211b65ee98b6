"""Shared fixtures for Album-Atlas tests."""

import json
from datetime import date

import pytest

from album_atlas.core.album import Album
from album_atlas.core.album_store import AlbumStore


def make_album(global_id: str, **overrides) -> Album:
    """Album with sensible defaults; any field can be overridden."""
    fields = dict(
        id=f"id-{global_id}",
        global_id=global_id,
        artist_id=f"artist-{global_id}",
        artist_name=f"Artist {global_id}",
        title=f"Album {global_id}",
        position=1,
        release_date=date(2000, 1, 1),
        release_type="Album",
        primary_genres=(),
        secondary_genres=(),
        descriptors=(),
        avg_rating=3.5,
        rating_count=100,
        review_count=10,
    )
    fields.update(overrides)
    return Album(**fields)


def album_record(global_id: str, **overrides) -> dict:
    """Raw NDJSON record in the export's camelCase format."""
    record = {
        "id": f"id-{global_id}",
        "globalId": global_id,
        "artistId": f"artist-{global_id}",
        "artist": f"Artist {global_id}",
        "release": f"Album {global_id}",
        "position": 1,
        "releaseDate": "2000-01-01",
        "releaseType": "Album",
        "primaryGenres": ["Rock"],
        "secondaryGenres": [],
        "descriptors": ["energetic"],
        "avgRating": 3.5,
        "ratingCount": 100,
        "reviewCount": 10,
    }
    record.update(overrides)
    return record


@pytest.fixture
def albums():
    """A small collection with two shared artists and overlapping genres."""
    return [
        make_album(
            "seed",
            artist_id="radiohead",
            artist_name="Radiohead",
            title="OK Computer",
            release_date=date(1997, 5, 21),
            primary_genres=("Alternative Rock", "Art Rock"),
            secondary_genres=("Electronic",),
            descriptors=("melancholic", "anxious", "atmospheric"),
            avg_rating=4.2,
            rating_count=90000,
        ),
        make_album(
            "kid-a",
            artist_id="radiohead",
            artist_name="Radiohead",
            title="Kid A",
            release_date=date(2000, 10, 2),
            primary_genres=("Art Rock", "Electronic"),
            secondary_genres=("Ambient",),
            descriptors=("atmospheric", "cold", "anxious"),
            avg_rating=4.25,
            rating_count=80000,
        ),
        make_album(
            "bends",
            artist_id="radiohead",
            artist_name="Radiohead",
            title="The Bends",
            release_date=date(1995, 3, 13),
            primary_genres=("Alternative Rock",),
            descriptors=("melancholic",),
            avg_rating=3.9,
            rating_count=60000,
        ),
        make_album(
            "loveless",
            artist_id="mbv",
            artist_name="My Bloody Valentine",
            title="Loveless",
            release_date=date(1991, 11, 4),
            primary_genres=("Shoegaze",),
            secondary_genres=("Alternative Rock",),
            descriptors=("atmospheric", "noisy"),
            avg_rating=4.3,
            rating_count=70000,
        ),
        make_album(
            "in-rainbows",
            artist_id="radiohead",
            artist_name="Radiohead",
            title="In Rainbows",
            release_date=date(2007, 10, 10),
            primary_genres=("Art Rock", "Alternative Rock"),
            descriptors=("melancholic", "warm"),
            avg_rating=4.3,
            rating_count=85000,
        ),
        make_album(
            "blue-train",
            artist_id="coltrane",
            artist_name="John Coltrane",
            title="Blue Train",
            release_date=date(1958, 1, 1),
            primary_genres=("Hard Bop",),
            descriptors=("warm",),
            avg_rating=4.0,
            rating_count=20000,
        ),
    ]


@pytest.fixture
def store(albums):
    return AlbumStore.from_albums(albums)


@pytest.fixture
def ndjson_file(tmp_path):
    """Write records to a temporary NDJSON file; returns a writer callable."""
    def _write(lines, name="albums.ndjson"):
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as f:
            for line in lines:
                f.write(line if isinstance(line, str) else json.dumps(line))
                f.write("\n")
        return path
    return _write
