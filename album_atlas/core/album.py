"""
Album record model.

Validated with pydantic on ingestion; instances are frozen and never mutated.
Field aliases accept the camelCase export format as well as the older
hyphenated keys ("artist-mbid", "avg-rating", ...).
"""

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Album(BaseModel):
    """One rated release. ``global_id`` is the identity used everywhere else."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    global_id: str = Field(validation_alias=AliasChoices("globalId", "mbid", "global_id"))
    artist_id: str = Field(validation_alias=AliasChoices("artistId", "artist-mbid", "artist_id"))
    artist_name: str = Field(validation_alias=AliasChoices("artist", "artistName", "artist_name"))
    title: str = Field(validation_alias=AliasChoices("release", "title"))
    position: int
    release_date: date = Field(
        validation_alias=AliasChoices("releaseDate", "release-date", "release_date")
    )
    release_type: str = Field(
        validation_alias=AliasChoices("releaseType", "release-type", "release_type")
    )
    primary_genres: tuple[str, ...] = Field(
        validation_alias=AliasChoices("primaryGenres", "primary-genres", "primary_genres")
    )
    secondary_genres: tuple[str, ...] = Field(
        validation_alias=AliasChoices("secondaryGenres", "secondary-genres", "secondary_genres")
    )
    descriptors: tuple[str, ...]
    avg_rating: float = Field(validation_alias=AliasChoices("avgRating", "avg-rating", "avg_rating"))
    rating_count: int = Field(
        validation_alias=AliasChoices("ratingCount", "rating-count", "rating_count")
    )
    review_count: int = Field(
        validation_alias=AliasChoices("reviewCount", "review-count", "review_count")
    )

    @property
    def year(self) -> int:
        return self.release_date.year

    def to_row(self) -> dict:
        """Flat dict used to build the store's DataFrame."""
        row = self.model_dump()
        row["primary_genres"] = list(self.primary_genres)
        row["secondary_genres"] = list(self.secondary_genres)
        row["descriptors"] = list(self.descriptors)
        return row
