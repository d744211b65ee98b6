"""
Core components for Album-Atlas.
"""

from .album import Album
from .album_store import AlbumStore
from .errors import (
    AlbumLoadError,
    LayoutError,
    MissingDimensionsError,
    PositioningError,
    ViewStateError,
)
from .recommender import Recommendation, RecommendOptions, RecommendationWeights, recommend
from .tags import Tag, get_tags_from_reason

__all__ = [
    "Album",
    "AlbumStore",
    "AlbumLoadError",
    "LayoutError",
    "MissingDimensionsError",
    "PositioningError",
    "ViewStateError",
    "Recommendation",
    "RecommendOptions",
    "RecommendationWeights",
    "recommend",
    "Tag",
    "get_tags_from_reason",
]
