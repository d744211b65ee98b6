"""
View builders for Album-Atlas.
"""

from .builders import (
    ArtistData,
    BaseViewBuilder,
    FlowchartData,
    GenreData,
    HomeData,
    SearchData,
    ViewConfig,
    get_view_builder,
    list_views,
    register_view,
)
from .home import HomeView
from .search import SearchView
from .artist import ArtistView
from .genre import GenreView
from .flowchart import FlowchartView, with_recommendations, without_children
from .measure import CardMeasurer, Measurer

__all__ = [
    "ArtistData",
    "BaseViewBuilder",
    "FlowchartData",
    "GenreData",
    "HomeData",
    "SearchData",
    "ViewConfig",
    "get_view_builder",
    "list_views",
    "register_view",
    "HomeView",
    "SearchView",
    "ArtistView",
    "GenreView",
    "FlowchartView",
    "with_recommendations",
    "without_children",
    "CardMeasurer",
    "Measurer",
]
