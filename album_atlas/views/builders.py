"""
Base class and registry for view builders.

A view builder turns view data into node definitions, and node definitions
plus measured sizes into positions. Builders are pure: the same inputs always
produce the same output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional, Union

import config
from album_atlas.core.album import Album
from album_atlas.core.album_store import AlbumStore
from album_atlas.core.errors import MissingDimensionsError
from album_atlas.core.recommender import Recommendation
from album_atlas.views.nodes import AlbumContext, NodeDef, NodeDimensions, Position


# -----------------------------------------------------------------------------
# View data
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class HomeData:
    seed: str


@dataclass(frozen=True)
class SearchData:
    query: str


@dataclass(frozen=True)
class ArtistData:
    artist_id: str


@dataclass(frozen=True)
class GenreData:
    genre: str


@dataclass(frozen=True)
class FlowchartData:
    album_id: str
    node_tree: Optional[NodeDef] = None


ViewData = Union[HomeData, SearchData, ArtistData, GenreData, FlowchartData]


@dataclass(frozen=True)
class ViewConfig:
    """Active view: registry key plus the data it is built from."""
    key: str
    data: ViewData


# -----------------------------------------------------------------------------
# Builder interface
# -----------------------------------------------------------------------------

class BaseViewBuilder(ABC):
    """
    Abstract base class for view builders.

    Subclasses read their per-device settings from ``config.VIEWS_CONSTANTS``
    under their registry key.
    """

    key: str = ""
    transition_duration: float = config.VIEW_TRANSITION_DURATION

    def __init__(self, device: str = config.DEFAULT_DEVICE):
        self.device = device
        self.constants = config.VIEWS_CONSTANTS[device].get(self.key, {})

    @abstractmethod
    def build_nodes(self, data: ViewData, selectors: AlbumStore) -> dict[str, NodeDef]:
        """
        Define the nodes shown by this view.

        Args:
            data: View data
            selectors: Album store

        Returns:
            Node definitions by id, in display order
        """
        pass

    @abstractmethod
    def build_node_positions(
        self,
        data: ViewData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        """
        Lay out measured nodes.

        Args:
            data: View data
            selectors: Album store
            node_defs: Output of ``build_nodes``
            dimensions: Sizes by id, covering at least every node in ``node_defs``

        Returns:
            Top-left position per node id

        Raises:
            MissingDimensionsError: If a node the layout needs has no dimensions
        """
        pass


def album_node(
    album: Album,
    parent_view: str,
    variant: str = "compact",
    recommendation: Optional[Recommendation] = None,
) -> NodeDef:
    """Card node for one album, keyed by its global id."""
    return NodeDef(
        id=album.global_id,
        context=AlbumContext(
            album_id=album.global_id,
            artist_id=album.artist_id,
            artist_name=album.artist_name,
            title=album.title,
            parent_view=parent_view,
            variant=variant,
            recommendation=recommendation,
        ),
    )


def require_dimensions(dimensions: Mapping[str, NodeDimensions], node_id: str) -> NodeDimensions:
    """
    Raises:
        MissingDimensionsError: If ``node_id`` has not been measured
    """
    dims = dimensions.get(node_id)
    if dims is None:
        raise MissingDimensionsError(node_id)
    return dims


def album_dimensions(
    node_defs: Mapping[str, NodeDef],
    dimensions: Mapping[str, NodeDimensions],
) -> list[NodeDimensions]:
    """Sizes of the album cards in ``node_defs``, in definition order."""
    return [
        require_dimensions(dimensions, node_id)
        for node_id, node in node_defs.items()
        if node.context.type == "album"
    ]


# Registry for available views
_VIEW_REGISTRY: dict[str, type[BaseViewBuilder]] = {}


def register_view(key: str):
    """
    Decorator to register a view builder class.

    Usage:
        @register_view("home")
        class HomeView(BaseViewBuilder):
            ...

    Raises:
        TypeError: If class doesn't inherit from BaseViewBuilder
        ValueError: If key is already registered
    """
    def decorator(cls: type[BaseViewBuilder]):
        if not issubclass(cls, BaseViewBuilder):
            raise TypeError(f"{cls.__name__} must inherit from BaseViewBuilder")
        if key in _VIEW_REGISTRY:
            raise ValueError(
                f"View '{key}' already registered by {_VIEW_REGISTRY[key].__name__}"
            )
        cls.key = key
        _VIEW_REGISTRY[key] = cls
        return cls
    return decorator


def get_view_builder(key: str, **kwargs) -> BaseViewBuilder:
    """
    Get a view builder instance by key.

    Raises:
        ValueError: If key not found
    """
    if key not in _VIEW_REGISTRY:
        available = list(_VIEW_REGISTRY.keys())
        raise ValueError(f"Unknown view '{key}'. Available: {available}")

    return _VIEW_REGISTRY[key](**kwargs)


def list_views() -> list[str]:
    """Return list of registered view keys."""
    return list(_VIEW_REGISTRY.keys())
