"""
Search view: matching albums in a grid under a results title.
"""

from typing import Callable, Mapping, Optional

import config
from album_atlas.core.album import Album
from album_atlas.core.album_store import AlbumStore
from album_atlas.views.builders import (
    BaseViewBuilder,
    SearchData,
    album_dimensions,
    album_node,
    register_view,
    require_dimensions,
)
from album_atlas.views.grid import build_grid_positions
from album_atlas.views.nodes import NodeDef, NodeDimensions, Position, SectionTitleContext

TITLE_ID = "search-results-title"

SearchFn = Callable[[AlbumStore, str, int], list[Album]]


def substring_search(selectors: AlbumStore, query: str, limit: int) -> list[Album]:
    return selectors.search(query, limit=limit)


@register_view("search")
class SearchView(BaseViewBuilder):
    """
    Search results.

    The matcher is injectable; the default delegates to ``AlbumStore.search``.
    """

    def __init__(self, device: str = config.DEFAULT_DEVICE, search_fn: Optional[SearchFn] = None):
        super().__init__(device)
        self.search_fn = search_fn or substring_search

    def build_nodes(self, data: SearchData, selectors: AlbumStore) -> dict[str, NodeDef]:
        query = data.query.strip()
        results = self.search_fn(selectors, query, self.constants["search_count"]) if query else []

        label = "Search Results" if query else "Enter a search term above"
        nodes = {TITLE_ID: NodeDef(id=TITLE_ID, context=SectionTitleContext(label=label))}
        for album in results[:self.constants["search_count"]]:
            nodes[album.global_id] = album_node(album, parent_view="search")
        return nodes

    def build_node_positions(
        self,
        data: SearchData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        title = require_dimensions(dimensions, TITLE_ID)

        grid = build_grid_positions(
            album_dimensions(node_defs, dimensions),
            max_per_row=self.constants["max_per_row"],
            base_y=title.height + config.SEARCH_TITLE_GAP,
            y_gap=config.GRID_Y_GAP,
        )
        return {TITLE_ID: Position(0.0, 0.0), **grid.positions}
