"""
Genre view: the best rated albums listing a genre as primary.
"""

from typing import Mapping

import config
from album_atlas.core.album import Album
from album_atlas.core.album_store import AlbumStore
from album_atlas.views.builders import (
    BaseViewBuilder,
    GenreData,
    album_dimensions,
    album_node,
    register_view,
    require_dimensions,
)
from album_atlas.views.grid import build_grid_positions
from album_atlas.views.nodes import GenreContext, NodeDef, NodeDimensions, Position


def genre_node_id(genre: str) -> str:
    return f"genre:{genre}"


@register_view("genre")
class GenreView(BaseViewBuilder):

    def _top_albums(self, data: GenreData, selectors: AlbumStore) -> list[Album]:
        albums = sorted(
            selectors.albums_by_genre(data.genre),
            key=lambda a: (-a.avg_rating, -a.rating_count),
        )
        return albums[:config.VIEWS_CONSTANTS[self.device]["search"]["search_count"]]

    def build_nodes(self, data: GenreData, selectors: AlbumStore) -> dict[str, NodeDef]:
        albums = self._top_albums(data, selectors)
        node_id = genre_node_id(data.genre)

        nodes = {
            node_id: NodeDef(
                id=node_id,
                context=GenreContext(name=data.genre, album_count=len(selectors.albums_by_genre(data.genre))),
            ),
        }
        for album in albums:
            nodes[album.global_id] = album_node(album, parent_view="genre")
        return nodes

    def build_node_positions(
        self,
        data: GenreData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        node_id = genre_node_id(data.genre)
        card = require_dimensions(dimensions, node_id)

        grid = build_grid_positions(
            album_dimensions(node_defs, dimensions),
            max_per_row=self.constants["max_per_row"],
            base_y=card.height + config.GRID_Y_GAP,
        )
        return {node_id: Position(0.0, 0.0), **grid.positions}
