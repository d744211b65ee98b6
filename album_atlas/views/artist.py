"""
Artist view: the artist card above their discography.
"""

from typing import Mapping

import config
from album_atlas.core.album_store import AlbumStore
from album_atlas.views.builders import (
    ArtistData,
    BaseViewBuilder,
    album_node,
    register_view,
    require_dimensions,
)
from album_atlas.views.grid import build_grid_positions
from album_atlas.views.nodes import ArtistContext, NodeDef, NodeDimensions, Position


@register_view("albums_for_artist")
class ArtistView(BaseViewBuilder):

    def build_nodes(self, data: ArtistData, selectors: AlbumStore) -> dict[str, NodeDef]:
        albums = sorted(selectors.albums_by_artist(data.artist_id), key=lambda a: a.release_date)
        artist_name = albums[0].artist_name if albums else ""

        nodes = {data.artist_id: NodeDef(id=data.artist_id, context=ArtistContext(name=artist_name))}
        for album in albums:
            nodes[album.global_id] = album_node(album, parent_view="albums_for_artist")
        return nodes

    def build_node_positions(
        self,
        data: ArtistData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        artist = require_dimensions(dimensions, data.artist_id)

        albums = sorted(selectors.albums_by_artist(data.artist_id), key=lambda a: a.release_date)
        items = [
            require_dimensions(dimensions, a.global_id)
            for a in albums
            if a.global_id in node_defs
        ]

        grid = build_grid_positions(
            items,
            max_per_row=self.constants["max_per_row"],
            base_y=artist.height + config.GRID_Y_GAP,
        )
        return {data.artist_id: Position(0.0, 0.0), **grid.positions}
