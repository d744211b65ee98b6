"""
Home view: a refreshable row of random picks.
"""

import logging
from typing import Mapping

import config
from album_atlas.core.album_store import AlbumStore
from album_atlas.views.builders import (
    BaseViewBuilder,
    HomeData,
    album_dimensions,
    album_node,
    register_view,
    require_dimensions,
)
from album_atlas.views.grid import build_grid_positions
from album_atlas.views.nodes import (
    IconButtonContext,
    NodeDef,
    NodeDimensions,
    Position,
    SectionTitleContext,
)

logger = logging.getLogger(__name__)

TITLE_ID = "random-picks"
REFRESH_BUTTON_ID = "refresh-random-picks-button"


@register_view("home")
class HomeView(BaseViewBuilder):
    """Section title, refresh button and ``recs_count`` seeded random albums."""

    def build_nodes(self, data: HomeData, selectors: AlbumStore) -> dict[str, NodeDef]:
        logger.debug(f"Building home view with seed {data.seed!r}")
        picks = selectors.random_n(self.constants["recs_count"], data.seed)

        nodes = {
            TITLE_ID: NodeDef(id=TITLE_ID, context=SectionTitleContext(label="Random Picks")),
            REFRESH_BUTTON_ID: NodeDef(
                id=REFRESH_BUTTON_ID,
                context=IconButtonContext(aria_label="Refresh Random Picks", action="refresh_home"),
            ),
        }
        for album in picks:
            nodes[album.global_id] = album_node(album, parent_view="home")
        return nodes

    def build_node_positions(
        self,
        data: HomeData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        title = require_dimensions(dimensions, TITLE_ID)

        grid = build_grid_positions(
            album_dimensions(node_defs, dimensions),
            max_per_row=self.constants["max_per_row"],
            base_y=title.height + config.SECTION_TITLE_GAP,
        )

        return {
            TITLE_ID: Position(0.0, 0.0),
            REFRESH_BUTTON_ID: Position(title.width + config.SECTION_TITLE_GAP, 0.0),
            **grid.positions,
        }
