"""
Flowchart view: a recommendation tree grown from a seed album.

Expanding a card appends recommendations for it as children; pruning drops
children again. Both return new view data with a new tree root.
"""

import logging
from dataclasses import replace
from typing import Iterable, Mapping, Optional

from album_atlas.core.album_store import AlbumStore
from album_atlas.core.recommender import RecommendOptions, RecommendationWeights, recommend
from album_atlas.views.builders import (
    BaseViewBuilder,
    FlowchartData,
    album_node,
    register_view,
)
from album_atlas.views.nodes import (
    NodeDef,
    NodeDimensions,
    Position,
    add_children,
    find_node,
    flatten_tree,
    remove_children,
)
from album_atlas.views.tree import build_tree_positions

logger = logging.getLogger(__name__)


def root_node(data: FlowchartData, selectors: AlbumStore) -> Optional[NodeDef]:
    """Current tree root, or a childless seed card when the tree is new."""
    if data.node_tree is not None:
        return data.node_tree
    album = selectors.get_album(data.album_id)
    if album is None:
        return None
    return album_node(album, parent_view="flowchart", variant="detailed")


@register_view("flowchart")
class FlowchartView(BaseViewBuilder):

    def build_nodes(self, data: FlowchartData, selectors: AlbumStore) -> dict[str, NodeDef]:
        root = root_node(data, selectors)
        if root is None:
            logger.warning(f"Flowchart seed album not found: {data.album_id}")
            return {}
        return flatten_tree(root)

    def build_node_positions(
        self,
        data: FlowchartData,
        selectors: AlbumStore,
        node_defs: Mapping[str, NodeDef],
        dimensions: Mapping[str, NodeDimensions],
    ) -> dict[str, Position]:
        return build_tree_positions(node_defs.get(data.album_id), dimensions)


def with_recommendations(
    data: FlowchartData,
    selectors: AlbumStore,
    album_id: str,
    top_x: int,
    weights: Optional[RecommendationWeights] = None,
    options: Optional[RecommendOptions] = None,
) -> FlowchartData:
    """
    Attach the top recommendations for ``album_id`` as its children.

    Albums already in the tree are never recommended again. Returns ``data``
    unchanged if the album is unknown or not part of the tree.
    """
    seed = selectors.get_album(album_id)
    root = root_node(data, selectors)
    if seed is None or root is None or find_node(root, album_id) is None:
        logger.warning(f"Cannot expand missing flowchart node: {album_id}")
        return data

    existing = flatten_tree(root).keys()
    recs = recommend(
        seed,
        selectors.all_albums(),
        top_x,
        excluded_ids=existing,
        weights=weights,
        options=options,
    )
    children = [
        album_node(rec.album, parent_view="flowchart", recommendation=rec)
        for rec in recs
    ]
    if not children:
        logger.info(f"No recommendations left for {album_id}")
        return data
    logger.info(f"Adding {len(children)} recommendations under {album_id}")
    return replace(data, node_tree=add_children(root, album_id, children))


def without_children(data: FlowchartData, parent_id: str, child_ids: Iterable[str]) -> FlowchartData:
    """Drop the given children (and their subtrees) of ``parent_id``."""
    if data.node_tree is None:
        return data
    if find_node(data.node_tree, parent_id) is None:
        logger.warning(f"Cannot prune missing flowchart node: {parent_id}")
        return data
    updated = remove_children(data.node_tree, parent_id, child_ids)
    if updated is data.node_tree:
        return data
    return replace(data, node_tree=updated)
