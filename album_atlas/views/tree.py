"""
Top-down tree layout for the recommendation flowchart.

Two passes: the first computes how much horizontal room every subtree needs
and the tallest card per depth; the second hands each child a slot of exactly
that width, left to right, and centres every parent over its children.
"""

import logging
from typing import Mapping, Optional

import config
from album_atlas.core.errors import MissingDimensionsError
from album_atlas.views.nodes import NodeDef, NodeDimensions, Position

logger = logging.getLogger(__name__)


def build_tree_positions(
    root: Optional[NodeDef],
    dimensions: Mapping[str, NodeDimensions],
    h_margin: float = config.TREE_MARGIN_X,
    v_margin: float = config.TREE_MARGIN_Y,
) -> dict[str, Position]:
    """
    Position every node of a rooted tree.

    Args:
        root: Tree root; None yields an empty layout
        dimensions: Sizes by node id (may contain extra ids)
        h_margin: Horizontal gap between sibling slots
        v_margin: Vertical gap between depth rows

    Returns:
        Position (top-left) per node id

    Raises:
        MissingDimensionsError: If any node in the tree has no dimensions
    """
    if root is None:
        logger.warning("Tree layout requested without a root node")
        return {}

    width_required: dict[str, float] = {}
    height_per_depth: list[float] = []

    def _dims(node: NodeDef) -> NodeDimensions:
        dims = dimensions.get(node.id)
        if dims is None:
            raise MissingDimensionsError(node.id)
        return dims

    # Pass 1: width requirements and row heights
    def _measure(node: NodeDef, depth: int) -> float:
        dims = _dims(node)
        if depth == len(height_per_depth):
            height_per_depth.append(0.0)
        height_per_depth[depth] = max(height_per_depth[depth], dims.height)

        if not node.children:
            required = dims.width
        else:
            required = sum(_measure(c, depth + 1) for c in node.children)
            required += h_margin * (len(node.children) - 1)
        width_required[node.id] = required
        return required

    _measure(root, 0)

    y_for_depth = [0.0]
    for height in height_per_depth:
        y_for_depth.append(y_for_depth[-1] + height + v_margin)

    positions: dict[str, Position] = {}

    # Pass 2: slots, left to right
    def _place(node: NodeDef, slot_left: float, depth: int) -> None:
        y = y_for_depth[depth]
        if not node.children:
            positions[node.id] = Position(x=slot_left, y=y)
            return

        cursor = slot_left
        for child in node.children:
            _place(child, cursor, depth + 1)
            cursor += width_required[child.id] + h_margin

        count = len(node.children)
        if count % 2:
            x = positions[node.children[count // 2].id].x
        else:
            left = positions[node.children[count // 2 - 1].id].x
            right = positions[node.children[count // 2].id].x
            x = (left + right) / 2
        positions[node.id] = Position(x=x, y=y)

    _place(root, -width_required[root.id] / 2, 0)
    return positions
