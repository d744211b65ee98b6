"""
Row-wrapping grid packer shared by the list-like views.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import config
from album_atlas.views.nodes import NodeDimensions, Position


@dataclass(frozen=True)
class GridLayout:
    positions: dict[str, Position]
    max_x: float
    max_y: float


def build_grid_positions(
    items: Iterable[NodeDimensions],
    max_per_row: Optional[int] = None,
    base_x: float = 0.0,
    base_y: float = 0.0,
    x_gap: float = config.GRID_X_GAP,
    y_gap: float = config.GRID_Y_GAP,
) -> GridLayout:
    """
    Place items left to right, wrapping after every ``max_per_row`` items.

    A wrapping row advances y by the tallest height seen (including the
    wrapping item) plus ``y_gap``; the next row's running max height starts at
    the wrapping item's height.

    Args:
        items: Ordered sizes; ``id`` keys the result
        max_per_row: Items per row, or None to never wrap
        base_x: Left edge of every row
        base_y: Top of the first row
        x_gap: Horizontal gap between items
        y_gap: Vertical gap between rows

    Returns:
        GridLayout with positions, the largest x cursor reached, and the bottom
        of the last row
    """
    x, y = base_x, base_y
    row_max_height = 0.0
    max_x = 0.0
    positions: dict[str, Position] = {}

    for index, item in enumerate(items):
        positions[item.id] = Position(x=x, y=y)
        if max_per_row and (index + 1) % max_per_row == 0:
            y += max(row_max_height, item.height) + y_gap
            x = base_x
            row_max_height = item.height
        else:
            x += item.width + x_gap
            row_max_height = max(row_max_height, item.height)
        max_x = max(max_x, x)

    return GridLayout(positions=positions, max_x=max_x, max_y=y + row_max_height)
