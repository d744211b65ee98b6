"""
Viewport culling for positioned cards and links.

Only cards intersecting the viewport (grown by a buffer) are handed to the
renderer. Cards and links that come back into view after being culled are
reported separately so the renderer can skip their entry animation.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

import config
from album_atlas.core.zoom_manager import Bounds, CanvasSize, ZoomTransform
from album_atlas.views.nodes import Link, PositionedNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def expanded(self, delta: float) -> "Rect":
        return Rect(self.x - delta, self.y - delta, self.width + 2 * delta, self.height + 2 * delta)

    def intersects(self, left: float, top: float, right: float, bottom: float) -> bool:
        """AABB test; touching edges count as intersecting."""
        return not (
            right < self.x
            or left > self.x + self.width
            or bottom < self.y
            or top > self.y + self.height
        )


@dataclass(frozen=True)
class WindowResult:
    visible_ids: frozenset[str]
    reappeared_ids: frozenset[str] = frozenset()


def viewport_in_content(transform: ZoomTransform, canvas: CanvasSize) -> Rect:
    """Canvas rectangle mapped back into layout coordinates."""
    x0, y0 = transform.invert(0, 0)
    x1, y1 = transform.invert(canvas.width, canvas.height)
    return Rect(min(x0, x1), min(y0, y1), abs(x1 - x0), abs(y1 - y0))


def _buffered(viewport: Rect, buffer: float) -> Rect:
    return viewport.expanded(buffer * max(viewport.width, viewport.height))


def _node_visible(node: PositionedNode, rect: Rect) -> bool:
    return rect.intersects(node.position.x, node.position.y, node.right, node.bottom)


def filter_visible(
    nodes: Mapping[str, PositionedNode],
    viewport: Rect,
    buffer: float = config.NODE_WINDOW_BUFFER,
    previously_visible: Optional[Iterable[str]] = None,
    previously_positioned: Optional[Iterable[str]] = None,
) -> WindowResult:
    """
    Cards intersecting the buffered viewport.

    Args:
        nodes: Positioned cards by id
        viewport: Visible area in layout coordinates
        buffer: Growth on every side, as a fraction of the viewport's larger side
        previously_visible: Ids visible in the previous pass
        previously_positioned: Ids positioned in the previous ready layout

    Returns:
        Visible ids, and the subset that was positioned before but culled
    """
    rect = _buffered(viewport, buffer)
    visible = frozenset(node_id for node_id, node in nodes.items() if _node_visible(node, rect))

    before = set(previously_visible or ())
    positioned_before = set(previously_positioned or ())
    reappeared = frozenset(
        node_id for node_id in visible
        if node_id not in before and node_id in positioned_before
    )
    return WindowResult(visible_ids=visible, reappeared_ids=reappeared)


def filter_visible_links(
    links: Iterable[Link],
    nodes: Mapping[str, PositionedNode],
    visible_node_ids: Iterable[str],
    viewport: Rect,
    buffer: float = config.LINK_WINDOW_BUFFER,
    previously_visible: Optional[Iterable[str]] = None,
) -> WindowResult:
    """
    Links with a visible endpoint, or any link while the bounds of all
    positioned cards intersect the viewport.

    A parent and its children can all sit outside the viewport while the
    lines between them cross it; the bounds fallback keeps those links.
    """
    rect = _buffered(viewport, buffer)
    visible_nodes = set(visible_node_ids)
    visible = set()

    bounds = Bounds.from_nodes(nodes.values())
    content_in_view = bounds is not None and rect.intersects(
        bounds.left, bounds.top, bounds.right, bounds.bottom
    )

    for link in links:
        endpoint_ids = (link.source, *link.targets)
        if content_in_view or any(i in visible_nodes for i in endpoint_ids):
            visible.add(link.id)

    before = set(previously_visible or ())
    return WindowResult(
        visible_ids=frozenset(visible),
        reappeared_ids=frozenset(i for i in visible if i not in before),
    )


@dataclass
class WindowedContent:
    nodes: dict[str, PositionedNode] = field(default_factory=dict)
    reappeared_node_ids: frozenset[str] = frozenset()
    links: list[Link] = field(default_factory=list)
    reappeared_link_ids: frozenset[str] = frozenset()


class WindowingTracker:
    """
    Stateful culling across passes.

    Remembers what was visible last time, and which cards the last ready
    layout had positioned, to report reappearances.
    """

    def __init__(self, node_buffer: float = config.NODE_WINDOW_BUFFER,
                 link_buffer: float = config.LINK_WINDOW_BUFFER):
        self.node_buffer = node_buffer
        self.link_buffer = link_buffer
        self._visible_nodes: frozenset[str] = frozenset()
        self._positioned_nodes: frozenset[str] = frozenset()
        self._visible_links: frozenset[str] = frozenset()

    def update(
        self,
        nodes: Mapping[str, PositionedNode],
        links: Iterable[Link],
        viewport: Rect,
        layout_ready: bool = True,
    ) -> WindowedContent:
        """
        Cull one pass.

        Args:
            nodes: Cards currently shown (the ready layout, or the previous
                snapshot while a new layout is in progress)
            links: Links between those cards
            viewport: Visible area in layout coordinates
            layout_ready: Whether ``nodes`` is a ready layout; only then does it
                become the reference for future reappearances
        """
        links = list(links)
        node_result = filter_visible(
            nodes, viewport, self.node_buffer,
            previously_visible=self._visible_nodes,
            previously_positioned=self._positioned_nodes,
        )
        link_result = filter_visible_links(
            links, nodes, node_result.visible_ids, viewport, self.link_buffer,
            previously_visible=self._visible_links,
        )

        self._visible_nodes = node_result.visible_ids
        if layout_ready:
            self._positioned_nodes = frozenset(nodes.keys())
        self._visible_links = link_result.visible_ids

        return WindowedContent(
            nodes={i: n for i, n in nodes.items() if i in node_result.visible_ids},
            reappeared_node_ids=node_result.reappeared_ids,
            links=[link for link in links if link.id in link_result.visible_ids],
            reappeared_link_ids=link_result.reappeared_ids,
        )

    def reset(self) -> None:
        self._visible_nodes = frozenset()
        self._positioned_nodes = frozenset()
        self._visible_links = frozenset()
