"""
Segment geometry for flowchart links.

A link from one parent to its children is drawn as a stem down from the
parent, a horizontal bar spanning the children, and one arrow per child.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

import config
from album_atlas.core.tags import Tag, get_tags_from_reason
from album_atlas.views.nodes import Link, PositionedNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class LinkSegment:
    segment_id: str
    start: Point
    end: Point
    is_arrow: bool = False
    tags: tuple[Tag, ...] = ()


@dataclass(frozen=True)
class LinkGeometry:
    link_id: str
    groups: tuple[tuple[LinkSegment, ...], ...]     # draw order: stem, bar, arrows

    @property
    def segments(self) -> list[LinkSegment]:
        return [seg for group in self.groups for seg in group]


def link_geometry(
    source: PositionedNode,
    targets: list[PositionedNode],
    gap: float = config.LINK_GAP,
    link_id: Optional[str] = None,
) -> LinkGeometry:
    """
    Compute the segments of one link.

    Args:
        source: Parent card
        targets: Child cards (any order, at least one)
        gap: Distance kept between line ends and cards
        link_id: Link id (derived from source and targets when omitted)

    Returns:
        Segment groups in draw order

    Raises:
        ValueError: If there is no target, or a target is not an album card
    """
    if not targets:
        raise ValueError(f"Link from {source.id} has no targets")

    ordered = sorted(targets, key=lambda t: t.position.x)
    source_id = source.id

    source_bottom = source.bottom
    target_top = min(t.position.y for t in ordered)
    junction = Point(
        x=source.center_x,
        y=target_top - (target_top - source_bottom) * 5 / 8,
    )

    stem = LinkSegment(
        segment_id=f"source-{source_id}",
        start=Point(x=source.center_x, y=source_bottom + gap),
        end=junction,
    )
    bar = (
        LinkSegment(
            segment_id=f"connection-left-{source_id}",
            start=junction,
            end=Point(x=ordered[0].center_x, y=junction.y),
        ),
        LinkSegment(
            segment_id=f"connection-right-{source_id}",
            start=junction,
            end=Point(x=ordered[-1].center_x, y=junction.y),
        ),
    )

    arrows = []
    for target in ordered:
        ctx = target.node_def.context
        if ctx.type != "album":
            raise ValueError(f"Link target does not have album context: {target.id}")

        tags: tuple[Tag, ...] = ()
        if ctx.recommendation is not None:
            tags = tuple(get_tags_from_reason(
                ctx.recommendation.reason, rng_seed=f"{source_id}-{target.id}"
            ))

        arrows.append(LinkSegment(
            segment_id=f"target-{source_id}-{target.id}",
            start=Point(x=target.center_x, y=junction.y),
            end=Point(x=target.center_x, y=target.position.y - gap),
            is_arrow=True,
            tags=tags,
        ))

    link_id = link_id or Link(source=source_id, targets=tuple(t.id for t in targets)).id
    return LinkGeometry(link_id=link_id, groups=((stem,), bar, tuple(arrows)))


def build_link_geometries(
    links: list[Link],
    positioned: Mapping[str, PositionedNode],
) -> list[LinkGeometry]:
    """Geometry for every link whose source and at least one target are positioned."""
    result = []
    for link in links:
        source: Optional[PositionedNode] = positioned.get(link.source)
        if source is None or not link.targets:
            continue
        targets = []
        for target_id in link.targets:
            target = positioned.get(target_id)
            if target is None:
                logger.warning(f"Missing positioned node for link target: {target_id}")
                continue
            targets.append(target)
        if targets:
            result.append(link_geometry(source, targets, link_id=link.id))
    return result
