"""
View node model: node definitions, measured sizes, positions and links.

Node trees are immutable. Tree edits return a new root that shares every
untouched subtree with the old one, so callers can detect changes by identity.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import ClassVar, Iterable, Mapping, Optional, Union

from album_atlas.core.recommender import Recommendation

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Node contexts
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AppTitleContext:
    type: ClassVar[str] = "app-title"


@dataclass(frozen=True)
class ArtistContext:
    name: str
    type: ClassVar[str] = "artist"


@dataclass(frozen=True)
class GenreContext:
    name: str
    album_count: int = 0
    type: ClassVar[str] = "genre"


@dataclass(frozen=True)
class SectionTitleContext:
    label: str
    type: ClassVar[str] = "section-title"


@dataclass(frozen=True)
class IconButtonContext:
    aria_label: str
    action: str     # name of the explorer action the button triggers
    type: ClassVar[str] = "icon-button"


@dataclass(frozen=True)
class AlbumContext:
    album_id: str
    artist_id: str
    artist_name: str
    title: str
    parent_view: str
    variant: str = "compact"    # "compact" | "detailed"
    recommendation: Optional[Recommendation] = None
    type: ClassVar[str] = "album"


NodeContext = Union[
    AppTitleContext,
    ArtistContext,
    GenreContext,
    SectionTitleContext,
    IconButtonContext,
    AlbumContext,
]


# -----------------------------------------------------------------------------
# Nodes, sizes, positions, links
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class NodeDef:
    """Logical graph element before it has a size or a position."""
    id: str
    context: NodeContext
    children: tuple["NodeDef", ...] = ()


@dataclass(frozen=True)
class NodeDimensions:
    id: str
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return self.width == 0 and self.height == 0


@dataclass(frozen=True)
class Position:
    """Top-left corner of a card in layout coordinates."""
    x: float
    y: float


@dataclass(frozen=True)
class PositionedNode:
    node_def: NodeDef
    dimensions: NodeDimensions
    position: Position

    @property
    def id(self) -> str:
        return self.node_def.id

    @property
    def right(self) -> float:
        return self.position.x + self.dimensions.width

    @property
    def bottom(self) -> float:
        return self.position.y + self.dimensions.height

    @property
    def center_x(self) -> float:
        return self.position.x + self.dimensions.width / 2


@dataclass(frozen=True)
class Link:
    """Edge group from one parent card to all of its children."""
    source: str
    targets: tuple[str, ...] = field(default_factory=tuple)

    @property
    def id(self) -> str:
        return f"{self.source}-{'_'.join(self.targets)}"


# -----------------------------------------------------------------------------
# Tree utilities
# -----------------------------------------------------------------------------

def flatten_tree(root: NodeDef) -> dict[str, NodeDef]:
    """
    Flatten a node tree to an id -> NodeDef map in depth-first pre-order.

    Raises:
        ValueError: If two nodes share an id
    """
    result: dict[str, NodeDef] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        if node.id in result:
            raise ValueError(f"Duplicate node id in tree: {node.id}")
        result[node.id] = node
        stack.extend(reversed(node.children))
    return result


def find_node(root: NodeDef, node_id: str) -> Optional[NodeDef]:
    if root.id == node_id:
        return root
    for child in root.children:
        found = find_node(child, node_id)
        if found is not None:
            return found
    return None


def find_parent(root: NodeDef, node_id: str) -> Optional[NodeDef]:
    for child in root.children:
        if child.id == node_id:
            return root
        found = find_parent(child, node_id)
        if found is not None:
            return found
    return None


def add_children(root: NodeDef, parent_id: str, new_children: Iterable[NodeDef]) -> NodeDef:
    """
    Append children to the node ``parent_id``.

    Returns the new root. Subtrees off the path to the parent are shared; if
    the parent is absent the original root is returned unchanged.
    """
    new_children = tuple(new_children)

    def _add(node: NodeDef) -> NodeDef:
        if node.id == parent_id:
            return replace(node, children=node.children + new_children)
        if not node.children:
            return node
        updated = tuple(_add(c) for c in node.children)
        if all(a is b for a, b in zip(updated, node.children)):
            return node
        return replace(node, children=updated)

    return _add(root)


def remove_children(root: NodeDef, parent_id: str, child_ids: Iterable[str]) -> NodeDef:
    """
    Drop the listed direct children (and their subtrees) of ``parent_id``.

    Returns the new root; the original root if nothing changed.
    """
    to_remove = set(child_ids)

    def _remove(node: NodeDef) -> NodeDef:
        if node.id == parent_id:
            kept = tuple(c for c in node.children if c.id not in to_remove)
            if len(kept) == len(node.children):
                return node
            return replace(node, children=kept)
        if not node.children:
            return node
        updated = tuple(_remove(c) for c in node.children)
        if all(a is b for a, b in zip(updated, node.children)):
            return node
        return replace(node, children=updated)

    return _remove(root)


def build_links(node_defs: Mapping[str, NodeDef]) -> list[Link]:
    """One link per node that has children, in map order."""
    return [
        Link(source=node.id, targets=tuple(c.id for c in node.children))
        for node in node_defs.values()
        if node.children
    ]
