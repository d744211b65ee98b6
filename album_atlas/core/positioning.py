"""
NodePositioner: sequences define nodes -> measure -> position for the active view.

The positioner exposes a single derived state. It is ``init`` until a view
defines nodes, ``in-progress`` while some target node still lacks measured
dimensions, and ``ready`` once the view builder has placed every node.
"""

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import ClassVar, Iterable, Mapping, Optional, Union

from album_atlas.core.album_store import AlbumStore
from album_atlas.core.errors import PositioningError
from album_atlas.views.builders import BaseViewBuilder, ViewConfig
from album_atlas.views.nodes import NodeDef, NodeDimensions, PositionedNode

logger = logging.getLogger(__name__)

Snapshot = Mapping[str, PositionedNode]


@dataclass(frozen=True)
class InitState:
    state: ClassVar[str] = "init"


@dataclass(frozen=True)
class InProgressState:
    target_node_defs: Mapping[str, NodeDef]
    previous_snapshot: Optional[Snapshot] = None
    state: ClassVar[str] = "in-progress"


@dataclass(frozen=True)
class ReadyState:
    positioned_nodes: Snapshot
    previous_snapshot: Optional[Snapshot] = None
    state: ClassVar[str] = "ready"


PositioningState = Union[InitState, InProgressState, ReadyState]


class NodePositioner:
    """
    Positioning state machine for one explorer session.

    Dimensions measured for a view are kept while the next view is of the same
    kind (so a flowchart expansion only waits for its new cards) and dropped
    when the view kind changes.
    """

    def __init__(self, selectors: AlbumStore, builders: Mapping[str, BaseViewBuilder]):
        """
        Args:
            selectors: Album store handed to the view builders
            builders: View builders by view key
        """
        self.selectors = selectors
        self.builders = builders

        self._view: Optional[ViewConfig] = None
        self._node_defs: Mapping[str, NodeDef] = MappingProxyType({})
        self._dimensions: Mapping[str, NodeDimensions] = MappingProxyType({})
        self._snapshot: Optional[Snapshot] = None
        self._state: PositioningState = InitState()

    @property
    def state(self) -> PositioningState:
        return self._state

    @property
    def view(self) -> Optional[ViewConfig]:
        return self._view

    @property
    def node_defs(self) -> Mapping[str, NodeDef]:
        return self._node_defs

    @property
    def dimensions(self) -> Mapping[str, NodeDimensions]:
        return self._dimensions

    @property
    def missing_ids(self) -> list[str]:
        """Target ids still waiting for dimensions."""
        return [i for i in self._node_defs if i not in self._dimensions]

    def set_view(self, view: ViewConfig) -> PositioningState:
        """
        Switch to a new view (or new data for the same view).

        Raises:
            ValueError: If no builder is registered for ``view.key``
        """
        if view.key not in self.builders:
            raise ValueError(f"No builder for view '{view.key}'")

        if isinstance(self._state, ReadyState):
            self._snapshot = self._state.positioned_nodes
        elif isinstance(self._state, InProgressState):
            logger.warning("New active view while positioning is in progress")

        if self._view is None or self._view.key != view.key:
            self._dimensions = MappingProxyType({})

        self._view = view
        builder = self.builders[view.key]
        self._node_defs = MappingProxyType(builder.build_nodes(view.data, self.selectors))
        logger.info(f"View '{view.key}' defines {len(self._node_defs)} nodes")

        return self._recompute()

    def register_dimensions(self, dims: NodeDimensions) -> PositioningState:
        """Record one measured size; lays out once every target is covered."""
        return self.register_many([dims])

    def register_many(self, dims: Iterable[NodeDimensions]) -> PositioningState:
        """
        Record several measured sizes, recomputing at most once.

        Sizes for ids outside the current targets, empty (0x0) sizes and sizes
        equal to the known ones are ignored.
        """
        updated = dict(self._dimensions)
        changed = False

        for d in dims:
            if d.id not in self._node_defs:
                logger.debug(f"Ignoring dimensions for unknown node {d.id}")
                continue
            if d.is_empty:
                logger.debug(f"Ignoring empty dimensions for {d.id}")
                continue
            known = updated.get(d.id)
            if known is not None and known.width == d.width and known.height == d.height:
                continue
            updated[d.id] = d
            changed = True

        if not changed:
            return self._state

        self._dimensions = MappingProxyType(updated)
        return self._recompute()

    def complete_entry_transition(self) -> PositioningState:
        """Drop the previous-view snapshot once new cards finished appearing."""
        self._snapshot = None
        if isinstance(self._state, (ReadyState, InProgressState)) and self._state.previous_snapshot is not None:
            self._state = replace(self._state, previous_snapshot=None)
        return self._state

    def _recompute(self) -> PositioningState:
        if not self._node_defs:
            self._state = InitState()
            return self._state

        if self.missing_ids:
            self._state = InProgressState(
                target_node_defs=self._node_defs,
                previous_snapshot=self._snapshot,
            )
            return self._state

        builder = self.builders[self._view.key]
        positions = builder.build_node_positions(
            self._view.data, self.selectors, self._node_defs, self._dimensions
        )

        positioned = {}
        for node_id, node_def in self._node_defs.items():
            position = positions.get(node_id)
            if position is None:
                raise PositioningError(f"No position generated for node def {node_id}")
            positioned[node_id] = PositionedNode(
                node_def=node_def,
                dimensions=self._dimensions[node_id],
                position=position,
            )

        self._state = ReadyState(
            positioned_nodes=MappingProxyType(positioned),
            previous_snapshot=self._snapshot,
        )
        logger.debug(f"Positioned {len(positioned)} nodes for view '{self._view.key}'")
        return self._state
