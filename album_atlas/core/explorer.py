"""
GraphExplorer: one exploration session.

Wires the album store, view builders, positioning, camera and culling
together, and owns the view actions (switch view, expand, prune). Every
action rebuilds the node definitions, runs the measurement pass and, once the
layout is ready, hands the camera a rezoom.
"""

import logging
import time
import uuid
from typing import Callable, Iterable, Mapping, Optional

import config
from album_atlas.core.album_store import AlbumStore
from album_atlas.core.errors import ViewStateError
from album_atlas.core.positioning import (
    InProgressState,
    NodePositioner,
    PositioningState,
    ReadyState,
)
from album_atlas.core.recommender import RecommendOptions, RecommendationWeights
from album_atlas.core.windowing import WindowedContent, WindowingTracker, viewport_in_content
from album_atlas.core.zoom_manager import (
    CameraTransition,
    CanvasSize,
    ZoomConstants,
    ZoomManager,
    ZoomTransform,
)
from album_atlas.views import (
    ArtistData,
    BaseViewBuilder,
    CardMeasurer,
    FlowchartData,
    GenreData,
    HomeData,
    Measurer,
    SearchData,
    ViewConfig,
    get_view_builder,
    list_views,
    with_recommendations,
    without_children,
)
from album_atlas.views.flowchart import root_node
from album_atlas.views.links import LinkGeometry, build_link_geometries
from album_atlas.views.nodes import Link, NodeDimensions, PositionedNode, build_links, find_node

logger = logging.getLogger(__name__)


class GraphExplorer:
    """
    Explorer session over an initialized AlbumStore.

    The session is synchronous: each action returns after the layout for the
    new view is ready (with the default measurer) and a camera transition, if
    any, is waiting in ``pending_transition``.
    """

    def __init__(
        self,
        store: AlbumStore,
        device: str = config.DEFAULT_DEVICE,
        canvas: Optional[CanvasSize] = None,
        measurer: Optional[Measurer] = None,
        view_builders: Optional[Mapping[str, BaseViewBuilder]] = None,
        clock: Callable[[], float] = time.monotonic,
        auto_measure: bool = True,
    ):
        """
        Args:
            store: Initialized album store
            device: "desktop" or "mobile"; selects view and zoom constants
            canvas: Canvas size in pixels (defaults to the plot size)
            measurer: Card measurement (defaults to CardMeasurer)
            view_builders: Builder overrides by view key
            clock: Monotonic clock for resize debouncing
            auto_measure: Run the measurement pass on every view change; when
                False, sizes arrive through ``register_dimensions``
        """
        self.store = store
        self.device = device
        self.measurer = (measurer or CardMeasurer()) if auto_measure else None

        builders = {key: get_view_builder(key, device=device) for key in list_views()}
        builders.update(view_builders or {})
        self.builders = builders

        self.positioner = NodePositioner(store, builders)
        self.zoom = ZoomManager(
            canvas or CanvasSize(config.PLOT_WIDTH, config.PLOT_HEIGHT),
            ZoomConstants.for_device(device),
            clock,
        )
        self.windowing = WindowingTracker()

        self.pending_transition: Optional[CameraTransition] = None
        self._last_ready: Optional[ReadyState] = None

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> PositioningState:
        return self.positioner.state

    @property
    def view(self) -> Optional[ViewConfig]:
        return self.positioner.view

    @property
    def positioned_nodes(self) -> Mapping[str, PositionedNode]:
        """Cards to draw: the ready layout, or the previous one while positioning."""
        state = self.positioner.state
        if isinstance(state, ReadyState):
            return state.positioned_nodes
        if isinstance(state, InProgressState) and state.previous_snapshot is not None:
            return state.previous_snapshot
        return {}

    @property
    def camera(self) -> ZoomTransform:
        return self.zoom.camera

    def links(self) -> list[Link]:
        """Links between the drawn cards; only the flowchart has any."""
        if self.view is None or self.view.key != "flowchart":
            return []
        return build_links({i: n.node_def for i, n in self.positioned_nodes.items()})

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _apply_view(self, view: ViewConfig, rezoom_ids: Optional[Iterable[str]] = None) -> PositioningState:
        logger.info(f"Switching to view '{view.key}'")
        self.positioner.set_view(view)
        # The new token supersedes whatever transition was waiting
        self.pending_transition = None
        self.zoom.request_rezoom(rezoom_ids, defer=True)
        if self.measurer is not None:
            self._shell_pass()
        return self._observe(self.positioner.state)

    def _shell_pass(self) -> None:
        node_defs = self.positioner.node_defs
        measured = [self.measurer.measure(node_defs[i]) for i in self.positioner.missing_ids]
        self.positioner.register_many(measured)

    def _observe(self, state: PositioningState) -> PositioningState:
        if isinstance(state, ReadyState) and state is not self._last_ready:
            self._last_ready = state
            self._issue(self.zoom.set_positioned_nodes(state.positioned_nodes))
        return state

    def _issue(self, transition: Optional[CameraTransition]) -> None:
        if transition is not None:
            self.pending_transition = transition

    def register_dimensions(self, dims: Iterable[NodeDimensions]) -> PositioningState:
        """Feed sizes measured outside the session (custom renderers)."""
        return self._observe(self.positioner.register_many(dims))

    def complete_entry_transition(self) -> PositioningState:
        return self.positioner.complete_entry_transition()

    # -------------------------------------------------------------------------
    # Camera
    # -------------------------------------------------------------------------

    def complete_transition(self) -> Optional[ZoomTransform]:
        """Finish the pending camera transition at once (no animation)."""
        transition = self.pending_transition
        if transition is None:
            return None
        self.pending_transition = None
        self.zoom.on_transition_end(transition.token, transition.target)
        return self.zoom.camera

    def cancel_transition(self) -> None:
        if self.pending_transition is not None:
            self.zoom.on_transition_cancelled(self.pending_transition.token)
            self.pending_transition = None

    def resize(self, canvas: CanvasSize) -> None:
        self.zoom.resize(canvas)

    def flush_resize(self) -> Optional[CameraTransition]:
        transition = self.zoom.flush_resize()
        self._issue(transition)
        return transition

    def zoom_in(self) -> ZoomTransform:
        return self.zoom.zoom_by(config.ZOOM_STEP)

    def zoom_out(self) -> ZoomTransform:
        return self.zoom.zoom_by(1 / config.ZOOM_STEP)

    def fit(self, node_ids: Optional[Iterable[str]] = None) -> Optional[CameraTransition]:
        """Rezoom onto ``node_ids`` (all cards when None)."""
        transition = self.zoom.request_rezoom(node_ids)
        self._issue(transition)
        return transition

    def apply_user_transform(self, transform: ZoomTransform) -> ZoomTransform:
        return self.zoom.apply_user_transform(transform)

    # -------------------------------------------------------------------------
    # Rendering support
    # -------------------------------------------------------------------------

    def visible_content(self) -> WindowedContent:
        """Cards and links inside the buffered viewport for the current camera."""
        viewport = viewport_in_content(self.zoom.camera, self.zoom.canvas)
        return self.windowing.update(
            self.positioned_nodes,
            self.links(),
            viewport,
            layout_ready=isinstance(self.state, ReadyState),
        )

    def link_geometries(self, links: Optional[list[Link]] = None) -> list[LinkGeometry]:
        return build_link_geometries(links if links is not None else self.links(), self.positioned_nodes)

    # -------------------------------------------------------------------------
    # View actions
    # -------------------------------------------------------------------------

    def show_home(self, seed: Optional[str] = None) -> PositioningState:
        return self._apply_view(ViewConfig("home", HomeData(seed=seed or uuid.uuid4().hex)))

    def refresh_home(self) -> PositioningState:
        return self.show_home()

    def search(self, query: str) -> PositioningState:
        return self._apply_view(ViewConfig("search", SearchData(query=query)))

    def show_artist(self, artist_id: str) -> PositioningState:
        return self._apply_view(ViewConfig("albums_for_artist", ArtistData(artist_id=artist_id)))

    def show_genre(self, genre: str) -> PositioningState:
        return self._apply_view(ViewConfig("genre", GenreData(genre=genre)))

    def show_flowchart(self, album_id: str) -> PositioningState:
        return self._apply_view(ViewConfig("flowchart", FlowchartData(album_id=album_id)))

    def _flowchart_data(self, action: str) -> FlowchartData:
        if self.view is None or self.view.key != "flowchart":
            active = self.view.key if self.view else None
            raise ViewStateError(f"{action} requires the flowchart view (active: {active})")
        return self.view.data

    def add_recommendations_to_node(
        self,
        album_id: str,
        top_x: Optional[int] = None,
        weights: Optional[RecommendationWeights] = None,
        options: Optional[RecommendOptions] = None,
    ) -> PositioningState:
        """
        Expand a flowchart card with its top recommendations.

        Raises:
            ViewStateError: If the flowchart view is not active
        """
        data = self._flowchart_data("add_recommendations_to_node")
        if top_x is None:
            top_x = config.VIEWS_CONSTANTS[self.device]["flowchart"]["children_per_expand"]

        updated = with_recommendations(data, self.store, album_id, top_x, weights, options)
        if updated is data:
            return self.state

        before = find_node(root_node(data, self.store), album_id)
        after = find_node(updated.node_tree, album_id)
        known = {c.id for c in before.children}
        new_ids = [c.id for c in after.children if c.id not in known]

        return self._apply_view(ViewConfig("flowchart", updated), rezoom_ids=[album_id, *new_ids])

    def remove_children_from_node(self, parent_id: str, child_ids: Iterable[str]) -> PositioningState:
        """
        Prune children (and their subtrees) from a flowchart card.

        Raises:
            ViewStateError: If the flowchart view is not active
        """
        data = self._flowchart_data("remove_children_from_node")
        updated = without_children(data, parent_id, child_ids)
        if updated is data:
            return self.state
        return self._apply_view(ViewConfig("flowchart", updated))

    def activate_node(self, node_id: str) -> PositioningState:
        """
        Card click: expand in the flowchart, open the flowchart elsewhere,
        or run the action of an icon button.
        """
        node = self.positioned_nodes.get(node_id)
        if node is None:
            logger.warning(f"Activated node is not displayed: {node_id}")
            return self.state

        ctx = node.node_def.context
        if ctx.type == "album":
            if self.view.key == "flowchart":
                return self.add_recommendations_to_node(node_id)
            return self.show_flowchart(ctx.album_id)
        if ctx.type == "icon-button" and ctx.action == "refresh_home":
            return self.refresh_home()
        return self.state
