"""
ZoomManager: camera limits and fitted transitions for the graph canvas.
Computes the zoom floor and pan boundary from the positioned nodes, and issues
token-guarded camera transitions for rezooms and resize corrections.
"""

import logging
import math
import time
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Mapping, Optional

import config
from album_atlas.views.nodes import PositionedNode

logger = logging.getLogger(__name__)

TranslateExtent = tuple[tuple[float, float], tuple[float, float]]


# -----------------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class Bounds:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.right) / 2, (self.top + self.bottom) / 2

    @classmethod
    def from_nodes(cls, nodes: Iterable[PositionedNode]) -> Optional["Bounds"]:
        """Smallest box enclosing every card, or None for no cards."""
        nodes = list(nodes)
        if not nodes:
            return None
        return cls(
            left=min(n.position.x for n in nodes),
            top=min(n.position.y for n in nodes),
            right=max(n.right for n in nodes),
            bottom=max(n.bottom for n in nodes),
        )


@dataclass(frozen=True)
class CanvasSize:
    width: float
    height: float


@dataclass(frozen=True)
class ZoomTransform:
    """Screen = content * k + (x, y)."""
    x: float = 0.0
    y: float = 0.0
    k: float = 1.0

    def apply(self, px: float, py: float) -> tuple[float, float]:
        return px * self.k + self.x, py * self.k + self.y

    def invert(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.x) / self.k, (sy - self.y) / self.k

    def translate(self, dx: float, dy: float) -> "ZoomTransform":
        """Shift by a content-space offset."""
        return ZoomTransform(self.x + self.k * dx, self.y + self.k * dy, self.k)

    def is_close(self, other: "ZoomTransform", eps: float = 1e-6) -> bool:
        return (
            abs(self.k - other.k) <= eps
            and abs(self.x - other.x) <= eps
            and abs(self.y - other.y) <= eps
        )


IDENTITY = ZoomTransform()


@dataclass(frozen=True)
class ZoomConstants:
    zoom_padding: float
    min_zoom: float
    max_zoom: float

    @classmethod
    def for_device(cls, device: str = config.DEFAULT_DEVICE) -> "ZoomConstants":
        return cls(**config.ZOOM_CONSTANTS[device])


DESKTOP = ZoomConstants.for_device("desktop")


def _ratio(available: float, size: float) -> float:
    return available / size if size > 0 else math.inf


def compute_min_scale(
    bounds: Bounds,
    canvas: CanvasSize,
    constants: ZoomConstants = DESKTOP,
) -> float:
    """Largest scale showing all of ``bounds`` with padding, within the zoom range."""
    p = constants.zoom_padding
    scale = min(
        _ratio(canvas.width - 2 * p, bounds.width),
        _ratio(canvas.height - 2 * p, bounds.height),
        constants.max_zoom,
    )
    return max(scale, constants.min_zoom)


def compute_translate_extent(
    bounds: Bounds,
    canvas: CanvasSize,
    scale: float,
    constants: ZoomConstants = DESKTOP,
    extent_padding: float = config.ZOOM_EXTENT_PADDING,
) -> TranslateExtent:
    """
    Pan boundary in content coordinates.

    The bounds are padded by ``zoom_padding / scale``, widened about their
    centre to the canvas aspect ratio on the non-limiting axis and to at least
    the area visible at ``max_zoom``, then padded by ``extent_padding / scale``.

    Returns:
        ((min_x, min_y), (max_x, max_y))
    """
    pad = constants.zoom_padding / scale
    width = bounds.width + 2 * pad
    height = bounds.height + 2 * pad

    if canvas.height > 0 and height > 0:
        canvas_ratio = canvas.width / canvas.height
        if canvas_ratio < width / height:
            height = width / canvas_ratio
        else:
            width = height * canvas_ratio

    width = max(width, canvas.width / constants.max_zoom)
    height = max(height, canvas.height / constants.max_zoom)

    cx, cy = bounds.center
    extra = extent_padding / scale
    return (
        (cx - width / 2 - extra, cy - height / 2 - extra),
        (cx + width / 2 + extra, cy + height / 2 + extra),
    )


def compute_fit_transform(
    bounds: Bounds,
    canvas: CanvasSize,
    constants: ZoomConstants = DESKTOP,
) -> ZoomTransform:
    """Transform at the fit scale with ``bounds`` centred in the canvas."""
    k = compute_min_scale(bounds, canvas, constants)
    cx, cy = bounds.center
    return ZoomTransform(x=canvas.width / 2 - cx * k, y=canvas.height / 2 - cy * k, k=k)


def constrain(transform: ZoomTransform, canvas: CanvasSize, extent: TranslateExtent) -> ZoomTransform:
    """
    Nearest transform whose viewport stays inside ``extent``.

    On an axis where the viewport is larger than the extent, the extent is
    centred in the viewport instead.
    """
    (ex0, ey0), (ex1, ey1) = extent
    vx0, vy0 = transform.invert(0, 0)
    vx1, vy1 = transform.invert(canvas.width, canvas.height)
    dx0, dx1 = vx0 - ex0, vx1 - ex1
    dy0, dy1 = vy0 - ey0, vy1 - ey1
    return transform.translate(
        (dx0 + dx1) / 2 if dx1 > dx0 else min(0.0, dx0) or max(0.0, dx1),
        (dy0 + dy1) / 2 if dy1 > dy0 else min(0.0, dy0) or max(0.0, dy1),
    )


# -----------------------------------------------------------------------------
# Debounce
# -----------------------------------------------------------------------------

class Debouncer:
    """Collapses bursts of calls; the last value wins once ``wait`` has passed quietly."""

    def __init__(self, wait: float, clock: Callable[[], float] = time.monotonic):
        self.wait = wait
        self.clock = clock
        self._value = None
        self._deadline: Optional[float] = None

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def trigger(self, value) -> None:
        self._value = value
        self._deadline = self.clock() + self.wait

    def pop_due(self):
        """Return the pending value if the quiet period is over, else None."""
        if self._deadline is None or self.clock() < self._deadline:
            return None
        value, self._value, self._deadline = self._value, None, None
        return value


# -----------------------------------------------------------------------------
# Manager
# -----------------------------------------------------------------------------

IDLE = "idle"
REZOOMING_PENDING = "rezooming-pending"
RESIZING_PENDING = "resizing-pending"


@dataclass(frozen=True)
class ZoomStatus:
    status: str = IDLE
    token: Optional[int] = None
    rezoom_node_ids: Optional[frozenset[str]] = None

    @property
    def is_idle(self) -> bool:
        return self.status == IDLE


@dataclass(frozen=True)
class CameraTransition:
    token: int
    target: ZoomTransform
    duration: float


class ZoomManager:
    """
    Camera state for the graph canvas.

    Features:
    - Zoom floor and pan boundary recomputed whenever content or canvas changes
    - Rezoom to fit all cards or a subset, as a token-guarded transition
    - Debounced resize with a corrective transition only when limits are violated
    - Clamped user pan/zoom

    Transitions are returned to the caller, which animates them and reports back
    with ``on_transition_end`` / ``on_transition_interrupted`` /
    ``on_transition_cancelled``. Reports carrying an outdated token are ignored.
    """

    def __init__(
        self,
        canvas: CanvasSize,
        constants: Optional[ZoomConstants] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize ZoomManager.

        Args:
            canvas: Initial canvas size in screen pixels
            constants: Padding and zoom range (defaults to the desktop profile)
            clock: Monotonic clock used for resize debouncing
        """
        self.constants = constants or DESKTOP
        self.canvas = canvas
        self.camera = IDENTITY
        self.status = ZoomStatus()

        self._positioned: Mapping[str, PositionedNode] = {}
        self._bounds: Optional[Bounds] = None
        self._floor_scale = self.constants.min_zoom
        self._scale_extent = (self.constants.min_zoom, self.constants.max_zoom)
        self._translate_extent: Optional[TranslateExtent] = None

        self._generation = 0
        self._resize = Debouncer(config.RESIZE_DEBOUNCE_SECONDS, clock)

    # -------------------------------------------------------------------------
    # Limits
    # -------------------------------------------------------------------------

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def floor_scale(self) -> float:
        return self._floor_scale

    @property
    def scale_extent(self) -> tuple[float, float]:
        return self._scale_extent

    @property
    def translate_extent(self) -> Optional[TranslateExtent]:
        return self._translate_extent

    def _update_limits(self) -> None:
        if self._bounds is None:
            self._translate_extent = None
            return
        self._floor_scale = compute_min_scale(self._bounds, self.canvas, self.constants)
        self._scale_extent = (
            max(self._floor_scale - config.SCALE_EXTENT_PADDING, self.constants.min_zoom),
            self.constants.max_zoom,
        )
        self._translate_extent = compute_translate_extent(
            self._bounds, self.canvas, self._floor_scale, self.constants
        )
        logger.debug(
            f"Zoom limits: floor={self._floor_scale:.3f} extent={self._translate_extent}"
        )

    def _clamp_scale(self, k: float) -> float:
        lo, hi = self._scale_extent
        return min(max(k, lo), hi)

    def _constrained(self, transform: ZoomTransform) -> ZoomTransform:
        if self._translate_extent is None:
            return transform
        return constrain(transform, self.canvas, self._translate_extent)

    def _next_token(self) -> int:
        self._generation += 1
        return self._generation

    # -------------------------------------------------------------------------
    # Content updates and rezoom
    # -------------------------------------------------------------------------

    def set_positioned_nodes(self, positioned: Mapping[str, PositionedNode]) -> Optional[CameraTransition]:
        """
        Track the current layout.

        Recomputes the limits when the bounds change and starts a pending
        rezoom, if any.
        """
        self._positioned = positioned
        bounds = Bounds.from_nodes(positioned.values())
        if bounds != self._bounds:
            self._bounds = bounds
            self._update_limits()

        if self.status.status == REZOOMING_PENDING:
            return self._start_rezoom()
        return None

    def request_rezoom(
        self,
        node_ids: Optional[Iterable[str]] = None,
        defer: bool = False,
    ) -> Optional[CameraTransition]:
        """
        Fit the camera to ``node_ids`` (all cards when None).

        Preempts any earlier transition. With ``defer``, or if no layout is
        known yet, the rezoom stays pending until ``set_positioned_nodes``
        delivers the next layout.
        """
        ids = frozenset(node_ids) if node_ids is not None else None
        self.status = ZoomStatus(REZOOMING_PENDING, self._next_token(), ids)
        if defer or self._bounds is None:
            return None
        return self._start_rezoom()

    def _start_rezoom(self) -> Optional[CameraTransition]:
        ids = self.status.rezoom_node_ids
        nodes = (
            [self._positioned[i] for i in ids if i in self._positioned]
            if ids is not None else list(self._positioned.values())
        )
        bounds = Bounds.from_nodes(nodes) or self._bounds
        if bounds is None:
            return None

        fit = compute_fit_transform(bounds, self.canvas, self.constants)
        k = self._clamp_scale(fit.k)
        cx, cy = bounds.center
        target = self._constrained(
            ZoomTransform(x=self.canvas.width / 2 - cx * k, y=self.canvas.height / 2 - cy * k, k=k)
        )
        return CameraTransition(token=self.status.token, target=target, duration=config.REZOOM_DURATION)

    # -------------------------------------------------------------------------
    # Resize
    # -------------------------------------------------------------------------

    def resize(self, canvas: CanvasSize) -> None:
        """Record a canvas size change; applied by ``flush_resize`` after the quiet period."""
        self._resize.trigger(canvas)

    def flush_resize(self) -> Optional[CameraTransition]:
        """
        Apply a debounced resize if due.

        Returns:
            A corrective transition if the current camera violates the new
            limits, else None
        """
        canvas = self._resize.pop_due()
        if canvas is None:
            return None

        self.canvas = canvas
        self._update_limits()
        if self._translate_extent is None:
            return None

        k = max(self._floor_scale, min(self.camera.k, self.constants.max_zoom))
        clamped = self._constrained(replace(self.camera, k=k))
        if clamped.is_close(self.camera):
            return None

        self.status = ZoomStatus(RESIZING_PENDING, self._next_token())
        return CameraTransition(
            token=self.status.token, target=clamped, duration=config.RESIZE_CORRECTION_DURATION
        )

    # -------------------------------------------------------------------------
    # Transition reports
    # -------------------------------------------------------------------------

    def _is_current(self, token: int) -> bool:
        if token != self.status.token or self.status.is_idle:
            logger.debug(f"Ignoring stale transition token {token} (current {self.status.token})")
            return False
        return True

    def on_transition_end(self, token: int, transform: ZoomTransform) -> None:
        if self._is_current(token):
            self.camera = transform
            self.status = ZoomStatus()

    def on_transition_interrupted(self, token: int, transform: ZoomTransform) -> None:
        """The animation stopped part way; keep the camera where it stopped."""
        if self._is_current(token):
            self.camera = transform
            self.status = ZoomStatus()

    def on_transition_cancelled(self, token: int) -> None:
        if self._is_current(token):
            self.status = ZoomStatus()

    # -------------------------------------------------------------------------
    # User interaction
    # -------------------------------------------------------------------------

    def apply_user_transform(self, transform: ZoomTransform) -> ZoomTransform:
        """Clamp a pan/zoom gesture to the current limits and make it the camera."""
        self.camera = self._constrained(replace(transform, k=self._clamp_scale(transform.k)))
        return self.camera

    def zoom_by(self, factor: float) -> ZoomTransform:
        """Scale around the canvas centre (zoom buttons)."""
        cx, cy = self.canvas.width / 2, self.canvas.height / 2
        px, py = self.camera.invert(cx, cy)
        k = self._clamp_scale(self.camera.k * factor)
        return self.apply_user_transform(ZoomTransform(x=cx - px * k, y=cy - py * k, k=k))

    def reset(self) -> None:
        """Forget content and camera, keeping the canvas size."""
        self._positioned = {}
        self._bounds = None
        self._translate_extent = None
        self.camera = IDENTITY
        self.status = ZoomStatus()
