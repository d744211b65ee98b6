"""
Exceptions raised by the Album-Atlas core.
"""


class AlbumLoadError(RuntimeError):
    """The album collection could not be loaded at all."""


class LayoutError(RuntimeError):
    """A layout builder received inconsistent input."""


class MissingDimensionsError(LayoutError):
    """A node referenced by a layout has no measured dimensions."""

    def __init__(self, node_id: str):
        super().__init__(f"Node missing dimensions: {node_id}")
        self.node_id = node_id


class PositioningError(RuntimeError):
    """A builder produced no position for a node it was asked to place."""


class ViewStateError(RuntimeError):
    """An action was invoked while a different view is active."""
