"""Tests for the NodePositioner state machine."""

import pytest

from album_atlas.core.errors import PositioningError
from album_atlas.core.positioning import InitState, InProgressState, NodePositioner, ReadyState
from album_atlas.views.builders import BaseViewBuilder, ViewConfig
from album_atlas.views.nodes import NodeDef, NodeDimensions, Position, SectionTitleContext


class RowBuilder(BaseViewBuilder):
    """Places the ids given as view data in one row, 10 units apart."""

    def __init__(self, skip=()):
        super().__init__()
        self.skip = set(skip)
        self.layout_calls = 0

    def build_nodes(self, data, selectors):
        return {i: NodeDef(id=i, context=SectionTitleContext(label=i)) for i in data}

    def build_node_positions(self, data, selectors, node_defs, dimensions):
        self.layout_calls += 1
        return {
            node_id: Position(index * 10.0, 0.0)
            for index, node_id in enumerate(node_defs)
            if node_id not in self.skip
        }


def dims(node_id, width=10.0, height=10.0):
    return NodeDimensions(node_id, width, height)


@pytest.fixture
def builders():
    return {"row": RowBuilder(), "other": RowBuilder()}


@pytest.fixture
def positioner(builders):
    return NodePositioner(selectors=None, builders=builders)


def ready_with(positioner, key, ids):
    positioner.set_view(ViewConfig(key, tuple(ids)))
    return positioner.register_many([dims(i) for i in ids])


class TestStates:
    """init -> in-progress -> ready."""

    def test_starts_in_init(self, positioner):
        assert isinstance(positioner.state, InitState)
        assert positioner.state.state == "init"

    def test_view_with_nodes_is_in_progress(self, positioner):
        state = positioner.set_view(ViewConfig("row", ("a", "b")))
        assert isinstance(state, InProgressState)
        assert list(state.target_node_defs) == ["a", "b"]
        assert positioner.missing_ids == ["a", "b"]

    def test_view_without_nodes_is_init(self, positioner):
        assert isinstance(positioner.set_view(ViewConfig("row", ())), InitState)

    def test_ready_once_every_target_is_measured(self, positioner, builders):
        positioner.set_view(ViewConfig("row", ("a", "b")))
        assert isinstance(positioner.register_dimensions(dims("b")), InProgressState)
        state = positioner.register_dimensions(dims("a"))

        assert isinstance(state, ReadyState)
        assert state.positioned_nodes["b"].position == Position(10.0, 0.0)
        assert builders["row"].layout_calls == 1

    def test_published_snapshot_is_read_only(self, positioner):
        state = ready_with(positioner, "row", ["a"])
        with pytest.raises(TypeError):
            state.positioned_nodes["z"] = None

    def test_unknown_key_raises(self, positioner):
        with pytest.raises(ValueError, match="No builder"):
            positioner.set_view(ViewConfig("missing", ()))


class TestRegistration:
    """Which registrations trigger a layout."""

    def test_unknown_empty_and_unchanged_sizes_are_no_ops(self, positioner, builders):
        state = ready_with(positioner, "row", ["a"])
        assert positioner.register_dimensions(dims("stranger")) is state
        assert positioner.register_dimensions(dims("a", 0, 0)) is state
        assert positioner.register_dimensions(dims("a")) is state
        assert builders["row"].layout_calls == 1

    def test_changed_size_relayouts(self, positioner):
        state = ready_with(positioner, "row", ["a"])
        updated = positioner.register_dimensions(dims("a", 50.0, 10.0))
        assert updated is not state
        assert updated.positioned_nodes["a"].dimensions.width == 50.0

    def test_batch_lays_out_once(self, positioner, builders):
        positioner.set_view(ViewConfig("row", ("a", "b", "c")))
        positioner.register_many([dims("c"), dims("a"), dims("b"), dims("a")])
        assert builders["row"].layout_calls == 1

    def test_missing_position_raises(self):
        positioner = NodePositioner(None, {"row": RowBuilder(skip={"b"})})
        positioner.set_view(ViewConfig("row", ("a", "b")))
        with pytest.raises(PositioningError, match="b"):
            positioner.register_many([dims("a"), dims("b")])


class TestViewChanges:
    """Snapshots and the dimension cache across views."""

    def test_snapshot_of_previous_layout(self, positioner):
        first = ready_with(positioner, "row", ["a"])
        state = positioner.set_view(ViewConfig("other", ("x",)))
        assert isinstance(state, InProgressState)
        assert state.previous_snapshot is first.positioned_nodes

        ready = positioner.register_dimensions(dims("x"))
        assert ready.previous_snapshot is first.positioned_nodes

    def test_complete_entry_transition_clears_snapshot(self, positioner):
        ready_with(positioner, "row", ["a"])
        ready_with(positioner, "other", ["x"])
        state = positioner.complete_entry_transition()
        assert isinstance(state, ReadyState)
        assert state.previous_snapshot is None

    def test_same_kind_keeps_known_dimensions(self, positioner):
        ready_with(positioner, "row", ["a", "b"])
        state = positioner.set_view(ViewConfig("row", ("a", "b", "c")))
        assert isinstance(state, InProgressState)
        assert positioner.missing_ids == ["c"]

    def test_same_kind_with_known_ids_is_ready_at_once(self, positioner):
        ready_with(positioner, "row", ["a", "b"])
        assert isinstance(positioner.set_view(ViewConfig("row", ("b",))), ReadyState)

    def test_kind_change_clears_dimensions(self, positioner):
        ready_with(positioner, "row", ["a"])
        positioner.set_view(ViewConfig("other", ("a",)))
        assert positioner.missing_ids == ["a"]

    def test_view_change_while_in_progress_warns(self, positioner, caplog):
        first = ready_with(positioner, "row", ["a"])
        positioner.set_view(ViewConfig("other", ("x",)))
        state = positioner.set_view(ViewConfig("row", ("y",)))
        assert "in progress" in caplog.text
        assert state.previous_snapshot is first.positioned_nodes
