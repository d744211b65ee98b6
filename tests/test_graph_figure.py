"""Tests for the Plotly canvas figure."""

import plotly.graph_objects as go
import pytest

from album_atlas.core.zoom_manager import ZoomTransform
from album_atlas.views.links import link_geometry
from album_atlas.views.nodes import (
    AlbumContext,
    GenreContext,
    NodeDef,
    NodeDimensions,
    Position,
    PositionedNode,
)
from album_atlas.visualization.graph_figure import GraphFigureBuilder


def positioned(node_def, x=0.0, y=0.0, width=100.0, height=60.0):
    return PositionedNode(node_def, NodeDimensions(node_def.id, width, height), Position(x, y))


@pytest.fixture
def nodes():
    album = NodeDef("kid-a", AlbumContext("kid-a", "radiohead", "Radiohead", "Kid A", "genre"))
    genre = NodeDef("genre:Art Rock", GenreContext("Art Rock", album_count=3))
    return {
        genre.id: positioned(genre),
        album.id: positioned(album, y=110.0),
    }


@pytest.fixture
def builder():
    return GraphFigureBuilder(height=400, width=800)


class TestNodesFrame:
    """Tabular view of the cards."""

    def test_rows(self, builder, nodes):
        df = builder.nodes_frame(nodes, genre_lookup=lambda album_id: ["Art Rock", "Electronic"])
        assert list(df["id"]) == ["genre:Art Rock", "kid-a"]
        album = df.set_index("id").loc["kid-a"]
        assert album["label"] == "Kid A"
        assert album["subtitle"] == "Radiohead"
        assert album["genre"] == "Art Rock"
        assert df.set_index("id").loc["genre:Art Rock", "label"] == "Art Rock"

    def test_empty(self, builder):
        df = builder.nodes_frame({})
        assert df.empty
        assert "width" in df.columns


class TestBuild:
    """Figure contents."""

    def test_shapes_and_markers(self, builder, nodes):
        fig = builder.build(nodes)
        assert isinstance(fig, go.Figure)
        assert len(fig.layout.shapes) == 2
        (cards,) = fig.data
        assert list(cards.customdata) == ["genre:Art Rock", "kid-a"]
        assert list(cards.x) == [50.0, 50.0]
        assert list(cards.y) == [30.0, 140.0]

    def test_selected_card_highlighted(self, builder, nodes):
        fig = builder.build(nodes, selected_id="kid-a")
        widths = [shape.line.width for shape in fig.layout.shapes]
        assert widths == [1, 4]

    def test_camera_sets_axis_ranges(self, builder, nodes):
        fig = builder.build(nodes, camera=ZoomTransform(x=100, y=50, k=2))
        assert tuple(fig.layout.xaxis.range) == (-50, 350)
        assert tuple(fig.layout.yaxis.range) == (175, -25)

    def test_links_drawn_below_cards(self, builder):
        parent = positioned(NodeDef("p", AlbumContext("p", "a", "A", "P", "flowchart")))
        child = positioned(NodeDef("c", AlbumContext("c", "b", "B", "C", "flowchart")), y=400.0)
        geometry = link_geometry(parent, [child])

        fig = builder.build({"p": parent, "c": child}, links=[geometry])
        assert fig.data[0].mode == "lines"
        assert fig.data[0].name == "p-c"
        assert fig.data[-1].name == "Cards"
        assert len(fig.layout.annotations) == 1

    def test_color_by_genre(self, builder, nodes):
        fig = builder.build(nodes, color_by_genre=True, genre_lookup=lambda album_id: ["Art Rock"])
        album_fill = fig.layout.shapes[1].fillcolor
        assert album_fill == GraphFigureBuilder.CATEGORICAL_COLORS[0]


class TestClickedNode:
    """Selection payloads from the chart."""

    def test_scalar_customdata(self):
        assert GraphFigureBuilder.get_clicked_node_id({"points": [{"customdata": "kid-a"}]}) == "kid-a"

    def test_list_customdata(self):
        assert GraphFigureBuilder.get_clicked_node_id({"points": [{"customdata": ["seed", 1]}]}) == "seed"

    def test_nothing_selected(self):
        assert GraphFigureBuilder.get_clicked_node_id({}) is None
        assert GraphFigureBuilder.get_clicked_node_id({"points": [{"x": 1}]}) is None
