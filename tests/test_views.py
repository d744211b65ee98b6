"""Tests for the view builders, their registry and card measurement."""

import re

import pytest

import config
from album_atlas.core.errors import MissingDimensionsError
from album_atlas.views import (
    ArtistData,
    CardMeasurer,
    FlowchartData,
    GenreData,
    HomeData,
    SearchData,
    get_view_builder,
    list_views,
    with_recommendations,
    without_children,
)
from album_atlas.views.genre import genre_node_id
from album_atlas.views.home import REFRESH_BUTTON_ID, TITLE_ID as HOME_TITLE_ID
from album_atlas.views.nodes import (
    AlbumContext,
    NodeDef,
    NodeDimensions,
    Position,
    SectionTitleContext,
    flatten_tree,
)
from album_atlas.views.search import TITLE_ID as SEARCH_TITLE_ID


def uniform_dims(node_defs, width=100.0, height=50.0):
    return {i: NodeDimensions(i, width, height) for i in node_defs}


def layout(builder, data, store):
    node_defs = builder.build_nodes(data, store)
    return node_defs, builder.build_node_positions(data, store, node_defs, uniform_dims(node_defs))


class TestRegistry:
    """View lookup by key."""

    def test_all_views_registered(self):
        assert {"home", "search", "albums_for_artist", "genre", "flowchart"} <= set(list_views())

    def test_unknown_view(self):
        with pytest.raises(ValueError, match="Unknown view"):
            get_view_builder("nowhere")

    def test_device_constants(self):
        assert get_view_builder("home", device="mobile").constants["recs_count"] == 6
        assert get_view_builder("home").constants["recs_count"] == 5


class TestHomeView:
    """Random picks under a title with a refresh button."""

    def test_nodes(self, store):
        nodes = get_view_builder("home").build_nodes(HomeData(seed="s"), store)
        assert list(nodes)[:2] == [HOME_TITLE_ID, REFRESH_BUTTON_ID]
        assert nodes[REFRESH_BUTTON_ID].context.action == "refresh_home"
        albums = [n for n in nodes.values() if n.context.type == "album"]
        assert len(albums) == 5
        assert all(n.context.parent_view == "home" for n in albums)

    def test_same_seed_same_picks(self, store):
        builder = get_view_builder("home")
        assert builder.build_nodes(HomeData("x"), store) == builder.build_nodes(HomeData("x"), store)

    def test_positions(self, store):
        node_defs, positions = layout(get_view_builder("home"), HomeData(seed="s"), store)
        assert positions[HOME_TITLE_ID] == Position(0.0, 0.0)
        assert positions[REFRESH_BUTTON_ID] == Position(100.0 + config.SECTION_TITLE_GAP, 0.0)
        first_album = list(node_defs)[2]
        assert positions[first_album] == Position(0.0, 50.0 + config.SECTION_TITLE_GAP)
        assert set(positions) == set(node_defs)


class TestSearchView:
    """Search results grid."""

    def test_results(self, store):
        nodes = get_view_builder("search").build_nodes(SearchData("radiohead"), store)
        assert nodes[SEARCH_TITLE_ID].context.label == "Search Results"
        assert list(nodes)[1:] == ["seed", "in-rainbows", "kid-a", "bends"]

    def test_blank_query_prompts(self, store):
        nodes = get_view_builder("search").build_nodes(SearchData("  "), store)
        assert list(nodes) == [SEARCH_TITLE_ID]
        assert nodes[SEARCH_TITLE_ID].context.label == "Enter a search term above"

    def test_capped_at_search_count(self, store):
        builder = get_view_builder("search", search_fn=lambda s, q, n: s.all_albums() * 5)
        nodes = builder.build_nodes(SearchData("anything"), store)
        assert len(nodes) - 1 <= builder.constants["search_count"]

    def test_grid_below_title(self, store):
        node_defs, positions = layout(get_view_builder("search"), SearchData("radiohead"), store)
        assert positions["seed"] == Position(0.0, 50.0 + config.SEARCH_TITLE_GAP)


class TestArtistView:
    """Artist card above the discography."""

    def test_albums_by_release_date(self, store):
        nodes = get_view_builder("albums_for_artist").build_nodes(ArtistData("radiohead"), store)
        assert list(nodes) == ["radiohead", "bends", "seed", "kid-a", "in-rainbows"]
        assert nodes["radiohead"].context.name == "Radiohead"

    def test_positions(self, store):
        _, positions = layout(get_view_builder("albums_for_artist"), ArtistData("radiohead"), store)
        assert positions["radiohead"] == Position(0.0, 0.0)
        assert positions["bends"] == Position(0.0, 50.0 + config.GRID_Y_GAP)
        assert positions["seed"].x == 100.0 + config.GRID_X_GAP

    def test_unknown_artist(self, store):
        nodes = get_view_builder("albums_for_artist").build_nodes(ArtistData("nobody"), store)
        assert list(nodes) == ["nobody"]


class TestGenreView:
    """Best rated albums of a genre."""

    def test_sorted_by_rating(self, store):
        nodes = get_view_builder("genre").build_nodes(GenreData("Art Rock"), store)
        node_id = genre_node_id("Art Rock")
        assert list(nodes) == [node_id, "in-rainbows", "kid-a", "seed"]
        assert nodes[node_id].context.album_count == 3

    def test_positions(self, store):
        _, positions = layout(get_view_builder("genre"), GenreData("Art Rock"), store)
        assert positions[genre_node_id("Art Rock")] == Position(0.0, 0.0)
        assert positions["in-rainbows"].y == 50.0 + config.GRID_Y_GAP


class TestMissingDimensions:
    """Grid views refuse to lay out unmeasured cards."""

    @pytest.mark.parametrize("key, data, dropped", [
        ("home", HomeData(seed="s"), "album"),
        ("home", HomeData(seed="s"), HOME_TITLE_ID),
        ("search", SearchData("radiohead"), "kid-a"),
        ("search", SearchData("radiohead"), SEARCH_TITLE_ID),
        ("albums_for_artist", ArtistData("radiohead"), "bends"),
        ("albums_for_artist", ArtistData("radiohead"), "radiohead"),
        ("genre", GenreData("Art Rock"), "seed"),
        ("genre", GenreData("Art Rock"), genre_node_id("Art Rock")),
    ])
    def test_raises(self, store, key, data, dropped):
        builder = get_view_builder(key)
        node_defs = builder.build_nodes(data, store)
        if dropped == "album":
            dropped = next(i for i, n in node_defs.items() if n.context.type == "album")
        dims = uniform_dims(node_defs)
        del dims[dropped]

        with pytest.raises(MissingDimensionsError, match=re.escape(dropped)):
            builder.build_node_positions(data, store, node_defs, dims)


class TestFlowchartView:
    """Recommendation tree."""

    def test_fresh_tree_is_detailed_seed(self, store):
        nodes = get_view_builder("flowchart").build_nodes(FlowchartData("seed"), store)
        assert list(nodes) == ["seed"]
        assert nodes["seed"].context.variant == "detailed"

    def test_unknown_seed(self, store, caplog):
        assert get_view_builder("flowchart").build_nodes(FlowchartData("nope"), store) == {}
        assert "not found" in caplog.text

    def test_with_recommendations(self, store):
        data = with_recommendations(FlowchartData("seed"), store, "seed", top_x=3)
        children = data.node_tree.children
        assert len(children) == 3
        for child in children:
            assert isinstance(child.context, AlbumContext)
            assert child.context.recommendation is not None
            assert child.context.recommendation.album.global_id == child.id

    def test_expansion_never_repeats_tree_albums(self, store):
        data = with_recommendations(FlowchartData("seed"), store, "seed", top_x=2)
        first_child = data.node_tree.children[0].id
        data = with_recommendations(data, store, first_child, top_x=10)
        ids = list(flatten_tree(data.node_tree))
        assert len(ids) == len(set(ids)) == store.n_albums

    def test_expand_missing_node_is_no_op(self, store, caplog):
        data = FlowchartData("seed")
        assert with_recommendations(data, store, "kid-a", top_x=3) is data
        assert "missing flowchart node" in caplog.text

    def test_without_children(self, store):
        data = with_recommendations(FlowchartData("seed"), store, "seed", top_x=3)
        removed = data.node_tree.children[0].id
        pruned = without_children(data, "seed", [removed])
        assert removed not in flatten_tree(pruned.node_tree)
        assert without_children(pruned, "seed", ["unknown"]) is pruned

    def test_tree_positions(self, store):
        data = with_recommendations(FlowchartData("seed"), store, "seed", top_x=3)
        builder = get_view_builder("flowchart")
        node_defs = builder.build_nodes(data, store)
        positions = builder.build_node_positions(data, store, node_defs, uniform_dims(node_defs))
        children = [c.id for c in data.node_tree.children]
        assert positions["seed"].x == positions[children[1]].x
        assert positions["seed"].y == 0.0
        assert {positions[c].y for c in children} == {50.0 + config.TREE_MARGIN_Y}


class TestCardMeasurer:
    """Size estimates from card type and text length."""

    def test_long_title_grows_album_card(self):
        measurer = CardMeasurer(chars_per_line=10, line_height=20)
        short = NodeDef("a", AlbumContext("a", "x", "Art", "Short", "home"))
        long = NodeDef("b", AlbumContext("b", "x", "Art", "A much longer title", "home"))
        assert measurer.measure(long).height == measurer.measure(short).height + 20

    def test_section_title_width_follows_label(self):
        measurer = CardMeasurer(title_char_width=10)
        dims = measurer.measure(NodeDef("t", SectionTitleContext("Random Picks")))
        assert dims.width == 120.0
        assert dims.height == config.CARD_SIZES["section-title"]["height"]
