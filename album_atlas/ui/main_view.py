"""Main view UI components (search, navigation, canvas)."""

import logging
from typing import TYPE_CHECKING

import streamlit as st

from album_atlas.core.errors import AlbumLoadError, PositioningError, ViewStateError
from album_atlas.core.positioning import ReadyState
from album_atlas.ui.state import AppState
from album_atlas.visualization.graph_figure import GraphFigureBuilder

if TYPE_CHECKING:
    from album_atlas.core.album_store import AlbumStore
    from album_atlas.core.explorer import GraphExplorer

logger = logging.getLogger(__name__)


def render_search_bar(explorer: "GraphExplorer") -> None:
    """Render search input and handle search action."""
    col1, col2, col3 = st.columns([4, 1, 1])

    with col1:
        query = st.text_input(
            "Search albums",
            placeholder="Search by album title or artist...",
            key="search_input",
            label_visibility="collapsed",
        )

    with col2:
        search_clicked = st.button("Search", type="primary", use_container_width=True)

    with col3:
        home_clicked = st.button("Home", use_container_width=True)

    if search_clicked:
        AppState.set_search_query(query.strip())
        explorer.search(query.strip())
        st.rerun()
    if home_clicked:
        AppState.clear_selection()
        explorer.show_home()
        st.rerun()


def render_camera_controls(explorer: "GraphExplorer") -> None:
    """Zoom buttons and refit."""
    view = explorer.view
    label = view.key.replace("_", " ") if view else "-"
    st.markdown(f'*View: {label} · {len(explorer.positioned_nodes)} cards*')

    col1, col2, col3 = st.columns([1, 1, 1])
    with col1:
        if st.button("Zoom in", use_container_width=True):
            explorer.zoom_in()
            st.rerun()
    with col2:
        if st.button("Zoom out", use_container_width=True):
            explorer.zoom_out()
            st.rerun()
    with col3:
        if st.button("Fit", use_container_width=True):
            explorer.fit()
            st.rerun()


def render_visualization(store: "AlbumStore", explorer: "GraphExplorer") -> None:
    """Render the graph canvas and handle card clicks."""
    # No animation in Streamlit: transitions land immediately
    explorer.flush_resize()
    explorer.complete_transition()
    if isinstance(explorer.state, ReadyState):
        explorer.complete_entry_transition()

    content = explorer.visible_content()
    builder = GraphFigureBuilder()
    fig = builder.build(
        nodes=content.nodes,
        links=explorer.link_geometries(content.links),
        camera=explorer.camera,
        selected_id=st.session_state.selected_node_id,
        color_by_genre=st.session_state.color_by_genre,
        genre_lookup=store.genres_for_album,
    )

    selection = st.plotly_chart(
        fig,
        use_container_width=True,
        key="graph_canvas",
        on_select="rerun",
        selection_mode="points",
    )

    node_id = GraphFigureBuilder.get_clicked_node_id(selection.get("selection") if selection else None)
    if node_id and node_id != st.session_state.selected_node_id:
        AppState.set_selected_node(node_id)
        st.rerun()


def handle_node_action(explorer: "GraphExplorer", node_id: str) -> None:
    """Activate a card (expand, open flowchart, refresh)."""
    try:
        explorer.activate_node(node_id)
        AppState.clear_error()
    except (ViewStateError, PositioningError) as e:
        logger.exception("Node action failed")
        AppState.set_error(str(e))
    st.rerun()


def render_loading_screen(store: "AlbumStore") -> None:
    """Load the album collection with progress messages."""
    st.markdown("### Loading Albums")

    status_text = st.empty()

    def update_progress(msg: str):
        status_text.text(msg)

    try:
        store.initialize(progress_callback=update_progress)
        status_text.text("Done! Refreshing...")
        st.rerun()
    except AlbumLoadError as e:
        st.error(f"Could not load albums: {e}")
