"""
Album-Atlas: Music Discovery Graph
Main Streamlit application.

Run with: streamlit run app.py
"""

import logging

import streamlit as st

from album_atlas.core.album_store import AlbumStore
from album_atlas.core.explorer import GraphExplorer
from album_atlas.loaders.base import get_loader
from album_atlas.ui import AppState, init_session_state, inject_styles, render_error, render_header
from album_atlas.ui import details, main_view, sidebar
import config


# -----------------------------------------------------------------------------
# Page Configuration
# -----------------------------------------------------------------------------

st.set_page_config(
    page_title="Album-Atlas",
    page_icon="💿",
    layout="wide",
    initial_sidebar_state="expanded"
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

inject_styles()
init_session_state()


# -----------------------------------------------------------------------------
# Data Loading - Cached to survive refreshes
# -----------------------------------------------------------------------------

@st.cache_resource(show_spinner=False)
def get_album_store(dataset_key: str) -> AlbumStore:
    """
    Get or create the AlbumStore for a specific dataset.
    Cached so it survives page refreshes.
    """
    cfg = config.AVAILABLE_DATASETS[dataset_key]
    loader = get_loader(cfg["loader"], path=cfg["path"])
    return AlbumStore(loader=loader)


def get_or_create_explorer(store: AlbumStore) -> GraphExplorer:
    """Get or create the exploration session for the current dataset."""
    if st.session_state.explorer is None:
        explorer = GraphExplorer(store, device=st.session_state.device)
        explorer.show_home()
        st.session_state.explorer = explorer
    return st.session_state.explorer


# -----------------------------------------------------------------------------
# Main
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    render_header()

    has_any_dataset = any(cfg["data_check"]() for cfg in config.AVAILABLE_DATASETS.values())
    if not has_any_dataset:
        st.warning(f"""
        **No album data found!**

        Place an NDJSON file with one album per line at:
        `{config.ALBUMS_NDJSON_PATH}`
        """)
        st.stop()

    store = get_album_store(st.session_state.current_dataset)
    if not store.is_initialized:
        main_view.render_loading_screen(store)
        st.stop()

    explorer = get_or_create_explorer(store)

    sidebar.render_sidebar(store, explorer)

    if AppState.has_error():
        render_error(st.session_state.last_error)

    main_view.render_search_bar(explorer)
    main_view.render_camera_controls(explorer)

    col_viz, col_details = st.columns([3, 1])

    with col_viz:
        main_view.render_visualization(store, explorer)

    with col_details:
        details.render_node_details(store, explorer)


if __name__ == "__main__":
    main()
