"""Sidebar UI components for Album-Atlas."""

import logging
from typing import TYPE_CHECKING

import streamlit as st

from album_atlas.ui.state import AppState
import config

if TYPE_CHECKING:
    from album_atlas.core.album_store import AlbumStore
    from album_atlas.core.explorer import GraphExplorer

logger = logging.getLogger(__name__)

MAX_BROWSE_ITEMS = 500


def render_sidebar(store: "AlbumStore", explorer: "GraphExplorer") -> None:
    """Render the complete sidebar."""
    with st.sidebar:
        render_dataset_switcher()
        st.markdown("---")
        render_device_selector()
        st.markdown("---")
        render_dataset_info(store)
        st.markdown("---")
        render_color_toggle()
        st.markdown("---")
        render_reload(store)
        st.markdown("---")
        render_browse(store, explorer)


def render_dataset_switcher() -> None:
    """Render dataset selector radio buttons."""
    st.markdown("### Dataset")

    available = [
        (key, cfg["label"]) for key, cfg in config.AVAILABLE_DATASETS.items() if cfg["data_check"]()
    ]
    if not available:
        st.warning("No datasets found. Add albums.ndjson to the data/ folder.")
        return

    current = st.session_state.current_dataset
    valid_keys = [k for k, _ in available]
    if current not in valid_keys:
        current = valid_keys[0]
        st.session_state.current_dataset = current

    selected = st.radio(
        "Select dataset:",
        valid_keys,
        format_func=lambda x: dict(available)[x],
        index=valid_keys.index(current),
        key="dataset_radio",
    )

    if selected != current:
        st.session_state.current_dataset = selected
        AppState.reset_for_dataset_change()
        st.cache_resource.clear()
        st.rerun()


def render_device_selector() -> None:
    """Desktop or mobile layout constants."""
    st.markdown("### Layout")
    devices = list(config.VIEWS_CONSTANTS.keys())
    device = st.selectbox(
        "Layout profile:",
        devices,
        index=devices.index(st.session_state.device),
        key="device_selector",
    )
    if device != st.session_state.device:
        st.session_state.device = device
        st.session_state.explorer = None
        st.rerun()


def render_dataset_info(store: "AlbumStore") -> None:
    st.markdown("### Dataset Info")
    st.markdown(f"**Albums:** {store.n_albums:,}")
    st.markdown(f"**Artists:** {len(store.all_artist_ids()):,}")
    st.markdown(f"**Genres:** {len(store.all_genres()):,}")


def render_color_toggle() -> None:
    st.markdown("### Color")
    st.session_state.color_by_genre = st.toggle(
        "Color albums by genre",
        value=st.session_state.color_by_genre,
    )


def render_reload(store: "AlbumStore") -> None:
    if st.button("Reload Albums", help="Re-read the album file and rebuild indices"):
        st.session_state.explorer = None
        st.cache_resource.clear()
        st.rerun()


def render_browse(store: "AlbumStore", explorer: "GraphExplorer") -> None:
    """Jump to an artist or a genre."""
    st.markdown("### Browse")

    genres = sorted(store.all_genres())[:MAX_BROWSE_ITEMS]
    genre = st.selectbox("Genre:", ["-- Select a genre --"] + genres, key="genre_selector")
    if genre in genres and st.button("Show genre", use_container_width=True):
        explorer.show_genre(genre)
        AppState.clear_selection()
        st.rerun()

    df = store.get_all_items()
    artists = (
        df[["artist_id", "artist_name"]]
        .drop_duplicates("artist_id")
        .sort_values("artist_name")
        .head(MAX_BROWSE_ITEMS)
    )
    options = ["-- Select an artist --"] + artists["artist_id"].tolist()
    names = dict(zip(artists["artist_id"], artists["artist_name"]))
    artist_id = st.selectbox(
        "Artist:",
        options,
        format_func=lambda x: names.get(x, x),
        key="artist_selector",
    )
    if artist_id in names and st.button("Show discography", use_container_width=True):
        explorer.show_artist(artist_id)
        AppState.clear_selection()
        st.rerun()
