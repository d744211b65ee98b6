"""Selected card details panel."""

import html
from typing import TYPE_CHECKING

import streamlit as st

from album_atlas.core.album import Album
from album_atlas.core.recommender import Recommendation
from album_atlas.core.tags import get_tags_from_reason
from album_atlas.ui.main_view import handle_node_action
from album_atlas.ui.state import AppState

if TYPE_CHECKING:
    from album_atlas.core.album_store import AlbumStore
    from album_atlas.core.explorer import GraphExplorer


def render_node_details(store: "AlbumStore", explorer: "GraphExplorer") -> None:
    """Render the panel for the selected card."""
    node_id = st.session_state.selected_node_id
    node = explorer.positioned_nodes.get(node_id) if node_id else None

    if node is None:
        render_getting_started()
        return

    ctx = node.node_def.context
    if ctx.type == "album":
        album = store.get_album(ctx.album_id)
        if album is not None:
            render_album_card(album)
        if ctx.recommendation is not None:
            render_reason(ctx.recommendation, parent_id=_parent_id(explorer, node_id))
        render_album_actions(explorer, ctx, node_id)
    elif ctx.type == "icon-button":
        if st.button(ctx.aria_label, type="primary"):
            handle_node_action(explorer, node_id)
    elif ctx.type in ("artist", "genre"):
        st.markdown(f"### {html.escape(ctx.name)}")


def _parent_id(explorer: "GraphExplorer", node_id: str) -> str:
    for link in explorer.links():
        if node_id in link.targets:
            return link.source
    return "seed"


def render_album_card(album: Album) -> None:
    """Render a single album card."""
    genres = ", ".join(album.primary_genres)
    secondary = ", ".join(album.secondary_genres)
    st.markdown(f"""
    <div class="aa-card">
        <div class="aa-card-title">{html.escape(album.title)}</div>
        <div class="aa-card-artist">by {html.escape(album.artist_name)} · {album.year}</div>
        <div class="aa-card-meta">⭐ {album.avg_rating:.2f} ({album.rating_count:,} ratings, {album.review_count:,} reviews)</div>
        <div class="aa-card-meta">🎵 {html.escape(genres)}{f' / {html.escape(secondary)}' if secondary else ''}</div>
        <div class="aa-card-meta">{html.escape(', '.join(album.descriptors[:8]))}</div>
    </div>
    """, unsafe_allow_html=True)


def render_reason(rec: Recommendation, parent_id: str) -> None:
    """Score breakdown and tags for a recommended album."""
    reason = rec.reason
    tags = get_tags_from_reason(reason, rng_seed=f"{parent_id}-{rec.album.global_id}")
    tag_html = "".join(f"<span class='aa-tag'>{html.escape(t.label)}</span>" for t in tags)

    st.markdown(f"### Why this album <span class='aa-badge'>{rec.score:.2f}</span>", unsafe_allow_html=True)
    if tag_html:
        st.markdown(tag_html, unsafe_allow_html=True)

    genres = reason.genre_matches
    rows = [
        ("Primary ↔ primary genres", genres.primary_primary),
        ("Primary → secondary genres", genres.primary_secondary),
        ("Secondary → primary genres", genres.secondary_primary),
        ("Secondary ↔ secondary genres", genres.secondary_secondary),
        ("Descriptors", reason.descriptor_overlap),
    ]
    for label, bucket in rows:
        if bucket.count:
            st.markdown(f"- **{label}:** {', '.join(bucket.shared)} (+{bucket.contribution:.2f})")
    if reason.rating_delta.contribution:
        st.markdown(f"- **Higher rating:** +{reason.rating_delta.delta:.2f} (+{reason.rating_delta.contribution:.2f})")


def render_album_actions(explorer: "GraphExplorer", ctx, node_id: str) -> None:
    view_key = explorer.view.key if explorer.view else None

    col1, col2 = st.columns(2)
    with col1:
        label = "Expand recommendations" if view_key == "flowchart" else "Open flowchart"
        if st.button(label, type="primary", use_container_width=True):
            handle_node_action(explorer, node_id)
    with col2:
        if st.button("Artist discography", use_container_width=True):
            explorer.show_artist(ctx.artist_id)
            AppState.clear_selection()
            st.rerun()

    if view_key == "flowchart":
        node = explorer.positioned_nodes[node_id]
        if node.node_def.children and st.button("Remove children", use_container_width=True):
            explorer.remove_children_from_node(node_id, [c.id for c in node.node_def.children])
            st.rerun()


def render_getting_started() -> None:
    """Render getting started guide."""
    st.markdown("""
    ### Getting Started

    **Home:** Random picks; refresh them with the ⟳ card

    **Search:** Find albums by title or artist

    **Flowchart:** Select an album and open its flowchart, then expand any
    card to branch out into recommendations

    **Browse:** Jump to an artist's discography or a genre from the sidebar
    """)
