"""
Theme constants and CSS injection for Album-Atlas.
"""

import html
from dataclasses import dataclass

import streamlit as st


@dataclass(frozen=True)
class Theme:
    """Central theme configuration - all colors in one place."""
    # Record-sleeve accents
    accent: str = "#f59e0b"
    accent_deep: str = "#ea580c"
    link: str = "#6366f1"

    # Backgrounds
    bg_base: str = "#111114"
    bg_raised: str = "#1c1c22"
    bg_card: str = "rgba(28, 28, 34, 0.92)"

    # Text
    text_primary: str = "#f4f4f5"
    text_secondary: str = "#a1a1aa"

    # State
    selected: str = "#10b981"
    danger: str = "#f87171"

    # Borders
    border: str = "rgba(245, 158, 11, 0.25)"
    border_hover: str = "rgba(245, 158, 11, 0.55)"


THEME = Theme()


def get_css() -> str:
    """Generate CSS using theme constants."""
    return f"""
<style>
    [data-testid="stAppViewContainer"] {{
        background: radial-gradient(circle at 20% 0%, {THEME.bg_raised} 0%, {THEME.bg_base} 60%);
    }}

    [data-testid="stSidebar"] {{
        background: {THEME.bg_base};
        border-right: 1px solid {THEME.border};
    }}

    .aa-header {{
        font-family: 'Space Grotesk', 'Inter', sans-serif;
        color: {THEME.accent};
        font-size: 2.2rem;
        font-weight: 800;
        letter-spacing: -0.02em;
        margin-bottom: 0;
    }}

    .aa-subheader {{
        color: {THEME.text_secondary};
        font-size: 0.95rem;
        text-transform: uppercase;
        letter-spacing: 0.12em;
    }}

    .aa-card {{
        background: {THEME.bg_card};
        border-left: 4px solid {THEME.accent};
        border-top: 1px solid {THEME.border};
        border-right: 1px solid {THEME.border};
        border-bottom: 1px solid {THEME.border};
        border-radius: 6px;
        padding: 1rem 1.25rem;
        margin: 0.75rem 0;
    }}

    .aa-card:hover {{ border-color: {THEME.border_hover}; }}

    .aa-card-title {{
        color: {THEME.text_primary};
        font-size: 1.15rem;
        font-weight: 700;
    }}

    .aa-card-artist {{
        color: {THEME.accent};
        font-size: 0.9rem;
        margin: 0.2rem 0 0.8rem 0;
    }}

    .aa-card-meta {{
        color: {THEME.text_secondary};
        font-size: 0.82rem;
        line-height: 1.5;
    }}

    .aa-tag {{
        display: inline-block;
        padding: 0 0.5rem;
        margin: 0 0.25rem 0.25rem 0;
        border-radius: 4px;
        border: 1px solid currentColor;
        font-size: 0.78rem;
    }}

    .aa-badge {{
        display: inline-block;
        padding: 0.15rem 0.6rem;
        border-radius: 4px;
        background: {THEME.accent_deep};
        color: {THEME.text_primary};
        font-size: 0.78rem;
        font-weight: 700;
    }}

    .aa-error {{
        border: 1px solid {THEME.danger};
        border-radius: 6px;
        color: {THEME.danger};
        padding: 0.75rem 1rem;
        margin: 0.5rem 0;
    }}
</style>
"""


def inject_styles() -> None:
    """Inject CSS styles into the Streamlit app."""
    st.markdown(get_css(), unsafe_allow_html=True)


def render_header() -> None:
    """Render the styled application header."""
    st.markdown('<h1 class="aa-header">Album-Atlas</h1>', unsafe_allow_html=True)
    st.markdown('<p class="aa-subheader">Music Discovery Graph</p>', unsafe_allow_html=True)


def render_error(message: str) -> None:
    st.markdown(f'<div class="aa-error">{html.escape(message)}</div>', unsafe_allow_html=True)
