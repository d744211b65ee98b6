"""UI components for Album-Atlas Streamlit application."""

from .state import AppState, init_session_state
from .styles import inject_styles, render_header, render_error, THEME
from . import sidebar
from . import main_view
from . import details

__all__ = [
    "AppState",
    "init_session_state",
    "inject_styles",
    "render_header",
    "render_error",
    "THEME",
    "sidebar",
    "main_view",
    "details",
]
