"""
Centralized session state management for Album-Atlas.
Provides typed accessors and clear state transition methods.
"""

from dataclasses import dataclass
from typing import Any, Optional

import streamlit as st

import config


@dataclass
class StateDefaults:
    """Default values for all session state variables."""
    selected_node_id: Optional[str] = None
    search_query: str = ""
    current_dataset: str = config.DEFAULT_DATASET
    device: str = config.DEFAULT_DEVICE
    explorer: Optional[Any] = None
    color_by_genre: bool = False
    last_error: Optional[str] = None


class AppState:
    """
    Wrapper around Streamlit session state with type hints and defaults.
    Provides clear API for state transitions.
    """

    @classmethod
    def init(cls, default_dataset: str = config.DEFAULT_DATASET) -> None:
        """Initialize all session state with defaults."""
        defaults = StateDefaults(current_dataset=default_dataset)
        for field_name in defaults.__dataclass_fields__:
            if field_name not in st.session_state:
                st.session_state[field_name] = getattr(defaults, field_name)

    @classmethod
    def reset_for_dataset_change(cls) -> None:
        """Clear transient state when switching datasets or devices."""
        st.session_state.selected_node_id = None
        st.session_state.search_query = ""
        st.session_state.explorer = None
        st.session_state.last_error = None

    @classmethod
    def clear_selection(cls) -> None:
        st.session_state.selected_node_id = None

    @classmethod
    def set_selected_node(cls, node_id: Optional[str]) -> None:
        st.session_state.selected_node_id = node_id

    @classmethod
    def set_search_query(cls, query: str) -> None:
        st.session_state.search_query = query
        st.session_state.selected_node_id = None

    @classmethod
    def set_error(cls, message: str) -> None:
        """Record an error for display."""
        st.session_state.last_error = message

    @classmethod
    def clear_error(cls) -> None:
        st.session_state.last_error = None

    # Property-style accessors for common checks
    @staticmethod
    def has_selection() -> bool:
        return st.session_state.get("selected_node_id") is not None

    @staticmethod
    def has_error() -> bool:
        return st.session_state.get("last_error") is not None


def init_session_state(default_dataset: str = config.DEFAULT_DATASET) -> None:
    """Convenience function to initialize session state."""
    AppState.init(default_dataset)
