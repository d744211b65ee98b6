"""
Album-Atlas Configuration
Central configuration for paths, layout constants, and defaults.
"""

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent
DATA_DIR = PROJECT_ROOT / "data"

# Default dataset paths
ALBUMS_NDJSON_PATH = DATA_DIR / "albums.ndjson"

# Logging
LOG_LEVEL = "INFO"

# Zoom settings (desktop / mobile)
ZOOM_CONSTANTS = {
    "desktop": {
        "zoom_padding": 100.0,
        "min_zoom": 0.1,
        "max_zoom": 2.0,
    },
    "mobile": {
        "zoom_padding": 25.0,
        "min_zoom": 0.2,
        "max_zoom": 1.5,
    },
}
ZOOM_EXTENT_PADDING = 100.0  # Extra pan room around the content, in screen px
SCALE_EXTENT_PADDING = 0.1   # How far below the fit scale the user may zoom out
ZOOM_STEP = 1.2              # Zoom button factor

# Camera transitions (seconds)
REZOOM_DURATION = 0.6
RESIZE_CORRECTION_DURATION = 0.3
VIEW_TRANSITION_DURATION = 0.8
RESIZE_DEBOUNCE_SECONDS = 0.2

# Windowing buffers (fraction of the viewport's larger side)
NODE_WINDOW_BUFFER = 0.23
LINK_WINDOW_BUFFER = 0.0

# View settings (desktop / mobile)
VIEWS_CONSTANTS = {
    "desktop": {
        "search": {"search_count": 14, "max_per_row": 7},
        "home": {"recs_count": 5, "max_per_row": 5},
        "albums_for_artist": {"max_per_row": 5},
        "genre": {"max_per_row": 7},
        "flowchart": {"children_per_expand": 5},
    },
    "mobile": {
        "search": {"search_count": 12, "max_per_row": 3},
        "home": {"recs_count": 6, "max_per_row": 3},
        "albums_for_artist": {"max_per_row": 3},
        "genre": {"max_per_row": 3},
        "flowchart": {"children_per_expand": 3},
    },
}
DEFAULT_DEVICE = "desktop"

# Layout settings
GRID_X_GAP = 50.0
GRID_Y_GAP = 50.0
SECTION_TITLE_GAP = 20.0
SEARCH_TITLE_GAP = 30.0
TREE_MARGIN_X = 100.0
TREE_MARGIN_Y = 350.0
LINK_GAP = 40.0

# Card size estimates used by the measurement pass
CARD_SIZES = {
    "album": {"width": 220.0, "base_height": 290.0},
    "artist": {"width": 280.0, "base_height": 120.0},
    "genre": {"width": 260.0, "base_height": 100.0},
    "section-title": {"height": 48.0},
    "icon-button": {"width": 48.0, "height": 48.0},
    "app-title": {"width": 420.0, "height": 96.0},
}
CARD_LINE_HEIGHT = 22.0
CARD_CHARS_PER_LINE = 22
TITLE_CHAR_WIDTH = 17.0

# Recommendation defaults
DEFAULT_WEIGHTS = {
    "genre_pp": 1.0,
    "genre_ps": 0.6,
    "genre_ss": 0.3,
    "descriptors": 1.0,
    "rating": 1.0,
}
MAX_TAGS_COUNT = 4
MAX_GENRE_TAGS = 2
TAG_DEFAULT_COLOR = "#cccccc"

# Plot settings
PLOT_HEIGHT = 720
PLOT_WIDTH = 1200

# Dataset registry
AVAILABLE_DATASETS = {
    "albums": {
        "loader": "ndjson",
        "label": "💿 Albums",
        "description": "Rated albums, one JSON record per line",
        "path": ALBUMS_NDJSON_PATH,
        "data_check": lambda: ALBUMS_NDJSON_PATH.exists(),
    },
}

DEFAULT_DATASET = "albums"
