"""
Measurement ("shell pass"): intrinsic card sizes before layout.

The browser front end measures real DOM boxes; the Streamlit explorer has no
layout engine, so CardMeasurer estimates sizes from the card type and the
length of the text it wraps.
"""

import math
from typing import Protocol

import config
from album_atlas.views.nodes import NodeDef, NodeDimensions


class Measurer(Protocol):
    def measure(self, node_def: NodeDef) -> NodeDimensions:
        ...


def _wrapped_lines(text: str, chars_per_line: int) -> int:
    return max(1, math.ceil(len(text) / chars_per_line))


class CardMeasurer:
    """
    Size estimates per card type.

    Album cards grow by one line height per wrapped line of title and artist
    name beyond the first; section titles are as wide as their label.
    """

    def __init__(
        self,
        card_sizes: dict = None,
        line_height: float = config.CARD_LINE_HEIGHT,
        chars_per_line: int = config.CARD_CHARS_PER_LINE,
        title_char_width: float = config.TITLE_CHAR_WIDTH,
    ):
        self.card_sizes = card_sizes or config.CARD_SIZES
        self.line_height = line_height
        self.chars_per_line = chars_per_line
        self.title_char_width = title_char_width

    def measure(self, node_def: NodeDef) -> NodeDimensions:
        ctx = node_def.context
        sizes = self.card_sizes[ctx.type]

        if ctx.type == "album":
            extra_lines = (
                _wrapped_lines(ctx.title, self.chars_per_line) - 1
                + _wrapped_lines(ctx.artist_name, self.chars_per_line) - 1
            )
            width = sizes["width"]
            height = sizes["base_height"] + extra_lines * self.line_height
        elif ctx.type in ("artist", "genre"):
            extra_lines = _wrapped_lines(ctx.name, self.chars_per_line) - 1
            width = sizes["width"]
            height = sizes["base_height"] + extra_lines * self.line_height
        elif ctx.type == "section-title":
            width = len(ctx.label) * self.title_char_width
            height = sizes["height"]
        else:
            width = sizes["width"]
            height = sizes["height"]

        return NodeDimensions(id=node_def.id, width=float(width), height=float(height))
