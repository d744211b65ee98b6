"""
Plotly rendering of positioned cards and flowchart links.
Cards are drawn as rectangles with a clickable marker at their centre; the
axis ranges follow the explorer camera.
"""

from typing import Callable, Mapping, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

import config
from album_atlas.core.windowing import viewport_in_content
from album_atlas.core.zoom_manager import CanvasSize, ZoomTransform
from album_atlas.views.links import LinkGeometry
from album_atlas.views.nodes import PositionedNode


class GraphFigureBuilder:
    """
    Builds Plotly figures for the explorer canvas.

    Features:
    - One rectangle per card, colored by card type
    - Optional album coloring by primary genre
    - Link stems, connectors and arrows with recommendation tags
    - Highlight for the selected card
    - Clickable card markers carrying the node id as customdata
    """

    COLORS = {
        "album": "#6366f1",         # Indigo
        "artist": "#1db954",        # Green
        "genre": "#f59e0b",         # Amber
        "section-title": "rgba(0,0,0,0)",
        "icon-button": "#94a3b8",   # Slate
        "app-title": "rgba(0,0,0,0)",
        "selected": "#10b981",      # Emerald
        "link": "#999999",
        "default": "#94a3b8",
    }

    CATEGORICAL_COLORS = px.colors.qualitative.Set2 + px.colors.qualitative.Pastel1

    def __init__(
        self,
        height: int = config.PLOT_HEIGHT,
        width: int = config.PLOT_WIDTH
    ):
        """
        Initialize the figure builder.

        Args:
            height: Plot height in pixels
            width: Plot width in pixels
        """
        self.height = height
        self.width = width

    def build(
        self,
        nodes: Mapping[str, PositionedNode],
        links: Optional[list[LinkGeometry]] = None,
        camera: Optional[ZoomTransform] = None,
        selected_id: Optional[str] = None,
        color_by_genre: bool = False,
        top_n_genres: int = 10,
        genre_lookup: Optional[Callable[[str], list[str]]] = None,
    ) -> go.Figure:
        """
        Build the canvas figure.

        Args:
            nodes: Positioned cards to draw (usually already culled)
            links: Link geometries to draw under the cards
            camera: Camera transform; the axis ranges show what it sees
            selected_id: Card to highlight
            color_by_genre: Color album cards by their first primary genre
            top_n_genres: Genres beyond the most frequent N share one color
            genre_lookup: Primary genres by album id (e.g. AlbumStore.genres_for_album)

        Returns:
            Plotly Figure object
        """
        fig = go.Figure()
        df = self.nodes_frame(nodes, genre_lookup)

        for geometry in links or []:
            self._add_link(fig, geometry)

        genre_colors = self._genre_colors(df, top_n_genres) if color_by_genre else {}

        for row in df.itertuples(index=False):
            if row.type == "album" and genre_colors:
                fill = genre_colors.get(row.genre, "#6b7280")
            else:
                fill = self.COLORS.get(row.type, self.COLORS["default"])
            line_color = self.COLORS["selected"] if row.id == selected_id else "rgba(255,255,255,0.3)"
            fig.add_shape(
                type="rect",
                x0=row.x, y0=row.y, x1=row.x + row.width, y1=row.y + row.height,
                fillcolor=fill,
                opacity=0.85,
                line=dict(color=line_color, width=4 if row.id == selected_id else 1),
                layer="below",
            )

        if not df.empty:
            fig.add_trace(go.Scatter(
                x=df["x"] + df["width"] / 2,
                y=df["y"] + df["height"] / 2,
                mode="markers+text",
                marker=dict(size=12, opacity=0.0),
                text=df["label"],
                textfont=dict(color="white", size=12),
                hovertext=self._build_hover_text(df),
                hovertemplate="%{hovertext}<extra></extra>",
                customdata=df["id"].values,
                name="Cards",
                showlegend=False,
            ))

        self._apply_layout(fig, camera)
        return fig

    def nodes_frame(
        self,
        nodes: Mapping[str, PositionedNode],
        genre_lookup: Optional[Callable[[str], list[str]]] = None,
    ) -> pd.DataFrame:
        """One row per card with geometry and display fields."""
        rows = []
        for node_id, node in nodes.items():
            ctx = node.node_def.context
            row = {
                "id": node_id,
                "type": ctx.type,
                "x": node.position.x,
                "y": node.position.y,
                "width": node.dimensions.width,
                "height": node.dimensions.height,
                "label": "",
                "subtitle": "",
                "genre": None,
                "score": None,
            }
            if ctx.type == "album":
                row["label"] = ctx.title
                row["subtitle"] = ctx.artist_name
                if ctx.recommendation is not None:
                    row["score"] = ctx.recommendation.score
                if genre_lookup is not None:
                    genres = genre_lookup(ctx.album_id)
                    row["genre"] = genres[0] if genres else None
            elif ctx.type in ("artist", "genre"):
                row["label"] = ctx.name
            elif ctx.type == "section-title":
                row["label"] = ctx.label
            elif ctx.type == "icon-button":
                row["label"] = "⟳"
                row["subtitle"] = ctx.aria_label
            rows.append(row)
        return pd.DataFrame(
            rows,
            columns=["id", "type", "x", "y", "width", "height", "label", "subtitle", "genre", "score"],
        )

    def _genre_colors(self, df: pd.DataFrame, top_n: int) -> dict[str, str]:
        counts = df.loc[df["type"] == "album", "genre"].dropna().value_counts()
        return {
            genre: self.CATEGORICAL_COLORS[i % len(self.CATEGORICAL_COLORS)]
            for i, genre in enumerate(counts.head(top_n).index)
        }

    def _add_link(self, fig: go.Figure, geometry: LinkGeometry) -> None:
        xs, ys = [], []
        for seg in geometry.segments:
            xs += [seg.start.x, seg.end.x, None]
            ys += [seg.start.y, seg.end.y, None]
        fig.add_trace(go.Scatter(
            x=xs, y=ys,
            mode="lines",
            line=dict(color=self.COLORS["link"], width=3),
            hoverinfo="skip",
            showlegend=False,
            name=geometry.link_id,
        ))

        for seg in geometry.segments:
            if not seg.is_arrow:
                continue
            fig.add_annotation(
                x=seg.end.x, y=seg.end.y, ax=seg.start.x, ay=seg.start.y,
                xref="x", yref="y", axref="x", ayref="y",
                showarrow=True, arrowhead=2, arrowwidth=2, arrowcolor=self.COLORS["link"],
                text="",
            )
            if seg.tags:
                fig.add_annotation(
                    x=seg.start.x, y=(seg.start.y + seg.end.y) / 2,
                    xref="x", yref="y",
                    showarrow=False,
                    text="<br>".join(tag.label for tag in seg.tags),
                    font=dict(color=seg.tags[0].color, size=11),
                    bgcolor="rgba(17,17,17,0.7)",
                )

    def _apply_layout(self, fig: go.Figure, camera: Optional[ZoomTransform]) -> None:
        axis = dict(showgrid=False, showticklabels=False, zeroline=False, title="")
        if camera is not None:
            view = viewport_in_content(camera, CanvasSize(self.width, self.height))
            xaxis = dict(axis, range=[view.x, view.x + view.width])
            yaxis = dict(axis, range=[view.y + view.height, view.y])
        else:
            xaxis = axis
            yaxis = dict(axis, autorange="reversed")

        fig.update_layout(
            height=self.height,
            width=self.width,
            template="plotly_dark",
            paper_bgcolor="rgba(0,0,0,0)",
            plot_bgcolor="rgba(17,17,17,0.8)",
            margin=dict(l=0, r=0, t=0, b=0),
            xaxis=xaxis,
            yaxis=yaxis,
            hovermode="closest",
            dragmode="pan",
            clickmode="event+select",
        )

    def _build_hover_text(self, df: pd.DataFrame) -> list[str]:
        """Build hover text for cards."""
        texts = []
        for _, row in df.iterrows():
            label = str(row["label"])
            if len(label) > 60:
                label = label[:60] + "..."
            text = f"<b>{label}</b>"
            if row["subtitle"]:
                text += f"<br>{row['subtitle']}"
            if pd.notna(row["score"]):
                text += f"<br><i>score: {row['score']:.2f}</i>"
            texts.append(text)
        return texts

    @staticmethod
    def get_clicked_node_id(selection_data: dict) -> Optional[str]:
        """
        Extract the clicked card id from Plotly selection data.

        Args:
            selection_data: The selection state returned by the chart

        Returns:
            Node id of the first selected point, or None
        """
        if not selection_data or "points" not in selection_data:
            return None
        for point in selection_data["points"]:
            if "customdata" in point:
                data = point["customdata"]
                return data[0] if isinstance(data, list) else data
        return None
