"""Board visualization for the pursuit game using NetworkX and matplotlib.

Provides visualization of:
- Board topology (locations and routes)
- Routes coloured by transport kind, parallel routes offset side by side
- Player positions as the public sees them (the fugitive only at his
  last revealed location)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Any
from collections import defaultdict

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
import networkx as nx

from core.board import Board, Location
from core.constants import Colour, Transport, UNKNOWN_LOCATION
from core.game_state import GameState


# Color schemes
TRANSPORT_COLORS = {
    Transport.TAXI: "#E9C46A",  # Yellow
    Transport.BUS: "#2A9D8F",  # Teal
    Transport.UNDERGROUND: "#E63946",  # Red
    Transport.BOAT: "#457B9D",  # Blue
}

TRANSPORT_STYLES = {
    Transport.TAXI: "solid",
    Transport.BUS: "solid",
    Transport.UNDERGROUND: "solid",
    Transport.BOAT: "dashed",
}

PLAYER_COLORS = {
    Colour.BLACK: "#000000",
    Colour.BLUE: "#1D3557",
    Colour.GREEN: "#2B9348",
    Colour.RED: "#D00000",
    Colour.WHITE: "#F1FAEE",
    Colour.YELLOW: "#FFBA08",
}


class BoardVisualizer:
    """Visualizes a pursuit game board using NetworkX and matplotlib."""

    def __init__(
        self,
        board: Board,
        state: Optional[GameState] = None,
        figsize: tuple[int, int] = (12, 10),
        node_size: int = 500,
        font_size: int = 8,
    ):
        """Initialize the visualizer.

        Args:
            board: The Board to visualize.
            state: Optional game state whose players are drawn.
            figsize: Figure size as (width, height).
            node_size: Base size for nodes.
            font_size: Font size for labels.
        """
        self.board = board
        self.state = state
        self.figsize = figsize
        self.node_size = node_size
        self.font_size = font_size

    def _get_positions(self) -> dict[Location, tuple[float, float]]:
        """Node positions, falling back to a spring layout if any are missing."""
        G = self.board.graph
        pos = nx.get_node_attributes(G, "position")
        if len(pos) != len(G):
            pos = nx.spring_layout(G, seed=42)
        return pos

    def _draw_routes(
        self,
        ax: plt.Axes,
        pos: dict[Location, tuple[float, float]],
    ) -> None:
        """Draw routes, one colour per transport kind."""
        by_pair: dict[tuple[Location, Location], list[Transport]] = defaultdict(list)
        for u, v, transport in self.board.graph.edges(data="transport"):
            by_pair[(min(u, v), max(u, v))].append(transport)

        for (u, v), transports in by_pair.items():
            transports = sorted(transports, key=lambda t: list(Transport).index(t))
            for i, transport in enumerate(transports):
                offset = (i - (len(transports) - 1) / 2) * 0.04
                self._draw_offset_edge(ax, pos, u, v, transport, offset)

    def _draw_offset_edge(
        self,
        ax: plt.Axes,
        pos: dict[Location, tuple[float, float]],
        u: Location,
        v: Location,
        transport: Transport,
        offset: float,
    ) -> None:
        """Draw a route with perpendicular offset (for parallel routes)."""
        x1, y1 = pos[u]
        x2, y2 = pos[v]

        dx = x2 - x1
        dy = y2 - y1
        length = (dx**2 + dy**2) ** 0.5
        px, py = 0.0, 0.0
        if length > 0:
            # Perpendicular unit vector
            px = -dy / length * offset
            py = dx / length * offset

        ax.plot(
            [x1 + px, x2 + px],
            [y1 + py, y2 + py],
            color=TRANSPORT_COLORS[transport],
            linestyle=TRANSPORT_STYLES[transport],
            linewidth=2,
            zorder=1,
        )

    def _draw_players(
        self,
        ax: plt.Axes,
        pos: dict[Location, tuple[float, float]],
    ) -> None:
        """Draw each player at its publicly visible location."""
        if self.state is None:
            return
        for player in self.state.roster:
            location = self.state.visible_location(player.colour)
            if location == UNKNOWN_LOCATION or location not in pos:
                continue
            x, y = pos[location]
            ax.scatter(
                [x],
                [y],
                s=self.node_size * 1.8,
                facecolors="none",
                edgecolors=PLAYER_COLORS[player.colour],
                linewidths=3,
                zorder=3,
            )

    def visualize(
        self,
        title: str = "Pursuit Game Board",
        show_players: bool = True,
        show_legend: bool = True,
        save_path: Optional[str | Path] = None,
        show: bool = True,
    ) -> plt.Figure:
        """Visualize the board.

        Args:
            title: Title for the figure.
            show_players: Whether to mark player positions.
            show_legend: Whether to show the legend.
            save_path: If provided, save the figure to this path.
            show: Whether to display the figure.

        Returns:
            The matplotlib Figure object.
        """
        G = self.board.graph
        pos = self._get_positions()

        fig, ax = plt.subplots(figsize=self.figsize)
        ax.set_title(title, fontsize=14, fontweight="bold")

        # Routes first (behind nodes)
        self._draw_routes(ax, pos)

        nx.draw_networkx_nodes(
            G, pos,
            node_color="#FFFFFF",
            edgecolors="#333333",
            linewidths=1.5,
            node_size=self.node_size,
            ax=ax,
        )
        nx.draw_networkx_labels(
            G, pos,
            font_size=self.font_size,
            font_weight="bold",
            ax=ax,
        )

        if show_players:
            self._draw_players(ax, pos)

        if show_legend:
            self._draw_legend(ax)

        ax.set_aspect("equal")
        ax.axis("off")
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches="tight")

        if show:
            plt.show()

        return fig

    def _draw_legend(self, ax: plt.Axes) -> None:
        """Draw the legend."""
        legend_elements: list[Any] = []

        for transport, color in TRANSPORT_COLORS.items():
            legend_elements.append(
                plt.Line2D(
                    [0], [0],
                    color=color,
                    linestyle=TRANSPORT_STYLES[transport],
                    linewidth=2,
                    label=transport.value.title(),
                )
            )

        if self.state is not None:
            for player in self.state.roster:
                legend_elements.append(
                    mpatches.Patch(
                        facecolor="none",
                        edgecolor=PLAYER_COLORS[player.colour],
                        label=player.colour.value.title(),
                    )
                )

        ax.legend(
            handles=legend_elements,
            loc="upper left",
            bbox_to_anchor=(1.02, 1),
            fontsize=8,
        )


def visualize_board(
    board: Board,
    state: Optional[GameState] = None,
    title: str = "Pursuit Game Board",
    save_path: Optional[str | Path] = None,
    show: bool = True,
    **kwargs: Any,
) -> plt.Figure:
    """Convenience function to visualize a board.

    Args:
        board: The Board to visualize.
        state: Optional game state whose players are drawn.
        title: Title for the figure.
        save_path: If provided, save the figure to this path.
        show: Whether to display the figure.
        **kwargs: Additional arguments passed to BoardVisualizer.visualize()

    Returns:
        The matplotlib Figure object.
    """
    visualizer = BoardVisualizer(board, state=state)
    return visualizer.visualize(title=title, save_path=save_path, show=show, **kwargs)


def visualize_default_board(
    save_path: Optional[str | Path] = None,
    show: bool = True,
) -> plt.Figure:
    """Load and visualize the bundled default board.

    Args:
        save_path: If provided, save the figure to this path.
        show: Whether to display the figure.

    Returns:
        The matplotlib Figure object.
    """
    from data.loader import load_default_board

    board = load_default_board()
    return visualize_board(
        board,
        title="Default Board",
        save_path=save_path,
        show=show,
    )


if __name__ == "__main__":
    # When run directly, visualize the default board
    visualize_default_board(save_path="default_board_vis.png")
