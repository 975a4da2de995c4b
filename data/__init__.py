"""Board data for the pursuit game engine.

- loader: reads board JSON files into Board objects and validates them
- graph_vis: draws a board, optionally with players at their public locations
- default_board.json: the bundled 20-location board
"""

from .loader import (
    BoardLoader,
    BoardLoadError,
    resource_path,
    load_board,
    load_default_board,
    get_board_stats,
)

from .graph_vis import (
    BoardVisualizer,
    TRANSPORT_COLORS,
    PLAYER_COLORS,
    visualize_board,
    visualize_default_board,
)

__all__ = [
    # Board files
    "BoardLoader",
    "BoardLoadError",
    "resource_path",
    "load_board",
    "load_default_board",
    "get_board_stats",
    # Drawing
    "BoardVisualizer",
    "TRANSPORT_COLORS",
    "PLAYER_COLORS",
    "visualize_board",
    "visualize_default_board",
]
