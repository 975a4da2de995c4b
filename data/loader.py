"""Board data loader for the pursuit game engine.

Loads and validates board topology from JSON files, converting them into
Board instances ready for use in the game. The expected format is:

    {
        "nodes": [{"id": 1, "position": {"x": 0, "y": 0}}, ...],
        "edges": [[1, 2, "taxi"], [1, 9, "bus"], ...]
    }

Node entries may also be bare integers when no position is needed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from core.board import Board, Location
from core.constants import Transport, UNKNOWN_LOCATION


def resource_path(relative_path: str) -> Path:
    """Absolute path to a file shipped inside the data package."""
    return Path(__file__).parent / relative_path


class BoardLoadError(Exception):
    """Raised when board loading or validation fails."""
    pass


class BoardLoader:
    """Loads and validates board data from JSON files."""

    def __init__(self, require_connected: bool = True):
        """Initialize the loader.

        Args:
            require_connected: If True, reject boards where some location
                cannot be reached from the others.
        """
        self.require_connected = require_connected

    def load_from_file(self, file_path: str | Path) -> Board:
        """Load a board from a JSON file.

        Args:
            file_path: Path to the JSON board file.

        Returns:
            A Board instance with the loaded topology.

        Raises:
            BoardLoadError: If the file cannot be read or parsed.
            BoardLoadError: If validation fails.
        """
        path = Path(file_path)

        if not path.exists():
            raise BoardLoadError(f"Board file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise BoardLoadError(f"Invalid JSON in board file: {e}")
        except IOError as e:
            raise BoardLoadError(f"Error reading board file: {e}")

        return self.load_from_dict(data)

    def load_from_dict(self, data: dict[str, Any]) -> Board:
        """Load a board from a dictionary.

        Args:
            data: Dictionary containing 'nodes' and 'edges' keys.

        Returns:
            A Board instance with the loaded topology.

        Raises:
            BoardLoadError: If validation fails.
        """
        self._validate_structure(data)

        board = Board()

        # Load nodes
        node_ids: set[Location] = set()
        for node_data in data["nodes"]:
            node_id, position = self._parse_node(node_data)
            if node_id in node_ids:
                raise BoardLoadError(f"Duplicate node ID: {node_id}")
            node_ids.add(node_id)
            board.add_location(node_id, position)

        # Load edges
        for edge_data in data["edges"]:
            node_a, node_b, transport = self._parse_edge(edge_data)

            if node_a not in node_ids:
                raise BoardLoadError(f"Edge references unknown node: {node_a}")
            if node_b not in node_ids:
                raise BoardLoadError(f"Edge references unknown node: {node_b}")

            try:
                board.add_route(node_a, node_b, transport)
            except ValueError as e:
                raise BoardLoadError(str(e))

        if self.require_connected and not board.is_connected():
            raise BoardLoadError("Board is not connected")

        return board

    def _validate_structure(self, data: dict[str, Any]) -> None:
        """Validate the basic structure of the board data."""
        if not isinstance(data, dict):
            raise BoardLoadError("Board data must be a dictionary")

        if "nodes" not in data:
            raise BoardLoadError("Board data missing 'nodes' key")

        if "edges" not in data:
            raise BoardLoadError("Board data missing 'edges' key")

        if not isinstance(data["nodes"], list):
            raise BoardLoadError("'nodes' must be a list")

        if not isinstance(data["edges"], list):
            raise BoardLoadError("'edges' must be a list")

        if len(data["nodes"]) == 0:
            raise BoardLoadError("Board must have at least one node")

    def _parse_node(self, node_data: Any) -> tuple[Location, Optional[tuple[float, float]]]:
        """Parse a node entry into (id, position)."""
        position = None
        if isinstance(node_data, dict):
            if "id" not in node_data:
                raise BoardLoadError("Node missing required field: id")
            node_id = node_data["id"]
            if "position" in node_data:
                position_data = node_data["position"]
                if (
                    not isinstance(position_data, dict)
                    or "x" not in position_data
                    or "y" not in position_data
                ):
                    raise BoardLoadError(f"Invalid position format for node {node_id}")
                position = (position_data["x"], position_data["y"])
        else:
            node_id = node_data

        if not isinstance(node_id, int) or isinstance(node_id, bool) or node_id <= UNKNOWN_LOCATION:
            raise BoardLoadError(f"Invalid node ID: {node_id!r} (must be a positive integer)")

        return node_id, position

    def _parse_edge(self, edge_data: Any) -> tuple[Location, Location, Transport]:
        """Parse an edge entry [a, b, transport]."""
        if not isinstance(edge_data, (list, tuple)) or len(edge_data) != 3:
            raise BoardLoadError(f"Edge must be [node_a, node_b, transport], got {edge_data!r}")

        node_a, node_b, transport_name = edge_data
        try:
            transport = Transport(transport_name)
        except ValueError:
            valid = ", ".join(t.value for t in Transport)
            raise BoardLoadError(
                f"Invalid transport '{transport_name}' on edge [{node_a}, {node_b}]. "
                f"Valid transports: {valid}"
            )
        return node_a, node_b, transport


def load_board(file_path: str | Path, require_connected: bool = True) -> Board:
    """Convenience function to load a board from a file.

    Args:
        file_path: Path to the JSON board file.
        require_connected: If True, reject disconnected boards.

    Returns:
        A Board instance with the loaded topology.
    """
    loader = BoardLoader(require_connected=require_connected)
    return loader.load_from_file(file_path)


def load_default_board() -> Board:
    """Load the bundled default board.

    Raises:
        BoardLoadError: If the default board file is missing or invalid.
    """
    default_path = resource_path("default_board.json")
    return load_board(default_path)


def get_board_stats(board: Board) -> dict[str, Any]:
    """Get statistics about a board.

    Args:
        board: The board to analyze.

    Returns:
        Dictionary with board statistics.
    """
    return {
        "num_locations": len(board),
        "num_routes": board.num_routes(),
        "routes_by_transport": {
            transport.value: count
            for transport, count in board.routes_by_transport().items()
        },
        "is_connected": board.is_connected(),
    }
