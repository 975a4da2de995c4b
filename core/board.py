"""Board graph model for the pursuit game engine.

The board is a static transport graph:
- Nodes are numbered locations (1-based; 0 is reserved as "unknown")
- Edges are routes, each labelled with a Transport kind
- Two locations may be joined by several routes of different kinds

Topology is immutable once the game starts; player positions live in
GameState, not on the board.
"""

from __future__ import annotations

from typing import Iterable, Optional

import networkx as nx

from .constants import Transport, UNKNOWN_LOCATION


# Type alias for clarity
Location = int
Route = tuple[Location, Location, Transport]


class Board:
    """The transport graph the game is played on.

    Wraps an undirected ``networkx.MultiGraph`` where every edge carries a
    ``transport`` attribute. The engine only ever asks one question of the
    board: which (location, transport) pairs are directly reachable.
    """

    def __init__(self, graph: Optional[nx.MultiGraph] = None):
        """Initialize the board.

        Args:
            graph: Optional prebuilt MultiGraph whose edges carry a
                ``transport`` attribute. An empty board is created if None.
        """
        self._graph = graph if graph is not None else nx.MultiGraph()

    @classmethod
    def from_routes(cls, routes: Iterable[Route]) -> Board:
        """Build a board from (location, location, transport) triples."""
        board = cls()
        for node_a, node_b, transport in routes:
            board.add_route(node_a, node_b, transport)
        return board

    @property
    def graph(self) -> nx.MultiGraph:
        """The underlying networkx graph."""
        return self._graph

    def add_location(
        self, location: Location, position: Optional[tuple[float, float]] = None
    ) -> None:
        """Add a location to the board.

        Raises:
            ValueError: If the location id is the reserved unknown sentinel.
        """
        if location == UNKNOWN_LOCATION:
            raise ValueError(f"Location {UNKNOWN_LOCATION} is reserved")
        if position is None:
            self._graph.add_node(location)
        else:
            self._graph.add_node(location, position=position)

    def add_route(self, node_a: Location, node_b: Location, transport: Transport) -> None:
        """Connect two locations with a route of the given transport kind.

        Missing locations are added.

        Raises:
            ValueError: If the route is a self-loop or already exists.
        """
        if node_a == node_b:
            raise ValueError(f"Self-loop route not allowed at {node_a}")
        if transport in self.transports_between(node_a, node_b):
            raise ValueError(
                f"Duplicate {transport.value} route between {node_a} and {node_b}"
            )
        for node in (node_a, node_b):
            if node not in self._graph:
                self.add_location(node)
        self._graph.add_edge(node_a, node_b, transport=transport)

    def neighbors(self, location: Location) -> list[tuple[Location, Transport]]:
        """Return every (location, transport) pair directly reachable.

        Unknown locations have no neighbors.
        """
        if location not in self._graph:
            return []
        return [
            (target, data["transport"])
            for _, target, data in self._graph.edges(location, data=True)
        ]

    def transports_between(self, node_a: Location, node_b: Location) -> set[Transport]:
        """Return the transport kinds directly linking two locations."""
        if not self._graph.has_edge(node_a, node_b):
            return set()
        return {
            data["transport"]
            for data in self._graph.get_edge_data(node_a, node_b).values()
        }

    def has_location(self, location: Location) -> bool:
        """Check if a location exists on the board."""
        return location in self._graph

    def locations(self) -> list[Location]:
        """Return all locations in sorted order."""
        return sorted(self._graph.nodes)

    def num_routes(self) -> int:
        """Return the total number of routes."""
        return self._graph.number_of_edges()

    def routes_by_transport(self) -> dict[Transport, int]:
        """Count routes per transport kind."""
        counts = {transport: 0 for transport in Transport}
        for _, _, transport in self._graph.edges(data="transport"):
            counts[transport] += 1
        return counts

    def is_connected(self) -> bool:
        """Check whether every location can reach every other."""
        if len(self._graph) == 0:
            return True
        return nx.is_connected(self._graph)

    def __len__(self) -> int:
        return len(self._graph)

    def __contains__(self, location: object) -> bool:
        return location in self._graph

    def __repr__(self) -> str:
        return f"Board(locations={len(self)}, routes={self.num_routes()})"
