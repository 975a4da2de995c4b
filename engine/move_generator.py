"""Legal move generation for the pursuit game.

Given where a player stands, which tickets it holds and which locations are
off limits, the generator enumerates every legal move:

- One TicketMove per reachable neighbour whose ticket the player holds
- A secret-ticket twin of every non-secret move if a secret ticket is held
- For the fugitive holding a double ticket, every two-leg DoubleMove
- A PassMove for a detective left with nothing else

Results are ordered by board adjacency and contain no duplicates.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from core.board import Board, Location
from core.constants import Colour, Ticket
from core.moves import Move, TicketMove, DoubleMove, PassMove, make_double
from core.tickets import ticket_for_transport


class MoveGenerator:
    """Enumerates legal moves on a board.

    The generator is stateless apart from the board; callers pass in the
    ticket counts and forbidden locations for each query.
    """

    def __init__(self, board: Board):
        """Initialize the generator.

        Args:
            board: The transport graph to move on.
        """
        self.board = board

    def generate_ticket_moves(
        self,
        colour: Colour,
        tickets: Mapping[Ticket, int],
        location: Location,
        forbidden: Iterable[Location],
    ) -> list[TicketMove]:
        """Generate every single-leg move from a location.

        Args:
            colour: The moving player.
            tickets: Tickets the player holds.
            location: Where the move starts.
            forbidden: Locations that may not be entered.

        Returns:
            Unique ticket moves, secret twins after the regular moves.
        """
        forbidden = set(forbidden)
        moves: list[TicketMove] = []
        seen: set[TicketMove] = set()

        def add(move: TicketMove) -> None:
            if move not in seen:
                seen.add(move)
                moves.append(move)

        for target, transport in self.board.neighbors(location):
            ticket = ticket_for_transport(transport)
            if tickets.get(ticket, 0) > 0 and target not in forbidden:
                add(TicketMove(colour=colour, ticket=ticket, target=target))

        # Travelling disguised: a secret ticket can replace any other ticket.
        # Boat moves already use the secret ticket and get no twin.
        if tickets.get(Ticket.SECRET, 0) > 0:
            for move in list(moves):
                if move.ticket is not Ticket.SECRET:
                    add(TicketMove(colour=colour, ticket=Ticket.SECRET, target=move.target))

        return moves

    def generate_double_moves(
        self,
        colour: Colour,
        tickets: Mapping[Ticket, int],
        first_legs: Iterable[TicketMove],
        forbidden: Iterable[Location],
    ) -> list[DoubleMove]:
        """Compose every two-leg move from a set of first legs.

        The first leg's ticket is spent on a copy of the pool before the
        second leg is generated, so a player holding a single bus ticket
        cannot use it twice.

        Args:
            colour: The moving player.
            tickets: Tickets the player holds (not modified).
            first_legs: Single-leg moves available from the start location.
            forbidden: Locations that may not be entered by either leg.

        Returns:
            Unique double moves. Two paths producing the same
            (ticket, target, ticket, target) collapse into one entry.
        """
        if tickets.get(Ticket.DOUBLE, 0) < 1:
            return []

        forbidden = set(forbidden)
        doubles: list[DoubleMove] = []
        seen: set[DoubleMove] = set()

        for move1 in first_legs:
            remaining = dict(tickets)
            remaining[move1.ticket] = remaining.get(move1.ticket, 0) - 1
            for move2 in self.generate_ticket_moves(colour, remaining, move1.target, forbidden):
                double = make_double(move1, move2)
                if double not in seen:
                    seen.add(double)
                    doubles.append(double)

        return doubles

    def generate(
        self,
        colour: Colour,
        tickets: Mapping[Ticket, int],
        location: Location,
        forbidden: Iterable[Location],
        is_fugitive: bool,
        allow_double: bool = True,
    ) -> list[Move]:
        """Generate the complete legal move list for one player.

        Args:
            colour: The moving player.
            tickets: Tickets the player holds.
            location: The player's true location.
            forbidden: Locations occupied by detectives.
            is_fugitive: Whether the mover is the fugitive. Only the fugitive
                gets double moves; only detectives get a pass.
            allow_double: Whether enough move slots remain for a double move.

        Returns:
            Single moves followed by double moves. A detective with no move
            gets exactly ``[PassMove]``; a stuck fugitive gets ``[]``.
        """
        forbidden = set(forbidden)
        singles = self.generate_ticket_moves(colour, tickets, location, forbidden)

        result: list[Move] = list(singles)
        if is_fugitive and allow_double:
            result.extend(self.generate_double_moves(colour, tickets, singles, forbidden))

        if not result and not is_fugitive:
            return [PassMove(colour=colour)]
        return result
