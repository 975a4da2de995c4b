"""Move model for the pursuit game engine.

A move is one of three shapes, distinguished by its ``kind`` tag:
- TicketMove: spend one ticket to travel to a neighbouring location
- DoubleMove: two TicketMoves in one turn (fugitive only)
- PassMove: stay put (detectives only, when nothing else is legal)

Moves are frozen dataclasses, so equality and hashing are structural and
duplicate moves collapse regardless of how they were generated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .board import Location
from .constants import Colour, Ticket


class MoveKind(Enum):
    """Tag identifying the shape of a move."""

    TICKET = "ticket"
    DOUBLE = "double"
    PASS = "pass"


@dataclass(frozen=True)
class TicketMove:
    """A single-leg move paid for with one ticket.

    Attributes:
        colour: The moving player.
        ticket: The ticket spent.
        target: The destination location.
    """

    colour: Colour
    ticket: Ticket
    target: Location
    kind: MoveKind = field(default=MoveKind.TICKET, init=False)

    def __str__(self) -> str:
        return f"{self.colour.value}: {self.ticket.value} -> {self.target}"


@dataclass(frozen=True)
class DoubleMove:
    """Two consecutive ticket moves made in a single turn.

    Attributes:
        colour: The moving player (always the fugitive).
        move1: The first leg.
        move2: The second leg, starting at ``move1.target``.
    """

    colour: Colour
    move1: TicketMove
    move2: TicketMove
    kind: MoveKind = field(default=MoveKind.DOUBLE, init=False)

    @property
    def targets(self) -> tuple[Location, Location]:
        """Destinations of both legs."""
        return (self.move1.target, self.move2.target)

    @property
    def tickets(self) -> tuple[Ticket, Ticket]:
        """Tickets spent on both legs (the double ticket is implied)."""
        return (self.move1.ticket, self.move2.ticket)

    def __str__(self) -> str:
        return (
            f"{self.colour.value}: double {self.move1.ticket.value} -> {self.move1.target}, "
            f"{self.move2.ticket.value} -> {self.move2.target}"
        )


@dataclass(frozen=True)
class PassMove:
    """A detective standing still because no other move is possible."""

    colour: Colour
    kind: MoveKind = field(default=MoveKind.PASS, init=False)

    def __str__(self) -> str:
        return f"{self.colour.value}: pass"


Move = Union[TicketMove, DoubleMove, PassMove]


def make_double(move1: TicketMove, move2: TicketMove) -> DoubleMove:
    """Compose two ticket moves of the same player into a double move.

    Raises:
        ValueError: If the legs belong to different players.
    """
    if move1.colour != move2.colour:
        raise ValueError(
            f"Double move legs belong to different players: "
            f"{move1.colour.value} and {move2.colour.value}"
        )
    return DoubleMove(colour=move1.colour, move1=move1, move2=move2)


def with_target(move: Move, target: Location) -> Move:
    """Return a copy of a move with every destination replaced by ``target``.

    Pass moves have no destination and are returned unchanged.
    """
    if move.kind is MoveKind.TICKET:
        return TicketMove(colour=move.colour, ticket=move.ticket, target=target)
    if move.kind is MoveKind.DOUBLE:
        return DoubleMove(
            colour=move.colour,
            move1=TicketMove(move.move1.colour, move.move1.ticket, target),
            move2=TicketMove(move.move2.colour, move.move2.ticket, target),
        )
    if move.kind is MoveKind.PASS:
        return move
    raise TypeError(f"Unknown move kind: {move.kind!r}")


def tickets_spent(move: Move) -> list[Ticket]:
    """Return every ticket a move consumes, including the double ticket."""
    if move.kind is MoveKind.TICKET:
        return [move.ticket]
    if move.kind is MoveKind.DOUBLE:
        return [Ticket.DOUBLE, move.move1.ticket, move.move2.ticket]
    if move.kind is MoveKind.PASS:
        return []
    raise TypeError(f"Unknown move kind: {move.kind!r}")
