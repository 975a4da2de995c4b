"""Player model for the pursuit game engine.

Each player has a colour, a true location on the board and a pool of
tickets. The player handle is the external object notified when it is the
player's turn to move.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional, TYPE_CHECKING

from .board import Location
from .constants import Colour, Ticket, FUGITIVE_COLOUR
from .tickets import TicketCounts, normalize_tickets

if TYPE_CHECKING:
    from .moves import Move


# Callback a player uses to hand its chosen move back to the engine
MoveSubmitter = Callable[["Move", str], object]


class PlayerHandle(ABC):
    """Interface for whatever controls a player (human, AI, network relay).

    The engine calls ``notify`` when it is this player's turn. The player
    eventually calls ``submit(move, token)`` with one of the offered moves and
    the token it was given, possibly from another thread.
    """

    @abstractmethod
    def notify(
        self,
        location: Location,
        moves: list[Move],
        token: str,
        submit: MoveSubmitter,
    ) -> None:
        """Offer the legal moves for the current turn."""
        pass


@dataclass
class PlayerData:
    """Authoritative state of one player.

    Attributes:
        colour: The player's colour (BLACK is the fugitive).
        location: The player's true location.
        tickets: Remaining tickets of every kind (never negative).
        handle: The object notified on this player's turn.
    """

    colour: Colour
    location: Location
    tickets: TicketCounts = field(default_factory=lambda: normalize_tickets(None))
    handle: Optional[PlayerHandle] = None

    def __post_init__(self) -> None:
        self.tickets = normalize_tickets(self.tickets)

    @property
    def is_fugitive(self) -> bool:
        """Whether this player is the fugitive."""
        return self.colour == FUGITIVE_COLOUR

    @property
    def is_detective(self) -> bool:
        """Whether this player is a detective."""
        return not self.is_fugitive

    def ticket_count(self, ticket: Ticket) -> int:
        """Return how many tickets of a kind the player holds."""
        return self.tickets.get(ticket, 0)

    def has_ticket(self, ticket: Ticket) -> bool:
        """Check if the player holds at least one ticket of a kind."""
        return self.ticket_count(ticket) > 0

    def remove_ticket(self, ticket: Ticket) -> None:
        """Spend one ticket.

        Raises:
            ValueError: If the player holds no ticket of that kind.
        """
        if not self.has_ticket(ticket):
            raise ValueError(
                f"Player {self.colour.value} has no {ticket.value} tickets remaining"
            )
        self.tickets[ticket] -= 1

    def add_ticket(self, ticket: Ticket) -> None:
        """Receive one ticket."""
        self.tickets[ticket] = self.ticket_count(ticket) + 1

    def move_to(self, location: Location) -> None:
        """Relocate the player."""
        self.location = location

    def total_tickets(self) -> int:
        """Return the number of tickets held across all kinds."""
        return sum(self.tickets.values())
