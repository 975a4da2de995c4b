"""Ticket economy helpers.

Tickets are the only resource in the game. A detective's spent ticket is
handed to the fugitive, a fugitive's spent ticket leaves the game, and the
double ticket is simply consumed.
"""

from __future__ import annotations

from typing import Mapping, Optional

from .constants import (
    Ticket,
    Transport,
    TRANSPORT_TICKETS,
    DEFAULT_DETECTIVE_TICKETS,
    DEFAULT_FUGITIVE_TICKETS,
)


# Type alias for a ticket pool
TicketCounts = dict[Ticket, int]


def ticket_for_transport(transport: Transport) -> Ticket:
    """Return the ticket needed to travel by the given transport."""
    return TRANSPORT_TICKETS[transport]


def normalize_tickets(tickets: Optional[Mapping[Ticket, int]]) -> TicketCounts:
    """Build a full ticket pool with a count for every ticket kind.

    Missing kinds default to 0.

    Args:
        tickets: Partial mapping of ticket kind to count (may be None).

    Returns:
        A new dict keyed by every Ticket.

    Raises:
        ValueError: If a count is negative or not an integer, or a key is
            not a Ticket.
    """
    counts: TicketCounts = {ticket: 0 for ticket in Ticket}
    for ticket, count in (tickets or {}).items():
        if not isinstance(ticket, Ticket):
            raise ValueError(f"Unknown ticket kind: {ticket!r}")
        if not isinstance(count, int) or isinstance(count, bool):
            raise ValueError(f"Ticket count for {ticket.value} must be an integer, got {count!r}")
        if count < 0:
            raise ValueError(f"Negative ticket count for {ticket.value}: {count}")
        counts[ticket] = int(count)
    return counts


def detective_tickets() -> TicketCounts:
    """Return the standard starting pool for a detective."""
    return normalize_tickets(DEFAULT_DETECTIVE_TICKETS)


def fugitive_tickets(num_detectives: int) -> TicketCounts:
    """Return the standard starting pool for the fugitive.

    The fugitive gets one secret ticket per detective.
    """
    counts = normalize_tickets(DEFAULT_FUGITIVE_TICKETS)
    counts[Ticket.SECRET] = num_detectives
    return counts


def tickets_from_names(raw: Mapping[str, int]) -> TicketCounts:
    """Convert a {"taxi": 10, ...} mapping (e.g. from JSON) to a ticket pool.

    Raises:
        ValueError: If a name is not a ticket kind or a count is invalid.
    """
    parsed: dict[Ticket, int] = {}
    for name, count in raw.items():
        try:
            ticket = Ticket(name)
        except ValueError:
            valid = ", ".join(t.value for t in Ticket)
            raise ValueError(f"Invalid ticket '{name}'. Valid tickets: {valid}")
        if not isinstance(count, int) or isinstance(count, bool):
            raise ValueError(f"Ticket count for '{name}' must be an integer")
        parsed[ticket] = count
    return normalize_tickets(parsed)


def tickets_to_names(tickets: Mapping[Ticket, int]) -> dict[str, int]:
    """Convert a ticket pool to a JSON-friendly mapping."""
    return {ticket.value: count for ticket, count in tickets.items()}
