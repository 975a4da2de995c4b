"""Constants and enums for the pursuit game engine."""

from enum import Enum


class Colour(Enum):
    """Player colours. BLACK is always the fugitive."""

    BLACK = "black"
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    WHITE = "white"
    YELLOW = "yellow"


class Transport(Enum):
    """Kinds of route connecting two board locations."""

    TAXI = "taxi"
    BUS = "bus"
    UNDERGROUND = "underground"
    BOAT = "boat"  # Water route, only usable with a secret ticket


class Ticket(Enum):
    """Tickets spent to make moves."""

    TAXI = "taxi"
    BUS = "bus"
    UNDERGROUND = "underground"
    SECRET = "secret"  # Disguise: usable in place of any transport
    DOUBLE = "double"  # Chains two moves into one turn


class GamePhase(Enum):
    """Lifecycle phases of a single game."""

    AWAITING_ROSTER = "awaiting_roster"
    READY = "ready"
    TURN_PENDING = "turn_pending"
    TURN_APPLIED = "turn_applied"
    GAME_OVER = "game_over"


FUGITIVE_COLOUR = Colour.BLACK

# Pursuer colours in their conventional seating order
DETECTIVE_COLOURS = [
    Colour.BLUE,
    Colour.GREEN,
    Colour.RED,
    Colour.WHITE,
    Colour.YELLOW,
]

# Sentinel for "fugitive has never been revealed"; never a board location
UNKNOWN_LOCATION = 0

# Player limits
MIN_DETECTIVES = 1
MAX_DETECTIVES = len(DETECTIVE_COLOURS)

# Ticket spent for each transport kind. Boat routes need the secret ticket.
TRANSPORT_TICKETS = {
    Transport.TAXI: Ticket.TAXI,
    Transport.BUS: Ticket.BUS,
    Transport.UNDERGROUND: Ticket.UNDERGROUND,
    Transport.BOAT: Ticket.SECRET,
}

# Standard reveal schedule: 24 fugitive moves, revealed after moves 3, 8, 13, 18, 24
DEFAULT_REVEAL_ROUNDS = (3, 8, 13, 18, 24)
DEFAULT_ROUND_COUNT = 25
DEFAULT_ROUNDS = tuple(
    n in DEFAULT_REVEAL_ROUNDS for n in range(DEFAULT_ROUND_COUNT)
)

# Standard starting ticket pools
DEFAULT_DETECTIVE_TICKETS = {
    Ticket.TAXI: 10,
    Ticket.BUS: 8,
    Ticket.UNDERGROUND: 4,
    Ticket.SECRET: 0,
    Ticket.DOUBLE: 0,
}

DEFAULT_FUGITIVE_TICKETS = {
    Ticket.TAXI: 4,
    Ticket.BUS: 3,
    Ticket.UNDERGROUND: 3,
    Ticket.DOUBLE: 2,
    # Ticket.SECRET is one per detective, see core.tickets.fugitive_tickets()
}
