"""Core data models for the pursuit game engine."""

from .constants import (
    Colour,
    Transport,
    Ticket,
    GamePhase,
    FUGITIVE_COLOUR,
    DETECTIVE_COLOURS,
    UNKNOWN_LOCATION,
    MIN_DETECTIVES,
    MAX_DETECTIVES,
    TRANSPORT_TICKETS,
    DEFAULT_ROUNDS,
    DEFAULT_DETECTIVE_TICKETS,
    DEFAULT_FUGITIVE_TICKETS,
)

from .board import Location, Route, Board

from .tickets import (
    TicketCounts,
    ticket_for_transport,
    normalize_tickets,
    detective_tickets,
    fugitive_tickets,
)

from .moves import (
    MoveKind,
    TicketMove,
    DoubleMove,
    PassMove,
    Move,
    make_double,
    with_target,
    tickets_spent,
)

from .player import PlayerHandle, PlayerData, MoveSubmitter

from .schedule import RoundSchedule

from .token_store import PendingAuthorization, TokenStore, InMemoryTokenStore

from .game_state import Roster, GlobalState, GameState

from .config import GameConfig, ConfigError, load_config

from .errors import GameNotReadyError, UnknownPlayerError

__all__ = [
    # Constants
    "Colour",
    "Transport",
    "Ticket",
    "GamePhase",
    "FUGITIVE_COLOUR",
    "DETECTIVE_COLOURS",
    "UNKNOWN_LOCATION",
    "MIN_DETECTIVES",
    "MAX_DETECTIVES",
    "TRANSPORT_TICKETS",
    "DEFAULT_ROUNDS",
    "DEFAULT_DETECTIVE_TICKETS",
    "DEFAULT_FUGITIVE_TICKETS",
    # Board
    "Location",
    "Route",
    "Board",
    # Tickets
    "TicketCounts",
    "ticket_for_transport",
    "normalize_tickets",
    "detective_tickets",
    "fugitive_tickets",
    # Moves
    "MoveKind",
    "TicketMove",
    "DoubleMove",
    "PassMove",
    "Move",
    "make_double",
    "with_target",
    "tickets_spent",
    # Player
    "PlayerHandle",
    "PlayerData",
    "MoveSubmitter",
    # Schedule
    "RoundSchedule",
    # Token store
    "PendingAuthorization",
    "TokenStore",
    "InMemoryTokenStore",
    # Game State
    "Roster",
    "GlobalState",
    "GameState",
    # Config
    "GameConfig",
    "ConfigError",
    "load_config",
    # Errors
    "GameNotReadyError",
    "UnknownPlayerError",
]
