"""Game engine for the pursuit game.

This module provides the game logic including:
- Legal move generation
- Phase state machine for the game lifecycle
- Spectator fan-out with fugitive redaction
- Game engine coordinating turns, moves and termination
"""

from .move_generator import MoveGenerator

from .phase_machine import (
    PhaseMachine,
    PhaseTransitionResult,
    PHASE_TRANSITIONS,
)

from .spectators import Spectator, SpectatorFanout

from .game_engine import GameEngine

__all__ = [
    # Move generation
    "MoveGenerator",
    # Phase machine
    "PhaseMachine",
    "PhaseTransitionResult",
    "PHASE_TRANSITIONS",
    # Spectators
    "Spectator",
    "SpectatorFanout",
    # Game engine
    "GameEngine",
]
