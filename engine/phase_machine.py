"""Phase state machine for the pursuit game engine.

A game moves through these phases:
- AWAITING_ROSTER: players are still joining
- READY: roster is complete, no turn has started yet
- TURN_PENDING: a player has been notified and a token is outstanding
- TURN_APPLIED: a move was applied, the next turn is about to start
- GAME_OVER: terminal

The phase machine enforces valid transitions. It does not decide when the
game is over; the engine evaluates that and asks for the transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.constants import GamePhase


# Valid phase transitions
PHASE_TRANSITIONS: dict[GamePhase, list[GamePhase]] = {
    GamePhase.AWAITING_ROSTER: [GamePhase.READY],
    GamePhase.READY: [GamePhase.TURN_PENDING, GamePhase.GAME_OVER],
    GamePhase.TURN_PENDING: [GamePhase.TURN_APPLIED],
    GamePhase.TURN_APPLIED: [GamePhase.TURN_PENDING, GamePhase.GAME_OVER],
    # Terminal
    GamePhase.GAME_OVER: [],
}


@dataclass
class PhaseTransitionResult:
    """Result of a phase transition attempt.

    Attributes:
        success: Whether the transition was successful.
        new_phase: The new phase if successful, None otherwise.
        reason: Description of why the transition failed (if it did).
    """

    success: bool
    new_phase: Optional[GamePhase]
    reason: Optional[str] = None


class PhaseMachine:
    """Tracks the current phase of a game and rejects invalid transitions."""

    def __init__(self, initial_phase: GamePhase = GamePhase.AWAITING_ROSTER):
        """Initialize the phase machine.

        Args:
            initial_phase: The starting phase (default: AWAITING_ROSTER).
        """
        self._phase = initial_phase

    @property
    def phase(self) -> GamePhase:
        """Get the current phase."""
        return self._phase

    def get_valid_transitions(self) -> list[GamePhase]:
        """Get the list of valid next phases from the current phase."""
        return PHASE_TRANSITIONS.get(self._phase, [])

    def can_transition_to(self, target_phase: GamePhase) -> bool:
        """Check if a transition to the target phase is valid."""
        return target_phase in self.get_valid_transitions()

    def transition_to(self, target_phase: GamePhase) -> PhaseTransitionResult:
        """Attempt to transition to a new phase.

        Args:
            target_phase: The phase to transition to.

        Returns:
            PhaseTransitionResult indicating success or failure.
        """
        if not self.can_transition_to(target_phase):
            valid = self.get_valid_transitions()
            return PhaseTransitionResult(
                success=False,
                new_phase=None,
                reason=f"Cannot transition from {self._phase.value} to {target_phase.value}. "
                f"Valid transitions: {[p.value for p in valid]}",
            )

        self._phase = target_phase
        return PhaseTransitionResult(success=True, new_phase=target_phase)

    def is_awaiting_roster(self) -> bool:
        """Check if players are still joining."""
        return self._phase == GamePhase.AWAITING_ROSTER

    def is_turn_pending(self) -> bool:
        """Check if a player has been notified and not yet moved."""
        return self._phase == GamePhase.TURN_PENDING

    def is_game_over(self) -> bool:
        """Check if the game has ended."""
        return self._phase == GamePhase.GAME_OVER

    def is_playing(self) -> bool:
        """Check if the game has started and not ended."""
        return self._phase in (
            GamePhase.READY,
            GamePhase.TURN_PENDING,
            GamePhase.TURN_APPLIED,
        )

    def __str__(self) -> str:
        """Return string representation of the phase machine."""
        return f"PhaseMachine(phase={self._phase.value})"

    def __repr__(self) -> str:
        """Return detailed representation of the phase machine."""
        return f"PhaseMachine(phase={self._phase!r})"
