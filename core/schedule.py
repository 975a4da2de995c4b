"""Reveal schedule for the fugitive.

Entry n of the schedule is True when the fugitive's location becomes public
as his n-th move completes. Entry 0 refers to the starting location. The
schedule length minus one is the maximum number of fugitive moves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .constants import DEFAULT_ROUNDS


@dataclass(frozen=True)
class RoundSchedule:
    """Immutable reveal schedule.

    Attributes:
        rounds: One boolean per round, True where the fugitive is revealed.
    """

    rounds: tuple[bool, ...]

    def __post_init__(self) -> None:
        if len(self.rounds) < 1:
            raise ValueError("Round schedule must have at least one entry")
        object.__setattr__(self, "rounds", tuple(bool(r) for r in self.rounds))

    @classmethod
    def from_list(cls, rounds: Iterable[bool]) -> RoundSchedule:
        """Build a schedule from any iterable of booleans."""
        return cls(rounds=tuple(rounds))

    @classmethod
    def default(cls) -> RoundSchedule:
        """Return the standard 24-move schedule."""
        return cls(rounds=DEFAULT_ROUNDS)

    @property
    def max_moves(self) -> int:
        """Maximum number of fugitive moves (a double move counts twice)."""
        return len(self.rounds) - 1

    def is_reveal_round(self, round_number: int) -> bool:
        """Check if the fugitive is revealed at the given round.

        Rounds outside the schedule never reveal.
        """
        return 0 <= round_number < len(self.rounds) and self.rounds[round_number]

    def moves_remaining(self, round_number: int) -> int:
        """Return how many fugitive moves are left after ``round_number``."""
        return max(0, self.max_moves - round_number)

    def reveal_rounds(self) -> list[int]:
        """Return the indices of all reveal rounds."""
        return [n for n, reveal in enumerate(self.rounds) if reveal]

    def as_list(self) -> list[bool]:
        """Return the schedule as a plain list."""
        return list(self.rounds)

    def __len__(self) -> int:
        return len(self.rounds)
