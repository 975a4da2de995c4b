"""Pending move authorizations.

Before a player is notified of its turn, the engine writes a random token
into the store under the game id. A submitted move is only accepted if it
carries the token currently stored for that game. Writing a new record
replaces the old one, so a stale token can never match.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, Optional

from .constants import Colour


@dataclass(frozen=True)
class PendingAuthorization:
    """The single live permission to submit the current turn's move.

    Attributes:
        token: Unpredictable token handed to the current player.
        colour: The player allowed to move.
        issued_at: Unix timestamp when the token was issued.
    """

    token: str
    colour: Colour
    issued_at: float


class TokenStore(ABC):
    """Keyed store holding at most one live authorization per game id."""

    @abstractmethod
    def put(self, game_id: Hashable, record: PendingAuthorization) -> None:
        """Store a record, replacing any previous record for the game."""
        pass

    @abstractmethod
    def get(self, game_id: Hashable) -> Optional[PendingAuthorization]:
        """Return the live record for the game, or None."""
        pass

    @abstractmethod
    def remove(self, game_id: Hashable) -> None:
        """Drop the record for the game if present."""
        pass


class InMemoryTokenStore(TokenStore):
    """Process-local token store backed by a dict.

    Safe to share between games and threads.
    """

    def __init__(self) -> None:
        self._records: dict[Hashable, PendingAuthorization] = {}
        self._lock = threading.Lock()

    def put(self, game_id: Hashable, record: PendingAuthorization) -> None:
        with self._lock:
            self._records[game_id] = record

    def get(self, game_id: Hashable) -> Optional[PendingAuthorization]:
        with self._lock:
            return self._records.get(game_id)

    def remove(self, game_id: Hashable) -> None:
        with self._lock:
            self._records.pop(game_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
