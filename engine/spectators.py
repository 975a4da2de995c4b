"""Observer fan-out with information hiding.

Every applied move is broadcast to registered spectators. Spectators see the
game as a detective does: a fugitive move has every destination replaced by
the fugitive's last publicly revealed location before it is sent.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor, Future, wait
from typing import Optional

from core.board import Location
from core.moves import Move, with_target


logger = logging.getLogger(__name__)


class Spectator(ABC):
    """Interface for anything that watches a game (renderer, log, relay)."""

    @abstractmethod
    def notify(self, move: Move) -> None:
        """Receive a move that has just been applied."""
        pass


class SpectatorFanout:
    """Registered spectators and the redacting broadcast to them.

    A spectator that raises is logged and skipped; the others still receive
    the move and the game carries on. If an executor is supplied, each
    notification is submitted to it instead of being called inline, and
    ``flush`` waits for the deliveries still outstanding.
    """

    def __init__(self, executor: Optional[Executor] = None):
        """Initialize the fan-out.

        Args:
            executor: Optional executor for asynchronous delivery.
        """
        self._spectators: list[Spectator] = []
        self._executor = executor
        self._pending: set[Future] = set()
        self._pending_lock = threading.Lock()

    def register(self, spectator: Spectator) -> None:
        """Add a spectator. Registering twice has no effect."""
        if spectator not in self._spectators:
            self._spectators.append(spectator)

    def unregister(self, spectator: Spectator) -> None:
        """Remove a spectator if registered."""
        if spectator in self._spectators:
            self._spectators.remove(spectator)

    @property
    def spectators(self) -> list[Spectator]:
        """Currently registered spectators."""
        return list(self._spectators)

    def redact(self, move: Move, is_fugitive: bool, revealed_location: Location) -> Move:
        """Hide the fugitive's destination(s) behind his revealed location."""
        if not is_fugitive:
            return move
        return with_target(move, revealed_location)

    def broadcast(self, move: Move, is_fugitive: bool, revealed_location: Location) -> Move:
        """Send a move to every spectator.

        Args:
            move: The move just applied.
            is_fugitive: Whether the mover is the fugitive.
            revealed_location: The fugitive's last-revealed location.

        Returns:
            The payload that was sent (the same object for every spectator).
        """
        payload = self.redact(move, is_fugitive, revealed_location)
        for spectator in list(self._spectators):
            if self._executor is not None:
                future = self._executor.submit(spectator.notify, payload)
                with self._pending_lock:
                    self._pending.add(future)
                future.add_done_callback(self._settle)
            else:
                try:
                    spectator.notify(payload)
                except Exception:
                    logger.exception("Spectator %r failed on move %s", spectator, payload)
        return payload

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for executor deliveries submitted so far.

        Returns:
            True if every pending delivery finished within the timeout.
        """
        with self._pending_lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def _settle(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Spectator notification failed: %s", error, exc_info=error)

    def __len__(self) -> int:
        return len(self._spectators)
