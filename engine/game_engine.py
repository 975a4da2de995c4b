"""Main game engine for the pursuit game.

The GameEngine owns one game from the first join to game over:
- join(): seat players until the roster is full
- start_round(): notify the current player of its legal moves
- play_move(): accept a move carrying the current turn's token
- valid_moves(), is_game_over(), get_winning_players() and the accessors

Turn exclusivity is token based. Before a player is notified, a fresh random
token is written to the token store under the game id, replacing any older
one. A submission is applied only if it presents that token, so replayed or
late submissions are dropped without touching the state.

Players may answer from inside ``notify``. Such a submission is validated
immediately but applied only after the current step returns, so each turn
runs to completion before the next one starts.

Spectators receive moves from a worker thread owned by the engine, so a
slow spectator never delays the next turn. Pass ``inline_spectators=True``
to deliver on the calling thread instead.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from collections import deque
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Hashable, Iterable, Mapping, Optional, Union

from core.board import Board, Location
from core.config import GameConfig
from core.constants import Colour, GamePhase, Ticket, FUGITIVE_COLOUR
from core.game_state import GameState
from core.moves import Move, MoveKind, TicketMove, DoubleMove, PassMove
from core.player import PlayerData, PlayerHandle
from core.schedule import RoundSchedule
from core.token_store import PendingAuthorization, TokenStore

from .move_generator import MoveGenerator
from .phase_machine import PhaseMachine
from .spectators import Spectator, SpectatorFanout


logger = logging.getLogger(__name__)


class GameEngine:
    """Rules engine for one game of hidden-movement pursuit.

    Usage:
        engine = GameEngine(num_detectives=2, rounds=rounds, board=board,
                            token_store=InMemoryTokenStore(), game_id=1)
        engine.join(mr_x, Colour.BLACK, 45, fugitive_tickets(2))
        engine.join(blue, Colour.BLUE, 13, detective_tickets())
        engine.join(green, Colour.GREEN, 26, detective_tickets())
        engine.start_round()
        # players answer through the submit callback they are notified with
    """

    def __init__(
        self,
        num_detectives: int,
        rounds: Union[RoundSchedule, Iterable[bool]],
        board: Board,
        token_store: TokenStore,
        game_id: Hashable,
        executor: Optional[Executor] = None,
        inline_spectators: bool = False,
    ):
        """Initialize the engine.

        Args:
            num_detectives: Number of detectives the game waits for.
            rounds: Reveal schedule (RoundSchedule or list of booleans).
            board: The transport graph.
            token_store: Store for pending move authorizations.
            game_id: Key for this game's authorization in the store.
            executor: Executor for spectator delivery. If None, the engine
                starts a single-worker thread pool of its own so that a slow
                spectator never holds up the next turn.
            inline_spectators: Deliver to spectators on the calling thread
                instead, while the engine lock is held.
        """
        schedule = rounds if isinstance(rounds, RoundSchedule) else RoundSchedule.from_list(rounds)
        self._state = GameState.create_initial_state(game_id, num_detectives, schedule, board)
        self._generator = MoveGenerator(board)
        self._phase_machine = PhaseMachine(initial_phase=GamePhase.AWAITING_ROSTER)
        self._owned_executor: Optional[ThreadPoolExecutor] = None
        if executor is None and not inline_spectators:
            executor = self._owned_executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix=f"spectators-{game_id}"
            )
        self._fanout = SpectatorFanout(executor)
        self._token_store = token_store

        self._lock = threading.RLock()
        self._work: deque[Optional[Move]] = deque()
        self._draining = False

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        board: Board,
        token_store: TokenStore,
        game_id: Hashable,
        executor: Optional[Executor] = None,
        inline_spectators: bool = False,
    ) -> GameEngine:
        """Create an engine from a GameConfig."""
        return cls(
            num_detectives=config.num_detectives,
            rounds=config.schedule,
            board=board,
            token_store=token_store,
            game_id=game_id,
            executor=executor,
            inline_spectators=inline_spectators,
        )

    @property
    def state(self) -> GameState:
        """The authoritative game state."""
        return self._state

    @property
    def game_id(self) -> Hashable:
        """This game's id."""
        return self._state.game_id

    @property
    def phase(self) -> GamePhase:
        """The current lifecycle phase."""
        return self._phase_machine.phase

    # -------------------------------------------------------------------------
    # Joining and spectating
    # -------------------------------------------------------------------------

    def join(
        self,
        player: Optional[PlayerHandle],
        colour: Colour,
        location: Location,
        tickets: Mapping[Ticket, int],
    ) -> bool:
        """Seat a player. The fugitive always moves first.

        Args:
            player: Handle notified on this player's turns.
            colour: The player's colour (BLACK for the fugitive).
            location: Starting location.
            tickets: Starting ticket pool.

        Returns:
            True if the player joined; False if the join was illegal, in
            which case nothing changed.
        """
        with self._lock:
            if not isinstance(tickets, Mapping):
                logger.warning(
                    "Game %s: rejected join of %s: tickets must be a mapping, got %r",
                    self.game_id,
                    colour.value,
                    tickets,
                )
                return False
            try:
                data = PlayerData(colour=colour, location=location, tickets=dict(tickets), handle=player)
            except ValueError as e:
                logger.warning("Game %s: rejected join of %s: %s", self.game_id, colour.value, e)
                return False

            error = self._state.join_error(data)
            if error is not None:
                logger.warning("Game %s: rejected join of %s: %s", self.game_id, colour.value, error)
                return False

            self._state.add_player(data)
            logger.info(
                "Game %s: %s joined (%d/%d)",
                self.game_id,
                colour.value,
                len(self._state.roster),
                self._state.roster_size,
            )

            if self._state.is_ready() and self._phase_machine.is_awaiting_roster():
                self._transition_to_phase(GamePhase.READY)
                logger.info("Game %s: roster complete, ready to start", self.game_id)
            return True

    def spectate(self, spectator: Spectator) -> None:
        """Register a spectator to receive every applied move."""
        with self._lock:
            self._fanout.register(spectator)

    def unregister_spectator(self, spectator: Spectator) -> None:
        """Stop sending moves to a spectator."""
        with self._lock:
            self._fanout.unregister(spectator)

    def flush_spectators(self, timeout: Optional[float] = None) -> bool:
        """Wait until every move broadcast so far has been delivered.

        Returns:
            True if delivery finished within the timeout.
        """
        return self._fanout.flush(timeout)

    def close(self) -> None:
        """Deliver outstanding spectator moves and stop the engine's own pool."""
        if self._owned_executor is not None:
            self._owned_executor.shutdown(wait=True)

    # -------------------------------------------------------------------------
    # Turn protocol
    # -------------------------------------------------------------------------

    def start_round(self) -> None:
        """Notify the current player, unless the game is not ready or over."""
        with self._lock:
            self._work.append(None)
            self._drain()

    def play_move(self, move: Move, token: str) -> bool:
        """Submit a move for the current turn.

        Submissions with a missing or stale token are dropped silently.
        Submissions with the right token but a move that is not legal for
        the authorized player are rejected and the token stays live.

        Args:
            move: The chosen move.
            token: The token received with the turn notification.

        Returns:
            True if the move was accepted, False if it was dropped.
        """
        with self._lock:
            if not self._authorize(move, token):
                return False
            self._work.append(move)
            self._drain()
            return True

    def _authorize(self, move: Move, token: str) -> bool:
        """Check a submission against the live authorization and consume it."""
        record = self._token_store.get(self.game_id)
        if record is None or record.token != token:
            logger.debug("Game %s: dropping %s, token is not live", self.game_id, move)
            return False

        if not isinstance(move, (TicketMove, DoubleMove, PassMove)):
            logger.warning("Game %s: rejecting submission %r, not a move", self.game_id, move)
            return False

        if move.colour != record.colour or move not in self.valid_moves(record.colour):
            logger.warning(
                "Game %s: rejecting illegal move %s, %s to play",
                self.game_id,
                move,
                record.colour.value,
            )
            return False

        self._token_store.remove(self.game_id)
        return True

    def _drain(self) -> None:
        """Process queued moves and turn starts until none are left.

        Runs only in the outermost call; a move submitted from inside a
        player's ``notify`` is queued and picked up here afterwards.
        """
        if self._draining:
            return
        self._draining = True
        try:
            while self._work:
                move = self._work.popleft()
                if move is None:
                    self._begin_turn()
                else:
                    self._apply_turn(move)
        finally:
            self._draining = False

    def _begin_turn(self) -> None:
        """Issue a token and offer the current player its legal moves."""
        if not self._state.is_ready() or self._phase_machine.is_game_over():
            return

        reason = self.game_over_reason()
        if reason is not None:
            self._transition_to_phase(GamePhase.GAME_OVER)
            winners = sorted(c.value for c in self.get_winning_players())
            logger.info("Game %s over: %s. Winners: %s", self.game_id, reason, ", ".join(winners))
            return

        if not self._phase_machine.is_turn_pending():
            self._transition_to_phase(GamePhase.TURN_PENDING)

        player = self._state.get_current_player()
        moves = self.valid_moves(player.colour)
        token = secrets.token_hex(16)
        self._token_store.put(
            self.game_id,
            PendingAuthorization(token=token, colour=player.colour, issued_at=time.time()),
        )
        logger.debug(
            "Game %s: %s to move from %d with %d options",
            self.game_id,
            player.colour.value,
            player.location,
            len(moves),
        )

        if player.handle is None:
            return
        try:
            player.handle.notify(player.location, moves, token, self.play_move)
        except Exception:
            logger.exception("Game %s: notifying %s failed", self.game_id, player.colour.value)

    def _apply_turn(self, move: Move) -> None:
        """Apply an authorized move and queue the next turn."""
        self._transition_to_phase(GamePhase.TURN_APPLIED)
        self._play(move)
        self._state.advance_current_player()
        self._work.append(None)

    def _transition_to_phase(self, new_phase: GamePhase) -> None:
        """Transition to a new phase."""
        result = self._phase_machine.transition_to(new_phase)
        if not result.success:
            raise RuntimeError(f"Game {self.game_id}: {result.reason}")

    # -------------------------------------------------------------------------
    # Move application
    # -------------------------------------------------------------------------

    def _play(self, move: Move) -> None:
        """Apply a move of any kind."""
        if move.kind is MoveKind.TICKET:
            self._play_ticket(move)
        elif move.kind is MoveKind.DOUBLE:
            self._play_double(move)
        elif move.kind is MoveKind.PASS:
            self._play_pass(move)
        else:
            raise TypeError(f"Unknown move kind: {move.kind!r}")

    def _play_ticket(self, move: TicketMove) -> None:
        """Move the player and settle the ticket.

        A detective's ticket goes to the fugitive. A fugitive's ticket is
        discarded and the round advances, revealing him if scheduled.
        """
        player = self._state.get_player(move.colour)
        player.move_to(move.target)
        player.remove_ticket(move.ticket)
        if player.is_detective:
            self._state.fugitive.add_ticket(move.ticket)
        else:
            self._state.advance_round()
        logger.debug("Game %s: played %s", self.game_id, move)
        self._notify_spectators(move)

    def _play_double(self, move: DoubleMove) -> None:
        """Spend the double ticket, then play both legs in order."""
        player = self._state.get_player(move.colour)
        player.remove_ticket(Ticket.DOUBLE)
        self._notify_spectators(move)
        self._play_ticket(move.move1)
        self._play_ticket(move.move2)

    def _play_pass(self, move: PassMove) -> None:
        """Nothing moves; spectators are still told."""
        logger.debug("Game %s: %s passes", self.game_id, move.colour.value)
        self._notify_spectators(move)

    def _notify_spectators(self, move: Move) -> None:
        self._fanout.broadcast(
            move,
            is_fugitive=move.colour == FUGITIVE_COLOUR,
            revealed_location=self._state.global_state.last_revealed_location,
        )

    # -------------------------------------------------------------------------
    # Valid moves
    # -------------------------------------------------------------------------

    def valid_moves(self, colour: Colour) -> list[Move]:
        """Return every legal move for a player.

        Locations occupied by detectives are forbidden to every mover.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        player = self._state.get_player(colour)
        allow_double = (
            player.is_fugitive
            and self._state.schedule.moves_remaining(self._state.global_state.round_number) >= 2
        )
        return self._generator.generate(
            colour=colour,
            tickets=player.tickets,
            location=player.location,
            forbidden=self._state.detective_locations(),
            is_fugitive=player.is_fugitive,
            allow_double=allow_double,
        )

    # -------------------------------------------------------------------------
    # Termination
    # -------------------------------------------------------------------------

    def game_over_reason(self) -> Optional[str]:
        """Return why the game is over, or None if play continues.

        Conditions are checked in order and the first match wins:
        1. Fewer than two players
        2. A detective shares the fugitive's location
        3. The fugitive is to move but has used every move slot
        4. No detective can move
        5. The fugitive cannot move
        """
        if not self._state.is_ready():
            return None

        if len(self._state.roster) < 2:
            return "No detectives in the game"

        if self._state.is_fugitive_caught():
            return "Fugitive caught"

        current = self._state.get_current_player()
        if current.is_fugitive and self.get_round() == self._state.schedule.max_moves:
            return "Fugitive has made every move"

        if self._detectives_stuck():
            return "No detective can move"

        if not self.valid_moves(FUGITIVE_COLOUR):
            return "Fugitive cannot move"

        return None

    def is_game_over(self) -> bool:
        """Check if the game has ended. An unready game is never over."""
        return self.game_over_reason() is not None

    def _detectives_stuck(self) -> bool:
        for detective in self._state.detectives:
            moves = self.valid_moves(detective.colour)
            if moves != [PassMove(colour=detective.colour)]:
                return False
        return True

    def get_winning_players(self) -> set[Colour]:
        """Return the winners' colours, or an empty set if not over.

        Detectives win if the fugitive is caught or cannot move; otherwise
        the fugitive wins.
        """
        if not self.is_game_over():
            return set()
        fugitive_stuck = not self.valid_moves(FUGITIVE_COLOUR)
        if self._state.is_fugitive_caught() or fugitive_stuck:
            return {p.colour for p in self._state.detectives}
        return {FUGITIVE_COLOUR}

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def is_ready(self) -> bool:
        """Check if every player has joined with the fugitive first."""
        return self._state.is_ready()

    def get_players(self) -> list[Colour]:
        """Colours of joined players in turn order."""
        return self._state.roster.colours()

    def get_current_player(self) -> Colour:
        """Colour of the player to move.

        Raises:
            GameNotReadyError: If the roster is not complete.
        """
        return self._state.get_current_player().colour

    def get_player_location(self, colour: Colour) -> Location:
        """Publicly visible location of a player.

        The fugitive is reported at his last revealed location (0 if he has
        never been revealed); detectives at their true location.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        return self._state.visible_location(colour)

    def get_player_tickets(self, colour: Colour, ticket: Ticket) -> int:
        """Number of tickets of one kind a player holds.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        return self._state.get_player(colour).ticket_count(ticket)

    def player_has_joined(self, colour: Colour) -> bool:
        """Check if a colour has joined."""
        return self._state.has_joined(colour)

    def get_round(self) -> int:
        """Number of moves the fugitive has made (double moves count twice)."""
        return self._state.global_state.round_number

    def get_rounds(self) -> list[bool]:
        """The full reveal schedule."""
        return self._state.schedule.as_list()

    def get_last_revealed_location(self) -> Location:
        """The fugitive's last revealed location, 0 if never revealed."""
        return self._state.global_state.last_revealed_location

    def get_game_summary(self) -> dict[str, Any]:
        """Get an observer-safe summary of the game.

        Returns:
            Dictionary with game summary information.
        """
        over = self.is_game_over()
        return {
            "game_id": self.game_id,
            "phase": self.phase.value,
            "round": self.get_round(),
            "max_moves": self._state.schedule.max_moves,
            "current_player": (
                self.get_current_player().value if self.is_ready() else None
            ),
            "last_revealed_location": self.get_last_revealed_location(),
            "players": [
                {
                    "colour": p.colour.value,
                    "location": self._state.visible_location(p.colour),
                    "tickets": {t.value: n for t, n in p.tickets.items()},
                }
                for p in self._state.roster
            ],
            "game_over": over,
            "reason": self.game_over_reason(),
            "winners": sorted(c.value for c in self.get_winning_players()),
        }

    def __str__(self) -> str:
        """Return string representation of the engine."""
        return f"GameEngine(game={self.game_id}, phase={self.phase.value}, round={self.get_round()})"
