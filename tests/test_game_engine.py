"""Tests for the game engine.

Tests cover:
1. Joining and readiness
2. The token-based turn protocol
3. Move application and ticket transfer
4. Round counting and fugitive reveals
5. Game termination and winners
6. Players that answer from inside notify
7. Spectator delivery off the turn path
"""

import threading
from collections import namedtuple

import pytest

from core.board import Board
from core.constants import Colour, GamePhase, Ticket, Transport
from core.errors import GameNotReadyError, UnknownPlayerError
from core.moves import MoveKind, TicketMove, DoubleMove, PassMove
from core.player import PlayerHandle
from core.tickets import normalize_tickets
from core.token_store import InMemoryTokenStore
from engine.game_engine import GameEngine
from engine.spectators import Spectator


BLACK = Colour.BLACK
BLUE = Colour.BLUE
GREEN = Colour.GREEN

Notification = namedtuple("Notification", "location moves token submit")


def pool(**counts) -> dict:
    """Build a full ticket pool from keyword counts."""
    return normalize_tickets({Ticket(name): n for name, n in counts.items()})


def line_board(length: int) -> Board:
    """Taxi line 1 - 2 - ... - length."""
    return Board.from_routes([(i, i + 1, Transport.TAXI) for i in range(1, length)])


class RecordingPlayer(PlayerHandle):
    """Remembers every notification and never answers on its own."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def notify(self, location, moves, token, submit):
        self.notifications.append(Notification(location, moves, token, submit))

    @property
    def last(self) -> Notification:
        return self.notifications[-1]

    def play(self, move) -> bool:
        """Answer the latest notification with the given move."""
        return self.last.submit(move, self.last.token)


class FirstMovePlayer(PlayerHandle):
    """Answers synchronously with the first legal move."""

    depth = 0
    max_depth = 0

    def __init__(self):
        self.turns = 0

    def notify(self, location, moves, token, submit):
        FirstMovePlayer.depth += 1
        FirstMovePlayer.max_depth = max(FirstMovePlayer.max_depth, FirstMovePlayer.depth)
        try:
            self.turns += 1
            submit(moves[0], token)
        finally:
            FirstMovePlayer.depth -= 1


class RecordingSpectator(Spectator):
    def __init__(self):
        self.moves = []

    def notify(self, move):
        self.moves.append(move)


class FailingSpectator(Spectator):
    def notify(self, move):
        raise RuntimeError("spectator down")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def players() -> dict:
    return {BLACK: RecordingPlayer(), BLUE: RecordingPlayer()}


@pytest.fixture
def spectator() -> RecordingSpectator:
    return RecordingSpectator()


@pytest.fixture
def engine(store, players, spectator) -> GameEngine:
    """One detective chasing the fugitive along a six-stop taxi line.

    Fugitive starts at 1, detective at 6; no scheduled reveals.
    """
    engine = GameEngine(
        num_detectives=1,
        rounds=[False] * 6,
        board=line_board(6),
        token_store=store,
        game_id="game-1",
    )
    engine.spectate(spectator)
    assert engine.join(players[BLACK], BLACK, 1, pool(taxi=4, double=1, secret=1))
    assert engine.join(players[BLUE], BLUE, 6, pool(taxi=10))
    return engine


# =============================================================================
# Join Tests
# =============================================================================


class TestJoin:
    """Test seating players."""

    def _engine(self, num_detectives=2):
        return GameEngine(num_detectives, [False, False, False], line_board(5), InMemoryTokenStore(), 1)

    def test_roster_completes(self):
        engine = self._engine()
        assert engine.phase == GamePhase.AWAITING_ROSTER
        assert engine.join(RecordingPlayer(), BLUE, 2, pool(taxi=1))
        assert engine.join(RecordingPlayer(), BLACK, 1, pool(taxi=1))
        assert not engine.is_ready()
        assert engine.join(RecordingPlayer(), GREEN, 3, pool(taxi=1))
        assert engine.is_ready()
        assert engine.phase == GamePhase.READY
        assert engine.get_players() == [BLACK, BLUE, GREEN]
        assert engine.get_current_player() == BLACK

    def test_duplicate_colour_rejected(self):
        engine = self._engine()
        assert engine.join(None, BLUE, 2, pool())
        assert not engine.join(None, BLUE, 3, pool())
        assert engine.get_player_location(BLUE) == 2

    def test_location_off_board_rejected(self):
        engine = self._engine()
        assert not engine.join(None, BLACK, 42, pool())
        assert not engine.player_has_joined(BLACK)

    def test_negative_tickets_rejected(self):
        engine = self._engine()
        assert not engine.join(None, BLUE, 2, {Ticket.TAXI: -1})
        assert not engine.player_has_joined(BLUE)

    def test_non_integer_tickets_rejected(self):
        engine = self._engine()
        assert not engine.join(None, BLUE, 2, {Ticket.TAXI: "3"})
        assert not engine.join(None, BLUE, 2, {Ticket.TAXI: 1.5})
        assert not engine.player_has_joined(BLUE)

    def test_missing_ticket_pool_rejected(self):
        engine = self._engine()
        assert not engine.join(None, BLUE, 2, None)
        assert not engine.player_has_joined(BLUE)

    def test_last_seat_reserved_for_fugitive(self):
        engine = self._engine()
        assert engine.join(None, BLUE, 2, pool())
        assert not engine.join(None, GREEN, 3, pool())
        assert engine.join(None, BLACK, 1, pool())
        assert engine.join(None, GREEN, 3, pool())

    def test_full_roster_rejects_more(self):
        engine = self._engine(num_detectives=1)
        assert engine.join(None, BLACK, 1, pool())
        assert engine.join(None, BLUE, 2, pool())
        assert not engine.join(None, GREEN, 3, pool())

    def test_current_player_before_ready(self):
        engine = self._engine()
        with pytest.raises(GameNotReadyError):
            engine.get_current_player()

    def test_queries_before_ready(self):
        engine = self._engine()
        assert not engine.is_game_over()
        assert engine.get_winning_players() == set()
        engine.start_round()
        assert engine.phase == GamePhase.AWAITING_ROSTER

    def test_unknown_player_queries(self):
        engine = self._engine()
        with pytest.raises(UnknownPlayerError):
            engine.get_player_location(GREEN)
        with pytest.raises(UnknownPlayerError):
            engine.get_player_tickets(GREEN, Ticket.TAXI)
        with pytest.raises(UnknownPlayerError):
            engine.valid_moves(GREEN)


# =============================================================================
# Turn Protocol Tests
# =============================================================================


class TestTurnProtocol:
    """Test token issuing and submission checks."""

    def test_start_round_notifies_fugitive(self, engine, players, store):
        engine.start_round()
        note = players[BLACK].last
        assert note.location == 1
        assert set(note.moves) == set(engine.valid_moves(BLACK))
        assert store.get("game-1").token == note.token
        assert store.get("game-1").colour == BLACK
        assert engine.phase == GamePhase.TURN_PENDING
        assert players[BLUE].notifications == []

    def test_valid_move_accepted(self, engine, players, store):
        engine.start_round()
        assert players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.get_current_player() == BLUE
        assert len(players[BLUE].notifications) == 1
        assert store.get("game-1").colour == BLUE

    def test_wrong_token_dropped(self, engine, players, spectator):
        engine.start_round()
        move = TicketMove(BLACK, Ticket.TAXI, 2)
        assert not engine.play_move(move, "not-the-token")
        assert engine.state.fugitive.location == 1
        assert engine.get_round() == 0
        engine.flush_spectators()
        assert spectator.moves == []
        # The real token is still live
        assert players[BLACK].play(move)

    def test_token_cannot_be_replayed(self, engine, players, spectator):
        engine.start_round()
        move = TicketMove(BLACK, Ticket.TAXI, 2)
        token = players[BLACK].last.token
        assert engine.play_move(move, token)
        assert not engine.play_move(move, token)
        assert engine.get_round() == 1
        engine.flush_spectators()
        assert len(spectator.moves) == 1

    def test_stale_token_after_next_turn(self, engine, players):
        engine.start_round()
        fugitive_token = players[BLACK].last.token
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert not engine.play_move(TicketMove(BLUE, Ticket.TAXI, 5), fugitive_token)
        assert engine.get_player_location(BLUE) == 6

    def test_no_token_outside_a_turn(self, engine):
        assert not engine.play_move(TicketMove(BLACK, Ticket.TAXI, 2), "")

    def test_restart_reissues_token(self, engine, players, store):
        engine.start_round()
        first = players[BLACK].last.token
        engine.start_round()
        second = players[BLACK].last.token
        assert first != second
        assert store.get("game-1").token == second
        assert not engine.play_move(TicketMove(BLACK, Ticket.TAXI, 2), first)
        assert players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))

    def test_illegal_move_keeps_token(self, engine, players, store, spectator):
        engine.start_round()
        token = players[BLACK].last.token
        assert not engine.play_move(TicketMove(BLACK, Ticket.BUS, 2), token)
        assert not engine.play_move(TicketMove(BLACK, Ticket.TAXI, 3), token)
        assert store.get("game-1").token == token
        engine.flush_spectators()
        assert spectator.moves == []
        assert engine.play_move(TicketMove(BLACK, Ticket.TAXI, 2), token)

    def test_non_move_submission_keeps_token(self, engine, players, store):
        engine.start_round()
        token = players[BLACK].last.token
        assert not engine.play_move(None, token)
        assert not engine.play_move("taxi to 2", token)
        assert store.get("game-1").token == token
        assert engine.play_move(TicketMove(BLACK, Ticket.TAXI, 2), token)

    def test_move_for_other_colour_rejected(self, engine, players):
        engine.start_round()
        assert not players[BLACK].play(TicketMove(BLUE, Ticket.TAXI, 5))
        assert engine.get_player_location(BLUE) == 6

    def test_notify_failure_does_not_break_engine(self, store):
        class Broken(PlayerHandle):
            def notify(self, location, moves, token, submit):
                raise RuntimeError("client disconnected")

        engine = GameEngine(1, [False] * 4, line_board(4), store, 9)
        engine.join(Broken(), BLACK, 1, pool(taxi=2))
        engine.join(RecordingPlayer(), BLUE, 4, pool(taxi=2))
        engine.start_round()
        token = store.get(9).token
        assert engine.play_move(TicketMove(BLACK, Ticket.TAXI, 2), token)


# =============================================================================
# Move Application Tests
# =============================================================================


class TestMoveApplication:
    """Test how accepted moves change the state."""

    def test_detective_ticket_goes_to_fugitive(self, engine, players):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.get_player_tickets(BLACK, Ticket.TAXI) == 3

        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        assert engine.get_player_tickets(BLUE, Ticket.TAXI) == 9
        assert engine.get_player_tickets(BLACK, Ticket.TAXI) == 4
        assert engine.get_player_location(BLUE) == 5

    def test_ticket_total_conserved_on_detective_move(self, engine, players):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        before = sum(p.total_tickets() for p in engine.state.roster)
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        assert sum(p.total_tickets() for p in engine.state.roster) == before

    def test_fugitive_ticket_discarded(self, engine, players):
        engine.start_round()
        before = sum(p.total_tickets() for p in engine.state.roster)
        players[BLACK].play(TicketMove(BLACK, Ticket.SECRET, 2))
        assert engine.get_player_tickets(BLACK, Ticket.SECRET) == 0
        assert sum(p.total_tickets() for p in engine.state.roster) == before - 1

    def test_single_move_advances_round(self, engine, players):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.get_round() == 1
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        assert engine.get_round() == 1

    def test_double_move(self, engine, players, spectator):
        engine.start_round()
        double = DoubleMove(
            BLACK,
            TicketMove(BLACK, Ticket.TAXI, 2),
            TicketMove(BLACK, Ticket.TAXI, 3),
        )
        assert players[BLACK].play(double)
        assert engine.get_round() == 2
        assert engine.state.fugitive.location == 3
        assert engine.get_player_tickets(BLACK, Ticket.DOUBLE) == 0
        assert engine.get_player_tickets(BLACK, Ticket.TAXI) == 2
        assert engine.get_current_player() == BLUE

        # The double itself, then each leg
        engine.flush_spectators()
        assert [m.kind for m in spectator.moves] == [MoveKind.DOUBLE, MoveKind.TICKET, MoveKind.TICKET]

    def test_pass_move(self, store, spectator):
        engine = GameEngine(2, [False] * 6, line_board(6), store, "g")
        engine.spectate(spectator)
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4))
        engine.join(detective, BLUE, 6, pool(bus=3))
        engine.join(RecordingPlayer(), GREEN, 5, pool(taxi=3))
        assert engine.valid_moves(BLUE) == [PassMove(BLUE)]

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert detective.last.moves == [PassMove(BLUE)]
        assert detective.play(PassMove(BLUE))
        assert engine.get_player_location(BLUE) == 6
        assert engine.get_player_tickets(BLUE, Ticket.BUS) == 3
        engine.flush_spectators()
        assert spectator.moves[-1] == PassMove(BLUE)
        assert engine.get_current_player() == GREEN

    def test_detective_squares_are_forbidden(self, engine, players):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 3))
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 4))
        targets = {m.target for m in engine.valid_moves(BLACK) if m.kind is MoveKind.TICKET}
        assert 4 not in targets


# =============================================================================
# Reveal Tests
# =============================================================================


class TestReveals:
    """Test what the public sees of the fugitive."""

    def test_hidden_move_keeps_old_location(self, store):
        """Round 0 revealed, round 1 hidden: the public still sees the start."""
        engine = GameEngine(1, [True, False, False], line_board(5), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=1))
        engine.join(detective, BLUE, 5, pool(taxi=5))
        assert engine.get_last_revealed_location() == 1

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.get_round() == 1
        assert engine.get_last_revealed_location() == 1
        assert engine.get_player_location(BLACK) == 1
        assert engine.state.fugitive.location == 2

    def test_scheduled_reveal(self, store):
        engine = GameEngine(1, [False, True, False, False], line_board(5), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=3))
        engine.join(detective, BLUE, 5, pool(taxi=5))
        assert engine.get_player_location(BLACK) == 0

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.get_player_location(BLACK) == 2

    def test_spectators_see_redacted_fugitive(self, engine, players, spectator):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        engine.flush_spectators()
        assert spectator.moves == [
            TicketMove(BLACK, Ticket.TAXI, 0),
            TicketMove(BLUE, Ticket.TAXI, 5),
        ]

    def test_double_legs_redacted_as_revealed(self, store, spectator):
        engine = GameEngine(1, [False, False, True, False, False], line_board(6), store, "g")
        engine.spectate(spectator)
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=2, double=1))
        engine.join(detective, BLUE, 6, pool(taxi=5))

        engine.start_round()
        fugitive.play(DoubleMove(
            BLACK,
            TicketMove(BLACK, Ticket.TAXI, 2),
            TicketMove(BLACK, Ticket.TAXI, 3),
        ))
        engine.flush_spectators()
        assert spectator.moves == [
            DoubleMove(BLACK, TicketMove(BLACK, Ticket.TAXI, 0), TicketMove(BLACK, Ticket.TAXI, 0)),
            TicketMove(BLACK, Ticket.TAXI, 0),
            TicketMove(BLACK, Ticket.TAXI, 3),
        ]
        assert engine.get_last_revealed_location() == 3


# =============================================================================
# Termination Tests
# =============================================================================


class TestTermination:
    """Test game-over conditions and winners."""

    def test_capture(self, store):
        engine = GameEngine(1, [False] * 5, line_board(3), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4))
        engine.join(detective, BLUE, 3, pool(taxi=4))

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert not engine.is_game_over()
        assert detective.play(TicketMove(BLUE, Ticket.TAXI, 2))

        assert engine.is_game_over()
        assert engine.phase == GamePhase.GAME_OVER
        assert engine.get_winning_players() == {BLUE}
        assert engine.get_player_location(BLACK) == 0
        assert len(fugitive.notifications) == 1

    def test_fugitive_without_tickets(self, store):
        engine = GameEngine(1, [False] * 5, line_board(4), store, "g")
        fugitive = RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool())
        engine.join(RecordingPlayer(), BLUE, 4, pool(taxi=4))

        assert engine.valid_moves(BLACK) == []
        assert engine.is_game_over()
        assert engine.get_winning_players() == {BLUE}
        engine.start_round()
        assert engine.phase == GamePhase.GAME_OVER
        assert fugitive.notifications == []

    def test_fugitive_stranded_after_last_ticket(self, store):
        engine = GameEngine(1, [True, False, False], line_board(5), store, "g")
        fugitive = RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=1))
        engine.join(RecordingPlayer(), BLUE, 5, pool(taxi=5))

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert engine.is_game_over()
        assert engine.get_winning_players() == {BLUE}

    def test_detectives_gridlocked(self, store):
        engine = GameEngine(2, [False] * 5, line_board(6), store, "g")
        engine.join(RecordingPlayer(), BLACK, 1, pool(taxi=4))
        engine.join(RecordingPlayer(), BLUE, 5, pool())
        engine.join(RecordingPlayer(), GREEN, 6, pool(bus=2))

        assert engine.is_game_over()
        assert engine.game_over_reason() == "No detective can move"
        assert engine.get_winning_players() == {BLACK}

    def test_round_limit(self, store):
        """Two-entry schedule allows one fugitive move."""
        engine = GameEngine(1, [False, False], line_board(6), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4, double=1))
        engine.join(detective, BLUE, 6, pool(taxi=4))

        engine.start_round()
        assert all(m.kind is MoveKind.TICKET for m in fugitive.last.moves)
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        detective.play(TicketMove(BLUE, Ticket.TAXI, 5))

        assert engine.is_game_over()
        assert engine.game_over_reason() == "Fugitive has made every move"
        assert engine.get_winning_players() == {BLACK}
        assert len(fugitive.notifications) == 1

    def test_double_needs_two_slots(self, store):
        engine = GameEngine(1, [False, False, False], line_board(6), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4, double=2))
        engine.join(detective, BLUE, 6, pool(taxi=4))

        engine.start_round()
        assert any(m.kind is MoveKind.DOUBLE for m in fugitive.last.moves)
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        detective.play(TicketMove(BLUE, Ticket.TAXI, 5))
        assert not any(m.kind is MoveKind.DOUBLE for m in fugitive.last.moves)

    def test_no_moves_accepted_after_game_over(self, store):
        engine = GameEngine(1, [False] * 5, line_board(3), store, "g")
        fugitive, detective = RecordingPlayer(), RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4))
        engine.join(detective, BLUE, 3, pool(taxi=4))
        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        detective.play(TicketMove(BLUE, Ticket.TAXI, 2))

        assert store.get("g") is None
        assert not detective.play(TicketMove(BLUE, Ticket.TAXI, 3))
        engine.start_round()
        assert store.get("g") is None

    def test_summary(self, engine):
        summary = engine.get_game_summary()
        assert summary["game_id"] == "game-1"
        assert summary["phase"] == "ready"
        assert summary["current_player"] == "black"
        assert summary["players"][0]["location"] == 0
        assert summary["winners"] == []
        assert not summary["game_over"]


# =============================================================================
# Synchronous Player Tests
# =============================================================================


class TestSynchronousPlayers:
    """Test players that submit from inside notify."""

    def test_game_runs_to_completion_without_nesting(self, store, spectator):
        FirstMovePlayer.depth = 0
        FirstMovePlayer.max_depth = 0
        engine = GameEngine(2, [False] * 12, line_board(10), store, "sync")
        engine.spectate(spectator)
        fugitive = FirstMovePlayer()
        engine.join(fugitive, BLACK, 5, pool(taxi=20, bus=5))
        engine.join(FirstMovePlayer(), BLUE, 1, pool(taxi=20))
        engine.join(FirstMovePlayer(), GREEN, 10, pool(taxi=20))

        engine.start_round()

        assert engine.is_game_over()
        assert engine.phase == GamePhase.GAME_OVER
        assert FirstMovePlayer.max_depth == 1
        engine.flush_spectators()
        assert len(spectator.moves) > 0
        assert fugitive.turns >= 1

    def test_failing_spectator_does_not_stall(self, store, spectator):
        engine = GameEngine(1, [False] * 4, line_board(6), store, "g")
        engine.spectate(FailingSpectator())
        engine.spectate(spectator)
        engine.join(FirstMovePlayer(), BLACK, 1, pool(taxi=10))
        engine.join(FirstMovePlayer(), BLUE, 6, pool(taxi=10))

        engine.start_round()

        assert engine.is_game_over()
        engine.flush_spectators()
        assert len(spectator.moves) > 0


# =============================================================================
# Spectator Delivery Tests
# =============================================================================


class BlockingSpectator(Spectator):
    """Holds every delivery until released."""

    def __init__(self):
        self.release = threading.Event()
        self.moves = []

    def notify(self, move):
        self.release.wait(timeout=5)
        self.moves.append(move)


class TestSpectatorDelivery:
    """Test that spectators never hold up play."""

    def test_slow_spectator_does_not_delay_next_turn(self, store, players):
        engine = GameEngine(1, [False] * 6, line_board(6), store, "slow")
        slow = BlockingSpectator()
        engine.spectate(slow)
        engine.join(players[BLACK], BLACK, 1, pool(taxi=4))
        engine.join(players[BLUE], BLUE, 6, pool(taxi=4))

        engine.start_round()
        assert players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))

        # Detective is already on turn while the spectator is still blocked
        assert len(players[BLUE].notifications) == 1
        assert slow.moves == []

        slow.release.set()
        assert engine.flush_spectators(timeout=5)
        assert slow.moves == [TicketMove(BLACK, Ticket.TAXI, 0)]
        engine.close()

    def test_deliveries_keep_move_order(self, engine, players, spectator):
        engine.start_round()
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 2))
        players[BLUE].play(TicketMove(BLUE, Ticket.TAXI, 5))
        players[BLACK].play(TicketMove(BLACK, Ticket.TAXI, 3))
        engine.close()
        assert spectator.moves == [
            TicketMove(BLACK, Ticket.TAXI, 0),
            TicketMove(BLUE, Ticket.TAXI, 5),
            TicketMove(BLACK, Ticket.TAXI, 0),
        ]

    def test_inline_delivery(self, store, spectator):
        engine = GameEngine(1, [False] * 6, line_board(6), store, "inline", inline_spectators=True)
        engine.spectate(spectator)
        fugitive = RecordingPlayer()
        engine.join(fugitive, BLACK, 1, pool(taxi=4))
        engine.join(RecordingPlayer(), BLUE, 6, pool(taxi=4))

        engine.start_round()
        fugitive.play(TicketMove(BLACK, Ticket.TAXI, 2))
        assert spectator.moves == [TicketMove(BLACK, Ticket.TAXI, 0)]
