"""Game state for the pursuit game engine.

GameState is the single source of truth for one game: the roster in turn
order, the round counter, whose turn it is, and the fugitive's true and
last-revealed locations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from .board import Board, Location
from .constants import Colour, FUGITIVE_COLOUR, UNKNOWN_LOCATION, MAX_DETECTIVES
from .errors import GameNotReadyError, UnknownPlayerError
from .player import PlayerData
from .schedule import RoundSchedule
from .tickets import tickets_to_names


class Roster:
    """Players in turn order, with lookup by colour.

    The ordered list is authoritative; the colour index is rebuilt from it
    whenever a player is added. The fugitive is always kept at index 0.
    """

    def __init__(self) -> None:
        self._players: list[PlayerData] = []
        self._index: dict[Colour, int] = {}

    def add(self, player: PlayerData) -> None:
        """Add a player, putting the fugitive first.

        Raises:
            ValueError: If the colour has already joined.
        """
        if player.colour in self._index:
            raise ValueError(f"Player {player.colour.value} has already joined")
        if player.is_fugitive:
            self._players.insert(0, player)
        else:
            self._players.append(player)
        self._index = {p.colour: i for i, p in enumerate(self._players)}

    def get(self, colour: Colour) -> PlayerData:
        """Get a player by colour.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        idx = self._index.get(colour)
        if idx is None:
            raise UnknownPlayerError(f"Player {colour.value} has not joined the game")
        return self._players[idx]

    def index_of(self, colour: Colour) -> int:
        """Return the turn-order index of a colour.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        if colour not in self._index:
            raise UnknownPlayerError(f"Player {colour.value} has not joined the game")
        return self._index[colour]

    def at(self, idx: int) -> PlayerData:
        """Return the player at a turn-order index."""
        return self._players[idx]

    def colours(self) -> list[Colour]:
        """Return all colours in turn order."""
        return [p.colour for p in self._players]

    def __contains__(self, colour: object) -> bool:
        return colour in self._index

    def __iter__(self) -> Iterator[PlayerData]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)


@dataclass
class GlobalState:
    """Round and turn bookkeeping not tied to a specific player.

    Attributes:
        round_number: Number of fugitive moves made so far (double moves
            count twice).
        current_player_idx: Turn-order index of the player to move.
        last_revealed_location: Where the fugitive was last seen publicly,
            UNKNOWN_LOCATION until the first reveal.
    """

    round_number: int = 0
    current_player_idx: int = 0
    last_revealed_location: Location = UNKNOWN_LOCATION


@dataclass
class GameState:
    """The complete state of one game.

    Attributes:
        game_id: Identifier used to key pending authorizations.
        num_detectives: Number of detectives the game waits for.
        schedule: The fugitive's reveal schedule.
        board: The transport graph.
        roster: Joined players in turn order.
        global_state: Round/turn bookkeeping.
    """

    game_id: Any
    num_detectives: int
    schedule: RoundSchedule
    board: Board
    roster: Roster = field(default_factory=Roster)
    global_state: GlobalState = field(default_factory=GlobalState)

    @classmethod
    def create_initial_state(
        cls,
        game_id: Any,
        num_detectives: int,
        schedule: RoundSchedule,
        board: Board,
    ) -> GameState:
        """Create an empty game waiting for players.

        Raises:
            ValueError: If num_detectives is negative or above the maximum.
        """
        if not 0 <= num_detectives <= MAX_DETECTIVES:
            raise ValueError(
                f"Number of detectives must be between 0 and {MAX_DETECTIVES}, "
                f"got {num_detectives}"
            )
        return cls(
            game_id=game_id,
            num_detectives=num_detectives,
            schedule=schedule,
            board=board,
        )

    # -------------------------------------------------------------------------
    # Roster
    # -------------------------------------------------------------------------

    @property
    def roster_size(self) -> int:
        """Number of players needed for the game to start."""
        return self.num_detectives + 1

    def is_roster_full(self) -> bool:
        """Check if every seat is taken."""
        return len(self.roster) >= self.roster_size

    def join_error(self, player: PlayerData) -> Optional[str]:
        """Return why a player may not join, or None if the join is legal."""
        if self.is_roster_full():
            return f"Roster is full ({self.roster_size} players)"
        if player.colour in self.roster:
            return f"Player {player.colour.value} has already joined"
        if not self.board.has_location(player.location):
            return f"Start location {player.location} is not on the board"
        fugitive_missing = FUGITIVE_COLOUR not in self.roster
        last_seat = len(self.roster) == self.roster_size - 1
        if player.is_detective and fugitive_missing and last_seat:
            return "Last seat is reserved for the fugitive"
        return None

    def add_player(self, player: PlayerData) -> None:
        """Seat a player, revealing the fugitive's start if round 0 reveals.

        Raises:
            ValueError: If the join is illegal.
        """
        error = self.join_error(player)
        if error is not None:
            raise ValueError(error)
        self.roster.add(player)
        if player.is_fugitive and self.schedule.is_reveal_round(0):
            self.global_state.last_revealed_location = player.location

    def is_ready(self) -> bool:
        """Check if the roster is full with the fugitive first."""
        if len(self.roster) != self.roster_size:
            return False
        return self.roster.at(0).is_fugitive

    def has_joined(self, colour: Colour) -> bool:
        """Check if a colour has joined."""
        return colour in self.roster

    def get_player(self, colour: Colour) -> PlayerData:
        """Get a player by colour.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        return self.roster.get(colour)

    @property
    def fugitive(self) -> PlayerData:
        """The fugitive's player data.

        Raises:
            UnknownPlayerError: If the fugitive has not joined.
        """
        return self.roster.get(FUGITIVE_COLOUR)

    @property
    def detectives(self) -> list[PlayerData]:
        """All detectives in turn order."""
        return [p for p in self.roster if p.is_detective]

    def get_current_player(self) -> PlayerData:
        """Get the player whose turn it is.

        Raises:
            GameNotReadyError: If the roster is not complete.
        """
        if not self.is_ready():
            raise GameNotReadyError(
                f"Game {self.game_id} is not ready: "
                f"{len(self.roster)}/{self.roster_size} players joined"
            )
        return self.roster.at(self.global_state.current_player_idx)

    def advance_current_player(self) -> None:
        """Move to the next player in turn order."""
        self.global_state.current_player_idx = (
            (self.global_state.current_player_idx + 1) % len(self.roster)
        )

    # -------------------------------------------------------------------------
    # Fugitive visibility
    # -------------------------------------------------------------------------

    def advance_round(self) -> None:
        """Count one fugitive move and reveal him if the schedule says so."""
        self.global_state.round_number += 1
        if self.schedule.is_reveal_round(self.global_state.round_number):
            self.global_state.last_revealed_location = self.fugitive.location

    def visible_location(self, colour: Colour) -> Location:
        """Location of a player as the public sees it.

        Detectives are always visible; the fugitive is shown at his
        last-revealed location.

        Raises:
            UnknownPlayerError: If the colour has not joined.
        """
        player = self.roster.get(colour)
        if player.is_fugitive:
            return self.global_state.last_revealed_location
        return player.location

    def detective_locations(self) -> set[Location]:
        """Locations currently occupied by detectives."""
        return {p.location for p in self.detectives}

    def is_fugitive_caught(self) -> bool:
        """Check if any detective shares the fugitive's true location."""
        if FUGITIVE_COLOUR not in self.roster:
            return False
        return self.fugitive.location in self.detective_locations()

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_dict(self, reveal_fugitive: bool = False) -> dict[str, Any]:
        """Serialize the game state to a dictionary.

        Args:
            reveal_fugitive: If True, include the fugitive's true location;
                otherwise the fugitive is reported at his last-revealed
                location, as observers see him.

        Returns:
            Dictionary representation of the game state.
        """
        players = []
        for p in self.roster:
            location = p.location
            if p.is_fugitive and not reveal_fugitive:
                location = self.global_state.last_revealed_location
            players.append(
                {
                    "colour": p.colour.value,
                    "location": location,
                    "tickets": tickets_to_names(p.tickets),
                }
            )
        return {
            "game_id": self.game_id,
            "num_detectives": self.num_detectives,
            "rounds": self.schedule.as_list(),
            "round_number": self.global_state.round_number,
            "current_player_idx": self.global_state.current_player_idx,
            "last_revealed_location": self.global_state.last_revealed_location,
            "players": players,
        }

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> list[str]:
        """Validate the game state for consistency.

        Returns:
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        if len(self.roster) > self.roster_size:
            errors.append(
                f"Too many players: {len(self.roster)} (expected {self.roster_size})"
            )

        fugitives = [p for p in self.roster if p.is_fugitive]
        if len(fugitives) > 1:
            errors.append(f"Found {len(fugitives)} fugitives")
        if fugitives and self.roster.at(0) is not fugitives[0]:
            errors.append("Fugitive is not first in turn order")

        if len(self.roster) and not 0 <= self.global_state.current_player_idx < len(self.roster):
            errors.append(
                f"Invalid current_player_idx: {self.global_state.current_player_idx}"
            )

        if self.global_state.round_number > self.schedule.max_moves:
            errors.append(
                f"Round {self.global_state.round_number} exceeds schedule "
                f"({self.schedule.max_moves} moves)"
            )

        for p in self.roster:
            for ticket, count in p.tickets.items():
                if count < 0:
                    errors.append(f"Player {p.colour.value} has {count} {ticket.value} tickets")
            if not self.board.has_location(p.location):
                errors.append(f"Player {p.colour.value} at unknown location {p.location}")

        return errors

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        lines = [
            f"GameState(game={self.game_id}, round={self.global_state.round_number}"
            f"/{self.schedule.max_moves})",
            f"  Current player: {self.global_state.current_player_idx}",
            f"  Last revealed: {self.global_state.last_revealed_location}",
            f"  Players ({len(self.roster)}/{self.roster_size}):",
        ]
        for p in self.roster:
            role = "fugitive" if p.is_fugitive else "detective"
            tickets = ", ".join(f"{t.value}={n}" for t, n in p.tickets.items() if n)
            lines.append(f"    {p.colour.value} ({role}) at {p.location}: {tickets}")
        return "\n".join(lines)
