"""Game configuration for the pursuit engine.

A GameConfig bundles everything needed to set up a game besides the board
itself: how many detectives take part, the fugitive's reveal schedule and the
starting ticket pools. Configs can be loaded from JSON:

    {
        "num_detectives": 5,
        "rounds": [false, false, false, true, ...],
        "fugitive_tickets": {"taxi": 4, "bus": 3, ...},
        "detective_tickets": {"taxi": 10, "bus": 8, "underground": 4},
        "board_path": "boards/small.json"
    }

Every key is optional; missing keys fall back to the standard rules.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from .constants import MIN_DETECTIVES, MAX_DETECTIVES, DEFAULT_ROUNDS
from .schedule import RoundSchedule
from .tickets import (
    TicketCounts,
    detective_tickets,
    fugitive_tickets,
    tickets_from_names,
    tickets_to_names,
)


class ConfigError(Exception):
    """Raised when a game configuration is invalid."""

    pass


@dataclass(frozen=True)
class GameConfig:
    """Settings for one game.

    Attributes:
        num_detectives: Number of detectives (1-5).
        rounds: Reveal schedule, one boolean per round.
        fugitive_tickets: Starting tickets for the fugitive. If None, the
            standard pool for ``num_detectives`` is used.
        detective_tickets: Starting tickets for each detective.
        board_path: Optional path to a board JSON file.
    """

    num_detectives: int = MAX_DETECTIVES
    rounds: tuple[bool, ...] = DEFAULT_ROUNDS
    fugitive_tickets: Optional[TicketCounts] = None
    detective_tickets: TicketCounts = field(default_factory=detective_tickets)
    board_path: Optional[str] = None

    def __post_init__(self) -> None:
        if not MIN_DETECTIVES <= self.num_detectives <= MAX_DETECTIVES:
            raise ConfigError(
                f"Number of detectives must be between {MIN_DETECTIVES} and "
                f"{MAX_DETECTIVES}, got {self.num_detectives}"
            )
        if len(self.rounds) < 2:
            raise ConfigError("Reveal schedule must allow at least one fugitive move")

    @property
    def schedule(self) -> RoundSchedule:
        """The reveal schedule as a RoundSchedule."""
        return RoundSchedule.from_list(self.rounds)

    def get_fugitive_tickets(self) -> TicketCounts:
        """Return a fresh copy of the fugitive's starting tickets."""
        if self.fugitive_tickets is None:
            return fugitive_tickets(self.num_detectives)
        return dict(self.fugitive_tickets)

    def get_detective_tickets(self) -> TicketCounts:
        """Return a fresh copy of a detective's starting tickets."""
        return dict(self.detective_tickets)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        """Build a config from a dictionary.

        Raises:
            ConfigError: If any value is malformed.
        """
        if not isinstance(data, dict):
            raise ConfigError("Config data must be a dictionary")

        kwargs: dict[str, Any] = {}
        try:
            if "num_detectives" in data:
                if not isinstance(data["num_detectives"], int):
                    raise ConfigError("'num_detectives' must be an integer")
                kwargs["num_detectives"] = data["num_detectives"]

            if "rounds" in data:
                rounds = data["rounds"]
                if not isinstance(rounds, list) or not all(isinstance(r, bool) for r in rounds):
                    raise ConfigError("'rounds' must be a list of booleans")
                kwargs["rounds"] = tuple(rounds)

            if "fugitive_tickets" in data:
                kwargs["fugitive_tickets"] = tickets_from_names(data["fugitive_tickets"])

            if "detective_tickets" in data:
                kwargs["detective_tickets"] = tickets_from_names(data["detective_tickets"])

            if data.get("board_path") is not None:
                kwargs["board_path"] = str(data["board_path"])
        except (ValueError, AttributeError) as e:
            raise ConfigError(f"Invalid config: {e}")

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the config to a JSON-friendly dictionary."""
        return {
            "num_detectives": self.num_detectives,
            "rounds": list(self.rounds),
            "fugitive_tickets": tickets_to_names(self.get_fugitive_tickets()),
            "detective_tickets": tickets_to_names(self.detective_tickets),
            "board_path": self.board_path,
        }


def load_config(file_path: str | Path) -> GameConfig:
    """Load a game config from a JSON file.

    A relative ``board_path`` is resolved against the config file's directory.

    Raises:
        ConfigError: If the file cannot be read or holds invalid data.
    """
    path = Path(file_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file: {e}")
    except IOError as e:
        raise ConfigError(f"Error reading config file: {e}")

    if isinstance(data, dict) and data.get("board_path") is not None:
        board_path = Path(data["board_path"])
        if not board_path.is_absolute():
            data = dict(data, board_path=str(path.parent / board_path))

    return GameConfig.from_dict(data)
