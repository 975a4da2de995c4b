"""Command-line driver that plays a complete game with random players.

The driver wires the engine to simple collaborators:
- RandomPlayer answers every turn with a uniformly random legal move
- LoggingSpectator logs every broadcast move (already redacted)
- GameDriver seats the players, starts the game and reports the result

It doubles as a reference for how a server would host the engine.

Usage:
    python -m engine.driver --detectives 3 --seed 7

Or from code:
    from engine.driver import GameDriver
    summary = GameDriver(seed=7).run()
"""

from __future__ import annotations

import argparse
import logging
import random
from typing import Any, Optional

from core.board import Board, Location
from core.config import GameConfig, ConfigError, load_config
from core.constants import Colour, FUGITIVE_COLOUR, DETECTIVE_COLOURS
from core.moves import Move
from core.player import PlayerHandle, MoveSubmitter
from core.token_store import InMemoryTokenStore, TokenStore
from data.loader import BoardLoadError, load_board, load_default_board

from .game_engine import GameEngine
from .spectators import Spectator


logger = logging.getLogger(__name__)


class RandomPlayer(PlayerHandle):
    """Plays a uniformly random legal move as soon as it is notified."""

    def __init__(self, colour: Colour, rng: Optional[random.Random] = None):
        self.colour = colour
        self.rng = rng or random.Random()
        self.turns_taken = 0

    def notify(
        self,
        location: Location,
        moves: list[Move],
        token: str,
        submit: MoveSubmitter,
    ) -> None:
        if not moves:
            return
        move = self.rng.choice(moves)
        self.turns_taken += 1
        submit(move, token)


class LoggingSpectator(Spectator):
    """Logs each move the engine broadcasts."""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self.moves_seen = 0

    def notify(self, move: Move) -> None:
        self.moves_seen += 1
        logger.log(self.level, "Move %d: %s", self.moves_seen, move)


class GameDriver:
    """Sets up and plays one game to completion.

    Every player starts on a distinct random location.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        board: Optional[Board] = None,
        token_store: Optional[TokenStore] = None,
        game_id: Any = 1,
        seed: Optional[int] = None,
    ):
        """Initialize the driver.

        Args:
            config: Game settings; standard rules if None.
            board: Board to play on; the config's board_path or the bundled
                default board if None.
            token_store: Store for pending authorizations.
            game_id: Id of the hosted game.
            seed: Seed for start locations and player choices.
        """
        self.config = config or GameConfig()
        if board is None:
            board = load_board(self.config.board_path) if self.config.board_path else load_default_board()
        self.board = board
        self.rng = random.Random(seed)
        self.engine = GameEngine.from_config(
            self.config,
            board,
            token_store or InMemoryTokenStore(),
            game_id,
        )
        self.spectator = LoggingSpectator()
        self.players: dict[Colour, RandomPlayer] = {}

    def setup(self) -> None:
        """Seat the fugitive and every detective.

        Raises:
            ValueError: If the board has fewer locations than players.
        """
        colours = [FUGITIVE_COLOUR] + DETECTIVE_COLOURS[: self.config.num_detectives]
        locations = self.board.locations()
        if len(locations) < len(colours):
            raise ValueError(
                f"Board has {len(locations)} locations, need at least {len(colours)}"
            )
        starts = self.rng.sample(locations, len(colours))

        self.engine.spectate(self.spectator)
        for colour, start in zip(colours, starts):
            player = RandomPlayer(colour, random.Random(self.rng.random()))
            tickets = (
                self.config.get_fugitive_tickets()
                if colour == FUGITIVE_COLOUR
                else self.config.get_detective_tickets()
            )
            if not self.engine.join(player, colour, start, tickets):
                raise RuntimeError(f"Could not seat {colour.value} at {start}")
            self.players[colour] = player

    def run(self) -> dict[str, Any]:
        """Play the game and return the final summary."""
        if not self.players:
            self.setup()
        self.engine.start_round()
        self.engine.close()
        summary = self.engine.get_game_summary()
        logger.info(
            "Game finished after %d fugitive moves: %s. Winners: %s",
            summary["round"],
            summary["reason"],
            ", ".join(summary["winners"]),
        )
        return summary


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="engine.driver",
        description="Play a game of hidden-movement pursuit with random players.",
    )
    parser.add_argument("--config", help="Path to a game config JSON file")
    parser.add_argument("--board", help="Path to a board JSON file")
    parser.add_argument("--detectives", type=int, help="Number of detectives (1-5)")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Log every turn")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI driver."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else GameConfig()
        if args.detectives is not None:
            data = config.to_dict()
            data["num_detectives"] = args.detectives
            if config.fugitive_tickets is None:
                data.pop("fugitive_tickets")
            config = GameConfig.from_dict(data)
        board = load_board(args.board) if args.board else None
        driver = GameDriver(config=config, board=board, seed=args.seed)
    except (ConfigError, BoardLoadError) as e:
        logger.error("%s", e)
        return 1

    summary = driver.run()
    print(f"Winners: {', '.join(summary['winners'])} ({summary['reason']})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
