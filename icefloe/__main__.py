"""Entry point for ``python -m icefloe``.

Loads the default YAML config, sets up a board, and plays the game in
the terminal.  With ``--play`` one penguin is controlled from the
keyboard; otherwise every penguin is played by the AI.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from icefloe.simulation.config import GameConfig
from icefloe.simulation.game import Game, TurnReport
from icefloe.ui.console import (
    console_controller,
    narrate_turn,
    render_grid,
    render_roster,
    render_scoreboard,
)

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, set up the game, play every round."""
    parser = argparse.ArgumentParser(
        prog="icefloe",
        description="icefloe - sliding penguin puzzle on an icy grid",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override the RNG seed from the config file",
    )
    parser.add_argument(
        "--play",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Control one penguin from the keyboard (default: from config)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    config = GameConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    if args.play is not None:
        config.player_controlled = args.play

    game = Game(config=config, controller=console_controller())

    print("The initial icy terrain grid:")
    print(render_grid(game.grid))
    print(render_roster(game))
    print()

    def show(report: TurnReport) -> None:
        if report.skipped and report.actor.fallen:
            return
        print("\n".join(narrate_turn(report)))
        print("New state of the grid:")
        print(render_grid(game.grid))
        print()

    game.run(on_turn=show)

    print()
    print("***** GAME OVER *****")
    print()
    print(render_scoreboard(game.standings()))


if __name__ == "__main__":
    main()
