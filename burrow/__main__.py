"""Entry point for ``python -m burrow``.

Loads the YAML config, builds a simulation engine and opens a Pygame
window on the title screen.  Press ENTER to settle the colony.
"""

from __future__ import annotations

import argparse
import pathlib

from burrow.simulation.config import SimulationConfig
from burrow.simulation.engine import SimulationEngine
from burrow.simulation.leaderboard import Leaderboard
from burrow.ui.pygame_client import PygameRenderer
from burrow.ui.sound import PygameSoundSink
from burrow.utils.logging import setup_logging

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)
_DEFAULT_LEADERBOARD = pathlib.Path.home() / ".burrow" / "leaderboard.yaml"


def main() -> None:
    """Parse CLI args, create engine, launch renderer."""
    parser = argparse.ArgumentParser(
        prog="burrow",
        description="Burrow - colony survival simulator",
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
        help="Override the config's RNG seed",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=12,
        help="Pixel size per grid cell (default: 12)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Simulated seconds per real second (default: 1)",
    )
    parser.add_argument(
        "--leaderboard",
        type=pathlib.Path,
        default=_DEFAULT_LEADERBOARD,
        help="Leaderboard file (default: ~/.burrow/leaderboard.yaml)",
    )
    parser.add_argument("--mute", action="store_true", help="Disable sound")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: the config's log_level)",
    )
    args = parser.parse_args()

    config = SimulationConfig.from_yaml(args.config)
    if args.seed is not None:
        config.seed = args.seed
    setup_logging(args.log_level or config.log_level)

    sound = PygameSoundSink()
    sound.enabled = sound.enabled and not args.mute
    engine = SimulationEngine(config=config, events=sound)

    renderer = PygameRenderer(
        engine=engine,
        cell_size=args.cell_size,
        time_scale=args.speed,
        leaderboard=Leaderboard(args.leaderboard),
    )
    renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
