"""Command line entry point: headless simulation, leaderboard server and client."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import numpy as np

logger = logging.getLogger(__name__)

_STEERING_KEYS = ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smooth-snake",
        description="Smooth Snake simulation and leaderboard tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Run a headless game with random steering.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override its values).",
    )
    sim_p.add_argument("--frames", type=int, default=3600)
    sim_p.add_argument(
        "--frame-ms", type=float, default=1000 / 60,
        help="Simulated wall-clock time between frames.",
    )
    sim_p.add_argument("--turn-every", type=int, default=30)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--width", type=float, default=None)
    sim_p.add_argument("--height", type=float, default=None)
    sim_p.add_argument(
        "--boundary", type=str, default=None, choices=["death", "wrap"],
    )
    sim_p.add_argument("--player", type=str, default=None)
    sim_p.add_argument(
        "--report-url", type=str, default=None,
        help="Leaderboard base URL to submit the final score to.",
    )

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the leaderboard HTTP service.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    # --- leaderboard ---
    board_p = sub.add_parser("leaderboard", help="Print the top scores.")
    board_p.add_argument("--url", type=str, default="http://127.0.0.1:8000")
    board_p.add_argument("--limit", type=int, default=10)

    return parser


def _load_config(args: argparse.Namespace):
    from smooth_snake.config import GameConfig

    config = GameConfig.load(args.config) if args.config else GameConfig()
    overrides: dict = {}
    for flag in ("seed", "width", "height"):
        val = getattr(args, flag, None)
        if val is not None:
            overrides[flag] = val
    if args.boundary is not None:
        overrides["boundary_mode"] = args.boundary
    if overrides:
        d = config.to_dict()
        d.update(overrides)
        config = GameConfig.from_dict(d)
    return config


def _run_simulate(args: argparse.Namespace) -> int:
    from smooth_snake.game import Game, GameState
    from smooth_snake.loop import GameLoop
    from smooth_snake.reporting import HttpScoreReporter, LoggingScoreReporter

    config = _load_config(args)
    reporter = (
        HttpScoreReporter(args.report_url) if args.report_url
        else LoggingScoreReporter()
    )
    game = Game(config, score_reporter=reporter, player_id=args.player)
    loop = GameLoop(game)
    steer_rng = np.random.default_rng(config.seed)

    now = 0.0
    loop.start(now=now)
    held: str | None = None
    for frame in range(args.frames):
        if frame % max(args.turn_every, 1) == 0:
            if held is not None:
                game.input_handler.release(held)
            held = str(steer_rng.choice(_STEERING_KEYS))
            game.input_handler.press(held)
        now += args.frame_ms
        if not loop.frame(now):
            break
        if game.state == GameState.GAME_OVER:
            break
    if isinstance(reporter, HttpScoreReporter):
        reporter.close()

    summary = {
        "frames": loop.frames,
        "state": game.state.value,
        "score": game.score,
        "food_count": game.food_count,
        "length": game.worm.length,
        "game_time": game.game_time_seconds,
        "error": repr(loop.error) if loop.error is not None else None,
    }
    print(json.dumps(summary, indent=2))  # noqa: T201
    return 1 if loop.error is not None else 0


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from smooth_snake.server.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def _run_leaderboard(args: argparse.Namespace) -> int:
    import httpx

    from smooth_snake.reporting import HttpScoreReporter

    try:
        data = HttpScoreReporter(args.url).top_scores(args.limit)
    except httpx.HTTPError as exc:
        logger.error("Could not fetch leaderboard from %s: %s", args.url, exc)
        return 1
    for entry in data["scores"]:
        print(  # noqa: T201
            f"{entry['rank']:>3}. {entry['playerId']:<20} {entry['score']:>8}"
        )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``smooth-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "serve": _run_serve,
        "leaderboard": _run_leaderboard,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
