"""CLI entrypoint for the domino simulator and solver."""

from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

import yaml

from .actions import MOVE_CATALOG, build_half_turn_catalog, solved_state
from .engine import DominoEngine
from .server import DominoHTTPServer
from .state_codec import StateValidationError, validate_state


def load_config(path: str | Path) -> dict:
    """Load YAML config. Returns dict with optional 'search' and 'server' keys."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _log(message: str) -> None:
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {message}", flush=True)


def build_parser(defaults: dict | None = None) -> argparse.ArgumentParser:
    d = defaults or {}
    search = d.get("search", {})
    srv = d.get("server", {})
    parser = argparse.ArgumentParser(description="3x3x2 domino bidirectional BFS solver")
    parser.add_argument("--config", type=str, default=None, help="Path to YAML config (search + server params)")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=argparse.SUPPRESS, help="Path to YAML config")

    solve = sub.add_parser("solve", parents=[common], help="Solve one start state")
    solve.add_argument("--start", type=str, default=search.get("start"), help="Start state (required if no --config)")
    solve.add_argument("--goal", type=str, default=search.get("goal"), help="Goal state (default: solved)")
    solve.add_argument(
        "--catalog",
        type=str,
        default=search.get("catalog", "full"),
        choices=["full", "half"],
        help="Move set for single-stage search",
    )
    solve.add_argument(
        "--two-stage",
        action=argparse.BooleanOptionalAction,
        default=bool(search.get("two_stage", False)),
        help="Solve the colour projection first, then finish with half turns",
    )
    solve.add_argument("--max-expansions", type=int, default=search.get("max_expansions"))

    headless = sub.add_parser("headless", parents=[common], help="Run headless HTTP simulator")
    headless.add_argument("--host", default=srv.get("host", "127.0.0.1"))
    headless.add_argument("--port", type=int, default=srv.get("port", 8000))
    headless.add_argument("--state", type=str, default=search.get("start"))
    headless.add_argument("--scramble-steps", type=int, default=srv.get("scramble_steps", 0))
    headless.add_argument("--seed", type=int, default=srv.get("seed"))

    return parser


def run_solve(args: argparse.Namespace) -> int:
    from domino_search.bfs import bidirectional_search
    from domino_search.staged import solve_two_stage

    start = validate_state(args.start)
    goal = validate_state(args.goal) if args.goal else solved_state()
    _log(
        f"solve_init start={start} goal={goal} two_stage={args.two_stage} "
        f"catalog={args.catalog} max_expansions={args.max_expansions}"
    )

    if args.two_stage:
        staged = solve_two_stage(start, goal, catalog=MOVE_CATALOG, max_expansions=args.max_expansions)
        for i, stage in enumerate(staged.stages, start=1):
            _log(
                f"stage={i} found={stage.found} moves={len(stage.moves)} expansions={stage.expansions} "
                f"visited_fwd={stage.forward_visited} visited_bwd={stage.backward_visited} "
                f"truncated={stage.truncated}"
            )
        if staged.intermediate is not None:
            _log(f"intermediate_state {staged.intermediate}")
        found, moves = staged.found, staged.moves
    else:
        catalog = MOVE_CATALOG if args.catalog == "full" else build_half_turn_catalog(MOVE_CATALOG)
        result = bidirectional_search(start, goal, catalog, max_expansions=args.max_expansions)
        _log(
            f"search found={result.found} moves={len(result.moves)} expansions={result.expansions} "
            f"visited_fwd={result.forward_visited} visited_bwd={result.backward_visited} "
            f"truncated={result.truncated}"
        )
        found, moves = result.found, result.moves

    if not found:
        print("No solution", flush=True)
        return 1
    print(" ".join(moves), flush=True)
    return 0


def run_headless(args: argparse.Namespace) -> None:
    engine = DominoEngine(initial_state=args.state)
    server = DominoHTTPServer(engine=engine, host=args.host, port=args.port, mode="headless")
    if args.scramble_steps > 0 and args.state is None:
        _, moves = engine.scramble(args.scramble_steps, seed=args.seed)
        _log(f"scrambled moves={' '.join(moves)}")
    print(f"Domino headless server listening on http://{server.host}:{server.port}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()


def main(argv: list[str] | None = None) -> int:
    # Pre-parse to get --config
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", type=str, default=None)
    pre_args, _ = pre.parse_known_args(argv)

    defaults = {}
    if pre_args.config:
        defaults = load_config(pre_args.config)

    parser = build_parser(defaults)
    args = parser.parse_args(argv)

    if args.mode == "solve":
        if args.start is None:
            parser.error("--start required (or set search.start in --config)")
        try:
            return run_solve(args)
        except StateValidationError as exc:
            parser.error(str(exc))

    if args.mode == "headless":
        run_headless(args)
        return 0

    parser.error(f"Unsupported mode: {args.mode}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
