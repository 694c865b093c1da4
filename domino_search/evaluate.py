"""Offline solver evaluation over scramble depths."""

from __future__ import annotations

import argparse
import csv
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from tqdm import tqdm

from domino_sim.actions import MOVE_CATALOG, solved_state
from domino_sim.engine import DominoEngine

from .bfs import bidirectional_search
from .staged import solve_two_stage

matplotlib.use("Agg")


@dataclass
class DepthMetrics:
    scramble_depth: int
    episodes: int
    solved_count: int
    success_rate: float
    length_mean: float | None
    length_max: float | None
    verified_count: int
    expansions_mean: float
    eval_time_sec: float
    solves_per_sec: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "scramble_depth": self.scramble_depth,
            "episodes": self.episodes,
            "solved_count": self.solved_count,
            "success_rate": self.success_rate,
            "length_mean": self.length_mean,
            "length_max": self.length_max,
            "verified_count": self.verified_count,
            "expansions_mean": self.expansions_mean,
            "eval_time_sec": self.eval_time_sec,
            "solves_per_sec": self.solves_per_sec,
        }


def _aggregate_metrics(
    scramble_depth: int,
    solved: np.ndarray,
    lengths: np.ndarray,
    verified: np.ndarray,
    expansions: np.ndarray,
    eval_time_sec: float,
) -> DepthMetrics:
    solved = np.asarray(solved, dtype=bool)
    lengths = np.asarray(lengths, dtype=np.int64)
    verified = np.asarray(verified, dtype=bool)
    expansions = np.asarray(expansions, dtype=np.int64)
    episodes = int(solved.size)
    solved_count = int(solved.sum())

    if solved_count > 0:
        solved_lengths = lengths[solved]
        length_mean = float(np.mean(solved_lengths))
        length_max = float(np.max(solved_lengths))
    else:
        length_mean = None
        length_max = None

    return DepthMetrics(
        scramble_depth=scramble_depth,
        episodes=episodes,
        solved_count=solved_count,
        success_rate=float(solved_count / episodes) if episodes > 0 else 0.0,
        length_mean=length_mean,
        length_max=length_max,
        verified_count=int(verified.sum()),
        expansions_mean=float(np.mean(expansions)) if episodes > 0 else 0.0,
        eval_time_sec=float(eval_time_sec),
        solves_per_sec=float(episodes / max(eval_time_sec, 1e-9)),
    )


def _fmt_opt(v: float | None) -> str:
    return "-" if v is None else f"{v:.2f}"


def _print_header() -> None:
    print("depth  episodes  success  len_mean  len_max  verified  exp_mean  time_s", flush=True)


def _print_row(m: DepthMetrics) -> None:
    print(
        f"{m.scramble_depth:5d}  {m.episodes:8d}  {m.success_rate:7.3f}  "
        f"{_fmt_opt(m.length_mean):>8}  {_fmt_opt(m.length_max):>7}  {m.verified_count:8d}  "
        f"{m.expansions_mean:8.1f}  {m.eval_time_sec:6.2f}",
        flush=True,
    )


def _plot_metrics(metrics: list[DepthMetrics], output_dir: Path, prefix: str) -> Path:
    depths = [m.scramble_depth for m in metrics]
    lengths = [m.length_mean if m.length_mean is not None else np.nan for m in metrics]
    expansions = [m.expansions_mean for m in metrics]

    fig, (ax_len, ax_exp) = plt.subplots(1, 2, figsize=(10, 4))
    ax_len.plot(depths, lengths, marker="o")
    ax_len.plot(depths, depths, linestyle="--", color="gray", label="scramble depth")
    ax_len.set_xlabel("Scramble depth")
    ax_len.set_ylabel("Mean solution length")
    ax_len.legend()
    ax_exp.plot(depths, expansions, marker="o", color="tab:orange")
    ax_exp.set_xlabel("Scramble depth")
    ax_exp.set_ylabel("Mean expansions")
    ax_exp.set_yscale("symlog")
    fig.tight_layout()

    path = output_dir / f"{prefix}_metrics.png"
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path


def _save_reports(metrics: list[DepthMetrics], output_dir: Path, prefix: str, args: argparse.Namespace) -> tuple[Path, Path]:
    csv_path = output_dir / f"{prefix}_metrics.csv"
    json_path = output_dir / f"{prefix}_metrics.json"
    rows = [m.to_dict() for m in metrics]

    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()) if rows else ["scramble_depth"])
        writer.writeheader()
        writer.writerows(rows)

    payload = {
        "config": {
            "episodes_per_depth": int(args.episodes_per_depth),
            "scramble_min": int(args.scramble_min),
            "scramble_max": int(args.scramble_max),
            "two_stage": bool(args.two_stage),
            "max_expansions": args.max_expansions,
            "seed": args.seed,
        },
        "metrics": rows,
    }
    with open(json_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)
    return csv_path, json_path


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Evaluate the domino solver over random scrambles")
    p.add_argument("--episodes-per-depth", type=int, default=20)
    p.add_argument("--scramble-min", type=int, default=1)
    p.add_argument("--scramble-max", type=int, default=6)
    p.add_argument("--two-stage", action="store_true", help="Use projection + half-turn staged solving")
    p.add_argument("--max-expansions", type=int, default=200000)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--output-dir", type=str, default="eval_reports")
    p.add_argument("--output-prefix", type=str, default="domino_bfs")
    p.add_argument("--progress", type=str, default="on", choices=["on", "off"])
    return p


def run_evaluation(args: argparse.Namespace) -> dict[str, Any]:
    if args.scramble_min < 0 or args.scramble_max < args.scramble_min:
        raise ValueError("--scramble-min/--scramble-max must satisfy 0 <= min <= max")
    if args.episodes_per_depth < 1:
        raise ValueError("--episodes-per-depth must be >= 1")

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    rng = np.random.default_rng(args.seed)
    goal = solved_state()
    engine = DominoEngine(goal_state=goal, catalog=MOVE_CATALOG)

    print(
        "evaluation_init "
        f"episodes_per_depth={args.episodes_per_depth} depths={args.scramble_min}..{args.scramble_max} "
        f"two_stage={args.two_stage} max_expansions={args.max_expansions} seed={args.seed}",
        flush=True,
    )
    _print_header()

    metrics: list[DepthMetrics] = []
    for depth in range(int(args.scramble_min), int(args.scramble_max) + 1):
        t0 = time.perf_counter()
        n = int(args.episodes_per_depth)
        solved = np.zeros((n,), dtype=bool)
        lengths = np.zeros((n,), dtype=np.int64)
        verified = np.zeros((n,), dtype=bool)
        expansions = np.zeros((n,), dtype=np.int64)

        episode_iter = range(n)
        if args.progress == "on":
            episode_iter = tqdm(episode_iter, desc=f"depth={depth}", unit="solve", mininterval=1.0, leave=False)

        for i in episode_iter:
            engine.reset()
            start, _ = engine.scramble(depth, seed=int(rng.integers(2**31 - 1)))
            if args.two_stage:
                staged = solve_two_stage(start, goal, catalog=MOVE_CATALOG, max_expansions=args.max_expansions)
                found, moves = staged.found, staged.moves
                expansions[i] = sum(stage.expansions for stage in staged.stages)
            else:
                result = bidirectional_search(start, goal, MOVE_CATALOG, max_expansions=args.max_expansions)
                found, moves = result.found, result.moves
                expansions[i] = result.expansions

            solved[i] = found
            if found:
                lengths[i] = len(moves)
                verified[i] = MOVE_CATALOG.apply_sequence(moves, start) == goal

        m = _aggregate_metrics(depth, solved, lengths, verified, expansions, time.perf_counter() - t0)
        metrics.append(m)
        _print_row(m)

    plot_path = _plot_metrics(metrics, output_dir, args.output_prefix)
    csv_path, json_path = _save_reports(metrics, output_dir, args.output_prefix, args)
    print(f"evaluation_summary plot={plot_path} csv={csv_path} json={json_path}", flush=True)

    return {"metrics": metrics, "plot": plot_path, "csv": csv_path, "json": json_path}


def main() -> None:
    args = build_parser().parse_args()
    run_evaluation(args)


if __name__ == "__main__":
    main()
