import argparse
import json
import tempfile
import unittest
from pathlib import Path

import numpy as np

from domino_search.evaluate import _aggregate_metrics, build_parser, run_evaluation


class TestEvaluate(unittest.TestCase):
    def test_parser_defaults(self):
        args = build_parser().parse_args([])
        self.assertEqual(args.episodes_per_depth, 20)
        self.assertEqual(args.scramble_min, 1)
        self.assertEqual(args.scramble_max, 6)
        self.assertEqual(args.max_expansions, 200000)
        self.assertFalse(args.two_stage)
        self.assertEqual(args.progress, "on")

    def test_metrics_aggregation(self):
        solved = np.array([True, False, True, True], dtype=bool)
        lengths = np.array([3, 0, 5, 4], dtype=np.int64)
        verified = np.array([True, False, True, True], dtype=bool)
        expansions = np.array([10, 100, 30, 20], dtype=np.int64)
        m = _aggregate_metrics(3, solved, lengths, verified, expansions, eval_time_sec=2.0)
        self.assertEqual(m.scramble_depth, 3)
        self.assertEqual(m.episodes, 4)
        self.assertEqual(m.solved_count, 3)
        self.assertAlmostEqual(m.success_rate, 0.75, places=6)
        self.assertAlmostEqual(m.length_mean, 4.0, places=6)
        self.assertAlmostEqual(m.length_max, 5.0, places=6)
        self.assertEqual(m.verified_count, 3)
        self.assertAlmostEqual(m.expansions_mean, 40.0, places=6)
        self.assertAlmostEqual(m.solves_per_sec, 2.0, places=6)

    def test_metrics_without_solutions(self):
        m = _aggregate_metrics(
            1,
            np.zeros(2, dtype=bool),
            np.zeros(2, dtype=np.int64),
            np.zeros(2, dtype=bool),
            np.array([5, 7]),
            eval_time_sec=1.0,
        )
        self.assertIsNone(m.length_mean)
        self.assertIsNone(m.length_max)
        self.assertEqual(m.success_rate, 0.0)

    def test_smoke_evaluation_writes_artifacts(self):
        with tempfile.TemporaryDirectory() as td:
            args = argparse.Namespace(
                episodes_per_depth=2,
                scramble_min=0,
                scramble_max=2,
                two_stage=False,
                max_expansions=50000,
                seed=5,
                output_dir=td,
                output_prefix="smoke",
                progress="off",
            )
            out = run_evaluation(args)

            self.assertEqual([m.scramble_depth for m in out["metrics"]], [0, 1, 2])
            for m in out["metrics"]:
                self.assertEqual(m.success_rate, 1.0)
                self.assertEqual(m.verified_count, 2)
            self.assertEqual(out["metrics"][0].length_max, 0.0)
            self.assertTrue(Path(out["plot"]).exists())
            self.assertTrue(Path(out["csv"]).exists())
            with open(out["json"], encoding="utf-8") as f:
                report = json.load(f)
            self.assertEqual(report["config"]["seed"], 5)
            self.assertEqual(len(report["metrics"]), 3)

    def test_invalid_ranges_rejected(self):
        args = build_parser().parse_args(["--scramble-min", "4", "--scramble-max", "2"])
        with self.assertRaises(ValueError):
            run_evaluation(args)


if __name__ == "__main__":
    unittest.main()
