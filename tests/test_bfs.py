import unittest

from domino_search.bfs import bidirectional_search, solve
from domino_sim.actions import HALF_TURN_CATALOG, MOVE_CATALOG, MoveCatalog, solved_state
from domino_sim.moves import compose_all, cycle, with_id
from domino_sim.state_codec import StateValidationError


def _ring_catalog() -> MoveCatalog:
    """Four-sticker toy puzzle whose only moves rotate all four stickers."""
    quarter = cycle(0, 1, 2, 3)
    return MoveCatalog(
        [
            with_id(quarter, "X"),
            with_id(compose_all(quarter, quarter), "X2"),
            with_id(compose_all(quarter, quarter, quarter), "X'"),
        ],
        state_size=4,
    )


class TestBidirectionalSearch(unittest.TestCase):
    def setUp(self):
        self.goal = solved_state()

    def test_start_equals_goal_returns_empty_sequence(self):
        for catalog in (MOVE_CATALOG, HALF_TURN_CATALOG):
            result = solve(self.goal, self.goal, catalog)
            self.assertTrue(result.found)
            self.assertEqual(result.moves, [])
            self.assertEqual(result.expansions, 0)

    def test_single_quarter_turn_scramble(self):
        start = MOVE_CATALOG.permute("U", self.goal)
        result = solve(start, self.goal, MOVE_CATALOG)
        self.assertTrue(result.found)
        self.assertEqual(result.moves, ["U'"])

    def test_single_half_turn_scramble(self):
        start = MOVE_CATALOG.permute("R2", self.goal)
        result = solve(start, self.goal, MOVE_CATALOG)
        self.assertTrue(result.found)
        self.assertEqual(len(result.moves), 1)
        self.assertEqual(MOVE_CATALOG.apply_sequence(result.moves, start), self.goal)

    def test_result_round_trips_to_goal(self):
        scrambles = [
            ["U", "F2"],
            ["D'", "L2", "U2"],
            ["B2", "U", "R2", "D"],
        ]
        for scramble in scrambles:
            start = MOVE_CATALOG.apply_sequence(scramble, self.goal)
            result = solve(start, self.goal, MOVE_CATALOG)
            self.assertTrue(result.found, msg=f"scramble={scramble}")
            self.assertEqual(MOVE_CATALOG.apply_sequence(result.moves, start), self.goal)
            self.assertEqual(result.moves[: len(result.forward)], result.forward)

    def test_meeting_state_is_on_both_paths(self):
        start = MOVE_CATALOG.apply_sequence(["U", "L2", "D2"], self.goal)
        result = solve(start, self.goal, MOVE_CATALOG)
        self.assertTrue(result.found)
        self.assertEqual(MOVE_CATALOG.apply_sequence(result.forward, start), result.meeting_state)
        self.assertEqual(MOVE_CATALOG.apply_sequence(result.backward, self.goal), result.meeting_state)

    def test_symmetry_between_directions(self):
        a = MOVE_CATALOG.apply_sequence(["U", "F2", "D"], self.goal)
        b = self.goal
        ab = solve(a, b, MOVE_CATALOG)
        ba = solve(b, a, MOVE_CATALOG)
        self.assertTrue(ab.found)
        self.assertTrue(ba.found)
        self.assertEqual(MOVE_CATALOG.apply_sequence(ab.moves, a), b)
        self.assertEqual(MOVE_CATALOG.apply_sequence(ba.moves, b), a)

    def test_symmetry_when_unreachable(self):
        self.assertFalse(bidirectional_search("abcd", "bacd", _ring_catalog()).found)
        self.assertFalse(bidirectional_search("bacd", "abcd", _ring_catalog()).found)

    def test_search_is_deterministic(self):
        start = MOVE_CATALOG.apply_sequence(["L2", "U'", "F2"], self.goal)
        first = solve(start, self.goal, MOVE_CATALOG)
        second = solve(start, self.goal, MOVE_CATALOG)
        self.assertEqual(first.moves, second.moves)
        self.assertEqual(first.meeting_state, second.meeting_state)
        self.assertEqual(first.expansions, second.expansions)

    def test_half_turn_catalog_only_uses_half_turns(self):
        start = HALF_TURN_CATALOG.apply_sequence(["U2", "L2", "D2"], self.goal)
        result = solve(start, self.goal, HALF_TURN_CATALOG)
        self.assertTrue(result.found)
        self.assertTrue(all(label.endswith("2") for label in result.moves))
        self.assertEqual(HALF_TURN_CATALOG.apply_sequence(result.moves, start), self.goal)

    def test_unreachable_symbol_content_fails_without_search(self):
        start = "r" * len(self.goal)
        result = solve(start, self.goal, MOVE_CATALOG)
        self.assertFalse(result.found)
        self.assertFalse(result.truncated)
        self.assertEqual(result.moves, [])
        self.assertEqual(result.expansions, 0)

    def test_exhausted_frontiers_report_failure(self):
        catalog = _ring_catalog()
        result = bidirectional_search("abcd", "bacd", catalog)
        self.assertFalse(result.found)
        self.assertFalse(result.truncated)
        self.assertEqual(result.forward_visited, 4)
        self.assertEqual(result.backward_visited, 4)
        self.assertEqual(result.expansions, 8)

    def test_toy_catalog_finds_rotation(self):
        catalog = _ring_catalog()
        result = bidirectional_search("abcd", "cdab", catalog)
        self.assertTrue(result.found)
        self.assertEqual(catalog.apply_sequence(result.moves, "abcd"), "cdab")
        self.assertEqual(result.moves, ["X2"])

    def test_max_expansions_truncates(self):
        start = MOVE_CATALOG.apply_sequence(["U", "F2", "D", "L2"], self.goal)
        result = solve(start, self.goal, MOVE_CATALOG, max_expansions=0)
        self.assertFalse(result.found)
        self.assertTrue(result.truncated)
        self.assertEqual(result.expansions, 0)

        near = MOVE_CATALOG.permute("D", self.goal)
        result = solve(near, self.goal, MOVE_CATALOG, max_expansions=1)
        self.assertTrue(result.found)
        self.assertEqual(result.moves, ["D'"])

    def test_length_mismatch_is_rejected(self):
        with self.assertRaises(StateValidationError):
            solve(self.goal, self.goal[:-1], MOVE_CATALOG)
        with self.assertRaises(ValueError):
            solve("abcd", "abcd", MOVE_CATALOG)
        with self.assertRaises(ValueError):
            solve(self.goal, self.goal, MOVE_CATALOG, max_expansions=-1)


if __name__ == "__main__":
    unittest.main()
