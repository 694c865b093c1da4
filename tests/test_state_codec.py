import unittest

from domino_sim.actions import solved_state
from domino_sim.state_codec import (
    StateValidationError,
    faces_to_state,
    project,
    same_symbol_counts,
    state_to_faces,
    validate_pair,
    validate_state,
)


class TestStateCodec(unittest.TestCase):
    def test_validate_accepts_string_and_sequence(self):
        state = solved_state()
        self.assertEqual(validate_state(state), state)
        self.assertEqual(validate_state(list(state)), state)
        self.assertEqual(validate_state(f"  {state}\n"), state)

    def test_validate_rejects_bad_length_and_colours(self):
        with self.assertRaises(StateValidationError):
            validate_state("rrr")
        with self.assertRaises(StateValidationError):
            validate_state("q" + solved_state()[1:])
        with self.assertRaises(StateValidationError):
            validate_state(12345)

    def test_validate_pair_requires_equal_lengths(self):
        with self.assertRaises(StateValidationError):
            validate_pair("abc", "ab")
        self.assertEqual(validate_pair("ab", "ba"), ("ab", "ba"))

    def test_projection_collapses_colours(self):
        projected = project(solved_state())
        self.assertNotIn("o", projected)
        self.assertNotIn("g", projected)
        self.assertEqual(projected.count("r"), 12)
        self.assertEqual(projected.count("b"), 18)
        self.assertEqual(project("og", {"o": "x"}), "xg")

    def test_symbol_counts(self):
        self.assertTrue(same_symbol_counts("abca", "aabc"))
        self.assertFalse(same_symbol_counts("abca", "abcc"))

    def test_faces_roundtrip(self):
        faces = state_to_faces(solved_state())
        self.assertEqual(faces["U"], "b" * 9)
        self.assertEqual(faces["L"], "w" * 6)
        self.assertEqual(faces_to_state(faces), solved_state())
        faces["F"] = "rr"
        with self.assertRaises(StateValidationError):
            faces_to_state(faces)
        with self.assertRaises(StateValidationError):
            faces_to_state({"F": "r" * 6})


if __name__ == "__main__":
    unittest.main()
