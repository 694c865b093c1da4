"""Move catalog and sticker geometry for the 3x3x2 domino puzzle."""

from __future__ import annotations

from typing import Callable, Iterator, Sequence

import numpy as np

from .moves import Move, apply_in_place, compose_all, cycle, iter_cycles, move_permutation, with_id

# Sticker layout (centres of the 3x3 faces are fixed and not stored).
#
#                15 16 17
#                18 19 20          B
#
#                06 07 08
#                09 10 11          U
#                12 13 14
#
#      30 31 32  00 01 02  36 37 38
#      33 34 35  03 04 05  39 40 41     L F R
#
#                21 22 23
#                24 25 26          D
#                27 28 29
FACE_ORDER = ("F", "U", "B", "D", "L", "R")
FACE_SLICES = {
    "F": range(0, 6),
    "U": range(6, 15),
    "B": range(15, 21),
    "D": range(21, 30),
    "L": range(30, 36),
    "R": range(36, 42),
}
STATE_SIZE = 42

FACE_COLORS = {"F": "r", "U": "b", "B": "o", "D": "g", "L": "w", "R": "y"}
COLORS = tuple(FACE_COLORS[face] for face in FACE_ORDER)

QUARTER_TURN_CYCLES = {
    "U": [(6, 8, 14, 12), (7, 11, 13, 9), (0, 30, 20, 36), (1, 31, 19, 37), (2, 32, 18, 38)],
    "D": [(21, 23, 29, 27), (22, 26, 28, 24), (3, 39, 17, 33), (4, 40, 16, 34), (5, 41, 15, 35)],
}

HALF_TURN_CYCLES = {
    "L": [(30, 35), (31, 34), (32, 33), (3, 18), (0, 15), (6, 21), (9, 24), (12, 27)],
    "R": [(36, 41), (37, 40), (38, 39), (5, 20), (2, 17), (14, 29), (11, 26), (8, 23)],
    "F": [(0, 5), (1, 4), (2, 3), (12, 23), (13, 22), (14, 21), (32, 39), (35, 36)],
    "B": [(15, 20), (16, 19), (17, 18), (6, 29), (7, 28), (8, 27), (30, 41), (33, 38)],
}


class CatalogError(ValueError):
    """Raised when catalog geometry or naming is inconsistent."""


def solved_state() -> str:
    """Return the canonical solved state of length 42."""
    return "".join(FACE_COLORS[face] * len(FACE_SLICES[face]) for face in FACE_ORDER)


def is_half_turn(label: str) -> bool:
    return len(label) > 1 and label[1] == "2"


def is_inverse_quarter_turn(label: str) -> bool:
    return len(label) > 1 and label.endswith("'")


def invert_label(label: str) -> str:
    if is_half_turn(label):
        return label
    if len(label) > 1:
        return label[:1]
    return label + "'"


def invert_labels(labels: Sequence[str]) -> list[str]:
    """Return the sequence undoing ``labels``: reversed, each step inverted."""
    return [invert_label(label) for label in reversed(labels)]


def validate_cycle(indices: Sequence[int], size: int) -> None:
    if len(indices) < 2:
        raise CatalogError(f"Cycle {tuple(indices)} must name at least two positions")
    if len(set(indices)) != len(indices):
        raise CatalogError(f"Cycle {tuple(indices)} repeats a position")
    for idx in indices:
        if idx < 0 or idx >= size:
            raise CatalogError(f"Cycle {tuple(indices)} index {idx} is outside 0..{size - 1}")


class MoveCatalog:
    """Ordered, immutable collection of labeled moves over states of one size."""

    def __init__(self, moves: Sequence[Move], state_size: int = STATE_SIZE):
        self.state_size = int(state_size)
        self._moves: tuple[Move, ...] = tuple(moves)
        self._by_label: dict[str, Move] = {}
        for move in self._moves:
            if move.label is None:
                raise CatalogError("Catalog moves must be labeled")
            if move.label in self._by_label:
                raise CatalogError(f"Duplicate catalog label {move.label!r}")
            for indices in iter_cycles(move):
                validate_cycle(indices, self.state_size)
            self._by_label[move.label] = move
        self._perms = {
            label: tuple(int(i) for i in move_permutation(move, self.state_size))
            for label, move in self._by_label.items()
        }

    def __iter__(self) -> Iterator[Move]:
        return iter(self._moves)

    def __len__(self) -> int:
        return len(self._moves)

    def __contains__(self, label: object) -> bool:
        return label in self._by_label

    def __getitem__(self, label: str) -> Move:
        return self._by_label[label]

    @property
    def labels(self) -> list[str]:
        return [move.label for move in self._moves]

    def permutation(self, label: str) -> tuple[int, ...]:
        return self._perms[label]

    def permute(self, label: str, state: str) -> str:
        """Apply the labeled move to ``state`` through its cached permutation."""
        return "".join([state[i] for i in self._perms[label]])

    def apply_sequence(self, labels: Sequence[str], state: str) -> str:
        cells = list(state)
        for label in labels:
            apply_in_place(self._by_label[label], cells)
        return "".join(cells)

    def subset(self, keep: Callable[[str], bool]) -> "MoveCatalog":
        return MoveCatalog([m for m in self._moves if keep(m.label)], self.state_size)

    def check_consistency(self) -> None:
        """Verify quarter/half/inverse naming against the move effects."""
        probe = np.arange(self.state_size)
        for label in self.labels:
            if is_half_turn(label) or is_inverse_quarter_turn(label):
                continue
            quarter = np.asarray(self._perms[label])
            twice = probe[quarter][quarter]
            four = twice[quarter][quarter]
            if not np.array_equal(four, probe):
                raise CatalogError(f"Quarter turn {label!r} does not return after four applications")
            half_label = f"{label}2"
            if half_label in self and not np.array_equal(np.asarray(self._perms[half_label]), twice):
                raise CatalogError(f"{half_label!r} is not {label!r} applied twice")
            inverse_label = f"{label}'"
            if inverse_label in self and not np.array_equal(
                np.asarray(self._perms[inverse_label]), twice[quarter]
            ):
                raise CatalogError(f"{inverse_label!r} is not {label!r} applied three times")
        for label in self.labels:
            if is_half_turn(label):
                half = np.asarray(self._perms[label])
                if not np.array_equal(probe[half][half], probe):
                    raise CatalogError(f"Half turn {label!r} is not self-inverse")


def _face_cycles_move(cycles: Sequence[tuple[int, ...]]) -> Move:
    return compose_all(*(cycle(*c) for c in cycles))


def build_move_catalog() -> MoveCatalog:
    """Return the full catalog: U/D quarter turns and L/R/F/B half turns."""
    moves: list[Move] = []
    for face, cycles in QUARTER_TURN_CYCLES.items():
        quarter = _face_cycles_move(cycles)
        moves.append(with_id(quarter, face))
        moves.append(with_id(compose_all(quarter, quarter), f"{face}2"))
        moves.append(with_id(compose_all(quarter, quarter, quarter), f"{face}'"))
    for face, cycles in HALF_TURN_CYCLES.items():
        moves.append(with_id(_face_cycles_move(cycles), f"{face}2"))

    catalog = MoveCatalog(moves, STATE_SIZE)
    catalog.check_consistency()
    return catalog


def build_half_turn_catalog(catalog: MoveCatalog | None = None) -> MoveCatalog:
    """Return only the half-turn entries of ``catalog`` (default: full catalog)."""
    base = catalog if catalog is not None else build_move_catalog()
    return base.subset(is_half_turn)


MOVE_CATALOG = build_move_catalog()
HALF_TURN_CATALOG = build_half_turn_catalog(MOVE_CATALOG)
MOVE_NAMES = MOVE_CATALOG.labels
