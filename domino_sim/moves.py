"""Composable permutation moves over fixed-length puzzle states.

A move is one of three immutable node kinds:

* ``EmptyMove``: the identity.
* ``CycleMove``: a primitive index cycle; the symbol at ``indices[i]`` is
  carried to ``indices[i + 1]`` and the last one wraps to ``indices[0]``.
* ``CompositeMove``: ``first`` applied, then ``second``.

Every node may carry one label. Children are shared, never copied, because
nodes are never mutated after construction.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import MutableSequence, Sequence, Union

import numpy as np


class MoveError(ValueError):
    """Raised when a move is built or labeled incorrectly."""


@dataclass(frozen=True)
class EmptyMove:
    label: str | None = None


@dataclass(frozen=True)
class CycleMove:
    indices: tuple[int, ...]
    label: str | None = None


@dataclass(frozen=True)
class CompositeMove:
    first: "Move"
    second: "Move"
    label: str | None = None


Move = Union[EmptyMove, CycleMove, CompositeMove]

IDENTITY = EmptyMove()


def cycle(*indices: int) -> CycleMove:
    return CycleMove(tuple(int(i) for i in indices))


def apply_cycle(cells: MutableSequence, indices: Sequence[int]) -> None:
    """Rotate ``cells`` one step along ``indices`` in place."""
    n = len(indices)
    saved = cells[indices[0]]
    for i in range(n - 1, 0, -1):
        cells[indices[(i + 1) % n]] = cells[indices[i]]
    cells[indices[1]] = saved


def compose(first: Move, second: Move) -> CompositeMove:
    """Return an unlabeled move applying ``first`` then ``second``."""
    return CompositeMove(first, second)


def compose_all(*moves: Move) -> Move:
    """Left fold of ``compose``; intermediate composites stay unlabeled."""
    if not moves:
        return IDENTITY
    result = moves[0]
    for move in moves[1:]:
        result = compose(result, move)
    return result


def with_id(move: Move, label: str) -> Move:
    if not label:
        raise MoveError("Move label must be a non-empty string")
    if move.label is not None:
        raise MoveError(f"Move is already labeled {move.label!r}, cannot relabel as {label!r}")
    return replace(move, label=label)


def clone(move: Move) -> Move:
    """Deep structural copy keeping every label."""
    if isinstance(move, CompositeMove):
        return CompositeMove(clone(move.first), clone(move.second), move.label)
    if isinstance(move, CycleMove):
        return CycleMove(tuple(move.indices), move.label)
    return EmptyMove(move.label)


def apply_in_place(move: Move, cells: MutableSequence) -> None:
    if isinstance(move, CycleMove):
        apply_cycle(cells, move.indices)
    elif isinstance(move, CompositeMove):
        apply_in_place(move.first, cells)
        apply_in_place(move.second, cells)


def apply_move(move: Move, state: str) -> str:
    cells = list(state)
    apply_in_place(move, cells)
    return "".join(cells)


def extract_labels(move: Move) -> list[str]:
    """Return the labels of the outermost labeled nodes, left to right.

    A labeled node reports only its own label; descent never passes it. This
    turns a search path built from catalog moves back into catalog labels
    instead of primitive cycles.
    """
    labels: list[str] = []
    _collect_labels(move, labels)
    return labels


def _collect_labels(move: Move, out: list[str]) -> None:
    if move.label is not None:
        out.append(move.label)
        return
    if isinstance(move, CompositeMove):
        _collect_labels(move.first, out)
        _collect_labels(move.second, out)


def iter_cycles(move: Move):
    """Yield primitive cycles in application order."""
    if isinstance(move, CycleMove):
        yield move.indices
    elif isinstance(move, CompositeMove):
        yield from iter_cycles(move.first)
        yield from iter_cycles(move.second)


def move_permutation(move: Move, size: int) -> np.ndarray:
    """Return ``perm`` with ``apply_move(move, s)[p] == s[perm[p]]``."""
    cells = list(range(size))
    apply_in_place(move, cells)
    return np.asarray(cells, dtype=np.int32)
