"""Core 3x3x2 domino simulator engine."""

from __future__ import annotations

import threading
from typing import Any, Sequence

import numpy as np

from .actions import MOVE_CATALOG, MoveCatalog, build_half_turn_catalog, solved_state
from .state_codec import StateValidationError, faces_to_state, state_to_faces, validate_state


def _coerce_state(state: str | dict[str, str]) -> str:
    if isinstance(state, dict):
        return faces_to_state(state)
    return validate_state(state)


class DominoEngine:
    """Thread-safe domino simulator over a labeled move catalog."""

    def __init__(
        self,
        initial_state: str | None = None,
        goal_state: str | None = None,
        catalog: MoveCatalog | None = None,
    ):
        self.catalog = catalog if catalog is not None else MOVE_CATALOG
        self._lock = threading.RLock()
        self._rng = np.random.default_rng()

        self.goal = solved_state() if goal_state is None else validate_state(goal_state)
        self._state = self.goal if initial_state is None else _coerce_state(initial_state)
        self.step_count = 0
        self.history: list[str] = []

    def get_state(self) -> str:
        with self._lock:
            return self._state

    def set_state(self, state: str | dict[str, str]) -> str:
        text = _coerce_state(state)
        with self._lock:
            self._state = text
            self.step_count = 0
            self.history = []
            return self._state

    def reset(self, state: str | dict[str, str] | None = None) -> str:
        with self._lock:
            self._state = self.goal if state is None else _coerce_state(state)
            self.step_count = 0
            self.history = []
            return self._state

    def is_solved(self) -> bool:
        with self._lock:
            return self._state == self.goal

    def step(self, label: str) -> str:
        if not isinstance(label, str) or label not in self.catalog:
            raise StateValidationError(
                f"Move must be one of: {', '.join(self.catalog.labels)}"
            )

        with self._lock:
            self._state = self.catalog.permute(label, self._state)
            self.step_count += 1
            self.history.append(label)
            return self._state

    def apply_sequence(self, labels: Sequence[str]) -> str:
        unknown = [label for label in labels if label not in self.catalog]
        if unknown:
            raise StateValidationError(f"Unknown moves: {', '.join(map(str, unknown))}")
        with self._lock:
            for label in labels:
                self.step(label)
            return self._state

    def scramble(self, steps: int, seed: int | None = None) -> tuple[str, list[str]]:
        if not isinstance(steps, int) or steps < 0:
            raise StateValidationError("Scramble steps must be a non-negative integer")

        with self._lock:
            rng = np.random.default_rng(seed) if seed is not None else self._rng
            labels = self.catalog.labels
            move_list: list[str] = []
            prev: str | None = None

            for _ in range(steps):
                if prev is not None:
                    # No two turns of the same face in a row, unless the catalog has one face only.
                    candidates = [m for m in labels if m[0] != prev[0]] or labels
                else:
                    candidates = labels
                label = candidates[int(rng.integers(len(candidates)))]
                move_list.append(label)
                prev = label

            for label in move_list:
                self._state = self.catalog.permute(label, self._state)
                self.step_count += 1
                self.history.append(label)
            return self._state, move_list

    def solve(
        self,
        two_stage: bool = False,
        max_expansions: int | None = None,
        apply: bool = False,
    ) -> dict[str, Any]:
        """Search from the current state to the goal; optionally play the result."""
        from domino_search.bfs import bidirectional_search
        from domino_search.staged import solve_two_stage

        with self._lock:
            start = self._state
            if two_stage:
                staged = solve_two_stage(
                    start,
                    self.goal,
                    catalog=self.catalog,
                    reduced_catalog=build_half_turn_catalog(self.catalog),
                    max_expansions=max_expansions,
                )
                found, moves = staged.found, staged.moves
                expansions = sum(stage.expansions for stage in staged.stages)
                truncated = any(stage.truncated for stage in staged.stages)
            else:
                result = bidirectional_search(start, self.goal, self.catalog, max_expansions=max_expansions)
                found, moves = result.found, result.moves
                expansions = result.expansions
                truncated = result.truncated

            if found and apply:
                self.apply_sequence(moves)

            return {
                "found": found,
                "moves": moves,
                "expansions": expansions,
                "truncated": truncated,
                "applied": bool(found and apply),
            }

    def state_payload(self) -> dict[str, Any]:
        with self._lock:
            return {
                "state": self._state,
                "faces": state_to_faces(self._state),
                "step_count": self.step_count,
                "scrambled": self._state != self.goal,
            }
