"""Bidirectional breadth-first search over catalog moves."""

from __future__ import annotations

from collections import deque

from domino_sim.actions import MoveCatalog, invert_labels
from domino_sim.moves import IDENTITY, Move, compose, extract_labels
from domino_sim.state_codec import same_symbol_counts, validate_pair

from .types import SearchResult


class _Frontier:
    """One BFS side: reaching moves by state plus a FIFO of unexpanded states."""

    def __init__(self, root: str):
        self.reached: dict[str, Move] = {root: IDENTITY}
        self.queue: deque[str] = deque([root])

    def __bool__(self) -> bool:
        return bool(self.queue)


def _expand(side: _Frontier, other: _Frontier, catalog: MoveCatalog) -> str | None:
    """Expand the oldest state of ``side``; return a meeting state if one is hit."""
    current = side.queue.popleft()
    current_move = side.reached[current]
    for move in catalog:
        state = catalog.permute(move.label, current)
        if state not in side.reached:
            side.reached[state] = compose(current_move, move)
            side.queue.append(state)
        if state in other.reached:
            return state
    return None


def bidirectional_search(
    start: str,
    goal: str,
    catalog: MoveCatalog,
    max_expansions: int | None = None,
) -> SearchResult:
    """Search forward from ``start`` and backward from ``goal`` in lock step.

    Each round expands one state on the forward side, then one on the backward
    side; an empty side is skipped while the other keeps draining. The first
    state found on both sides ends the search. Returns a not-found result when
    both frontiers run dry, or ``truncated=True`` once ``max_expansions``
    states have been expanded.
    """
    validate_pair(start, goal)
    if len(start) != catalog.state_size:
        raise ValueError(f"States have {len(start)} stickers but catalog expects {catalog.state_size}")
    if max_expansions is not None and max_expansions < 0:
        raise ValueError("max_expansions must be >= 0")

    if start == goal:
        return SearchResult(found=True, meeting_state=start, forward_visited=1, backward_visited=1)
    if not same_symbol_counts(start, goal):
        return SearchResult(found=False, forward_visited=1, backward_visited=1)

    fwd = _Frontier(start)
    bwd = _Frontier(goal)
    expansions = 0
    meeting: str | None = None

    while fwd or bwd:
        for side, other in ((fwd, bwd), (bwd, fwd)):
            if not side:
                continue
            if max_expansions is not None and expansions >= max_expansions:
                return SearchResult(
                    found=False,
                    expansions=expansions,
                    forward_visited=len(fwd.reached),
                    backward_visited=len(bwd.reached),
                    truncated=True,
                )
            expansions += 1
            meeting = _expand(side, other, catalog)
            if meeting is not None:
                break
        if meeting is not None:
            break

    if meeting is None:
        return SearchResult(
            found=False,
            expansions=expansions,
            forward_visited=len(fwd.reached),
            backward_visited=len(bwd.reached),
        )

    forward = extract_labels(fwd.reached[meeting])
    backward = extract_labels(bwd.reached[meeting])
    return SearchResult(
        found=True,
        moves=forward + invert_labels(backward),
        forward=forward,
        backward=backward,
        meeting_state=meeting,
        expansions=expansions,
        forward_visited=len(fwd.reached),
        backward_visited=len(bwd.reached),
    )


def solve(
    start: str,
    goal: str,
    catalog: MoveCatalog,
    max_expansions: int | None = None,
) -> SearchResult:
    return bidirectional_search(start, goal, catalog, max_expansions=max_expansions)
