"""Two-stage solving: colour projection first, then half turns only."""

from __future__ import annotations

from domino_sim.actions import MoveCatalog, build_half_turn_catalog, build_move_catalog
from domino_sim.state_codec import project

from .bfs import bidirectional_search
from .types import StagedResult


def solve_two_stage(
    start: str,
    goal: str,
    catalog: MoveCatalog | None = None,
    reduced_catalog: MoveCatalog | None = None,
    projection: dict[str, str] | None = None,
    max_expansions: int | None = None,
) -> StagedResult:
    """Solve ``start`` to ``goal`` in two searches.

    Stage one searches between the projections of both states with the full
    catalog and applies the result to the real start. Stage two takes that
    intermediate state to ``goal`` with the reduced (half-turn) catalog. The
    returned moves are both stages concatenated. ``max_expansions`` caps each
    stage separately.
    """
    full = catalog if catalog is not None else build_move_catalog()
    reduced = reduced_catalog if reduced_catalog is not None else build_half_turn_catalog(full)

    first = bidirectional_search(
        project(start, projection), project(goal, projection), full, max_expansions=max_expansions
    )
    if not first.found:
        return StagedResult(found=False, stages=[first])

    intermediate = full.apply_sequence(first.moves, start)
    second = bidirectional_search(intermediate, goal, reduced, max_expansions=max_expansions)
    if not second.found:
        return StagedResult(found=False, intermediate=intermediate, stages=[first, second])

    return StagedResult(
        found=True,
        moves=first.moves + second.moves,
        intermediate=intermediate,
        stages=[first, second],
    )
