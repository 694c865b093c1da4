"""Bidirectional BFS solving for the domino puzzle."""

from .bfs import bidirectional_search, solve
from .staged import solve_two_stage
from .types import SearchResult, StagedResult

__all__ = [
    "bidirectional_search",
    "solve",
    "solve_two_stage",
    "SearchResult",
    "StagedResult",
]
