"""Shared dataclasses for the search pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class SearchResult:
    found: bool
    moves: list[str] = field(default_factory=list)
    forward: list[str] = field(default_factory=list)
    backward: list[str] = field(default_factory=list)
    meeting_state: str | None = None
    expansions: int = 0
    forward_visited: int = 0
    backward_visited: int = 0
    truncated: bool = False  # stopped by max_expansions, not by exhaustion


@dataclass
class StagedResult:
    found: bool
    moves: list[str] = field(default_factory=list)
    intermediate: str | None = None
    stages: list[SearchResult] = field(default_factory=list)
