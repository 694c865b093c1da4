"""3x3x2 domino puzzle simulator package."""

from .actions import MOVE_CATALOG, MoveCatalog, build_half_turn_catalog, build_move_catalog, solved_state
from .engine import DominoEngine

__all__ = [
    "DominoEngine",
    "MOVE_CATALOG",
    "MoveCatalog",
    "build_half_turn_catalog",
    "build_move_catalog",
    "solved_state",
]
