"""State validation and projection helpers."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from .actions import COLORS, FACE_ORDER, FACE_SLICES, STATE_SIZE

# Stage-one projection: opposite side colours collapse onto one another.
DEFAULT_PROJECTION = {"o": "r", "g": "b"}


class StateValidationError(ValueError):
    """Raised when an input state is invalid."""


def validate_state(
    state: str | Iterable[str],
    size: int = STATE_SIZE,
    alphabet: Iterable[str] | None = COLORS,
) -> str:
    """Validate state and return it as a plain string of length ``size``."""
    if isinstance(state, str):
        text = state.strip()
    else:
        try:
            text = "".join(str(s) for s in state)
        except TypeError as exc:
            raise StateValidationError("State must be a string or a sequence of symbols") from exc

    if len(text) != size:
        raise StateValidationError(f"State must have {size} stickers, got {len(text)}")

    if alphabet is not None:
        allowed = set(alphabet)
        bad = sorted(set(text) - allowed)
        if bad:
            raise StateValidationError(
                f"State contains invalid colours {bad}; allowed values are {''.join(sorted(allowed))}"
            )
    return text


def validate_pair(start: str, goal: str) -> tuple[str, str]:
    """Check that ``start`` and ``goal`` can be compared position by position."""
    if not isinstance(start, str) or not isinstance(goal, str):
        raise StateValidationError("Start and goal must both be strings")
    if len(start) != len(goal):
        raise StateValidationError(
            f"Start and goal lengths differ: {len(start)} != {len(goal)}"
        )
    return start, goal


def same_symbol_counts(a: str, b: str) -> bool:
    return Counter(a) == Counter(b)


def project(state: str, mapping: dict[str, str] | None = None) -> str:
    """Collapse colours according to ``mapping`` (default: orange->red, green->blue)."""
    table = DEFAULT_PROJECTION if mapping is None else mapping
    return "".join(table.get(ch, ch) for ch in state)


def state_to_faces(state: str) -> dict[str, str]:
    text = validate_state(state)
    return {face: "".join(text[i] for i in FACE_SLICES[face]) for face in FACE_ORDER}


def faces_to_state(faces: dict[str, str]) -> str:
    missing = [face for face in FACE_ORDER if face not in faces]
    if missing:
        raise StateValidationError(f"Missing faces: {', '.join(missing)}")
    parts = []
    for face in FACE_ORDER:
        stickers = str(faces[face])
        expected = len(FACE_SLICES[face])
        if len(stickers) != expected:
            raise StateValidationError(
                f"Face {face} must have {expected} stickers, got {len(stickers)}"
            )
        parts.append(stickers)
    return validate_state("".join(parts))
