"""Scrub position helpers for pointer and keyboard input."""

from __future__ import annotations


def position_from_pointer(x: int, width: int) -> float:
    """Map a pointer column inside the floor to a 0..1 position."""
    if width <= 1:
        return 0.0
    return min(max(x, 0), width - 1) / (width - 1)


def step_position(position: float, delta: float) -> float:
    """Nudge a scrub position, keeping it inside 0..1."""
    return max(0.0, min(1.0, position + delta))
