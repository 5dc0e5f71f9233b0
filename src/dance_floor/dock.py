"""Dock-style magnification of placed units around a scrub position.

Magnified units need ``base_icon_height * (scale - 1)`` extra pixels. That
extra width is accumulated outward from the scrub position so units left of
it slide left and units right of it slide right, like a lens pushing its
neighbours apart.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from dance_floor.config import DEFAULT_DOCK, DockConfig
from dance_floor.models import DockLayoutEntry

# Average gap assumed when there are too few units to measure one.
FALLBACK_SPACING = 0.2


def get_dock_scale(
    distance: float, neighbor_radius: float, dock: DockConfig = DEFAULT_DOCK
) -> float:
    """Return the magnification for a unit ``distance`` from the scrub point."""
    if neighbor_radius <= 0:
        return 1.0
    normalized = distance / neighbor_radius
    if normalized >= 1:
        return 1.0
    if dock.falloff_fn == "gaussian":
        t = math.exp(-4 * normalized * normalized)
    else:
        t = (1 + math.cos(math.pi * normalized)) / 2
    return 1.0 + (dock.max_scale - 1.0) * t


def _neighbor_radius(positions: Sequence[float], dock: DockConfig) -> float:
    ordered = sorted(positions)
    if len(ordered) <= 1:
        spacing = FALLBACK_SPACING
    else:
        gaps = (b - a for a, b in zip(ordered, ordered[1:]))
        spacing = sum(gaps) / (len(ordered) - 1)
    return spacing * dock.neighbor_count


def compute_dock_layout(
    unit_positions: Sequence[float],
    scrub_x: float,
    container_width: float,
    dock: Optional[DockConfig] = None,
) -> list[DockLayoutEntry]:
    """Return the scale and pixel displacement of every unit.

    ``unit_positions`` and ``scrub_x`` are normalized [0, 1] coordinates.
    ``container_width`` is the floor width in pixels; the displacement is
    measured in the same pixels as ``dock.base_icon_height`` and does not
    depend on it.
    """
    del container_width
    if dock is None:
        dock = DEFAULT_DOCK
    count = len(unit_positions)
    if count == 0:
        return []

    radius = _neighbor_radius(unit_positions, dock)
    if radius <= 0:
        return [DockLayoutEntry(scale=1.0, dx=0.0) for _ in unit_positions]

    scales = [get_dock_scale(abs(pos - scrub_x), radius, dock) for pos in unit_positions]
    extras = [dock.base_icon_height * (scale - 1) for scale in scales]

    order = sorted(range(count), key=lambda i: unit_positions[i])
    split = -1
    for rank, idx in enumerate(order):
        if unit_positions[idx] <= scrub_x:
            split = rank

    dx = [0.0] * count

    accumulated = 0.0
    for rank in range(split + 1, count):
        if rank > split + 1 or split >= 0:
            accumulated += extras[order[rank - 1]] / 2
        accumulated += extras[order[rank]] / 2
        dx[order[rank]] = accumulated

    accumulated = 0.0
    for rank in range(split, -1, -1):
        if rank == split:
            accumulated += extras[order[rank]] / 2
            if split + 1 < count:
                accumulated += extras[order[split + 1]] / 2
        else:
            accumulated += extras[order[rank + 1]] / 2
            accumulated += extras[order[rank]] / 2
        dx[order[rank]] = -accumulated

    return [DockLayoutEntry(scale=scale, dx=shift) for scale, shift in zip(scales, dx)]


def find_nearest_unit(unit_positions: Sequence[float], scrub_x: float) -> int:
    """Return the index of the unit closest to ``scrub_x``, or -1 if none."""
    best_idx = -1
    best_dist = math.inf
    for idx, pos in enumerate(unit_positions):
        dist = abs(pos - scrub_x)
        if dist < best_dist:
            best_dist = dist
            best_idx = idx
    return best_idx
