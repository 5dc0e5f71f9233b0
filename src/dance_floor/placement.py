"""Horizontal placement of dance units."""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Sequence

from dance_floor.config import DEFAULT_CONFIG, DancePartyConfig
from dance_floor.hashing import hash_string, hash_unit, utf16_sort_key
from dance_floor.models import DanceUnit, PlacedUnit
from dance_floor.priority import max_possible_score
from dance_floor.song import get_song_slot

logger = logging.getLogger(__name__)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def enforce_min_spacing(
    units: Sequence[PlacedUnit], min_spacing: float
) -> list[PlacedUnit]:
    """Spread units so adjacent ones are at least ``min_spacing`` apart.

    Units are swept left to right in x order (ties broken by unit key) and
    pushed right where they crowd their neighbour. The resulting spread is
    centred on 0.5 inside ``[margin, 1 - margin]`` with
    ``margin = min_spacing / 2``, or compressed proportionally when it does
    not fit. A spacing of 1 or more leaves no room at all and stacks every
    unit at 0.5. Relative order never changes; the result keeps input order.
    """
    if len(units) <= 1 or not min_spacing > 0:
        return list(units)

    if min_spacing >= 1:
        return [replace(unit, x=0.5) for unit in units]

    order = sorted(
        range(len(units)),
        key=lambda i: (units[i].x, utf16_sort_key(units[i].unit_key)),
    )
    xs = [units[i].x for i in order]

    for i in range(1, len(xs)):
        if xs[i] - xs[i - 1] < min_spacing:
            xs[i] = xs[i - 1] + min_spacing

    margin = min_spacing / 2
    spread = xs[-1] - xs[0]
    available = 1 - 2 * margin

    if spread > available:
        scale = available / spread
        base = xs[0]
        xs = [margin + (x - base) * scale for x in xs]
    else:
        shift = 0.5 - (xs[0] + xs[-1]) / 2
        left_overflow = margin - (xs[0] + shift)
        right_overflow = xs[-1] + shift - (1 - margin)
        shift += max(0.0, left_overflow) - max(0.0, right_overflow)
        xs = [_clamp(x + shift, margin, 1 - margin) for x in xs]

    result = list(units)
    for idx, x in zip(order, xs):
        if result[idx].x != x:
            result[idx] = replace(result[idx], x=x)
    return result


def place_dance_units(
    units: Sequence[DanceUnit],
    form_title: str,
    song_number: int,
    config: DancePartyConfig = DEFAULT_CONFIG,
) -> list[PlacedUnit]:
    """Give every unit a position, vertical jitter and flip state."""
    if not units:
        return []

    song_slot = get_song_slot(form_title, song_number)
    layout = config.layout
    max_score = max_possible_score(config.weights)
    solo_center = hash_unit(song_slot + "\0soloCenter")
    jitter = layout.vertical_jitter

    placed: list[PlacedUnit] = []
    for unit in units:
        raw = hash_unit(song_slot + "\0pos\0" + unit.unit_key)
        if unit.type == "solo":
            raw = _lerp(raw, solo_center, layout.solo_affinity)
        bias = (
            _clamp(unit.priority_score / max_score, 0, layout.center_bias_max)
            if max_score > 0
            else 0.0
        )
        y_hash = hash_string(song_slot + "\0y\0" + unit.unit_key)
        placed.append(
            PlacedUnit(
                type=unit.type,
                members=unit.members,
                unit_key=unit.unit_key,
                priority_score=unit.priority_score,
                image_num=unit.image_num,
                x=_lerp(raw, 0.5, bias),
                y_offset=y_hash % (jitter * 2 + 1) - jitter,
                flipped=hash_string(song_slot + "\0flip\0" + unit.unit_key) % 2 == 1,
            )
        )

    logger.debug("Placed %d units for %r song %d", len(placed), form_title, song_number)
    return enforce_min_spacing(placed, layout.min_spacing)
