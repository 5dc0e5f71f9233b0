"""Single entry point that turns a roster into a placed dance floor."""

from __future__ import annotations

from typing import Optional, Sequence

from dance_floor.config import DEFAULT_CONFIG, DancePartyConfig
from dance_floor.models import DancerRow, PlacedUnit
from dance_floor.pairing import build_dance_units
from dance_floor.placement import place_dance_units


def compute_dance_floor(
    dancers: Sequence[DancerRow],
    form_title: str,
    song_number: int,
    config: Optional[DancePartyConfig] = None,
) -> list[PlacedUnit]:
    """Pair the roster and place the resulting units for one song."""
    if config is None:
        config = DEFAULT_CONFIG
    units = build_dance_units(dancers, form_title, song_number, config)
    return place_dance_units(units, form_title, song_number, config)
