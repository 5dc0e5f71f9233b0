"""Pytest configuration for dance-floor."""

from __future__ import annotations

import os

import pytest

from dance_floor.models import DancerRow


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    del config
    if os.environ.get("DANCE_FLOOR_CI") != "1":
        return
    skip_tui = pytest.mark.skip(reason="Skipping interactive TUI tests in CI.")
    for item in items:
        if "tui" in item.keywords:
            item.add_marker(skip_tui)


def make_roster(count: int) -> list[DancerRow]:
    """Build a mixed roster of ``count`` dancers with varied attributes."""
    roles = ("lead", "follow", "both", "unknown", "follow", "lead", "follow")
    dancers: list[DancerRow] = []
    for idx in range(count):
        dancers.append(
            DancerRow(
                name=f"dancer{idx:02d}",
                role=roles[idx % len(roles)],  # type: ignore[arg-type]
                ts=1_700_000_000_000 + idx * 60_000 if idx % 4 else None,
                wish=f"wish {idx}" if idx % 3 == 0 else None,
                paid=idx % 2 == 0,
            )
        )
    return dancers


@pytest.fixture
def roster() -> list[DancerRow]:
    return make_roster(14)


@pytest.fixture
def roster_factory():
    return make_roster
