"""Text rendering of a placed dance floor for the terminal."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.text import Text

from dance_floor.config import DockConfig
from dance_floor.images import get_bubble_alignment
from dance_floor.models import DockLayoutEntry, PlacedUnit

# Idle figure footprint in terminal cells.
ICON_WIDTH_CELLS = 3
BASE_FIGURE_ROWS = 2

PAIR_GLYPH = "#"
SOLO_GLYPH = "|"
FLOOR_GLYPH = "="

UNIT_STYLE = "#c6d0f2"
HIGHLIGHT_STYLE = "bold #5fc9d6"
LABEL_STYLE = "dim"


def ellipsize(text: str, max_len: int, marker: str = "...") -> str:
    """Cut ``text`` to ``max_len`` cells, ending in ``marker`` when cut."""
    if max_len <= 0:
        return ""
    if len(text) <= max_len:
        return text
    if max_len <= len(marker):
        return marker[:max_len]
    return text[: max_len - len(marker)] + marker


def describe_unit(unit: PlacedUnit) -> str:
    """Return member names in the order they appear on screen."""
    if unit.type == "solo" or len(unit.members) < 2:
        return unit.members[0].name if unit.members else ""
    leader, follower = unit.members[0], unit.members[1]
    alignment = get_bubble_alignment(unit.image_num, unit.flipped)
    if alignment.left_member == "leader":
        return f"{leader.name} & {follower.name}"
    return f"{follower.name} & {leader.name}"


def unit_wishes(unit: PlacedUnit) -> list[str]:
    return [member.wish for member in unit.members if member.wish]


def floor_columns(
    placed: Sequence[PlacedUnit],
    entries: Sequence[DockLayoutEntry],
    width: int,
    dock: DockConfig,
) -> list[int]:
    """Return the terminal column of every unit after dock displacement."""
    if width <= 0:
        return [0 for _ in placed]
    px_per_cell = (
        dock.base_icon_height / ICON_WIDTH_CELLS if dock.base_icon_height > 0 else 1.0
    )
    columns: list[int] = []
    for unit, entry in zip(placed, entries):
        col = unit.x * (width - 1) + entry.dx / px_per_cell
        columns.append(int(round(max(0.0, min(width - 1.0, col)))))
    return columns


def figure_rows(scale: float) -> int:
    return max(1, int(round(BASE_FIGURE_ROWS * scale)))


def render_floor(
    placed: Sequence[PlacedUnit],
    entries: Sequence[DockLayoutEntry],
    width: int,
    height: int,
    dock: DockConfig,
    *,
    highlight: Optional[int] = None,
) -> Text:
    """Draw units as vertical figures standing on a floor line.

    Figures grow with their dock scale; magnified or highlighted units get
    their pose number printed above them.
    """
    if width <= 0 or height <= 0:
        return Text("")
    cells: list[list[tuple[str, str]]] = [
        [(" ", "") for _ in range(width)] for _ in range(height)
    ]
    if height > 1:
        cells[height - 1] = [(FLOOR_GLYPH, LABEL_STYLE) for _ in range(width)]
    baseline = height - 2 if height > 1 else 0

    columns = floor_columns(placed, entries, width, dock)
    draw_order = sorted(range(len(placed)), key=lambda i: entries[i].scale)
    for idx in draw_order:
        unit = placed[idx]
        entry = entries[idx]
        col = columns[idx]
        style = HIGHLIGHT_STYLE if idx == highlight else UNIT_STYLE
        glyph = PAIR_GLYPH if unit.type == "pair" else SOLO_GLYPH
        bottom = baseline - (1 if unit.y_offset > 0 and baseline > 0 else 0)
        rows = min(bottom + 1, figure_rows(entry.scale))
        for row in range(bottom, bottom - rows, -1):
            cells[row][col] = (glyph, style)
        top = bottom - rows
        if top >= 0 and (idx == highlight or entry.scale > 1.05):
            label = str(unit.image_num)
            start = max(0, min(width - len(label), col - len(label) // 2))
            for offset, char in enumerate(label[:width]):
                cells[top][start + offset] = (char, style)

    output = Text()
    for row_idx, row in enumerate(cells):
        if row_idx:
            output.append("\n")
        for char, style in row:
            output.append(char, style=style or None)
    return output


def render_status_line(
    *,
    form_title: str,
    song_number: int,
    placed: Sequence[PlacedUnit],
    highlight: Optional[int],
    width: int,
) -> str:
    pairs = sum(1 for unit in placed if unit.type == "pair")
    solos = len(placed) - pairs
    text = f"{form_title} | song {song_number} | {pairs} pairs, {solos} solos"
    if highlight is not None and 0 <= highlight < len(placed):
        unit = placed[highlight]
        text += f" | {describe_unit(unit)}"
        wishes = unit_wishes(unit)
        if wishes:
            text += f": {' / '.join(wishes)}"
    return ellipsize(text, width)
