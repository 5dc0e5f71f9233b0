"""Textual viewer for the dance floor with dock magnification."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, cast

try:
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.widgets import Footer, Header, Static
    from rich.text import Text
except ImportError as exc:  # pragma: no cover - depends on environment
    raise RuntimeError(
        "Textual is required for the TUI. Install the 'textual' dependency."
    ) from exc

from dance_floor.config import (
    FALLOFF_FUNCTIONS,
    DancePartyConfig,
    save_config,
)
from dance_floor.dock import compute_dock_layout, find_nearest_unit
from dance_floor.engine import compute_dance_floor
from dance_floor.logging_setup import set_console_level
from dance_floor.models import DancerRow, DockLayoutEntry, PlacedUnit
from dance_floor.ui.floor_rendering import render_floor, render_status_line
from dance_floor.ui.scrub import position_from_pointer, step_position

logger = logging.getLogger(__name__)


class FloorView(Static):
    """The dance floor; pointer movement drives the scrub position."""

    def _app(self) -> "DanceFloorApp":
        return cast(DanceFloorApp, self.app)

    def render(self) -> Text:
        width = max(1, self.content_size.width)
        height = max(1, self.content_size.height)
        return self._app().render_floor_text(width, height)

    def on_mouse_move(self, event: events.MouseMove) -> None:
        offset = event.get_content_offset(self)
        if offset is None:
            return
        self._app().set_scrub(position_from_pointer(offset.x, self.content_size.width))

    def on_leave(self, event: events.Leave) -> None:
        del event
        self._app().clear_scrub()


class StatusLine(Static):
    """One-line summary of the song and the unit under the scrub."""

    def render(self) -> Text:
        width = max(1, self.content_size.width)
        return Text(cast(DanceFloorApp, self.app).status_text(width))


class DanceFloorApp(App):
    """Dance floor viewer application."""

    TITLE = "Dance Floor"
    CSS = """
    #floor {
        height: 1fr;
        border: round #5fc9d6;
    }
    #status {
        height: 1;
    }
    """
    SCRUB_STEP = 0.02
    SCALE_STEP = 0.25
    MAX_SCALE_LIMIT = 4.0

    BINDINGS = [
        Binding("left", "scrub_left", "Scrub left"),
        Binding("right", "scrub_right", "Scrub right"),
        Binding("escape", "clear_scrub", "Clear scrub"),
        Binding("n", "next_song", "Next song"),
        Binding("p", "previous_song", "Previous song"),
        Binding("plus", "scale_up", "Zoom +", key_display="+"),
        Binding("minus", "scale_down", "Zoom -", key_display="-"),
        Binding("g", "toggle_falloff", "Falloff"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(
        self,
        *,
        dancers: Sequence[DancerRow],
        form_title: str,
        song_number: int,
        config: Optional[DancePartyConfig] = None,
        config_path: Optional[Path] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.dancers = list(dancers)
        self.form_title = form_title
        self.song_number = max(1, song_number)
        self.floor_config = config or DancePartyConfig()
        self._config_path = config_path
        self.scrub: Optional[float] = None
        self.placed: list[PlacedUnit] = []
        self._floor_ready = False
        self._recompute()

    def compose(self) -> ComposeResult:
        yield Header()
        yield FloorView(id="floor")
        yield StatusLine(id="status")
        yield Footer()

    # --- Layout ---
    def _recompute(self) -> None:
        self.placed = compute_dance_floor(
            self.dancers, self.form_title, self.song_number, self.floor_config
        )
        logger.debug(
            "Song %d: %d units on the floor", self.song_number, len(self.placed)
        )
        self._refresh_views()

    def on_mount(self) -> None:
        self._floor_ready = True
        self._refresh_views()

    def _refresh_views(self) -> None:
        if not self._floor_ready:
            return
        self.query_one(FloorView).refresh()
        self.query_one(StatusLine).refresh()

    def dock_entries(self, width: int) -> list[DockLayoutEntry]:
        if self.scrub is None:
            return [DockLayoutEntry(scale=1.0, dx=0.0) for _ in self.placed]
        positions = [unit.x for unit in self.placed]
        return compute_dock_layout(positions, self.scrub, width, self.floor_config.dock)

    def highlighted_index(self) -> Optional[int]:
        if self.scrub is None:
            return None
        idx = find_nearest_unit([unit.x for unit in self.placed], self.scrub)
        return idx if idx >= 0 else None

    def render_floor_text(self, width: int, height: int) -> Text:
        return render_floor(
            self.placed,
            self.dock_entries(width),
            width,
            height,
            self.floor_config.dock,
            highlight=self.highlighted_index(),
        )

    def status_text(self, width: int) -> str:
        return render_status_line(
            form_title=self.form_title,
            song_number=self.song_number,
            placed=self.placed,
            highlight=self.highlighted_index(),
            width=width,
        )

    # --- Scrub ---
    def set_scrub(self, position: float) -> None:
        self.scrub = step_position(position, 0.0)
        self._refresh_views()

    def clear_scrub(self) -> None:
        self.scrub = None
        self._refresh_views()

    def _nudge_scrub(self, delta: float) -> None:
        start = 0.5 if self.scrub is None else self.scrub
        self.set_scrub(step_position(start, delta))

    def action_scrub_left(self) -> None:
        self._nudge_scrub(-self.SCRUB_STEP)

    def action_scrub_right(self) -> None:
        self._nudge_scrub(self.SCRUB_STEP)

    def action_clear_scrub(self) -> None:
        self.clear_scrub()

    # --- Songs ---
    def action_next_song(self) -> None:
        self.song_number += 1
        self._recompute()

    def action_previous_song(self) -> None:
        if self.song_number <= 1:
            return
        self.song_number -= 1
        self._recompute()

    # --- Dock tuning ---
    def _set_max_scale(self, value: float) -> None:
        value = max(1.0, min(self.MAX_SCALE_LIMIT, value))
        self.floor_config = self.floor_config.with_overrides(dock={"max_scale": value})
        self.notify(f"Max scale {value:.2f}")
        self._refresh_views()

    def action_scale_up(self) -> None:
        self._set_max_scale(self.floor_config.dock.max_scale + self.SCALE_STEP)

    def action_scale_down(self) -> None:
        self._set_max_scale(self.floor_config.dock.max_scale - self.SCALE_STEP)

    def action_toggle_falloff(self) -> None:
        current = FALLOFF_FUNCTIONS.index(self.floor_config.dock.falloff_fn)
        falloff = FALLOFF_FUNCTIONS[(current + 1) % len(FALLOFF_FUNCTIONS)]
        self.floor_config = self.floor_config.with_overrides(dock={"falloff_fn": falloff})
        self.notify(f"Falloff {falloff}")
        self._refresh_views()

    def _save_config(self) -> None:
        try:
            save_config(self.floor_config, self._config_path)
        except OSError:
            logger.exception("Failed to save config")

    def action_quit_app(self) -> None:
        self._save_config()
        self.exit()


def run_tui(
    dancers: Sequence[DancerRow],
    form_title: str,
    song_number: int,
    *,
    config: Optional[DancePartyConfig] = None,
    config_path: Optional[Path] = None,
) -> int:
    """Run the TUI and return an exit code."""
    logger.info("TUI start title=%r song=%d", form_title, song_number)
    set_console_level(logging.WARNING)
    app = DanceFloorApp(
        dancers=dancers,
        form_title=form_title,
        song_number=song_number,
        config=config,
        config_path=config_path,
    )
    app.run()
    logger.info("TUI exit")
    return 0
