"""Textual front end for the timer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from rich.table import Table
from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Static

from .bundles import AutosplitterBundle
from .formatting import format_delta, format_split_time, format_timer
from .reconciler import Reconciler
from .segments import DeltaClass, segment_records
from .session import Session, load_bundle_session
from .splits import MalformedConfigError
from .timer import TimerPhase, TimerSnapshot

logger = logging.getLogger(__name__)

PHASE_STYLES = {
    TimerPhase.NOT_RUNNING: "bold white",
    TimerPhase.RUNNING: "bold green",
    TimerPhase.PAUSED: "bold gold1",
    TimerPhase.ENDED: "bold cornflower_blue",
}

PHASE_LABELS = {
    TimerPhase.NOT_RUNNING: "READY",
    TimerPhase.RUNNING: "RUNNING",
    TimerPhase.PAUSED: "PAUSED",
    TimerPhase.ENDED: "FINISHED",
}

DELTA_STYLES = {
    DeltaClass.AHEAD: "green",
    DeltaClass.CLOSE: "gold1",
    DeltaClass.BEHIND: "red",
}


@dataclass(frozen=True, slots=True)
class SplitRow:
    name: str
    state: str
    time: str
    delta: str | None = None
    delta_class: DeltaClass | None = None


def split_rows(snapshot: TimerSnapshot) -> list[SplitRow]:
    """Rows for the split list.

    Completed splits show their split time and the delta of their segment
    against the best segment; upcoming splits show the best segment.
    """

    current = snapshot.current_split_index or 0
    rows: list[SplitRow] = []
    for position, record in enumerate(segment_records(snapshot)):
        if position < current:
            rows.append(
                SplitRow(
                    name=record.name,
                    state="done",
                    time=format_split_time(record.split_time),
                    delta=format_delta(record.delta) if record.delta is not None else None,
                    delta_class=record.classification,
                )
            )
        elif position == current and snapshot.phase is TimerPhase.RUNNING:
            rows.append(SplitRow(name=record.name, state="current", time=""))
        else:
            rows.append(
                SplitRow(
                    name=record.name,
                    state="pending",
                    time=format_split_time(record.best_segment_time),
                )
            )
    return rows


def render_splits(rows: Sequence[SplitRow]) -> Table:
    table = Table.grid(expand=True, padding=(0, 1))
    table.add_column(ratio=1)
    table.add_column(justify="right")
    table.add_column(justify="right", min_width=9)
    for row in rows:
        if row.state == "current":
            name = Text(f"▶ {row.name}", style="bold white on grey23")
        elif row.state == "done":
            name = Text(f"✓ {row.name}", style="grey70")
        else:
            name = Text(f"  {row.name}", style="grey50")
        delta = Text(row.delta or "", style=DELTA_STYLES.get(row.delta_class, ""))
        time_style = "white" if row.state == "done" else "grey50"
        table.add_row(name, delta, Text(row.time, style=time_style))
    return table


class SplitTimerApp(App):
    """Split list, big clock and key bindings over a reconciler."""

    TITLE = "autosplit-timer"

    CSS = """
    Screen {
        background: rgb(20, 20, 25);
    }
    #header {
        background: rgb(30, 30, 40);
        content-align: center middle;
        padding: 0 1;
    }
    #splits {
        background: rgb(25, 25, 35);
        padding: 0 1;
        margin: 1 0;
    }
    #clock {
        background: rgb(30, 30, 40);
        content-align: center middle;
        padding: 1 1;
    }
    #status {
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("space", "start_or_split", "Start/Split"),
        Binding("p", "toggle_pause", "Pause"),
        Binding("r", "reset", "Reset"),
        Binding("u", "undo_split", "Undo"),
        Binding("s", "skip_split", "Skip"),
        Binding("n", "next_game", "Next game"),
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        session: Session,
        *,
        bundles: Sequence[AutosplitterBundle] = (),
        poll_interval: float = 0.016,
        home: Path | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._reconciler = Reconciler(session.timer, session.watcher)
        self._bundles = list(bundles)
        self._poll_interval = poll_interval
        self._home = home

    @property
    def reconciler(self) -> Reconciler:
        return self._reconciler

    @property
    def session(self) -> Session:
        return self._session

    def compose(self) -> ComposeResult:
        yield Static(id="header")
        yield Static(id="splits")
        yield Static(id="clock")
        yield Static(id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.refresh_view()
        self.set_interval(self._poll_interval, self._tick)

    def on_unmount(self) -> None:
        self._session.close()

    def _tick(self) -> None:
        self._reconciler.poll()
        self.refresh_view()

    def refresh_view(self) -> None:
        snapshot = self._reconciler.timer.snapshot()
        splits = self._session.splits

        header = Text.assemble(
            (splits.game, "bold white"), "\n", (splits.category, "grey70")
        )
        if self._session.bundle is not None:
            header.append(f"\n[{self._session.bundle.name}]", style="grey50")
        self.query_one("#header", Static).update(header)
        self.query_one("#splits", Static).update(render_splits(split_rows(snapshot)))
        self.query_one("#clock", Static).update(
            Text(format_timer(snapshot.current_time), style=PHASE_STYLES[snapshot.phase])
        )

        status = Text(f"[{PHASE_LABELS[snapshot.phase]}]", style="grey70")
        if self._reconciler.auto_splitting:
            status.append("  Auto-split active", style="medium_purple1")
        self.query_one("#status", Static).update(status)

    def action_start_or_split(self) -> None:
        self._reconciler.start_or_split()
        self.refresh_view()

    def action_toggle_pause(self) -> None:
        self._reconciler.toggle_pause()
        self.refresh_view()

    def action_reset(self) -> None:
        self._reconciler.reset()
        self.refresh_view()

    def action_undo_split(self) -> None:
        self._reconciler.undo_split()
        self.refresh_view()

    def action_skip_split(self) -> None:
        self._reconciler.skip_split()
        self.refresh_view()

    def action_next_game(self) -> None:
        if not self._bundles:
            self.notify("No auto-splitters found", severity="warning")
            return

        current = self._session.bundle
        names = [bundle.name for bundle in self._bundles]
        position = names.index(current.name) + 1 if current is not None and current.name in names else 0
        bundle = self._bundles[position % len(self._bundles)]

        try:
            session = load_bundle_session(bundle, home=self._home)
        except MalformedConfigError as exc:
            logger.error("Failed to load auto-splitter: %s", exc)
            self.notify(str(exc), severity="error")
            return

        self._reconciler.replace(session.timer, session.watcher)
        self._session = session
        self.refresh_view()


__all__ = ["SplitRow", "SplitTimerApp", "render_splits", "split_rows"]
