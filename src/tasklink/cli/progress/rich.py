"""Terminal progress for fetch and sync cycles."""

from __future__ import annotations

from types import TracebackType
from typing import NamedTuple

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn

from tasklink.engine.progress import SyncProgress


class _PhaseStyle(NamedTuple):
    running: str
    done: str
    unit: str


_PHASES = {
    "Courses": _PhaseStyle("[cyan]Listing Canvas courses", "[cyan]Canvas courses listed", ""),
    "Assignments": _PhaseStyle("[blue]Fetching assignments", "[blue]Assignments fetched", "courses"),
    "Index": _PhaseStyle("[magenta]Reading Todoist projects", "[magenta]Todoist projects read", "projects"),
    "Sync": _PhaseStyle("[green]Syncing assignments", "[green]Assignments synced", "assignments"),
}


class RichSyncProgress(SyncProgress):
    """One Rich progress row per cycle phase, written to stderr by default.

    Must be entered before the cycle starts::

        with RichSyncProgress() as progress:
            tasklink = Tasklink.from_config(config, progress=progress)
            await tasklink.run_fetch_cycle(config.user_id)
    """

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:<28}"),
            BarColumn(bar_width=24),
            MofNCompleteColumn(),
            TextColumn("{task.fields[unit]}"),
            TimeElapsedColumn(),
            console=console or Console(stderr=True),
        )
        self._rows: dict[str, TaskID] = {}

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def phase_start(self, phase: str, total: int | None = None) -> None:
        style = _PHASES.get(phase, _PhaseStyle(phase, phase, ""))
        self._rows[phase] = self._progress.add_task(style.running, total=total, unit=style.unit)

    def item_done(self, phase: str) -> None:
        if phase in self._rows:
            self._progress.advance(self._rows[phase])

    def phase_done(self, phase: str) -> None:
        row = self._rows.get(phase)
        if row is None:
            return
        style = _PHASES.get(phase, _PhaseStyle(phase, phase, ""))
        total = self._progress.tasks[row].total
        # Indeterminate phases are shown as a single completed step.
        self._progress.update(row, description=style.done, total=total or 1, completed=total or 1)

    def phase_error(self, phase: str, error: BaseException) -> None:
        row = self._rows.get(phase)
        if row is not None:
            self._progress.update(row, description=f"[red]✗ {phase} failed[/red]")
