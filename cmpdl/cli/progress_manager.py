"""
Manages the single-line Rich progress display used while files download.
"""

import asyncio
import math

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
)
from rich.text import Text

from cmpdl.utils.formatting import fit_label


class KilobyteColumn(ProgressColumn):
    """Renders transferred and total size in whole kilobytes."""

    def render(self, task: Task) -> Text:
        completed = int(task.completed) // 1024
        total = "?" if task.total is None else int(task.total) // 1024
        return Text(f"{completed}KB/{total}KB", style="progress.download")


class KilobyteSpeedColumn(ProgressColumn):
    """Renders the current transfer speed in whole kilobytes per second."""

    def render(self, task: Task) -> Text:
        speed = task.finished_speed or task.speed or 0
        return Text(f"({int(speed) // 1024} KB/s)", style="progress.data.speed")


class SecondsRemainingColumn(ProgressColumn):
    """Renders the estimated time remaining in seconds."""

    max_refresh = 0.5

    def render(self, task: Task) -> Text:
        if task.finished:
            return Text("0s", style="progress.remaining")
        remaining = task.time_remaining
        if remaining is None:
            return Text("?s", style="progress.remaining")
        return Text(f"{math.ceil(remaining)}s", style="progress.remaining")


class ProgressManager:
    """
    Shows one live progress line per transfer.

    Transfers run one at a time: each finished transfer is printed once as a
    static line and removed from the live display, so the live region never
    holds more than the current file.
    """

    def __init__(self, console: Console, enabled: bool = True):
        self.console = console
        self.enabled = enabled

        self.progress = Progress(
            TextColumn("{task.fields[counter]}{task.description}"),
            TextColumn("["),
            BarColumn(bar_width=40),
            TextColumn("]"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            "|",
            KilobyteColumn(),
            KilobyteSpeedColumn(),
            SecondsRemainingColumn(),
            console=console,
            transient=False,
        )

    def add_transfer(
        self, label: str, total: int | None, counter: str = ""
    ) -> TaskID | None:
        """
        Starts a progress line for one file.

        Args:
            label: File name shown on the line, fitted to a fixed width.
            total: Expected size in bytes, or None if the server did not say.
            counter: Fixed-width prefix such as '(3/120) '.
        """
        if not self.enabled:
            return None
        return self.progress.add_task(
            escape(fit_label(label)),
            total=total,
            counter=escape(counter),
            start=True,
        )

    def update_transfer(self, task_id: TaskID | None, completed: int):
        if task_id is not None and self.enabled:
            self.progress.update(task_id, completed=completed)

    def finish_transfer(self, task_id: TaskID | None):
        """Completes the line at 100%, prints it and drops it from the live view."""
        if task_id is None or not self.enabled:
            return
        task = self._get_task(task_id)
        if task is None:
            return
        total = task.total if task.total is not None else max(int(task.completed), 1)
        self.progress.update(task_id, total=total, completed=total)
        self.progress.stop_task(task_id)
        self.progress.console.print(self.progress.make_tasks_table([task]))
        self.progress.remove_task(task_id)

    def discard_transfer(self, task_id: TaskID | None):
        if task_id is None or not self.enabled:
            return
        try:
            self.progress.remove_task(task_id)
        except KeyError:
            pass

    def _get_task(self, task_id: TaskID) -> Task | None:
        return next((t for t in self.progress.tasks if t.id == task_id), None)

    async def __aenter__(self):
        if self.enabled:
            self.progress.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.enabled:
            await asyncio.sleep(0.1)
            self.progress.stop()
