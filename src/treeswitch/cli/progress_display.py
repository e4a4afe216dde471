"""Terminal rendering of checkout progress events."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
)

from treeswitch.progress.types import ProgressEvent


class CheckoutProgressDisplay:
    """Progress bar on stderr, fed one ProgressEvent at a time.

    Usage:
        with CheckoutProgressDisplay(Console(stderr=True)) as display:
            checkout_branch(ctx, repository, None, branch, progress_callback=display.update)
    """

    def __init__(self, console: Console) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        )
        self._task_id: TaskID | None = None

    def __enter__(self) -> CheckoutProgressDisplay:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def update(self, event: ProgressEvent) -> None:
        description = escape(event.title)
        if event.description is not None:
            description = f"{description} [dim]{escape(event.description)}[/dim]"
        if self._task_id is None:
            self._task_id = self._progress.add_task(description, total=1.0)
        self._progress.update(self._task_id, completed=event.value, description=description)
