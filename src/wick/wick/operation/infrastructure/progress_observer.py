"""ProgressOperationObserver — renders a Rich progress bar per repeated operation."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text


class _ThreeSegmentBarColumn(ProgressColumn):
    """ProgressColumn that renders three segments: done, in-flight, remaining."""

    def __init__(self, bar_width: int = 40) -> None:
        super().__init__()
        self.bar_width = bar_width

    def render(self, task: Task) -> Text:
        bar_width = self.bar_width or 40
        total = task.total or 0
        if total > 0:
            done_cells = int(task.completed / total * bar_width)
            inflight = int(task.fields.get("inflight", 0))
            # In-flight fills from where done ends; capped so done+inflight <= bar_width.
            inflight_cells = min(
                int(inflight / total * bar_width),
                bar_width - done_cells,
            )
        else:
            done_cells = 0
            inflight_cells = 0
        remaining_cells = bar_width - done_cells - inflight_cells

        result = Text()
        result.append("█" * done_cells, style="bright_green")
        result.append("▒" * inflight_cells, style="grey50")
        result.append("░" * remaining_cells, style="dim white")
        return result


class _CountsColumn(ProgressColumn):
    """Renders 'done/total' plus a red failure count once anything failed."""

    def render(self, task: Task) -> Text:
        total = int(task.total or 0)
        text = Text(f"{int(task.completed)}/{total}")
        failed = int(task.fields.get("failed", 0))
        if failed:
            text.append(f"  {failed} failed", style="red")
        return text


def _make_progress(console: Console) -> Progress:
    """Create a Progress instance with the standard column layout."""
    return Progress(
        TextColumn("{task.description}"),
        _ThreeSegmentBarColumn(bar_width=40),
        _CountsColumn(),
        TimeElapsedColumn(),
        console=console,
        refresh_per_second=10,
        transient=False,
    )


class ProgressOperationObserver:
    """Renders one Rich progress bar per repeated call/publish on stderr.

    Only operation_started, repetition_started, repetition_completed,
    repetition_failed and operation_completed produce output; all other events
    are no-ops.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests);
    the counters are still maintained.

    Does NOT inherit from OperationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._done: dict[str, int] = {}
        self._inflight: dict[str, int] = {}
        self._failed: dict[str, int] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None

    def counts(self, kind: str, target: str) -> tuple[int, int, int]:
        """Return (done, in-flight, failed) for an operation."""
        key = _key(kind=kind, target=target)
        return (
            self._done.get(key, 0),
            self._inflight.get(key, 0),
            self._failed.get(key, 0),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _update_task(self, key: str) -> None:
        """Push current counters into the Rich task."""
        if self._progress is None or key not in self._task_ids:
            return
        self._progress.update(
            self._task_ids[key],
            completed=self._done.get(key, 0),
            inflight=self._inflight.get(key, 0),
            failed=self._failed.get(key, 0),
        )

    def _finish_one(self, key: str) -> None:
        if key in self._done:
            self._done[key] += 1
            self._inflight[key] = max(0, self._inflight[key] - 1)
        if not self._disabled:
            self._update_task(key=key)

    # ------------------------------------------------------------------
    # Observer events
    # ------------------------------------------------------------------

    def operation_started(
        self,
        kind: str,
        target: str,
        repeat: int,
        concurrency: int,
        delay_ms: int,
    ) -> None:
        key = _key(kind=kind, target=target)
        self._done[key] = 0
        self._inflight[key] = 0
        self._failed[key] = 0

        if self._disabled:
            return

        if self._progress is None:
            self._progress = _make_progress(console=Console(stderr=True))
            self._progress.start()
        self._task_ids[key] = self._progress.add_task(
            description=f"[cyan]{key}[/cyan]",
            total=float(repeat),
            inflight=0,
            failed=0,
        )

    def operation_completed(
        self,
        kind: str,
        target: str,
        total: int,
        failed: int,
        elapsed_seconds: float,
    ) -> None:
        key = _key(kind=kind, target=target)
        self._task_ids.pop(key, None)
        if self._progress is not None and not self._task_ids:
            self._progress.stop()
            self._progress = None

    def repetition_started(self, kind: str, target: str, index: int) -> None:
        key = _key(kind=kind, target=target)
        if key in self._inflight:
            self._inflight[key] += 1
        if not self._disabled:
            self._update_task(key=key)

    def repetition_completed(
        self, kind: str, target: str, index: int, elapsed_ms: int | None
    ) -> None:
        self._finish_one(key=_key(kind=kind, target=target))

    def repetition_failed(
        self, kind: str, target: str, index: int, reason: str
    ) -> None:
        key = _key(kind=kind, target=target)
        if key in self._failed:
            self._failed[key] += 1
        self._finish_one(key=key)

    def call_result(self, procedure: str, output: str) -> None:
        pass

    def call_progress(self, procedure: str, output: str) -> None:
        pass

    def registered(self, procedure: str, elapsed_ms: int | None) -> None:
        pass

    def subscribed(self, topic: str, elapsed_ms: int | None) -> None:
        pass

    def invocation_received(self, procedure: str, output: str) -> None:
        pass

    def event_received(self, topic: str, output: str) -> None:
        pass

    def command_failed(
        self, procedure: str, command: str, reason: str, stderr: str
    ) -> None:
        pass

    def invocation_limit_reached(self, procedure: str) -> None:
        pass

    def unregister_failed(self, procedure: str, reason: str) -> None:
        pass

    def session_closing(self, procedure: str) -> None:
        pass

    def session_close_cancelled(self, procedure: str) -> None:
        pass

    def session_close_failed(self, procedure: str, reason: str) -> None:
        pass


def _key(kind: str, target: str) -> str:
    return f"{kind} {target}"
