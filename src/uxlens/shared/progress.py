"""Rich progress display for the analysis stages."""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

console = Console()


class PipelineProgress:
    """Tracks progress across the analysis stages using Rich."""

    def __init__(self) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_ids: dict[str, int] = {}

    def __enter__(self) -> "PipelineProgress":
        self._progress.__enter__()
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def start_stage(self, stage: str) -> None:
        """Register and start tracking a stage."""
        tid = self._progress.add_task(f"[cyan]{stage}[/]", total=None)
        self._task_ids[stage] = tid

    def finish_stage(self, stage: str, detail: str = "") -> None:
        """Mark a stage as complete, optionally with a short result note."""
        if stage in self._task_ids:
            suffix = f" ({detail})" if detail else ""
            self._progress.update(
                self._task_ids[stage],
                description=f"[green]✓ {stage}{suffix}[/]",
                completed=True,
            )

    def degrade_stage(self, stage: str, reason: str) -> None:
        """Mark a stage as finished with reduced output (fallback used)."""
        if stage in self._task_ids:
            self._progress.update(
                self._task_ids[stage],
                description=f"[yellow]~ {stage}: {reason}[/]",
                completed=True,
            )

    def fail_stage(self, stage: str, error: str) -> None:
        """Mark a stage as failed."""
        if stage in self._task_ids:
            self._progress.update(
                self._task_ids[stage],
                description=f"[red]✗ {stage}: {error}[/]",
                completed=True,
            )

    def print_warning(self, message: str) -> None:
        """Print a warning line above the live progress display."""
        self._progress.console.print(f"  [yellow]Warning:[/] {message}")
