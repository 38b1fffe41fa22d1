"""Progress display for batch classification.

A Rich bar counts batch stages while loguru records scroll above it. The
tracker only adds (and later removes) its own loguru handler; sinks set up
by the caller stay in place.
"""

from __future__ import annotations

import time

from loguru import logger
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

LOG_FORMAT = "<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}"


class ProgressTracker:
    """Stage counter for one batch run.

    Besides the stage count it accumulates how many input files were
    prepared and how many user agents were classified, and reports both
    when the run ends.

    Parameters
    ----------
    total_steps : int
        Number of stages the run will report.
    enabled : bool
        Draw the bar and mirror log records onto its console. When
        ``False`` stages are only logged through existing sinks.
    verbose : bool, optional
        Mirror INFO records instead of WARNING and above.
    console : Console | None, optional
        Console to draw on; a new one writing to stderr by default.
    """

    def __init__(
        self,
        total_steps: int,
        enabled: bool,
        verbose: bool = True,
        console: Console | None = None,
    ):
        self.total_steps = total_steps
        self.enabled = enabled
        self.verbose = verbose
        self.current_step = 0
        self.files = 0
        self.rows = 0
        self.started = time.monotonic()

        self.console = console or Console(stderr=True)
        self.progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TextColumn("{task.fields[rows]} agents"),
            console=self.console,
        )
        self._task = None
        self._handler_id: int | None = None

    @staticmethod
    def format_duration(seconds: float) -> str:
        """Format seconds as HH:MM:SS."""
        hours, rem = divmod(int(seconds), 3600)
        minutes, secs = divmod(rem, 60)
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"

    def __enter__(self) -> ProgressTracker:
        self.started = time.monotonic()
        if self.enabled:
            self.progress.start()
            self._task = self.progress.add_task(
                "classifying", total=self.total_steps, rows=0
            )
            self._handler_id = logger.add(
                lambda msg: self.console.print(msg.rstrip(), markup=False),
                level="INFO" if self.verbose else "WARNING",
                format=LOG_FORMAT,
            )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> bool:
        if self._handler_id is not None:
            logger.remove(self._handler_id)
            self._handler_id = None
        if self.enabled:
            self.progress.stop()
            if not exc_type:
                self.console.print(f"[dim]{self.summary()}[/dim]")
        return False

    def summary(self) -> str:
        elapsed = self.format_duration(time.monotonic() - self.started)
        return f"{self.files} files, {self.rows} user agents in {elapsed}"

    def step(self, message: str, files: int = 0, rows: int = 0) -> None:
        """Finish one stage, adding its file and row counts to the totals."""
        self.current_step += 1
        self.files += files
        self.rows += rows
        if self._task is not None:
            self.progress.update(
                self._task, advance=1, description=message, rows=self.rows
            )
        logger.info("[{}/{}] {}", self.current_step, self.total_steps, message)
