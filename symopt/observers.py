# ---------- Iteration observers ----------
# Optional per-iteration callbacks, decoupled from the explanation strings.

import logging
import math
from types import TracebackType
from typing import Optional

import numpy as np
from rich.console import Console
from rich.progress import Progress, TaskID, TextColumn, TimeElapsedColumn

from ._types import IterationSnapshot
from .utils import format_vector


class RecordingObserver:
    """Keeps every snapshot it is handed, e.g., for plotting multiplier paths."""

    def __init__(self):
        self.snapshots: list[IterationSnapshot] = []

    def __call__(self, snapshot: IterationSnapshot) -> None:
        self.snapshots.append(snapshot)

    def __len__(self) -> int:
        return len(self.snapshots)


class LoggingObserver:
    """Logs one line per iteration."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self.logger = logger or logging.getLogger("symopt.iterations")
        self.level = level

    def __call__(self, snapshot: IterationSnapshot) -> None:
        self.logger.log(
            self.level,
            "%s iter %d: x = %s, grad = %s, ||dx|| = %.3e",
            snapshot.method,
            snapshot.iteration,
            format_vector(snapshot.point),
            format_vector(snapshot.gradient),
            snapshot.displacement,
        )


class RichProgressObserver:
    """
    A transient `rich` progress bar over the iterations of one run.

    Use as a context manager around the solver call:
    ```
    with RichProgressObserver(total=max_iterations) as progress:
        solve(..., observer=progress)
    ```
    """

    def __init__(
        self,
        total: Optional[int] = None,
        description: str = "Run",
        console: Optional[Console] = None,
    ):
        self.total = total
        self.description = description
        self.progress = Progress(
            TextColumn("[progress.description]{task.description}"),
            TextColumn("iter:{task.completed:04},"),
            TextColumn("||Δx||:{task.fields[displacement]:.2e},"),
            TextColumn("||∇f(x)||: {task.fields[grad_norm]:.2e}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self.task: Optional[TaskID] = None

    def __enter__(self) -> "RichProgressObserver":
        self.progress.start()
        self.task = self.progress.add_task(
            self.description,
            total=self.total,
            displacement=math.nan,
            grad_norm=math.nan,
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.progress.stop()
        self.task = None

    def __call__(self, snapshot: IterationSnapshot) -> None:
        if self.task is None:
            raise RuntimeError("RichProgressObserver must be used as a context manager.")
        self.progress.update(
            self.task,
            advance=1,
            description=f"{self.description} ({snapshot.method})",
            displacement=snapshot.displacement,
            grad_norm=float(np.linalg.norm(snapshot.gradient)),
        )
