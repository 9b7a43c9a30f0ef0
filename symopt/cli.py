# ---------- Command line interface ----------

import argparse
import json
import logging
import time
from typing import Optional, Sequence

import matplotlib.pyplot as plt
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from ._types import OptimisationResult
from .cancel import CancelToken
from .config import (
    DEFAULT_ALPHA,
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_METHOD,
    DEFAULT_TOLERANCE,
    METHODS,
)
from .driver import solve
from .errors import InputError
from .observers import RichProgressObserver
from .parser import parse_latex_to_expression
from .plotting import plot_trajectory
from .utils import format_float, format_time


def _floats(text: str) -> list[float]:
    try:
        return [float(v) for v in text.split(",") if v.strip()]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers: {e}") from e


def _names(text: str) -> list[str]:
    return [v.strip() for v in text.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symopt",
        description="Minimise a symbolic expression, optionally subject to equality constraints.",
    )
    parser.add_argument("expression", help="Objective, e.g. '(x-2)^2 + (y-3)^2'.")
    parser.add_argument("--vars", type=_names, help="Ordered variable names, e.g. 'x,y'.")
    parser.add_argument("--init", type=_floats, help="Initial point, e.g. '0,0'.")
    parser.add_argument(
        "--constraint",
        action="append",
        default=[],
        help="Equality constraint g(x) = 0, given as g. Repeatable.",
    )
    parser.add_argument("--method", choices=METHODS, default=DEFAULT_METHOD)
    parser.add_argument("--alpha", type=float, default=DEFAULT_ALPHA)
    parser.add_argument("--max-iter", type=int, default=DEFAULT_MAX_ITERATIONS)
    parser.add_argument("--tol", type=float, default=DEFAULT_TOLERANCE)
    parser.add_argument(
        "--strategy",
        choices=("textual", "degree"),
        default="textual",
        help="How `auto` picks a method.",
    )
    parser.add_argument("--latex", action="store_true", help="Read expressions as LaTeX.")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON.")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar.")
    parser.add_argument("--plot", metavar="FILE", help="Save a trajectory plot to FILE.")
    parser.add_argument("--timeout", type=float, help="Cancel the run after this many seconds.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def render(result: OptimisationResult, console: Console, elapsed: float | None = None) -> None:
    """Prints the summary, trajectory table and explanations of a run."""
    console.print(f"[bold blue]{result.method}[/] [bright_black]({result.status})[/]")
    print(f"Iterations = {result.iterations}")
    print(f"x* = {format_float(result.solution, sep=', ')}")
    if result.multipliers:
        print(f"λ* = {format_float(result.multipliers, sep=', ')}")
    if elapsed is not None:
        console.print(f"[bright_black]Time taken: {format_time(elapsed)}[/]")

    table = Table(title="Trajectory")
    table.add_column("k", justify="right")
    for name in result.variables:
        table.add_column(name, justify="right")
    for k, point in enumerate(result.trajectory):
        table.add_row(str(k), *(f"{v:.6g}" for v in point))
    console.print(table)

    console.rule("[bold magenta]Explanation", style="magenta")
    for line in result.explanations:
        console.print(line, markup=False, highlight=False)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    install()  # For rich tracebacks in case of errors
    console = Console()
    err_console = Console(stderr=True)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console)],
        force=True,
    )

    try:
        expression = args.expression
        constraints = args.constraint
        if args.latex:
            expression = parse_latex_to_expression(expression)
            constraints = [parse_latex_to_expression(g) for g in constraints]

        kwargs = dict(
            variables=args.vars,
            initial_point=args.init,
            constraints=constraints,
            alpha=args.alpha,
            max_iterations=args.max_iter,
            tolerance=args.tol,
            method=args.method,
            cancel_token=CancelToken(args.timeout) if args.timeout else None,
            selection_strategy=args.strategy,
        )
        t0 = time.perf_counter()
        if args.progress:
            with RichProgressObserver(total=args.max_iter, console=err_console) as progress:
                result = solve(expression, observer=progress, **kwargs)
        else:
            result = solve(expression, **kwargs)
        elapsed = time.perf_counter() - t0
    except InputError as e:
        err_console.print(f"[red][bold]Error:[/bold] {e}[/red]")
        return 2

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        render(result, console, elapsed)

    if args.plot:
        plot_trajectory(result, objective=expression)
        plt.tight_layout()
        plt.savefig(args.plot)
        plt.close("all")
    return 0
