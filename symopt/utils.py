# ---------- symopt formatting utils ----------

from typing import Iterable

import numpy as np

from .config import EXPLAIN_DECIMALS


def format_float(
    obj: float | Iterable[float],
    dprec: int = 2,
    fprec: int = 16,
    ffmt: str = "f",
    sep: str = ",\n",
    lim: int = 5,
) -> str:
    """
    Formats a float, or a vector of floats, for the rich summary tables.\\
    Vectors longer than `lim` are shortened to the first two and last two entries.
    """
    _fmt = f"{{:{dprec}.{fprec}{ffmt}}}"
    if isinstance(obj, (float, int, np.floating)):
        return f"{_fmt.format(float(obj))}"
    values = [float(x) for x in obj]
    if len(values) <= lim:
        formatted = [f"{_fmt.format(x)}" for x in values]
    else:
        # Show first two and last two items
        formatted = (
            [f"{_fmt.format(x)}" for x in values[:2]]
            + ["..."]
            + [f"{_fmt.format(x)}" for x in values[-2:]]
        )
    return "[" + sep.join(formatted) + "]"


def format_vector(values: Iterable[float], decimals: int | None = EXPLAIN_DECIMALS) -> str:
    """
    Formats a vector for an explanation string, e.g., `[1.0000, -2.5000]`.\\
    With `decimals=None` the plain `repr` of each entry is used.
    """
    if decimals is None:
        return "[" + ", ".join(repr(float(v)) for v in values) + "]"
    return "[" + ", ".join(f"{float(v):.{decimals}f}" for v in values) + "]"


def format_time(t: float | None) -> str:
    """Format time in seconds to an appropriate unit"""
    if t is None:
        return "N/A"
    abs_t = abs(t)
    if abs_t >= 60:
        minutes = int(t // 60)
        seconds = t % 60
        if seconds < 1e-3:
            return f"{minutes} min"
        return f"{minutes} min {round(seconds)} s"
    units: list[tuple[str, float]] = [("s", 1), ("ms", 1e-3), ("μs", 1e-6)]
    for unit, thresh in units:
        if abs_t >= thresh:
            val = t / thresh
            if unit == "μs":
                return f"{int(round(val))} {unit}"
            return f"{val:.3f} {unit}"
    return f"{int(round(t / 1e-6))} μs"  # Fallback for very small values
