# ---------- Method Selector ----------

from typing import Sequence

from .errors import InputError
from .symbolic import Expression

STRATEGIES: tuple[str, ...] = ("textual", "degree")


def select_method(
    expression: "str | Expression",
    constraints: Sequence["str | Expression"] = (),
    strategy: str = "textual",
) -> str:
    """
    Picks a solver from the structure of the problem.

    - Any constraint -> `lagrangian`.
    - `textual` (default): the printed form contains `^2` but neither `^3` nor `^4` -> `gradient`.
    - `degree`: the objective is a polynomial of total degree 2 -> `gradient`.
    - Otherwise -> `newton`.

    The textual rule only looks at the printed form, so e.g. `x^21` counts as
    having a `^2` term. The `degree` strategy inspects the expression instead.
    """
    if strategy not in STRATEGIES:
        raise InputError(f"Unknown selection strategy: {strategy}")
    if len(constraints) > 0:
        return "lagrangian"

    if strategy == "degree":
        return "gradient" if Expression.parse(expression).degree() == 2 else "newton"

    if isinstance(expression, Expression):
        text = expression.canonical
    else:
        text = expression.replace("**", "^")
    if "^2" in text and "^3" not in text and "^4" not in text:
        return "gradient"
    return "newton"
