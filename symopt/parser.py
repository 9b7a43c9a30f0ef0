# ---------- Expression Parser ----------
# Converts the LaTeX subset produced by an equation editor into a canonical
# expression string, and derives the variable set from an expression.

import logging
import re

from .errors import ExpressionParseError
from .symbolic import Expression

logger = logging.getLogger(__name__)

_SIMPLE_COMMANDS: list[tuple[str, str]] = [
    (r"\left", ""),
    (r"\right", ""),
    (r"\cdot", "*"),
    (r"\times", "*"),
    (r"\div", "/"),
    (r"\ln", "log"),
    (r"\,", ""),
    (r"\;", ""),
    (r"\!", ""),
]

_VARIABLE_PATTERN = re.compile(r"(?<![A-Za-z_])([A-Za-z])(?![A-Za-z_0-9])")
"""A single-letter name, not part of a longer identifier (`sin`, `x1`)."""

MULTIPLIER_LETTER: str = "l"
"""Single-letter names starting with this are reserved for multipliers."""


def _extract_braced(s: str, pos: int) -> tuple[str | None, int]:
    """Returns the content of the `{...}` group starting at `s[pos]`, and the index after it."""
    if pos >= len(s) or s[pos] != "{":
        return None, pos
    depth = 0
    for i in range(pos, len(s)):
        if s[i] == "{":
            depth += 1
        elif s[i] == "}":
            depth -= 1
            if depth == 0:
                return s[pos + 1 : i], i + 1
    return None, pos


def latex_to_algebra(tex: str) -> str:
    r"""
    Rewrites LaTeX constructs in plain algebraic notation.

    `\frac{a}{b}` -> `((a)/(b))`, `\sqrt{a}` -> `sqrt(a)`, `\sqrt[n]{a}` -> `((a)^(1/(n)))`,
    `x^{2}` -> `x^(2)`, and `\cdot`, `\times`, `\left(`, `\right)` as expected.
    """
    s = tex.strip()
    for command, replacement in _SIMPLE_COMMANDS:
        s = s.replace(command, replacement)

    while (idx := s.find(r"\frac")) != -1:
        num, pos = _extract_braced(s, idx + 5)
        den, end = _extract_braced(s, pos) if num is not None else (None, pos)
        if num is None or den is None:
            raise ExpressionParseError(f"Malformed \\frac in {tex!r}")
        s = s[:idx] + f"(({latex_to_algebra(num)})/({latex_to_algebra(den)}))" + s[end:]

    while (idx := s.find(r"\sqrt")) != -1:
        pos = idx + 5
        root = None
        if pos < len(s) and s[pos] == "[":
            close = s.find("]", pos)
            if close == -1:
                raise ExpressionParseError(f"Malformed \\sqrt in {tex!r}")
            root, pos = s[pos + 1 : close], close + 1
        arg, end = _extract_braced(s, pos)
        if arg is None:
            raise ExpressionParseError(f"Malformed \\sqrt in {tex!r}")
        arg = latex_to_algebra(arg)
        if root is None:
            s = s[:idx] + f"sqrt({arg})" + s[end:]
        else:
            s = s[:idx] + f"(({arg})^(1/({latex_to_algebra(root)})))" + s[end:]

    # Remaining commands (\sin, \exp, \pi, ...) lose their backslash
    s = re.sub(r"\\([A-Za-z]+)", r"\1", s)
    return s.replace("{", "(").replace("}", ")")


def parse_latex_to_expression(latex: str) -> str:
    """
    Parses editor markup into the canonical expression string.

    Raises:
        ExpressionParseError: If the markup cannot be read as an expression.
    """
    algebra = latex_to_algebra(latex)
    logger.debug("LaTeX %r rewritten as %r", latex, algebra)
    expr = Expression.parse(algebra, variables=detect_variables(algebra))
    return expr.canonical


def detect_variables(expression: "str | Expression") -> list[str]:
    """
    Derives the ordered variable set of an expression: the distinct single-letter
    names, sorted, excluding the letter reserved for Lagrange multipliers.
    """
    if isinstance(expression, Expression):
        names = set(expression.variables)
    else:
        names = set(_VARIABLE_PATTERN.findall(expression))
    return sorted(
        n for n in names if len(n) == 1 and not n.startswith(MULTIPLIER_LETTER)
    )
