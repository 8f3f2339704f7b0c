from __future__ import annotations
from typing import Any, Dict, Iterable, Optional, Tuple, Union
import logging
import os
import sys
from parser import parse_postfix
from polynomial import Coefficients
from edag import EDAG
from expr import Expr, NO_BINDINGS

logger = logging.getLogger(__name__)

Source = Union[str, Iterable[str]]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"
# operations recurse once per tree level; warn well before sys.getrecursionlimit()
DEPTH_WARNING_THRESHOLD = 500


def log_level_from_env() -> str:
    """EXPR_LOG_LEVEL, upper-cased; unknown names fall back to DEFAULT_LOG_LEVEL."""
    raw = os.environ.get("EXPR_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("ignoring EXPR_LOG_LEVEL=%r; expected one of %s", raw, ", ".join(LOG_LEVELS))
        return DEFAULT_LOG_LEVEL
    return level


def depth_warning_from_env() -> int:
    raw = os.environ.get("EXPR_DEPTH_WARNING")
    if raw is None:
        return DEPTH_WARNING_THRESHOLD
    try:
        return int(raw)
    except ValueError:
        logger.warning("ignoring EXPR_DEPTH_WARNING=%r; using %d", raw, DEPTH_WARNING_THRESHOLD)
        return DEPTH_WARNING_THRESHOLD


class CAS:
    def __init__(self, depth_warning: Optional[int] = None) -> None:
        self.depth_warning = depth_warning if depth_warning is not None else depth_warning_from_env()

    def _wrap(self, obj: Any) -> "CAS.ExprResult":
        if isinstance(obj, CAS.ExprResult):
            return obj
        if isinstance(obj, Expr):
            return CAS.ExprResult(obj)
        if isinstance(obj, str) or isinstance(obj, (list, tuple)):
            return self.parse(obj)
        raise TypeError(f"Unsupported object for wrapping: {type(obj).__name__}")

    def parse(self, src: Source) -> "CAS.ExprResult":
        res = CAS.ExprResult(parse_postfix(src))
        size, depth = res.stats()
        logger.debug("built tree: %d nodes, depth %d", size, depth)
        if depth > self.depth_warning:
            logger.warning(
                "expression depth %d exceeds %d; recursive operations may hit the "
                "recursion limit (%d)",
                depth, self.depth_warning, sys.getrecursionlimit(),
            )
        return res

    class ExprResult:
        def __init__(self, expr: Expr) -> None:
            self._expr = expr

        @property
        def expr(self) -> Expr:
            return self._expr

        def string(self) -> str:
            return self._expr.string()

        def latex(self) -> str:
            return self._expr.latex()

        def __str__(self) -> str:
            return self.string()

        def __repr__(self) -> str:
            return f"ExprResult({self._expr!r})"

        def eval(self, env: Dict[str, float] | None = None) -> float:
            bindings = env if env is not None else NO_BINDINGS
            value = self._expr.evaluate(bindings)
            logger.debug("evaluated %s with %d bindings -> %r", self.string(), len(bindings), value)
            return value

        def derivative(self, var: str) -> "CAS.ExprResult":
            logger.debug("differentiating %s with respect to %s", self.string(), var)
            return CAS.ExprResult(self._expr.differentiate(var))

        def simplify(self) -> "CAS.ExprResult":
            out = CAS.ExprResult(self._expr.simplify())
            logger.debug("simplified %s -> %s", self.string(), out.string())
            return out

        def coefficients(self) -> Coefficients:
            return self._expr.coefficients()

        def constant_value(self) -> Optional[float]:
            return self._expr.get_constant_value()

        def graph(self) -> EDAG:
            return EDAG.from_expr(self._expr)

        def stats(self) -> Tuple[int, int]:
            """Node count and depth, measured without recursion."""
            dag = self.graph()
            return dag.size(), dag.depth()

    def eval(self, expr: Any, env: Dict[str, float] | None = None) -> float:
        return self._wrap(expr).eval(env)

    def differentiate(self, expr: Any, var: str) -> "CAS.ExprResult":
        return self._wrap(expr).derivative(var)

    def simplify(self, expr: Any) -> "CAS.ExprResult":
        return self._wrap(expr).simplify()

    def coefficients(self, expr: Any) -> Coefficients:
        return self._wrap(expr).coefficients()
