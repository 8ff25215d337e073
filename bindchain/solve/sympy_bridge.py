"""Best-effort bound Expr -> SymPy conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from bindchain.core.expr import Binary, Expr, Leaf
from bindchain.core.operators import OperatorTag

if TYPE_CHECKING:
    import sympy


def expr_to_sympy(
    expr: Expr,
    sym_env: dict[str, "sympy.Symbol"] | None = None,
) -> tuple[object | None, list[str], dict[str, "sympy.Symbol"]]:
    """Convert a bound tree to a SymPy object with non-fatal warnings.

    Implicit binder reactions become multiplication. Leaves with a numeric
    ``value`` become SymPy numbers, all others symbols named after the leaf.
    """

    try:
        import sympy
    except Exception:
        return None, ["sympy not installed"], sym_env or {}

    env: dict[str, sympy.Symbol] = {} if sym_env is None else sym_env

    binary_ops = {
        OperatorTag.PLUS: lambda a, b: a + b,
        OperatorTag.MINUS: lambda a, b: a - b,
        OperatorTag.MUL: lambda a, b: a * b,
        OperatorTag.DIV: lambda a, b: a / b,
        OperatorTag.MOD: sympy.Mod,
        OperatorTag.EQ: sympy.Eq,
        OperatorTag.NE: sympy.Ne,
        OperatorTag.LT: sympy.Lt,
        OperatorTag.LE: sympy.Le,
        OperatorTag.GT: sympy.Gt,
        OperatorTag.GE: sympy.Ge,
    }

    def _rec(node: Expr) -> tuple[object | None, list[str]]:
        if isinstance(node, Leaf):
            value = node.value
            if type(value) is int:
                return sympy.Integer(value), []
            if type(value) is float:
                return sympy.Float(value), []
            if node.name not in env:
                env[node.name] = sympy.Symbol(node.name)
            return env[node.name], []

        if isinstance(node, Binary):
            fn = sympy.Mul if node.implicit else binary_ops.get(node.op)
            if fn is None:
                return None, [f"unsupported operator={node.op.value}"]
            lhs, lhs_w = _rec(node.lhs)
            rhs, rhs_w = _rec(node.rhs)
            child_warnings = lhs_w + rhs_w
            if lhs is None or rhs is None:
                return None, child_warnings
            return fn(lhs, rhs), child_warnings

        return None, [f"unsupported node={node.__class__.__name__}"]

    converted, warnings = _rec(expr)
    return converted, warnings, env
