"""Unit tests for bound Expr -> SymPy bridge."""

from __future__ import annotations

import pytest

sympy = pytest.importorskip("sympy")

from bindchain.core.expr import Leaf
from bindchain.core.host import ExprBinder
from bindchain.core.operators import OperatorTag
from bindchain.core.types import BOOLEAN, ClassType
from bindchain.solve.sympy_bridge import expr_to_sympy


def test_expr_to_sympy_velocity(units) -> None:
    result = ExprBinder().bind_exprs(
        [Leaf("5", units.number, 5), Leaf("mi", units.length), (OperatorTag.DIV, Leaf("hr", units.time))]
    )

    out, warnings, env = expr_to_sympy(result.expr)

    mi, hr = sympy.symbols("mi hr")
    assert out == 5 * mi / hr
    assert warnings == []
    assert set(env) == {"mi", "hr"}


def test_expr_to_sympy_comparison() -> None:
    length = ClassType("Length")
    length.define("compareToWith", (length, ClassType("Operator")), BOOLEAN)
    result = ExprBinder().bind_exprs([Leaf("a", length), (OperatorTag.LT, Leaf("b", length))])

    out, warnings, _env = expr_to_sympy(result.expr)

    a, b = sympy.symbols("a b")
    assert out == sympy.Lt(a, b)
    assert warnings == []


def test_expr_to_sympy_unsupported_operator() -> None:
    bits = ClassType("Bits")
    bits.define("shiftLeft", (bits,), bits)
    result = ExprBinder().bind_exprs([Leaf("x", bits), (OperatorTag.SL, Leaf("y", bits))])

    out, warnings, _env = expr_to_sympy(result.expr)

    assert out is None
    assert warnings == ["unsupported operator=sl"]
