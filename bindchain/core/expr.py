"""Expression nodes produced by the reference binding host."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from bindchain.core.operators import DEFAULT_REGISTRY, OperatorRegistry, OperatorTag
from bindchain.core.oracle import Reaction
from bindchain.core.types import HostType

IMPLICIT_SYMBOL = "⊗"


@dataclass(frozen=True, slots=True)
class Leaf:
    """Operand leaf: a named value of a known type."""

    name: str
    type: HostType
    value: int | float | None = None


@dataclass(frozen=True, slots=True)
class Binary:
    """Two expressions joined by a reaction.

    ``op`` is the explicit operator, or ``MUL`` standing in for an implicit
    binder reaction (``implicit`` is then True). ``lhs``/``rhs`` keep source
    order even when the reaction is right-to-left.
    """

    op: OperatorTag
    lhs: "Expr"
    rhs: "Expr"
    reaction: Reaction
    type: HostType
    implicit: bool = False

    @property
    def right_to_left(self) -> bool:
        return self.reaction.right_to_left


Expr = Union[Leaf, Binary]


def render_expr(expr: Expr, registry: OperatorRegistry = DEFAULT_REGISTRY) -> str:
    """Render a fully parenthesized infix form, ``⊗`` for implicit binding."""

    if isinstance(expr, Leaf):
        return expr.name
    if expr.implicit:
        symbol = IMPLICIT_SYMBOL
    else:
        spec = registry.spec(expr.op)
        symbol = spec.symbol if spec is not None else expr.op.value
    return f"({render_expr(expr.lhs, registry)} {symbol} {render_expr(expr.rhs, registry)})"
