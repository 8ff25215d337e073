"""Reference binding host over ``Leaf``/``Binary`` expression trees."""

from __future__ import annotations

import threading
from typing import Iterable

from bindchain.core.binder import AbstractBinder, BindingResult, Operand
from bindchain.core.binding_trace import BindingTrace
from bindchain.core.expr import Binary, Expr
from bindchain.core.normalize import AssociativityNormalizer
from bindchain.core.operators import DEFAULT_REGISTRY, OperatorRegistry, OperatorTag
from bindchain.core.oracle import Reaction, ReactionCache, ReactionOracle
from bindchain.core.type_system import TypeSystem
from bindchain.core.types import HostType


class ExprBinder(AbstractBinder[Expr]):
    """Bind chains of ``Expr`` operands using a ``ReactionOracle``.

    Pure-binder lookups are memoized in a ``ReactionCache``. Without an
    explicit ``cache`` a fresh one is made for every top-level ``bind``,
    held per thread so concurrent calls on one binder stay apart; a cache
    passed in is kept and shared across calls.
    """

    def __init__(
        self,
        *,
        type_system: TypeSystem | None = None,
        registry: OperatorRegistry = DEFAULT_REGISTRY,
        oracle: ReactionOracle | None = None,
        cache: ReactionCache | None = None,
        trace: BindingTrace | None = None,
        normalize: bool = True,
    ) -> None:
        self.oracle = oracle or ReactionOracle(type_system, registry)
        self.registry = self.oracle.registry
        self.trace = trace
        self.normalize = normalize
        self._shared_cache = cache
        self._local = threading.local()

    @property
    def cache(self) -> ReactionCache:
        if self._shared_cache is not None:
            return self._shared_cache
        current = getattr(self._local, "cache", None)
        if current is None:
            current = self._local.cache = ReactionCache()
        return current

    def begin(self) -> None:
        if self._shared_cache is None:
            self._local.cache = ReactionCache()

    def type_of(self, expr: Expr) -> HostType:
        return expr.type

    def find_reaction(
        self,
        left_type: HostType,
        right_type: HostType,
        operator: OperatorTag | None,
    ) -> Reaction | None:
        if operator is not None:
            return self.oracle.find(left_type, right_type, operator)
        return self.cache.get_or_compute(
            (left_type, right_type),
            lambda: self.oracle.find(left_type, right_type, None),
        )

    def combine(self, left: Operand[Expr], right: Operand[Expr], reaction: Reaction) -> Operand[Expr]:
        node = self.make_node(left.expr, right.expr, reaction, right.operator_left)
        return Operand(node, left.operator_left)

    def make_node(
        self,
        lhs: Expr,
        rhs: Expr,
        reaction: Reaction,
        operator: OperatorTag | None,
    ) -> Binary:
        return Binary(
            op=operator if operator is not None else OperatorTag.MUL,
            lhs=lhs,
            rhs=rhs,
            reaction=reaction,
            type=reaction.result_type,
            implicit=operator is None,
        )

    def left_associate(self, solution: Operand[Expr]) -> Operand[Expr]:
        if not self.normalize:
            return solution
        normalizer = AssociativityNormalizer(self.find_reaction, self.make_node, trace=self.trace)
        root = normalizer.normalize(solution.expr)
        if root is solution.expr:
            return solution
        return Operand(root, solution.operator_left)

    def bind_exprs(self, items: Iterable[Expr | tuple[OperatorTag | None, Expr]]) -> BindingResult:
        """Bind a sequence of exprs, each optionally preceded by its left operator."""

        chain: list[Operand[Expr]] = []
        for item in items:
            if isinstance(item, tuple):
                operator, expr = item
                chain.append(Operand(expr, operator))
            else:
                chain.append(Operand(item))
        return self.bind(chain)


def operands_from_tree(expr: Expr) -> list[Operand[Expr]]:
    """Flatten a bound tree back into the operand chain it was bound from.

    Implicit nodes contribute their leaves untagged. An explicit node tags
    the leftmost operand of its right subtree with its operator.
    """

    operands: list[Operand[Expr]] = []
    _collect_operands(expr, operands)
    return operands


def _collect_operands(expr: Expr, operands: list[Operand[Expr]]) -> None:
    if not isinstance(expr, Binary):
        operands.append(Operand(expr))
        return
    _collect_operands(expr.lhs, operands)
    index = len(operands)
    _collect_operands(expr.rhs, operands)
    if not expr.implicit:
        operands[index] = Operand(operands[index].expr, expr.op)
