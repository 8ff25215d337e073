"""Left-associate runs of implicit binder reactions in a bound tree."""

from __future__ import annotations

from typing import Callable

from bindchain.core.binding_trace import BindingEventKind, BindingTrace
from bindchain.core.expr import Binary, Expr
from bindchain.core.operators import OperatorTag
from bindchain.core.oracle import Reaction
from bindchain.core.types import HostType

FindReaction = Callable[[HostType, HostType, "OperatorTag | None"], "Reaction | None"]
MakeNode = Callable[[Expr, Expr, Reaction, "OperatorTag | None"], Binary]


class AssociativityNormalizer:
    """Rewrite ``a ⊗ (b ⊗ c)`` into ``(a ⊗ b) ⊗ c`` for implicit reactions.

    Leftmost-first binding can leave implicit multiplication grouped to the
    right. A node is regrouped only when both it and its right child are
    implicit, neither is right-to-left, the regrouped reactions exist and
    the regrouped node has the same type. Nodes built from explicit
    operators are never touched, so the root type is preserved.
    """

    def __init__(
        self,
        find_reaction: FindReaction,
        make_node: MakeNode,
        *,
        trace: BindingTrace | None = None,
    ) -> None:
        self._find_reaction = find_reaction
        self._make_node = make_node
        self._trace = trace
        self.rotations = 0

    def normalize(self, root: Expr) -> Expr:
        if not isinstance(root, Binary):
            return root
        lhs = self.normalize(root.lhs)
        rhs = self.normalize(root.rhs)
        if lhs is not root.lhs or rhs is not root.rhs:
            root = self._make_node(lhs, rhs, root.reaction, None if root.implicit else root.op)
        return self._reassociate(root)

    def _reassociate(self, node: Binary) -> Expr:
        if not (_is_plain_implicit(node) and _is_plain_implicit(node.rhs)):
            return node

        a, b, c = node.lhs, node.rhs.lhs, node.rhs.rhs
        ab_reaction = self._find_reaction(a.type, b.type, None)
        if ab_reaction is None or ab_reaction.right_to_left:
            return node
        ab = self._reassociate(self._make_node(a, b, ab_reaction, None))

        abc_reaction = self._find_reaction(ab.type, c.type, None)
        if abc_reaction is None or abc_reaction.right_to_left:
            return node
        regrouped = self._make_node(ab, c, abc_reaction, None)
        if regrouped.type != node.type:
            return node

        self.rotations += 1
        if self._trace is not None:
            self._trace.record(
                BindingEventKind.NORMALIZE,
                "Left-associated implicit reaction",
                result_type=str(regrouped.type),
            )
        return regrouped


def _is_plain_implicit(expr: Expr) -> bool:
    return isinstance(expr, Binary) and expr.implicit and not expr.right_to_left
