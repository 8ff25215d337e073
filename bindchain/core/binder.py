"""Backtracking binder for flat operand chains.

For ``5 mi/hr`` (a velocity: length/time)::

      (bad)     (good)
        /         ⊗
       / \\       / \\
      ⊗   hr    5   /
     / \\           / \\
    5   mi        mi  hr

The chain keeps each operator on the operand to its right::

    initial  ==>  (? 5) -> (? mi) -> (/ hr)
             ==>  (? 5) -> (? (mi / hr))
             ==>  (5 ⊗ (mi / hr))

Adjacent pairs are tested for a reaction between their types. The first
reducible pair is reduced and the shorter chain solved recursively; when
that fails the next reducible pair is tried on the original chain.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Sequence, TypeVar, Union

from bindchain.core.binding_trace import BindingEventKind, BindingTrace
from bindchain.core.operators import OperatorTag
from bindchain.core.oracle import Reaction

E = TypeVar("E")


class PreconditionViolation(AssertionError):
    """The host called the binder with an unusable chain."""


@dataclass(frozen=True, slots=True)
class Operand(Generic[E]):
    """One position in an operand chain.

    ``operator_left`` is the operator binding this operand to its
    predecessor; None means the relation must be discovered.
    """

    expr: E
    operator_left: OperatorTag | None = None


@dataclass(frozen=True, slots=True)
class Solved(Generic[E]):
    """Binding succeeded with a single combined operand."""

    operand: Operand[E]
    result_type: object

    @property
    def expr(self) -> E:
        return self.operand.expr

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failed:
    """No split of the chain produced a solution."""

    left_type: object
    right_type: object

    @property
    def ok(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return f"No reaction defined for types '{self.left_type}' and '{self.right_type}'"


BindingResult = Union[Solved, Failed]


@dataclass(frozen=True, slots=True)
class _Root:
    index: int
    reaction: Reaction


class AbstractBinder(ABC, Generic[E]):
    """Resolve an operand chain into one expression using type reactions.

    Subclasses supply the host hooks: ``type_of``, ``find_reaction`` and
    ``combine``; ``left_associate`` may be overridden to normalize a solution.
    """

    trace: BindingTrace | None = None

    @abstractmethod
    def type_of(self, expr: E) -> object:
        """Return the type carried by a host expression."""

    @abstractmethod
    def find_reaction(
        self,
        left_type: object,
        right_type: object,
        operator: OperatorTag | None,
    ) -> Reaction | None:
        """Return the reaction joining two operand types, or None."""

    @abstractmethod
    def combine(self, left: Operand[E], right: Operand[E], reaction: Reaction) -> Operand[E]:
        """Materialize the node joining ``left`` and ``right`` via ``reaction``."""

    def left_associate(self, solution: Operand[E]) -> Operand[E]:
        return solution

    def begin(self) -> None:
        """Called once at the start of each top-level ``bind``."""

    def find_binder_method(self, left: Operand[E], right: Operand[E]) -> Reaction | None:
        return self.find_reaction(
            self.type_of(left.expr),
            self.type_of(right.expr),
            right.operator_left,
        )

    def bind(self, operands: Sequence[Operand[E]]) -> BindingResult:
        """Bind ``operands`` into one expression or report the top-level pair that failed."""

        if not operands:
            raise PreconditionViolation("bind() requires at least one operand")

        chain = tuple(operands)
        if len(chain) == 1:
            return Solved(chain[0], self.type_of(chain[0].expr))

        self.begin()
        solution = self._solve(chain, 0)
        if solution is None:
            failed = Failed(self.type_of(chain[0].expr), self.type_of(chain[1].expr))
            self._record(BindingEventKind.FAILED, failed.message, 0)
            return failed

        solution = self.left_associate(solution)
        result_type = self.type_of(solution.expr)
        self._record(BindingEventKind.SOLVED, f"Bound chain to {result_type}", 0, result_type=str(result_type))
        return Solved(solution, result_type)

    def _solve(self, operands: tuple[Operand[E], ...], depth: int) -> Operand[E] | None:
        if len(operands) == 1:
            return operands[0]

        root = self._next_root(operands, 0)
        while root is not None:
            self._record(
                BindingEventKind.SPLIT,
                f"Reduce pair at {root.index} via {root.reaction.name}",
                depth,
                index=root.index,
                reaction=root.reaction.name,
                length=len(operands),
            )
            solution = self._solve(self._reduce(operands, root), depth + 1)
            if solution is not None:
                return solution
            self._record(BindingEventKind.BACKTRACK, f"Split at {root.index} has no solution", depth, index=root.index)
            root = self._next_root(operands, root.index + 1)
        return None

    def _next_root(self, operands: tuple[Operand[E], ...], start: int) -> _Root | None:
        for i in range(start + 1, len(operands)):
            reaction = self.find_binder_method(operands[i - 1], operands[i])
            if reaction is not None:
                return _Root(i - 1, reaction)
        return None

    def _reduce(self, operands: tuple[Operand[E], ...], root: _Root) -> tuple[Operand[E], ...]:
        left = operands[root.index]
        right = operands[root.index + 1]
        combined = self.combine(left, right, root.reaction)
        if combined.operator_left != left.operator_left:
            combined = Operand(combined.expr, left.operator_left)
        return operands[: root.index] + (combined,) + operands[root.index + 2 :]

    def _record(self, kind: BindingEventKind, message: str, depth: int, **data) -> None:
        if self.trace is not None:
            self.trace.record(kind, message, depth=depth, **data)
