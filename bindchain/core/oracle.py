"""Reaction lookup between pairs of operand types."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable

from bindchain.core.operators import (
    COMPARE_TO,
    DEFAULT_REGISTRY,
    POSTFIX_BIND,
    PREFIX_BIND,
    OperatorRegistry,
    OperatorTag,
)
from bindchain.core.type_system import TypeSystem
from bindchain.core.types import CapabilityMethod, HostType, TypeHierarchy, TypeVariable, symbol_of


Matcher = Callable[[HostType, HostType], bool]


@dataclass(frozen=True, slots=True)
class Reaction:
    """A located combinator between a left and a right operand type.

    ``method`` is never executed here; the host materializes the combined
    node from it. ``owner`` is the type in the hierarchy walk that declared
    the method, as seen from the receiver.
    """

    method: CapabilityMethod
    owner: HostType
    result_type: HostType
    swapped: bool = False
    operator: OperatorTag | None = None

    @property
    def name(self) -> str:
        return self.method.name

    @property
    def right_to_left(self) -> bool:
        return self.swapped or self.method.name == POSTFIX_BIND

    @property
    def implicit(self) -> bool:
        return self.operator is None


@dataclass(frozen=True, slots=True)
class _Match:
    method: CapabilityMethod
    owner: HostType
    member: CapabilityMethod


_MISS = object()


class ReactionCache:
    """Memo of pure-binder reactions keyed by ``(left_type, right_type)``.

    Misses are memoized too. Access is guarded by a lock so one cache can be
    shared across concurrent ``bind`` calls.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[HostType, HostType], Reaction | None] = {}
        self._lock = threading.Lock()

    def get_or_compute(
        self,
        key: tuple[HostType, HostType],
        compute: Callable[[], Reaction | None],
    ) -> Reaction | None:
        with self._lock:
            cached = self._entries.get(key, _MISS)
        if cached is not _MISS:
            return cached
        value = compute()
        with self._lock:
            return self._entries.setdefault(key, value)

    def __contains__(self, key: tuple[HostType, HostType]) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class ReactionOracle:
    """Find reactions by walking the left (or right) operand's type hierarchy."""

    def __init__(
        self,
        type_system: TypeSystem | None = None,
        registry: OperatorRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self.types = type_system or TypeSystem()
        self.registry = registry

    def find(
        self,
        left: HostType,
        right: HostType,
        operator: OperatorTag | None = None,
    ) -> Reaction | None:
        """Return the reaction joining ``left`` and ``right``, or None."""

        if operator is not None:
            return self._resolve_operator_reaction(left, right, operator)

        match = self._resolve_binder(PREFIX_BIND, left, right)
        if match is not None:
            return self._reaction(match, right, swapped=False, operator=None)
        match = self._resolve_binder(POSTFIX_BIND, right, left)
        if match is not None:
            return self._reaction(match, left, swapped=False, operator=None)
        return None

    def find_unary(self, operand: HostType, operator: OperatorTag) -> Reaction | None:
        """Return the zero-parameter reaction for a unary operator, or None."""

        spec = self.registry.spec(operator)
        if spec is None or spec.param_count != 0:
            return None
        receiver = self._receiver(operand)
        if receiver is None:
            return None
        match = self.find_method(receiver, None, spec.method_name, 0)
        if match is None:
            return None
        result = self.types.resolve_return_type(match.member, None)
        if not self.types.is_assignable(result, operand):
            return None
        return Reaction(method=match.method, owner=match.owner, result_type=result, operator=operator)

    def _resolve_operator_reaction(
        self,
        left: HostType,
        right: HostType,
        operator: OperatorTag,
    ) -> Reaction | None:
        match = self._resolve_operator_method(left, right, operator)
        if match is not None:
            return self._reaction(match, right, swapped=False, operator=operator)
        if self.registry.is_commutative(operator):
            match = self._resolve_operator_method(right, left, operator)
            if match is not None:
                return self._reaction(match, left, swapped=True, operator=operator)
        return None

    def _resolve_operator_method(
        self,
        left: HostType,
        right: HostType,
        operator: OperatorTag,
    ) -> _Match | None:
        spec = self.registry.spec(operator)
        if spec is None or spec.param_count == 0:
            return None
        receiver = self._receiver(left)
        if receiver is None:
            return None

        match = self.find_method(receiver, right, spec.method_name, spec.param_count)
        if (
            match is None
            and self.registry.is_relational(operator)
            and not getattr(receiver, "primitive", False)
        ):
            # < <= > >= on any comparable type
            match = self.find_method(receiver, right, COMPARE_TO, 1)
        return match

    def _resolve_binder(self, name: str, receiver: HostType, argument: HostType) -> _Match | None:
        receiver = self._receiver(receiver)
        if receiver is None:
            return None
        return self.find_method(receiver, argument, name, 1)

    def _receiver(self, t: HostType) -> TypeHierarchy | None:
        if isinstance(t, TypeVariable):
            t = self.types.erasure(t)
        if symbol_of(t) is None:
            return None
        return t

    def _reaction(
        self,
        match: _Match,
        argument: HostType,
        *,
        swapped: bool,
        operator: OperatorTag | None,
    ) -> Reaction:
        if self.registry.is_comparison(operator):
            result = self.types.boolean_type
        else:
            result = self.types.resolve_return_type(match.member, argument)
        return Reaction(
            method=match.method,
            owner=match.owner,
            result_type=result,
            swapped=swapped,
            operator=operator,
        )

    def find_method(
        self,
        receiver: TypeHierarchy,
        argument: HostType | None,
        name: str,
        param_count: int,
    ) -> _Match | None:
        """Two full hierarchy walks: exact parameter match first, then assignable."""

        types = self.types
        match = self._walk(receiver, argument, name, param_count, types.is_same_type, set())
        if match is not None:
            return match
        return self._walk(
            receiver,
            argument,
            name,
            param_count,
            lambda t, s: types.is_assignable(t, s) or types.is_assignable_with_generics(t, s),
            set(),
        )

    def _walk(
        self,
        owner: TypeHierarchy | None,
        argument: HostType | None,
        name: str,
        param_count: int,
        matcher: Matcher,
        seen: set,
    ) -> _Match | None:
        if owner is None or symbol_of(owner) is None or owner in seen:
            return None
        seen.add(owner)

        for method in owner.capabilities():
            if method.synthetic:
                continue
            if method.param_count != param_count or method.name != name:
                continue
            member = self.types.member_type(owner, method)
            if param_count == 0:
                return _Match(method, owner, member)
            if argument is not None and matcher(argument, member.params[0]):
                return _Match(method, owner, member)

        match = self._walk(owner.superclass(), argument, name, param_count, matcher, seen)
        if match is not None:
            return match

        for iface in owner.interfaces():
            match = self._walk(iface, argument, name, param_count, matcher, seen)
            if match is not None:
                return match
        return None
