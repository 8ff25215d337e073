"""Type relations used when matching reaction parameters."""

from __future__ import annotations

from bindchain.core.types import (
    BOOLEAN,
    CapabilityMethod,
    ClassType,
    HostType,
    ParameterizedType,
    TypeHierarchy,
    TypeVariable,
    substitute,
    symbol_of,
)


class TypeSystem:
    """Same-type, assignability and member-type queries over ``HostType``.

    ``object_type`` is the optional root every class type is assignable to.
    ``boolean_type`` is the result type of comparison reactions.
    """

    def __init__(
        self,
        *,
        object_type: ClassType | None = None,
        boolean_type: ClassType = BOOLEAN,
    ) -> None:
        self.object_type = object_type
        self.boolean_type = boolean_type

    def is_same_type(self, t: HostType, s: HostType) -> bool:
        return t == s

    def erasure(self, t: HostType) -> HostType | None:
        if isinstance(t, TypeVariable):
            return self.erasure(t.bound) if t.bound is not None else self.object_type
        if isinstance(t, ParameterizedType):
            return t.generic
        return t

    def supertypes(self, t: HostType) -> list[HostType]:
        if isinstance(t, TypeVariable):
            return [t.bound] if t.bound is not None else []
        if symbol_of(t) is None:
            return []
        out: list[HostType] = []
        sup = t.superclass()
        if sup is not None:
            out.append(sup)
        out.extend(t.interfaces())
        return out

    def as_super(self, t: HostType, sym: TypeHierarchy) -> HostType | None:
        """Find the supertype of ``t`` declared by ``sym``, parameterized as ``t`` sees it."""

        return self._as_super(t, sym, set())

    def _as_super(self, t: HostType, sym: TypeHierarchy, seen: set) -> HostType | None:
        if t is None or t in seen:
            return None
        if symbol_of(t) == sym:
            return t
        if sym is self.object_type and not isinstance(t, TypeVariable):
            return sym
        seen.add(t)
        for sup in self.supertypes(t):
            found = self._as_super(sup, sym, seen)
            if found is not None:
                return found
        return None

    def is_assignable(self, t: HostType, s: HostType) -> bool:
        """True if a value of type ``t`` may be passed where ``s`` is declared."""

        if self.is_same_type(t, s):
            return True
        if isinstance(s, TypeVariable):
            return False
        if self.object_type is not None and s is self.object_type:
            return True
        if t is self.boolean_type or s is self.boolean_type:
            return False
        if getattr(t, "primitive", False) or getattr(s, "primitive", False):
            return False
        target = symbol_of(s)
        if target is None:
            return False
        sup = self.as_super(t, target)
        if sup is None:
            return False
        if isinstance(s, ParameterizedType) and isinstance(sup, ParameterizedType):
            return sup.args == s.args
        # raw target or raw supertype: unchecked but assignable
        return True

    def is_assignable_with_generics(self, t: HostType, s: HostType) -> bool:
        """True if ``s`` is a type variable whose bound ``t`` is a parameterization of."""

        if not isinstance(s, TypeVariable):
            return False
        if s.bound is None:
            return True
        bound_sym = symbol_of(self.erasure(s.bound))
        if bound_sym is None:
            return False
        return self.as_super(t, bound_sym) is not None

    def member_type(self, owner: HostType, method: CapabilityMethod) -> CapabilityMethod:
        """View ``method`` as a member of ``owner``, substituting class type arguments."""

        if not isinstance(owner, ParameterizedType):
            return method
        mapping = owner.bindings()
        return CapabilityMethod(
            name=method.name,
            params=tuple(substitute(p, mapping) for p in method.params),
            return_type=substitute(method.return_type, mapping),
            type_params=method.type_params,
            synthetic=method.synthetic,
        )

    def resolve_return_type(self, member: CapabilityMethod, arg_type: HostType | None) -> HostType:
        """Return type of ``member`` with method type variables inferred from the argument."""

        mapping: dict[TypeVariable, HostType] = {}
        if member.type_params and member.params and arg_type is not None:
            param = member.params[0]
            if isinstance(param, TypeVariable):
                mapping[param] = arg_type
                param = param.bound
            if isinstance(param, ParameterizedType):
                parameterized = self.as_super(arg_type, param.generic)
                if parameterized is not None:
                    self.fetch_type_vars(param, parameterized, mapping)
        ret = substitute(member.return_type, mapping)
        if isinstance(ret, TypeVariable):
            erased = self.erasure(ret)
            return erased if erased is not None else ret
        return ret

    def fetch_type_vars(
        self,
        t: HostType,
        pt: HostType,
        mapping: dict[TypeVariable, HostType],
    ) -> None:
        if isinstance(t, TypeVariable):
            mapping.setdefault(t, pt)
            return
        if isinstance(t, ParameterizedType) and isinstance(pt, ParameterizedType):
            if t == pt:
                return
            for t_arg, pt_arg in zip(t.args, pt.args):
                self.fetch_type_vars(t_arg, pt_arg, mapping)
