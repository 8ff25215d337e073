"""Host type model walked by the reaction oracle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union, runtime_checkable


class TypeVariable:
    """Declared type variable; identity-compared so bounds may be recursive."""

    def __init__(self, name: str, bound: "HostType | None" = None) -> None:
        self.name = name
        self.bound = bound

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class CapabilityMethod:
    """A method a type exposes that may serve as a reaction."""

    name: str
    params: tuple["HostType", ...]
    return_type: "HostType"
    type_params: tuple[TypeVariable, ...] = ()
    synthetic: bool = False

    @property
    def param_count(self) -> int:
        return len(self.params)


@runtime_checkable
class TypeHierarchy(Protocol):
    """What the oracle needs from a host type to search for reactions."""

    name: str

    def superclass(self) -> "HostType | None": ...

    def interfaces(self) -> tuple["HostType", ...]: ...

    def capabilities(self) -> tuple[CapabilityMethod, ...]: ...


class ClassType:
    """A declared class or interface.

    Declarations are compared by identity, which lets a class refer to
    itself in its own interfaces (``Length implements Comparable[Length]``).
    """

    def __init__(
        self,
        name: str,
        *,
        superclass: "HostType | None" = None,
        interfaces: tuple["HostType", ...] = (),
        type_params: tuple[TypeVariable, ...] = (),
        primitive: bool = False,
    ) -> None:
        self.name = name
        self.type_params = tuple(type_params)
        self.primitive = primitive
        self._superclass = superclass
        self._interfaces: list[HostType] = list(interfaces)
        self._methods: list[CapabilityMethod] = []

    def superclass(self) -> "HostType | None":
        return self._superclass

    def interfaces(self) -> tuple["HostType", ...]:
        return tuple(self._interfaces)

    def capabilities(self) -> tuple[CapabilityMethod, ...]:
        return tuple(self._methods)

    def extends(self, superclass: "HostType") -> "ClassType":
        self._superclass = superclass
        return self

    def implements(self, *interfaces: "HostType") -> "ClassType":
        self._interfaces.extend(interfaces)
        return self

    def define(
        self,
        name: str,
        params: tuple["HostType", ...] | list["HostType"],
        return_type: "HostType",
        *,
        type_params: tuple[TypeVariable, ...] = (),
        synthetic: bool = False,
    ) -> CapabilityMethod:
        """Declare a capability method on this type and return it."""

        method = CapabilityMethod(
            name=name,
            params=tuple(params),
            return_type=return_type,
            type_params=tuple(type_params),
            synthetic=synthetic,
        )
        self._methods.append(method)
        return method

    def __getitem__(self, args) -> "ParameterizedType":
        if not isinstance(args, tuple):
            args = (args,)
        return ParameterizedType(self, tuple(args))

    def __repr__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class ParameterizedType:
    """A generic class applied to type arguments, e.g. ``Comparable[Length]``."""

    generic: ClassType
    args: tuple["HostType", ...]

    @property
    def name(self) -> str:
        return self.generic.name

    @property
    def primitive(self) -> bool:
        return False

    def bindings(self) -> dict[TypeVariable, "HostType"]:
        return dict(zip(self.generic.type_params, self.args))

    def superclass(self) -> "HostType | None":
        sup = self.generic.superclass()
        return substitute(sup, self.bindings()) if sup is not None else None

    def interfaces(self) -> tuple["HostType", ...]:
        mapping = self.bindings()
        return tuple(substitute(iface, mapping) for iface in self.generic.interfaces())

    def capabilities(self) -> tuple[CapabilityMethod, ...]:
        return self.generic.capabilities()

    def __repr__(self) -> str:
        return f"{self.generic.name}[{', '.join(repr(a) for a in self.args)}]"


HostType = Union[ClassType, ParameterizedType, TypeVariable, TypeHierarchy]


def symbol_of(t: HostType | None) -> TypeHierarchy | None:
    """Return the declaration behind a class-like type.

    Host types outside this module qualify when they satisfy
    ``TypeHierarchy``; they are their own declaration.
    """

    if isinstance(t, ClassType):
        return t
    if isinstance(t, ParameterizedType):
        return t.generic
    if t is None or isinstance(t, TypeVariable):
        return None
    if isinstance(t, TypeHierarchy):
        return t
    return None


def substitute(t: HostType, mapping: dict[TypeVariable, HostType]) -> HostType:
    """Replace type variables in ``t`` according to ``mapping``."""

    if not mapping:
        return t
    if isinstance(t, TypeVariable):
        return mapping.get(t, t)
    if isinstance(t, ParameterizedType):
        return ParameterizedType(t.generic, tuple(substitute(a, mapping) for a in t.args))
    return t


BOOLEAN = ClassType("boolean", primitive=True)
