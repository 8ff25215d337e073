"""Pydantic models for binding request documents.

A request declares a small type universe (classes, their supertypes and
capability methods) plus an operand chain over it::

    {
      "types": [
        {"name": "Length", "methods": [
          {"name": "divide", "params": ["Time"], "returns": "Velocity"}]},
        ...
      ],
      "operands": [
        {"name": "5", "type": "Number", "value": 5},
        {"name": "mi", "type": "Length"},
        {"name": "hr", "type": "Time", "operator": "/"}
      ]
    }

Type references use ``Name`` or ``Name[Arg, ...]``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from bindchain.core.binder import Operand
from bindchain.core.expr import Expr, Leaf
from bindchain.core.operators import DEFAULT_REGISTRY, OperatorRegistry
from bindchain.core.type_system import TypeSystem
from bindchain.core.types import BOOLEAN, ClassType, HostType, ParameterizedType, TypeVariable

_TOKEN_RE = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_.$]*|\[|\]|,)")


class TypeParamDecl(BaseModel):
    """Type variable declaration, optionally bounded."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    bound: str | None = None


class MethodDecl(BaseModel):
    """Capability method declaration."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    params: list[str] = Field(default_factory=list)
    returns: str
    type_params: list[TypeParamDecl] = Field(default_factory=list)
    synthetic: bool = False

    @field_validator("type_params", mode="before")
    @classmethod
    def _coerce_type_params(cls, value):
        return _coerce_type_param_list(value)


class TypeDecl(BaseModel):
    """Class or interface declaration."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    superclass: str | None = None
    interfaces: list[str] = Field(default_factory=list)
    type_params: list[TypeParamDecl] = Field(default_factory=list)
    primitive: bool = False
    methods: list[MethodDecl] = Field(default_factory=list)

    @field_validator("type_params", mode="before")
    @classmethod
    def _coerce_type_params(cls, value):
        return _coerce_type_param_list(value)


class OperandDecl(BaseModel):
    """One operand of the chain; ``operator`` binds it to its predecessor."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    operator: str | None = None
    value: int | float | None = None


class BindingRequest(BaseModel):
    """Top-level binding request document."""

    model_config = ConfigDict(extra="forbid")

    types: list[TypeDecl]
    operands: list[OperandDecl] = Field(min_length=1)
    object_type: str | None = None
    boolean_type: str | None = None

    @model_validator(mode="after")
    def _validate_unique_names(self) -> "BindingRequest":
        names = [decl.name for decl in self.types]
        if len(names) != len(set(names)):
            raise ValueError("Type names must be unique")
        return self


@dataclass
class BuiltRequest:
    """A request resolved into live types and an operand chain."""

    types: dict[str, ClassType]
    type_system: TypeSystem
    chain: list[Operand[Expr]]


def load_request(path: str | Path) -> BindingRequest:
    """Load a binding request from a JSON file."""

    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return BindingRequest.model_validate(payload)


def build_request(
    request: BindingRequest | dict,
    registry: OperatorRegistry = DEFAULT_REGISTRY,
) -> BuiltRequest:
    """Resolve declarations into ``ClassType`` objects and the operand chain.

    Raises ValueError for unknown type names, unknown operators, wrong type
    argument counts and cyclic superclass chains.
    """

    if isinstance(request, dict):
        try:
            request = BindingRequest.model_validate(request)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    types: dict[str, ClassType] = {}
    for decl in request.types:
        type_params = tuple(TypeVariable(tp.name) for tp in decl.type_params)
        types[decl.name] = ClassType(decl.name, type_params=type_params, primitive=decl.primitive)

    for decl in request.types:
        cls = types[decl.name]
        scope = {tv.name: tv for tv in cls.type_params}
        for tv, tp in zip(cls.type_params, decl.type_params):
            if tp.bound is not None:
                tv.bound = _resolve(tp.bound, types, scope)
        if decl.superclass is not None:
            cls.extends(_resolve(decl.superclass, types, scope))
        if decl.interfaces:
            cls.implements(*(_resolve(iface, types, scope) for iface in decl.interfaces))
        for method in decl.methods:
            method_params = tuple(TypeVariable(tp.name) for tp in method.type_params)
            method_scope = {**scope, **{tv.name: tv for tv in method_params}}
            for tv, tp in zip(method_params, method.type_params):
                if tp.bound is not None:
                    tv.bound = _resolve(tp.bound, types, method_scope)
            cls.define(
                method.name,
                tuple(_resolve(p, types, method_scope) for p in method.params),
                _resolve(method.returns, types, method_scope),
                type_params=method_params,
                synthetic=method.synthetic,
            )

    for cls in types.values():
        _check_acyclic(cls)

    type_system = TypeSystem(
        object_type=_lookup_class(request.object_type, types) if request.object_type else None,
        boolean_type=_lookup_class(request.boolean_type, types) if request.boolean_type else types.get("boolean", BOOLEAN),
    )

    chain: list[Operand[Expr]] = []
    for idx, operand in enumerate(request.operands):
        operator = None
        if operand.operator is not None:
            spec = registry.lookup(operand.operator)
            if spec is None or spec.param_count == 0:
                raise ValueError(f"Unknown binary operator {operand.operator!r} on operand {idx}")
            operator = spec.tag
        leaf = Leaf(name=operand.name, type=_resolve(operand.type, types, {}), value=operand.value)
        chain.append(Operand(leaf, operator))

    return BuiltRequest(types=types, type_system=type_system, chain=chain)


def parse_type_ref(text: str) -> tuple[str, list]:
    """Parse ``Name[Arg, ...]`` into ``(name, [args...])`` recursively."""

    tokens = _tokenize(text)
    ref, pos = _parse_ref(tokens, 0, text)
    if pos != len(tokens):
        raise ValueError(f"Unexpected trailing input in type reference {text!r}")
    return ref


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if match is None:
            raise ValueError(f"Invalid type reference {text!r}")
        tokens.append(match.group(1))
        pos = match.end()
    if not tokens:
        raise ValueError("Empty type reference")
    return tokens


def _parse_ref(tokens: list[str], pos: int, text: str) -> tuple[tuple[str, list], int]:
    if pos >= len(tokens) or tokens[pos] in {"[", "]", ","}:
        raise ValueError(f"Expected a type name in {text!r}")
    name = tokens[pos]
    pos += 1
    args: list = []
    if pos < len(tokens) and tokens[pos] == "[":
        pos += 1
        while True:
            arg, pos = _parse_ref(tokens, pos, text)
            args.append(arg)
            if pos < len(tokens) and tokens[pos] == ",":
                pos += 1
                continue
            if pos < len(tokens) and tokens[pos] == "]":
                pos += 1
                break
            raise ValueError(f"Unterminated type arguments in {text!r}")
    return (name, args), pos


def _resolve(text: str, types: dict[str, ClassType], scope: dict[str, TypeVariable]) -> HostType:
    return _resolve_ref(parse_type_ref(text), types, scope)


def _resolve_ref(ref: tuple[str, list], types: dict[str, ClassType], scope: dict[str, TypeVariable]) -> HostType:
    name, args = ref
    if name in scope:
        if args:
            raise ValueError(f"Type variable {name!r} cannot take type arguments")
        return scope[name]
    cls = _lookup_class(name, types)
    if not args:
        return cls
    if len(args) != len(cls.type_params):
        raise ValueError(f"Type {name!r} expects {len(cls.type_params)} type arguments, got {len(args)}")
    return ParameterizedType(cls, tuple(_resolve_ref(arg, types, scope) for arg in args))


def _lookup_class(name: str, types: dict[str, ClassType]) -> ClassType:
    cls = types.get(name)
    if cls is None:
        if name == BOOLEAN.name:
            return BOOLEAN
        raise ValueError(f"Unknown type {name!r}")
    return cls


def _check_acyclic(cls: ClassType) -> None:
    seen: set[int] = set()
    current: HostType | None = cls
    while current is not None:
        sym = current.generic if isinstance(current, ParameterizedType) else current
        if id(sym) in seen:
            raise ValueError(f"Cyclic superclass chain through {sym.name!r}")
        seen.add(id(sym))
        current = sym.superclass() if isinstance(sym, ClassType) else None


def _coerce_type_param_list(value):
    if isinstance(value, list):
        return [{"name": item} if isinstance(item, str) else item for item in value]
    return value
