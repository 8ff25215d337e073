"""Operator registry mapping operator tags to reaction method names."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


def _normalize_surface(surface: str) -> str:
    return " ".join(surface.strip().lower().split())


class OperatorTag(str, Enum):
    """Binary and unary operator tags a host can attach to an operand."""

    PLUS = "plus"
    MINUS = "minus"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    BITAND = "bitand"
    BITOR = "bitor"
    BITXOR = "bitxor"
    SL = "sl"
    SR = "sr"
    USR = "usr"
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LE = "le"
    GT = "gt"
    GE = "ge"
    NEG = "neg"
    NOT = "not"
    COMPL = "compl"
    PREINC = "preinc"
    POSTINC = "postinc"
    PREDEC = "predec"
    POSTDEC = "postdec"


COMPARE_TO = "compareTo"
COMPARE_TO_WITH = "compareToWith"
PREFIX_BIND = "prefixBind"
POSTFIX_BIND = "postfixBind"


@dataclass(frozen=True, slots=True)
class OperatorSpec:
    """Canonical operator metadata used by the reaction oracle."""

    tag: OperatorTag
    method_name: str
    param_count: int
    surface_forms: tuple[str, ...]
    symbol: str
    commutative: bool = False
    comparison: bool = False
    relational: bool = False


class OperatorRegistry:
    """Deterministic lookup table for operator tags and surface forms."""

    def __init__(self, specs: list[OperatorSpec]) -> None:
        self._specs: tuple[OperatorSpec, ...] = tuple(specs)
        self._by_surface: dict[str, OperatorSpec] = {}
        self._by_tag: dict[OperatorTag, OperatorSpec] = {}

        for spec in self._specs:
            if spec.tag not in self._by_tag:
                self._by_tag[spec.tag] = spec
            for surface in spec.surface_forms:
                normalized = _normalize_surface(surface)
                if normalized and normalized not in self._by_surface:
                    self._by_surface[normalized] = spec

    def lookup(self, surface: str) -> OperatorSpec | None:
        """Lookup operator spec by surface token/alias (e.g. \"/\")."""

        return self._by_surface.get(_normalize_surface(surface))

    def spec(self, tag: OperatorTag) -> OperatorSpec | None:
        """Lookup operator spec by tag."""

        return self._by_tag.get(tag)

    def is_commutative(self, tag: OperatorTag | None) -> bool:
        spec = self._by_tag.get(tag) if tag is not None else None
        return spec is not None and spec.commutative

    def is_comparison(self, tag: OperatorTag | None) -> bool:
        spec = self._by_tag.get(tag) if tag is not None else None
        return spec is not None and spec.comparison

    def is_relational(self, tag: OperatorTag | None) -> bool:
        spec = self._by_tag.get(tag) if tag is not None else None
        return spec is not None and spec.relational


def _binary(
    tag: OperatorTag,
    method_name: str,
    symbol: str,
    surface_forms: tuple[str, ...],
    *,
    commutative: bool = False,
) -> OperatorSpec:
    return OperatorSpec(
        tag=tag,
        method_name=method_name,
        param_count=1,
        surface_forms=(symbol,) + surface_forms,
        symbol=symbol,
        commutative=commutative,
    )


def _comparison(
    tag: OperatorTag,
    symbol: str,
    surface_forms: tuple[str, ...],
    *,
    commutative: bool = False,
    relational: bool = False,
) -> OperatorSpec:
    # the whole equality/ordering family shares one method; the operator
    # itself is passed as the second declared parameter
    return OperatorSpec(
        tag=tag,
        method_name=COMPARE_TO_WITH,
        param_count=2,
        surface_forms=(symbol,) + surface_forms,
        symbol=symbol,
        commutative=commutative,
        comparison=True,
        relational=relational,
    )


def _unary(tag: OperatorTag, method_name: str, symbol: str) -> OperatorSpec:
    return OperatorSpec(
        tag=tag,
        method_name=method_name,
        param_count=0,
        surface_forms=(),
        symbol=symbol,
    )


DEFAULT_REGISTRY = OperatorRegistry(
    [
        _binary(OperatorTag.PLUS, "add", "+", ("plus", "add"), commutative=True),
        _binary(OperatorTag.MINUS, "subtract", "-", ("minus", "subtract")),
        _binary(OperatorTag.MUL, "multiply", "*", ("times", "multiply", "×"), commutative=True),
        _binary(OperatorTag.DIV, "divide", "/", ("divide", "over", "÷")),
        _binary(OperatorTag.MOD, "remainder", "%", ("mod", "rem", "remainder")),
        _binary(OperatorTag.BITAND, "and", "&", ("bitand",), commutative=True),
        _binary(OperatorTag.BITOR, "or", "|", ("bitor",), commutative=True),
        _binary(OperatorTag.BITXOR, "xor", "^", ("bitxor",), commutative=True),
        _binary(OperatorTag.SL, "shiftLeft", "<<", ("shl",)),
        _binary(OperatorTag.SR, "shiftRight", ">>", ("shr",)),
        _binary(OperatorTag.USR, "unsignedShiftRight", ">>>", ("ushr",)),
        _comparison(OperatorTag.EQ, "==", ("=", "equals"), commutative=True),
        _comparison(OperatorTag.NE, "!=", ("≠", "not equal"), commutative=True),
        _comparison(OperatorTag.LT, "<", ("less than",), relational=True),
        _comparison(OperatorTag.LE, "<=", ("≤", "at most"), relational=True),
        _comparison(OperatorTag.GT, ">", ("greater than",), relational=True),
        _comparison(OperatorTag.GE, ">=", ("≥", "at least"), relational=True),
        _unary(OperatorTag.NEG, "negate", "-"),
        _unary(OperatorTag.NOT, "not", "!"),
        _unary(OperatorTag.COMPL, "invert", "~"),
        _unary(OperatorTag.PREINC, "increment", "++"),
        _unary(OperatorTag.POSTINC, "increment", "++"),
        _unary(OperatorTag.PREDEC, "decrement", "--"),
        _unary(OperatorTag.POSTDEC, "decrement", "--"),
    ]
)
