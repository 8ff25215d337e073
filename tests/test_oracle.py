"""Unit tests for reaction lookup."""

from __future__ import annotations

from bindchain.core.expr import Leaf, render_expr
from bindchain.core.host import ExprBinder
from bindchain.core.operators import OperatorTag
from bindchain.core.oracle import ReactionCache, ReactionOracle
from bindchain.core.type_system import TypeSystem
from bindchain.core.types import BOOLEAN, CapabilityMethod, ClassType, TypeHierarchy, TypeVariable


def test_named_operator_found_on_left_type(units) -> None:
    reaction = ReactionOracle().find(units.length, units.time, OperatorTag.DIV)
    assert reaction is not None
    assert reaction.name == "divide"
    assert reaction.result_type is units.velocity
    assert reaction.swapped is False
    assert reaction.operator == OperatorTag.DIV
    assert not reaction.implicit


def test_named_operator_found_on_superclass_before_interface() -> None:
    time = ClassType("Time")
    from_super = ClassType("FromSuper")
    from_iface = ClassType("FromIface")
    iface = ClassType("Dividable")
    iface.define("divide", (time,), from_iface)
    base = ClassType("Base")
    base.define("divide", (time,), from_super)
    length = ClassType("Length", superclass=base, interfaces=(iface,))

    reaction = ReactionOracle().find(length, time, OperatorTag.DIV)
    assert reaction is not None
    assert reaction.result_type is from_super
    assert reaction.owner is base


def test_interface_method_found_when_superclass_lacks_it() -> None:
    time = ClassType("Time")
    velocity = ClassType("Velocity")
    iface = ClassType("Dividable")
    iface.define("divide", (time,), velocity)
    grand_iface = ClassType("Outer").implements(iface)
    length = ClassType("Length", superclass=ClassType("Base")).implements(grand_iface)

    reaction = ReactionOracle().find(length, time, OperatorTag.DIV)
    assert reaction is not None
    assert reaction.owner is iface


def test_commutative_operator_swaps_operands() -> None:
    a = ClassType("A")
    b = ClassType("B")
    ab = ClassType("AB")
    b.define("add", (a,), ab)
    oracle = ReactionOracle()

    reaction = oracle.find(a, b, OperatorTag.PLUS)
    assert reaction is not None
    assert reaction.swapped is True
    assert reaction.right_to_left is True
    assert reaction.result_type is ab
    assert oracle.find(b, a, OperatorTag.PLUS).swapped is False


def test_non_commutative_operator_does_not_swap() -> None:
    a = ClassType("A")
    b = ClassType("B")
    b.define("subtract", (a,), b)

    assert ReactionOracle().find(a, b, OperatorTag.MINUS) is None


def test_binder_without_operator_never_swaps_beyond_postfix() -> None:
    a = ClassType("A")
    b = ClassType("B")
    # prefixBind declared on the right type does not join (a, b)
    b.define("prefixBind", (a,), b)

    assert ReactionOracle().find(a, b, None) is None


def test_prefix_bind_preferred_over_postfix_bind() -> None:
    a = ClassType("A")
    b = ClassType("B")
    from_prefix = ClassType("FromPrefix")
    from_postfix = ClassType("FromPostfix")
    a.define("prefixBind", (b,), from_prefix)
    b.define("postfixBind", (a,), from_postfix)

    reaction = ReactionOracle().find(a, b)
    assert reaction is not None
    assert reaction.name == "prefixBind"
    assert reaction.result_type is from_prefix
    assert reaction.right_to_left is False
    assert reaction.implicit


def test_postfix_bind_is_right_to_left(units) -> None:
    reaction = ReactionOracle().find(units.number, units.velocity)
    assert reaction is not None
    assert reaction.name == "postfixBind"
    assert reaction.right_to_left is True
    assert reaction.swapped is False
    assert reaction.result_type is units.velocity


def test_exact_match_deeper_wins_over_assignable_match_shallower() -> None:
    wide = ClassType("Wide")
    narrow = ClassType("Narrow", superclass=wide)
    shallow_result = ClassType("Shallow")
    deep_result = ClassType("Deep")
    base = ClassType("Base")
    base.define("prefixBind", (narrow,), deep_result)
    receiver = ClassType("Receiver", superclass=base)
    receiver.define("prefixBind", (wide,), shallow_result)

    assert ReactionOracle().find(receiver, narrow).result_type is deep_result
    assert ReactionOracle().find(receiver, ClassType("Other", superclass=wide)).result_type is shallow_result


def test_synthetic_methods_are_ignored() -> None:
    a = ClassType("A")
    b = ClassType("B")
    a.define("prefixBind", (b,), a, synthetic=True)

    assert ReactionOracle().find(a, b) is None


def test_parameter_count_must_match() -> None:
    a = ClassType("A")
    b = ClassType("B")
    a.define("divide", (b, b), a)

    assert ReactionOracle().find(a, b, OperatorTag.DIV) is None


def test_comparison_uses_two_parameter_method_and_yields_boolean() -> None:
    operator_type = ClassType("Operator")
    length = ClassType("Length")
    length.define("compareToWith", (length, operator_type), BOOLEAN)

    for tag in (OperatorTag.EQ, OperatorTag.LT, OperatorTag.GE):
        reaction = ReactionOracle().find(length, length, tag)
        assert reaction is not None
        assert reaction.name == "compareToWith"
        assert reaction.result_type is BOOLEAN


def test_relational_operator_falls_back_to_compare_to() -> None:
    integer = ClassType("int", primitive=True)
    length = ClassType("Length")
    length.define("compareTo", (length,), integer)
    oracle = ReactionOracle()

    reaction = oracle.find(length, length, OperatorTag.LT)
    assert reaction is not None
    assert reaction.name == "compareTo"
    assert reaction.result_type is oracle.types.boolean_type
    assert oracle.find(length, length, OperatorTag.EQ) is None


def test_relational_fallback_skipped_for_primitive_left_type() -> None:
    prim = ClassType("long", primitive=True)
    prim.define("compareTo", (prim,), prim)

    assert ReactionOracle().find(prim, prim, OperatorTag.GT) is None


def test_generic_class_method_is_viewed_through_parameterization() -> None:
    t = TypeVariable("T")
    measure = ClassType("Measure", type_params=(t,))
    measure.define("add", (t,), t)
    length = ClassType("Length")
    length.extends(measure[length])

    reaction = ReactionOracle().find(length, length, OperatorTag.PLUS)
    assert reaction is not None
    assert reaction.result_type is length
    assert reaction.owner == measure[length]


def test_bound_type_variable_parameter_matches_in_second_pass() -> None:
    quantity = ClassType("Quantity")
    length = ClassType("Length").implements(quantity)
    scalar = ClassType("Scalar")
    q = TypeVariable("Q", bound=quantity)
    scalar.define("prefixBind", (q,), q, type_params=(q,))

    reaction = ReactionOracle().find(scalar, length)
    assert reaction is not None
    assert reaction.result_type is length
    assert ReactionOracle().find(scalar, ClassType("Unrelated")) is None


def test_type_variable_receiver_is_erased_to_bound(units) -> None:
    t = TypeVariable("L", bound=units.length)

    reaction = ReactionOracle().find(t, units.time, OperatorTag.DIV)
    assert reaction is not None
    assert reaction.result_type is units.velocity


def test_unary_reaction_requires_assignable_result() -> None:
    length = ClassType("Length")
    length.define("negate", (), length)
    weird = ClassType("Weird")
    weird.define("negate", (), ClassType("Other"))
    oracle = ReactionOracle()

    reaction = oracle.find_unary(length, OperatorTag.NEG)
    assert reaction is not None
    assert reaction.result_type is length
    assert oracle.find_unary(weird, OperatorTag.NEG) is None
    assert oracle.find_unary(length, OperatorTag.DIV) is None


def test_oracle_uses_supplied_boolean_type() -> None:
    my_bool = ClassType("Bool")
    length = ClassType("Length")
    length.define("compareToWith", (length, ClassType("Operator")), my_bool)

    oracle = ReactionOracle(TypeSystem(boolean_type=my_bool))
    assert oracle.find(length, length, OperatorTag.NE).result_type is my_bool


def test_reaction_cache_memoizes_hits_and_misses() -> None:
    a = ClassType("A")
    b = ClassType("B")
    cache = ReactionCache()
    calls: list[tuple] = []

    def compute():
        calls.append((a, b))
        return None

    assert cache.get_or_compute((a, b), compute) is None
    assert cache.get_or_compute((a, b), compute) is None
    assert len(calls) == 1
    assert (a, b) in cache
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0


class Unit:
    """Host type that only satisfies ``TypeHierarchy``."""

    def __init__(self, name: str, base=None, *interfaces) -> None:
        self.name = name
        self._base = base
        self._interfaces = tuple(interfaces)
        self.methods: list[CapabilityMethod] = []

    def superclass(self):
        return self._base

    def interfaces(self):
        return self._interfaces

    def capabilities(self):
        return tuple(self.methods)

    def __repr__(self) -> str:
        return self.name


def _unit_universe():
    duration = Unit("Duration")
    time = Unit("Time", duration)
    velocity = Unit("Velocity")
    quantity = Unit("Quantity")
    quantity.methods.append(CapabilityMethod("divide", (duration,), velocity))
    length = Unit("Length", quantity)
    number = Unit("Number")
    number.methods.append(CapabilityMethod("prefixBind", (velocity,), velocity))
    return number, length, time, velocity, quantity


def test_custom_hierarchy_is_walked_through_protocol() -> None:
    _number, length, time, velocity, quantity = _unit_universe()
    assert isinstance(length, TypeHierarchy)

    reaction = ReactionOracle().find(length, time, OperatorTag.DIV)
    assert reaction is not None
    assert reaction.name == "divide"
    assert reaction.owner is quantity
    assert reaction.result_type is velocity


def test_custom_hierarchy_binds_velocity_chain() -> None:
    number, length, time, velocity, _quantity = _unit_universe()

    result = ExprBinder().bind_exprs(
        [Leaf("5", number, 5), Leaf("mi", length), (OperatorTag.DIV, Leaf("hr", time))]
    )

    assert result.ok
    assert result.result_type is velocity
    assert render_expr(result.expr) == "(5 ⊗ (mi / hr))"
