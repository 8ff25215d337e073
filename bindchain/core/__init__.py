"""Core operand-chain binding functionality."""

from bindchain.core.binder import AbstractBinder, BindingResult, Failed, Operand, PreconditionViolation, Solved
from bindchain.core.binding_trace import BindingEvent, BindingEventKind, BindingTrace
from bindchain.core.expr import Binary, Leaf, render_expr
from bindchain.core.host import ExprBinder, operands_from_tree
from bindchain.core.normalize import AssociativityNormalizer
from bindchain.core.operators import DEFAULT_REGISTRY, OperatorRegistry, OperatorSpec, OperatorTag
from bindchain.core.oracle import Reaction, ReactionCache, ReactionOracle
from bindchain.core.type_system import TypeSystem
from bindchain.core.types import CapabilityMethod, ClassType, ParameterizedType, TypeHierarchy, TypeVariable

__all__ = [
    "AbstractBinder",
    "AssociativityNormalizer",
    "Binary",
    "BindingEvent",
    "BindingEventKind",
    "BindingResult",
    "BindingTrace",
    "CapabilityMethod",
    "ClassType",
    "DEFAULT_REGISTRY",
    "ExprBinder",
    "Failed",
    "Leaf",
    "Operand",
    "OperatorRegistry",
    "OperatorSpec",
    "OperatorTag",
    "ParameterizedType",
    "PreconditionViolation",
    "Reaction",
    "ReactionCache",
    "ReactionOracle",
    "Solved",
    "TypeHierarchy",
    "TypeSystem",
    "TypeVariable",
    "operands_from_tree",
    "render_expr",
]
