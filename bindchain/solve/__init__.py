"""Symbolic export of bound expression trees."""

from bindchain.solve.sympy_bridge import expr_to_sympy

__all__ = ["expr_to_sympy"]
