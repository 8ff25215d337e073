"""Operand-chain binding resolver."""

__version__ = "0.1.0"
