"""CLI package for bindchain tools."""

__all__ = ["bind"]
