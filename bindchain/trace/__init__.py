"""JSONL sink for binding traces."""

from bindchain.trace.logger import TraceLogger

__all__ = ["TraceLogger"]
