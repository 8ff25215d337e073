"""Append-only JSONL trace logger."""

from __future__ import annotations

import json
from pathlib import Path

from bindchain.core.binding_trace import BindingTrace


class TraceLogger:
    """Append binding events to a JSONL file, one compact object per line."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self.path.open("a", encoding="utf-8")

    def __enter__(self) -> "TraceLogger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def append(self, event: dict) -> None:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
        self._fh.write(line + "\n")

    def write_trace(self, trace: BindingTrace) -> int:
        """Append every event of ``trace``; return how many were written."""

        for event in trace.events:
            self.append(event.model_dump(mode="json"))
        return len(trace.events)

    def close(self) -> None:
        self._fh.flush()
        self._fh.close()
