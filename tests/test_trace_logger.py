"""Tests for the JSONL trace sink."""

from __future__ import annotations

import json
from pathlib import Path

from bindchain.core.binding_trace import BindingEventKind, BindingTrace
from bindchain.trace import TraceLogger


def test_trace_logger_appends_compact_lines(tmp_path: Path) -> None:
    trace = BindingTrace()
    trace.record(BindingEventKind.SPLIT, "Reduce pair at 0 via divide", index=0)
    trace.record(BindingEventKind.SOLVED, "Bound chain to Velocity", result_type="Velocity")
    path = tmp_path / "nested" / "trace.jsonl"

    with TraceLogger(path) as logger:
        assert logger.write_trace(trace) == 2
    with TraceLogger(path) as logger:
        logger.write_trace(trace)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    first = json.loads(lines[0])
    assert first["kind"] == "split"
    assert first["data"] == {"index": 0}
    assert first["depth"] == 0
    assert ", " not in lines[0]


def test_binding_event_without_data() -> None:
    trace = BindingTrace()
    event = trace.record(BindingEventKind.FAILED, "No reaction", depth=2)

    assert event.data is None
    assert event.depth == 2
    assert event.ts.endswith("Z")
    assert trace.kinds() == [BindingEventKind.FAILED]
