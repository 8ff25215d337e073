"""Structured binding-trace models for recording the binder's search."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def _utc_iso_z_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class BindingEventKind(str, Enum):
    """Enumerated binding-trace event kinds."""

    SPLIT = "split"
    BACKTRACK = "backtrack"
    SOLVED = "solved"
    FAILED = "failed"
    NORMALIZE = "normalize"


class BindingEvent(BaseModel):
    """Single event in a binding trace."""

    model_config = ConfigDict(extra="forbid")

    event_id: str = Field(min_length=1)
    ts: str | None = None
    kind: BindingEventKind
    message: str
    depth: int = Field(default=0, ge=0)
    data: dict | None = None


class BindingTrace(BaseModel):
    """Ordered record of the splits, backtracks and outcome of ``bind`` calls."""

    model_config = ConfigDict(extra="forbid")

    schema_version: Literal["0.1"] = "0.1"
    events: list[BindingEvent] = Field(default_factory=list)

    def record(
        self,
        kind: BindingEventKind,
        message: str,
        *,
        depth: int = 0,
        **data,
    ) -> BindingEvent:
        """Append a new event with a fresh id and UTC timestamp."""

        event = BindingEvent(
            event_id=uuid4().hex,
            ts=_utc_iso_z_now(),
            kind=kind,
            message=message,
            depth=depth,
            data=data or None,
        )
        self.events.append(event)
        return event

    def kinds(self) -> list[BindingEventKind]:
        return [event.kind for event in self.events]
