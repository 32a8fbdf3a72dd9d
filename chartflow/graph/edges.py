"""Edge types for workflow graph."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Edge:
    """A directed edge between two activity names (From -> To)."""

    source: str
    target: str
