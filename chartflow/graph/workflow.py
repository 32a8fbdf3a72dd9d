"""
Workflow data model and deterministic dict serialization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from chartflow.graph.edges import Edge
from chartflow.graph.nodes import Node


@dataclass(frozen=True)
class Workflow:
    """
    Named workflow: ordered nodes and ordered edges.

    The name is the re-visit key during export, so it must be unique among
    all workflows reachable from one root.
    """

    name: str
    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()


def build_workflow(
    name: str,
    nodes: Iterable[Node],
    edges: Iterable[Edge] = (),
) -> Workflow:
    """Build a Workflow, snapshotting nodes and edges into tuples."""
    return Workflow(name=name, nodes=tuple(nodes), edges=tuple(edges))


def workflow_to_dict(wf: Workflow) -> dict:
    """
    Return a JSON-serializable dict preserving declared node and edge order.
    Same Workflow -> same dict.
    """
    nodes = []
    for n in wf.nodes:
        entry = {"id": n.id, "activity_name": n.activity_name}
        if n.edit_link is not None:
            entry["edit_link"] = n.edit_link
        nodes.append(entry)
    return {
        "name": wf.name,
        "nodes": nodes,
        "edges": [{"source": e.source, "target": e.target} for e in wf.edges],
    }
