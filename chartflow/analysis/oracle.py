"""
Graph oracle: start nodes, exit nodes and parallel fan-out nodes of a workflow.

Exporters only query an oracle; they never analyse the graph themselves.
DigraphOracle is the default; anything implementing GraphOracle can replace it.
"""

from __future__ import annotations

from collections import deque
from typing import Protocol

from chartflow.analysis.digraph import DirectedGraph, build_digraph
from chartflow.graph.nodes import Node
from chartflow.graph.workflow import Workflow


class GraphOracle(Protocol):
    """Answers classification queries about one workflow."""

    def start_nodes(self, wf: Workflow) -> list[Node]: ...

    def exit_nodes(self, wf: Workflow) -> list[Node]: ...

    def parallel_node_ids(self, wf: Workflow) -> set[int | str]: ...


def _mark_parallel_nodes(dg: DirectedGraph, spawning: list[str]) -> set[str]:
    """
    BFS forward from each spawning node's successors; every vertex reached
    before a join (in_degree > 1) is a parallel branch vertex.
    """
    spawning_set = set(spawning)
    marked: set[str] = set()
    for spawner in spawning:
        q: deque[str] = deque(s for s in dg.successors(spawner) if s != spawner)
        seen: set[str] = set()
        while q:
            n = q.popleft()
            if n in seen:
                continue
            seen.add(n)
            if dg.in_degree(n) > 1 or n in spawning_set:
                continue
            marked.add(n)
            for succ in dg.successors(n):
                q.append(succ)
    return marked


class DigraphOracle:
    """Default oracle computing answers from the workflow's edge list."""

    def start_nodes(self, wf: Workflow) -> list[Node]:
        """Nodes with no incoming edge from another node, in node order."""
        dg = build_digraph(wf)
        return [n for n in wf.nodes if dg.in_degree(n.activity_name) == 0]

    def exit_nodes(self, wf: Workflow) -> list[Node]:
        """Nodes with no outgoing edge to another node, in node order."""
        dg = build_digraph(wf)
        return [n for n in wf.nodes if dg.out_degree(n.activity_name) == 0]

    def spawning_nodes(self, wf: Workflow) -> list[Node]:
        """Nodes that fan out to more than one distinct successor."""
        dg = build_digraph(wf)
        return [n for n in wf.nodes if dg.out_degree(n.activity_name) > 1]

    def parallel_node_ids(self, wf: Workflow) -> set[int | str]:
        dg = build_digraph(wf)
        spawning = [n.activity_name for n in self.spawning_nodes(wf)]
        marked = _mark_parallel_nodes(dg, spawning)
        return {n.id for n in wf.nodes if n.activity_name in marked}


def default_oracle() -> GraphOracle:
    return DigraphOracle()
