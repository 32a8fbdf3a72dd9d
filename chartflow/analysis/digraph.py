"""
Build a directed graph from a Workflow for start/exit/parallel classification.
Vertices = activity names of the workflow's nodes plus any edge endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chartflow.graph.workflow import Workflow


@dataclass
class DirectedGraph:
    """
    Adjacency-list directed graph keyed by activity name.
    Parallel edges are kept; degree helpers count distinct neighbours.
    """

    _successors: dict[str, list[str]] = field(default_factory=dict)
    _predecessors: dict[str, list[str]] = field(default_factory=dict)

    def nodes(self) -> set[str]:
        """All vertex names."""
        return set(self._successors.keys()) | set(self._predecessors.keys())

    def successors(self, node: str) -> list[str]:
        """List of targets of edges from node (order preserved)."""
        return list(self._successors.get(node, []))

    def predecessors(self, node: str) -> list[str]:
        """List of sources of edges into node (order preserved)."""
        return list(self._predecessors.get(node, []))

    def out_degree(self, node: str) -> int:
        """Number of distinct successors other than node itself."""
        return len({s for s in self._successors.get(node, []) if s != node})

    def in_degree(self, node: str) -> int:
        """Number of distinct predecessors other than node itself."""
        return len({p for p in self._predecessors.get(node, []) if p != node})

    def add_node(self, node: str) -> None:
        self._successors.setdefault(node, [])
        self._predecessors.setdefault(node, [])

    def add_edge(self, source: str, target: str) -> None:
        self.add_node(source)
        self.add_node(target)
        self._successors[source].append(target)
        self._predecessors[target].append(source)


def build_digraph(wf: Workflow) -> DirectedGraph:
    """
    Build a DirectedGraph from a Workflow.
    Every node is a vertex even when it has no edges; edge endpoints that name
    no node (e.g. a child-workflow key) become vertices as well.
    """
    dg = DirectedGraph()
    for n in wf.nodes:
        dg.add_node(n.activity_name)
    for e in wf.edges:
        dg.add_edge(e.source, e.target)
    return dg
