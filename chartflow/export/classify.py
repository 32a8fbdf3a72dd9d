"""
Node classification: start and parallel predicates answered by a GraphOracle.
"""

from __future__ import annotations

from dataclasses import dataclass

from chartflow.analysis.oracle import GraphOracle, default_oracle
from chartflow.graph.nodes import Node
from chartflow.graph.workflow import Workflow


@dataclass(frozen=True)
class NodeClassifier:
    """Start and parallel node IDs of one workflow, queried once per render."""

    start_ids: frozenset[int | str]
    parallel_ids: frozenset[int | str]
    start_nodes: tuple[Node, ...] = ()

    def is_start(self, node: Node) -> bool:
        return node.id in self.start_ids

    def is_parallel(self, node: Node) -> bool:
        return node.id in self.parallel_ids


def classify_nodes(wf: Workflow, oracle: GraphOracle | None = None) -> NodeClassifier:
    """Query the oracle for wf; nodes absent from both sets get no styling."""
    oracle = oracle or default_oracle()
    start_nodes = tuple(oracle.start_nodes(wf))
    return NodeClassifier(
        start_ids=frozenset(n.id for n in start_nodes),
        parallel_ids=frozenset(oracle.parallel_node_ids(wf)),
        start_nodes=start_nodes,
    )
