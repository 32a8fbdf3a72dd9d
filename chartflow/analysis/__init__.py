"""Graph analysis consumed by the exporters: digraph and graph oracle."""

from chartflow.analysis.digraph import DirectedGraph, build_digraph
from chartflow.analysis.oracle import DigraphOracle, GraphOracle, default_oracle

__all__ = [
    "DigraphOracle",
    "DirectedGraph",
    "GraphOracle",
    "build_digraph",
    "default_oracle",
]
