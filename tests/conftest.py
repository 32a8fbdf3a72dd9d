"""Shared test helpers."""

from pathlib import Path

import pytest

from chartflow.graph import Node, Workflow

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures" / "workflows"


class FixedOracle:
    """Graph oracle answering from fixed activity-name sets."""

    def __init__(self, start=(), parallel=(), exit=()):
        self.start = set(start)
        self.parallel = set(parallel)
        self.exit = set(exit)

    def start_nodes(self, wf: Workflow) -> list[Node]:
        return [n for n in wf.nodes if n.activity_name in self.start]

    def exit_nodes(self, wf: Workflow) -> list[Node]:
        return [n for n in wf.nodes if n.activity_name in self.exit]

    def parallel_node_ids(self, wf: Workflow) -> set:
        return {n.id for n in wf.nodes if n.activity_name in self.parallel}


@pytest.fixture
def fixed_oracle():
    """Factory: fixed_oracle(start=..., parallel=..., exit=...)."""
    return FixedOracle


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
