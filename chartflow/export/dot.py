"""
Generate a DOT digraph from a workflow, nesting child workflows as clusters.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from chartflow.analysis.oracle import GraphOracle, default_oracle
from chartflow.export.classify import classify_nodes
from chartflow.export.context import ExportContext
from chartflow.graph.workflow import Workflow
from chartflow.logging import get_logger

logger = get_logger(__name__)

LEVEL_INDENT = "    "
START_NODE_STYLE = " [shape=doublecircle, color=green]"
PARALLEL_NODE_STYLE = " [style=filled, fillcolor=lightblue]"


def export_dot(
    wf: Workflow,
    indent: str = "",
    child_workflows: Mapping[str, Workflow] | None = None,
    *,
    oracle: GraphOracle | None = None,
) -> str:
    """
    Produce a DOT `digraph` for wf.

    Start nodes are declared first (double circle, green), then the remaining
    nodes (parallel ones filled light blue), then edges in declared order.
    For each node whose activity name is a key of child_workflows, the child
    is rendered inside a `cluster_<child name>` subgraph. Each workflow name
    is rendered at most once per call.

    Args:
        wf: Root workflow.
        indent: Base indentation; the body sits one level deeper.
        child_workflows: Activity name -> child workflow to nest.
        oracle: Start/parallel oracle (default: DigraphOracle).

    Returns:
        DOT text.
    """
    ctx = ExportContext()
    ctx.emit(f'digraph "{wf.name}" {{\n')
    _render_workflow(
        wf,
        indent + LEVEL_INDENT,
        ctx,
        child_workflows or {},
        oracle or default_oracle(),
    )
    ctx.emit("}\n")
    return ctx.text()


def _render_workflow(
    wf: Workflow,
    indent: str,
    ctx: ExportContext,
    child_workflows: Mapping[str, Workflow],
    oracle: GraphOracle,
) -> None:
    if not ctx.enter(wf.name):
        logger.debug("Workflow %r already rendered; skipping", wf.name)
        return

    classifier = classify_nodes(wf, oracle)

    for node in wf.nodes:
        if classifier.is_start(node):
            ctx.emit(indent, f'"{node.activity_name}"', START_NODE_STYLE, ";\n")

    for node in wf.nodes:
        if classifier.is_start(node):
            continue
        style = PARALLEL_NODE_STYLE if classifier.is_parallel(node) else ""
        ctx.emit(indent, f'"{node.activity_name}"', style, ";\n")

    # Raw activity names: DOT output does not disambiguate nested scopes
    for edge in wf.edges:
        ctx.emit(indent, f'"{edge.source}" -> "{edge.target}"', ";\n")

    for node in wf.nodes:
        child = child_workflows.get(node.activity_name)
        if child is None:
            continue
        if child.name in ctx.visited:
            logger.debug("Child workflow %r already rendered; no cluster for %r", child.name, node.activity_name)
            continue
        ctx.emit(indent, f'subgraph "cluster_{child.name}" {{\n')
        ctx.emit(indent, LEVEL_INDENT, f'label = "{child.name}";\n')
        _render_workflow(child, indent + LEVEL_INDENT, ctx, child_workflows, oracle)
        ctx.emit(indent, "}\n")


def export_dot_to_file(
    wf: Workflow,
    path: str | Path,
    child_workflows: Mapping[str, Workflow] | None = None,
    *,
    oracle: GraphOracle | None = None,
    indent: str = LEVEL_INDENT,
) -> Path:
    """Write export_dot(wf, indent) as UTF-8 to path. OSError propagates unchanged."""
    text = export_dot(wf, indent, child_workflows, oracle=oracle)
    out_path = Path(path)
    out_path.write_text(text, encoding="utf-8")
    logger.debug("Wrote DOT for %r to %s (%d chars)", wf.name, out_path, len(text))
    return out_path
