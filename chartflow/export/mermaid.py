"""
Generate a Mermaid flowchart from a workflow, stitching child workflows in as subgraphs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from chartflow.analysis.oracle import GraphOracle, default_oracle
from chartflow.export.classify import classify_nodes
from chartflow.export.context import ExportContext
from chartflow.graph.nodes import Node, NodeMetadata
from chartflow.graph.workflow import Workflow
from chartflow.logging import get_logger

logger = get_logger(__name__)

LEVEL_INDENT = "    "
START_NODE_CLASS = "startNode"
PARALLEL_NODE_CLASS = "parallelNode"
CLASS_DEFS = (
    f"classDef {START_NODE_CLASS} fill:#9f6,stroke:#333,stroke-width:4px;\n",
    f"classDef {PARALLEL_NODE_CLASS} fill:#6cf,stroke:#333,stroke-width:2px;\n",
)


def node_label(name: str, metadata: NodeMetadata | None) -> str:
    """
    Label text for a node: its name, then `<br>` + description (line breaks
    become `<br>`), then one bold anchor per link.
    """
    label = name
    if metadata is None:
        return label
    if metadata.description:
        label += "<br>" + "<br>".join(metadata.description.splitlines())
    for link in metadata.links:
        label += f" <b><a href='{link.uri}' target='_blank'>{link.name}</a></b>"
    return label


def _is_standalone(node: Node, metadata: Mapping[str, NodeMetadata]) -> bool:
    meta = metadata.get(node.activity_name)
    return meta is not None and meta.standalone


def export_mermaid(
    wf: Workflow,
    indent: str = "",
    child_workflows: Mapping[str, Workflow] | None = None,
    metadata: Mapping[str, NodeMetadata] | None = None,
    *,
    oracle: GraphOracle | None = None,
) -> str:
    """
    Produce a Mermaid `flowchart TD` for wf.

    Layout: node declarations and edges of the whole recursive traversal,
    then standalone nodes from metadata, then the deferred `class` lines,
    then the fixed `classDef` lines. An edge whose target is a key of
    child_workflows fans in to the child's start nodes and renders the child
    as `subgraph <key>` with node names prefixed `<key>_`; an edge whose
    source is such a key fans out from the child's exit nodes.

    Args:
        wf: Root workflow.
        indent: Base indentation; workflow bodies sit one level deeper.
        child_workflows: Edge endpoint (activity name) -> child workflow.
        metadata: Activity name -> description, links and standalone flag.
        oracle: Start/exit/parallel oracle (default: DigraphOracle).

    Returns:
        Mermaid text.
    """
    metadata = metadata or {}
    ctx = ExportContext()
    ctx.emit("flowchart TD\n")
    _render_workflow(
        wf,
        indent + LEVEL_INDENT,
        ctx,
        child_workflows or {},
        metadata,
        oracle or default_oracle(),
        prefix="",
    )
    ctx.emit("\n")

    standalone = [(name, meta) for name, meta in metadata.items() if meta.standalone]
    for name, meta in standalone:
        ctx.emit(indent, name, "[", node_label(name, meta), "]\n")
    if standalone:
        logger.debug("Rendered %d standalone node(s)", len(standalone))

    # Class lines must follow every declaration, including nested subgraphs
    ctx.emit(*ctx.class_assignments)
    ctx.emit("\n")
    ctx.emit(*CLASS_DEFS)
    return ctx.text()


def _render_node(
    node: Node,
    indent: str,
    prefix: str,
    ctx: ExportContext,
    metadata: Mapping[str, NodeMetadata],
) -> str:
    name = prefix + node.activity_name
    label = node_label(node.activity_name, metadata.get(node.activity_name))
    ctx.emit(indent, name, "[", label, "]\n")
    if node.edit_link is not None:
        ctx.emit(f'click {name} "{node.edit_link}" _blank\n')
    return name


def _render_workflow(
    wf: Workflow,
    indent: str,
    ctx: ExportContext,
    child_workflows: Mapping[str, Workflow],
    metadata: Mapping[str, NodeMetadata],
    oracle: GraphOracle,
    prefix: str,
) -> None:
    if not ctx.enter(wf.name, prefix):
        logger.debug("Workflow %r already rendered; skipping", wf.name)
        return

    classifier = classify_nodes(wf, oracle)

    # Start nodes first so they sit at the top of the chart
    for node in classifier.start_nodes:
        if _is_standalone(node, metadata):
            continue
        name = _render_node(node, indent, prefix, ctx, metadata)
        ctx.defer_class(name, START_NODE_CLASS)

    for node in wf.nodes:
        if classifier.is_start(node) or _is_standalone(node, metadata):
            continue
        name = _render_node(node, indent, prefix, ctx, metadata)
        if classifier.is_parallel(node):
            ctx.defer_class(name, PARALLEL_NODE_CLASS)

    ctx.emit("\n")

    for edge in wf.edges:
        source = prefix + edge.source
        target = prefix + edge.target

        child = child_workflows.get(edge.target)
        child_prefix = _stitch_prefix(edge.target, child, wf, ctx)
        if child is not None and child_prefix is not None:
            for entry in oracle.start_nodes(child):
                ctx.emit(indent, source, " --> ", child_prefix + entry.activity_name, "\n")
            _render_subgraph(edge.target, child, indent, ctx, child_workflows, metadata, oracle)
            continue

        child = child_workflows.get(edge.source)
        child_prefix = _stitch_prefix(edge.source, child, wf, ctx)
        if child is not None and child_prefix is not None:
            for exit_node in oracle.exit_nodes(child):
                ctx.emit(indent, child_prefix + exit_node.activity_name, " --> ", target, "\n")
            # Only renders when no entry edge has rendered this child yet
            _render_subgraph(edge.source, child, indent, ctx, child_workflows, metadata, oracle)
            continue

        ctx.emit(indent, source, " --> ", target, "\n")


def _stitch_prefix(
    key: str,
    child: Workflow | None,
    wf: Workflow,
    ctx: ExportContext,
) -> str | None:
    """
    Prefix the child's node names carry in the output, or None when the edge
    should stay a plain arrow (no child, or a workflow embedding itself).
    An already-rendered child keeps the prefix it was first rendered under.
    """
    if child is None or child.name == wf.name:
        return None
    return ctx.prefixes.get(child.name, key + "_")


def _render_subgraph(
    key: str,
    child: Workflow,
    indent: str,
    ctx: ExportContext,
    child_workflows: Mapping[str, Workflow],
    metadata: Mapping[str, NodeMetadata],
    oracle: GraphOracle,
) -> None:
    if child.name in ctx.visited:
        logger.debug("Child workflow %r already rendered; no subgraph for %r", child.name, key)
        return
    logger.debug("Rendering child workflow %r as subgraph %r", child.name, key)
    ctx.emit(indent, "subgraph ", key, "\n")
    _render_workflow(
        child,
        indent + LEVEL_INDENT,
        ctx,
        child_workflows,
        metadata,
        oracle,
        prefix=key + "_",
    )
    ctx.emit(indent, "end\n")


def export_mermaid_to_file(
    wf: Workflow,
    path: str | Path,
    child_workflows: Mapping[str, Workflow] | None = None,
    metadata: Mapping[str, NodeMetadata] | None = None,
    *,
    oracle: GraphOracle | None = None,
    indent: str = LEVEL_INDENT,
) -> Path:
    """Write export_mermaid(wf, indent) as UTF-8 to path. OSError propagates unchanged."""
    text = export_mermaid(wf, indent, child_workflows, metadata, oracle=oracle)
    out_path = Path(path)
    out_path.write_text(text, encoding="utf-8")
    logger.debug("Wrote Mermaid for %r to %s (%d chars)", wf.name, out_path, len(text))
    return out_path
