"""
Workflow document loader: supports YAML/JSON files, dicts, Workflow instances.

A workflow document bundles everything one export call needs: the root
workflow, the child-workflow map, and the Mermaid metadata map.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

try:
    import yaml
except ImportError:
    yaml = None  # type: ignore

from chartflow.graph.edges import Edge
from chartflow.graph.nodes import Node, NodeLink, NodeMetadata
from chartflow.graph.workflow import Workflow, build_workflow

JSON_SUFFIXES = (".json",)


@dataclass(frozen=True)
class WorkflowDocument:
    """Root workflow plus the optional child-workflow and metadata maps."""

    workflow: Workflow
    child_workflows: dict[str, Workflow] = field(default_factory=dict)
    metadata: dict[str, NodeMetadata] = field(default_factory=dict)


def load_workflow_document(
    source: WorkflowDocument | Workflow | str | Path | dict,
) -> WorkflowDocument:
    """
    Load a WorkflowDocument from various sources.

    Args:
        source: Can be:
            - WorkflowDocument instance: returned as-is
            - Workflow instance: wrapped with empty child and metadata maps
            - str or Path: YAML file path (JSON when the suffix is .json)
            - dict: parsed directly

    Returns:
        WorkflowDocument instance

    Raises:
        FileNotFoundError: If source is a file path that doesn't exist
        ValueError: If the document is empty or malformed
        TypeError: If source is of an unsupported type
    """
    if isinstance(source, WorkflowDocument):
        return source

    if isinstance(source, Workflow):
        return WorkflowDocument(workflow=source)

    if isinstance(source, (str, Path)):
        return _document_from_dict(_read_file(source), origin=str(source))

    if isinstance(source, dict):
        return _document_from_dict(source, origin="<dict>")

    raise TypeError(
        f"Unsupported source type for load_workflow_document: {type(source).__name__}"
    )


def load_workflow(source: Workflow | str | Path | dict) -> Workflow:
    """Convenience: load a document and return only its root workflow."""
    return load_workflow_document(source).workflow


def _read_file(path: str | Path) -> dict:
    """Read a YAML or JSON file into a dict."""
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Workflow file not found: {file_path}")

    content = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() in JSON_SUFFIXES:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON file {file_path}: {e}") from e
    else:
        if yaml is None:
            raise ImportError(
                "PyYAML is required to load workflows from YAML files. "
                "Install it with: pip install pyyaml"
            )
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML file {file_path}: {e}") from e

    if data is None:
        raise ValueError(f"Workflow file {file_path} is empty")
    if not isinstance(data, dict):
        raise ValueError(
            f"Workflow file {file_path}: expected dict, got {type(data).__name__}"
        )
    return data


def _document_from_dict(data: dict, origin: str) -> WorkflowDocument:
    workflow = workflow_from_dict(data, origin=origin)

    children_data = data.get("children") or {}
    if not isinstance(children_data, dict):
        raise ValueError(
            f"{origin}: 'children' must be a dict, got {type(children_data).__name__}"
        )
    child_workflows: dict[str, Workflow] = {}
    for key, child in children_data.items():
        child_workflows[str(key)] = workflow_from_dict(
            child, origin=f"{origin}: children.{key}"
        )

    metadata_data = data.get("metadata") or {}
    if not isinstance(metadata_data, dict):
        raise ValueError(
            f"{origin}: 'metadata' must be a dict, got {type(metadata_data).__name__}"
        )
    metadata = {
        str(key): metadata_from_dict(value, origin=f"{origin}: metadata.{key}")
        for key, value in metadata_data.items()
    }

    return WorkflowDocument(
        workflow=workflow,
        child_workflows=child_workflows,
        metadata=metadata,
    )


def workflow_from_dict(data: dict, origin: str = "<dict>") -> Workflow:
    """
    Construct a Workflow from a dict (inverse of workflow_to_dict).

    Edges accept either source/target or from/to keys.

    Raises:
        ValueError: If required fields are missing or have invalid types
    """
    if not isinstance(data, dict):
        raise ValueError(f"{origin}: workflow must be a dict, got {type(data).__name__}")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"{origin}: workflow 'name' must be a non-empty string")

    nodes_data = data.get("nodes") or []
    if not isinstance(nodes_data, list):
        raise ValueError(f"{origin}: 'nodes' must be a list")
    nodes = []
    for i, n in enumerate(nodes_data):
        if not isinstance(n, dict):
            raise ValueError(f"{origin}: nodes[{i}] must be a dict")
        activity_name = n.get("activity_name", n.get("name"))
        if not isinstance(activity_name, str):
            raise ValueError(f"{origin}: nodes[{i}] needs a string 'activity_name'")
        node_id = n.get("id", activity_name)
        if not isinstance(node_id, (int, str)) or isinstance(node_id, bool):
            raise ValueError(
                f"{origin}: nodes[{i}] 'id' must be an int or string, "
                f"got {type(node_id).__name__}"
            )
        edit_link = n.get("edit_link")
        if edit_link is not None and not isinstance(edit_link, str):
            raise ValueError(f"{origin}: nodes[{i}] 'edit_link' must be a string")
        nodes.append(Node(id=node_id, activity_name=activity_name, edit_link=edit_link))

    edges_data = data.get("edges") or []
    if not isinstance(edges_data, list):
        raise ValueError(f"{origin}: 'edges' must be a list")
    edges = []
    for i, e in enumerate(edges_data):
        if not isinstance(e, dict):
            raise ValueError(f"{origin}: edges[{i}] must be a dict")
        source = e.get("source", e.get("from"))
        target = e.get("target", e.get("to"))
        if not isinstance(source, str) or not isinstance(target, str):
            raise ValueError(f"{origin}: edges[{i}] needs string source and target")
        edges.append(Edge(source=source, target=target))

    return build_workflow(name, nodes, edges)


def metadata_from_dict(data: dict, origin: str = "<dict>") -> NodeMetadata:
    """Construct NodeMetadata from a dict with description, links, standalone."""
    if not isinstance(data, dict):
        raise ValueError(f"{origin}: metadata must be a dict, got {type(data).__name__}")

    description = data.get("description") or ""
    if not isinstance(description, str):
        raise ValueError(f"{origin}: 'description' must be a string")

    links = []
    for i, link in enumerate(data.get("links") or []):
        if not isinstance(link, dict):
            raise ValueError(f"{origin}: links[{i}] must be a dict")
        link_name = link.get("name")
        uri = link.get("uri")
        if not isinstance(link_name, str) or not isinstance(uri, str):
            raise ValueError(f"{origin}: links[{i}] needs string 'name' and 'uri'")
        links.append(NodeLink(name=link_name, uri=uri))

    standalone = data.get("standalone", False)
    if not isinstance(standalone, bool):
        raise ValueError(f"{origin}: 'standalone' must be a boolean")

    return NodeMetadata(description=description, links=tuple(links), standalone=standalone)
