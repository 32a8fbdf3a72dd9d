"""Workflow graph model and document loading."""

from chartflow.graph.edges import Edge
from chartflow.graph.loader import (
    WorkflowDocument,
    load_workflow,
    load_workflow_document,
    metadata_from_dict,
    workflow_from_dict,
)
from chartflow.graph.nodes import Node, NodeLink, NodeMetadata
from chartflow.graph.workflow import Workflow, build_workflow, workflow_to_dict

__all__ = [
    "Edge",
    "Node",
    "NodeLink",
    "NodeMetadata",
    "Workflow",
    "WorkflowDocument",
    "build_workflow",
    "load_workflow",
    "load_workflow_document",
    "metadata_from_dict",
    "workflow_from_dict",
    "workflow_to_dict",
]
