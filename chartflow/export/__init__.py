"""DOT, Mermaid and HTML exporters for workflow graphs."""

from chartflow.export.classify import NodeClassifier, classify_nodes
from chartflow.export.context import ExportContext
from chartflow.export.dot import export_dot, export_dot_to_file
from chartflow.export.html import (
    TemplateRenderError,
    default_template,
    export_mermaid_html,
    render_template,
)
from chartflow.export.mermaid import export_mermaid, export_mermaid_to_file, node_label

__all__ = [
    "ExportContext",
    "NodeClassifier",
    "TemplateRenderError",
    "classify_nodes",
    "default_template",
    "export_dot",
    "export_dot_to_file",
    "export_mermaid",
    "export_mermaid_html",
    "export_mermaid_to_file",
    "node_label",
    "render_template",
]
