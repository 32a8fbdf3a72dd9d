"""
Wrap Mermaid output in a standalone HTML document.

The template is a string.Template with exactly two fields: $title and
$flowchart. Both are substituted verbatim.
"""

from __future__ import annotations

from importlib import resources
from string import Template
from typing import Mapping

from chartflow.analysis.oracle import GraphOracle
from chartflow.export.mermaid import export_mermaid
from chartflow.graph.nodes import NodeMetadata
from chartflow.graph.workflow import Workflow
from chartflow.logging import get_logger

logger = get_logger(__name__)

TEMPLATE_RESOURCE = "templates/mermaid.html"
TEMPLATE_FIELDS = frozenset({"title", "flowchart"})


class TemplateRenderError(ValueError):
    """The HTML template is malformed or references an unknown field."""


def default_template() -> str:
    """Text of the packaged mermaid.html template."""
    return (
        resources.files("chartflow.export")
        .joinpath(TEMPLATE_RESOURCE)
        .read_text(encoding="utf-8")
    )


def render_template(template: str, title: str, flowchart: str) -> str:
    """
    Substitute title and flowchart into template.

    Raises:
        TemplateRenderError: invalid placeholder syntax, or a placeholder
            other than $title / $flowchart.
    """
    tmpl = Template(template)
    if not tmpl.is_valid():
        raise TemplateRenderError("Malformed HTML template: invalid placeholder")
    unknown = sorted(set(tmpl.get_identifiers()) - TEMPLATE_FIELDS)
    if unknown:
        raise TemplateRenderError(
            f"HTML template references unknown field(s): {', '.join(unknown)}"
        )
    try:
        return tmpl.substitute(title=title, flowchart=flowchart)
    except (KeyError, ValueError) as e:
        raise TemplateRenderError(f"Failed to render HTML template: {e}") from e


def export_mermaid_html(
    wf: Workflow,
    indent: str = "",
    child_workflows: Mapping[str, Workflow] | None = None,
    metadata: Mapping[str, NodeMetadata] | None = None,
    *,
    oracle: GraphOracle | None = None,
    template: str | None = None,
) -> str:
    """
    Render export_mermaid(wf) into an HTML document titled with wf.name.

    Args:
        template: Template text; defaults to the packaged mermaid.html.

    Raises:
        TemplateRenderError: If the template cannot be parsed or rendered.
    """
    if template is None:
        template = default_template()
    flowchart = export_mermaid(wf, indent, child_workflows, metadata, oracle=oracle)
    document = render_template(template, title=wf.name, flowchart=flowchart)
    logger.debug("Rendered HTML for %r (%d chars)", wf.name, len(document))
    return document
