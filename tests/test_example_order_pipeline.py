"""
Test DOT and Mermaid generation on the example order pipeline.

Validates that a realistic workflow with a nested child workflow, metadata
and a standalone note renders consistently across both formats.
"""

from pathlib import Path

from chartflow.export import export_dot, export_mermaid, export_mermaid_html
from chartflow.graph import load_workflow_document

EXAMPLE_DIR = Path(__file__).resolve().parent.parent / "examples" / "order_pipeline"


def _doc():
    return load_workflow_document(EXAMPLE_DIR / "workflow.yaml")


def test_example_loads():
    """Example document has one child and two metadata entries."""
    doc = _doc()
    assert doc.workflow.name == "order_pipeline"
    assert list(doc.child_workflows) == ["fulfil"]
    assert set(doc.metadata) == {"receive", "audit_note"}


def test_example_dot_and_mermaid_agree_on_nodes():
    """Every non-standalone node is declared in both outputs."""
    doc = _doc()
    dot = export_dot(doc.workflow, "", doc.child_workflows)
    mermaid = export_mermaid(doc.workflow, "", doc.child_workflows, doc.metadata)
    for name in ("receive", "fulfil", "notify"):
        assert f'"{name}"' in dot
        assert f"    {name}[" in mermaid
    for name in ("pick", "pack", "label", "ship"):
        assert f'"{name}"' in dot
        assert f"        fulfil_{name}[{name}]" in mermaid


def test_example_html_is_deterministic():
    """Rendering twice yields the same document."""
    doc = _doc()
    first = export_mermaid_html(doc.workflow, "", doc.child_workflows, doc.metadata)
    second = export_mermaid_html(doc.workflow, "", doc.child_workflows, doc.metadata)
    assert first == second
