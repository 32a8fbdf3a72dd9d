"""Generate DOT, Mermaid and HTML diagrams for the order pipeline example."""
from pathlib import Path

from chartflow.export import export_dot_to_file, export_mermaid_html, export_mermaid_to_file
from chartflow.graph import load_workflow_document

if __name__ == "__main__":
    example_dir = Path(__file__).parent
    doc = load_workflow_document(example_dir / "workflow.yaml")

    output_dir = example_dir / "generated"
    output_dir.mkdir(exist_ok=True)

    dot_path = export_dot_to_file(doc.workflow, output_dir / "workflow.dot", doc.child_workflows)
    print(f"Saved to: {dot_path}")

    mmd_path = export_mermaid_to_file(
        doc.workflow, output_dir / "workflow.mmd", doc.child_workflows, doc.metadata
    )
    print(f"Saved to: {mmd_path}")

    html = export_mermaid_html(doc.workflow, "", doc.child_workflows, doc.metadata)
    html_path = output_dir / "workflow.html"
    html_path.write_text(html, encoding="utf-8")
    print(f"Saved to: {html_path}")
