"""
Chartflow CLI: render a workflow document as DOT, Mermaid or HTML.
"""

import argparse
import sys
from pathlib import Path

from chartflow.export import (
    export_dot,
    export_dot_to_file,
    export_mermaid,
    export_mermaid_html,
    export_mermaid_to_file,
)
from chartflow.graph import WorkflowDocument, load_workflow_document
from chartflow.logging import get_logger, setup_logging

logger = get_logger(__name__)

FORMATS = ("dot", "mermaid", "html")


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code: 0 on success, 1 on errors, 130 when interrupted
    """
    parser = argparse.ArgumentParser(
        description="Chartflow: render workflow graphs as DOT or Mermaid"
    )
    parser.add_argument(
        "--log-level",
        help="Log level (default: $CHARTFLOW_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    for fmt in FORMATS:
        sub = subparsers.add_parser(fmt, help=f"Export the workflow as {fmt}")
        sub.add_argument("path", help="Workflow document (.yaml, .yml or .json)")
        sub.add_argument(
            "--output",
            "-o",
            help="Output file path (default: print to stdout)",
        )
        sub.add_argument(
            "--indent",
            default="",
            help="Base indentation prepended to every rendered line",
        )

    args = parser.parse_args(argv)

    if args.command not in FORMATS:
        parser.print_help()
        return 1

    setup_logging(args.log_level)
    return _run_export(args.command, args.path, args.output, args.indent)


def _render(fmt: str, document: WorkflowDocument, indent: str) -> str:
    if fmt == "dot":
        return export_dot(document.workflow, indent, document.child_workflows)
    if fmt == "mermaid":
        return export_mermaid(
            document.workflow, indent, document.child_workflows, document.metadata
        )
    return export_mermaid_html(
        document.workflow, indent, document.child_workflows, document.metadata
    )


def _write(fmt: str, document: WorkflowDocument, output: str, indent: str) -> Path:
    if fmt == "dot":
        return export_dot_to_file(
            document.workflow, output, document.child_workflows, indent=indent
        )
    if fmt == "mermaid":
        return export_mermaid_to_file(
            document.workflow,
            output,
            document.child_workflows,
            document.metadata,
            indent=indent,
        )
    out_path = Path(output)
    out_path.write_text(_render(fmt, document, indent), encoding="utf-8")
    return out_path


def _run_export(fmt: str, path: str, output: str | None, indent: str) -> int:
    """
    Run one export command.

    Args:
        fmt: One of FORMATS
        path: Workflow document path
        output: Optional output file path (None = stdout)
        indent: Base indentation

    Returns:
        Exit code: 0 on success, 1 on errors
    """
    try:
        if not Path(path).exists():
            print(f"Error: Path does not exist: {path}", file=sys.stderr)
            return 1

        document = load_workflow_document(path)

        if output:
            out_path = _write(fmt, document, output, indent)
            logger.info("Wrote %s output to %s", fmt, out_path)
        else:
            sys.stdout.write(_render(fmt, document, indent))

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
