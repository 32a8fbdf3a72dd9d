"""Tests for Mermaid export: labels, click links, standalone nodes, deferred classes, subgraph stitching."""

import tempfile
from pathlib import Path

import pytest

from chartflow.export import export_mermaid, export_mermaid_to_file, node_label
from chartflow.graph import Edge, Node, NodeLink, NodeMetadata, Workflow, build_workflow

CLASS_DEFS = (
    "classDef startNode fill:#9f6,stroke:#333,stroke-width:4px;\n"
    "classDef parallelNode fill:#6cf,stroke:#333,stroke-width:2px;\n"
)


def _ab_wf() -> Workflow:
    return build_workflow("root", [Node(1, "A"), Node(2, "B")], [Edge("A", "B")])


def _xy_child() -> Workflow:
    return build_workflow("child_wf", [Node(1, "X"), Node(2, "Y")], [Edge("X", "Y")])


def _line_index(out: str, line: str) -> int:
    return out.splitlines().index(line)


def test_export_mermaid_two_nodes_exact():
    """Header, node decls, blank line, edges, class lines, classDefs."""
    out = export_mermaid(_ab_wf())
    assert out == (
        "flowchart TD\n"
        "    A[A]\n"
        "    B[B]\n"
        "\n"
        "    A --> B\n"
        "\n"
        "class A startNode\n"
        "\n" + CLASS_DEFS
    )


def test_export_mermaid_nested_child_exact():
    """Edge into a child key fans in to the child's start nodes, then a prefixed subgraph."""
    parent = build_workflow("parent", [Node(1, "A"), Node(2, "Child")], [Edge("A", "Child")])
    out = export_mermaid(parent, child_workflows={"Child": _xy_child()})
    assert out == (
        "flowchart TD\n"
        "    A[A]\n"
        "    Child[Child]\n"
        "\n"
        "    A --> Child_X\n"
        "    subgraph Child\n"
        "        Child_X[X]\n"
        "        Child_Y[Y]\n"
        "\n"
        "        Child_X --> Child_Y\n"
        "    end\n"
        "\n"
        "class A startNode\n"
        "class Child_X startNode\n"
        "\n" + CLASS_DEFS
    )


def test_export_mermaid_fan_in_to_every_entry_node():
    """A child with several start nodes gets one fan-in edge per start node."""
    child = build_workflow("c", [Node(1, "X"), Node(2, "Y"), Node(3, "Z")], [Edge("X", "Z"), Edge("Y", "Z")])
    parent = build_workflow("p", [Node(1, "A")], [Edge("A", "K")])
    out = export_mermaid(parent, child_workflows={"K": child})
    assert "    A --> K_X\n    A --> K_Y\n    subgraph K\n" in out


def test_export_mermaid_exit_fan_out_after_entry():
    """Edge out of a child key connects each child exit node; child rendered once."""
    parent = build_workflow(
        "p",
        [Node(1, "A"), Node(2, "Child"), Node(3, "Z")],
        [Edge("A", "Child"), Edge("Child", "Z")],
    )
    out = export_mermaid(parent, child_workflows={"Child": _xy_child()})
    assert "    A --> Child_X\n" in out
    assert "    Child_Y --> Z\n" in out
    assert out.count("subgraph Child") == 1
    assert out.index("subgraph Child") < out.index("Child_Y --> Z")


def test_export_mermaid_exit_only_child_is_rendered():
    """A child reached only by an outgoing edge is still rendered, once."""
    parent = build_workflow("p", [Node(1, "Child"), Node(2, "Z")], [Edge("Child", "Z")])
    out = export_mermaid(parent, child_workflows={"Child": _xy_child()})
    assert "    Child_Y --> Z\n" in out
    assert out.count("subgraph Child\n") == 1
    assert "        Child_X[X]\n" in out


def test_export_mermaid_exit_before_entry_no_duplicate():
    """Exit edge listed first renders the child; the later entry edge does not repeat it."""
    parent = build_workflow(
        "p",
        [Node(1, "A"), Node(2, "Z")],
        [Edge("Child", "Z"), Edge("A", "Child")],
    )
    out = export_mermaid(parent, child_workflows={"Child": _xy_child()})
    assert out.count("subgraph Child\n") == 1
    assert out.count("Child_X[X]") == 1
    assert "    A --> Child_X\n" in out


def test_export_mermaid_prefix_applies_inside_child_only():
    """Parent-side endpoints are bare; grandchild names use only their own key prefix."""
    grandchild = build_workflow("g", [Node(1, "Q")])
    child = build_workflow("c", [Node(1, "X")], [Edge("X", "G")])
    parent = build_workflow("p", [Node(1, "A")], [Edge("A", "C")])
    out = export_mermaid(parent, child_workflows={"C": child, "G": grandchild})
    assert "    A --> C_X\n" in out
    assert "        C_X --> G_Q\n" in out
    assert "        subgraph G\n" in out
    assert "            G_Q[Q]\n" in out


def test_export_mermaid_metadata_label_and_links():
    """Description lines become <br>; links render as bold anchors in order."""
    meta = {
        "A": NodeMetadata(
            description="first line\nsecond line",
            links=(NodeLink("Docs", "https://d"), NodeLink("Logs", "https://l")),
        )
    }
    out = export_mermaid(_ab_wf(), metadata=meta)
    assert (
        "    A[A<br>first line<br>second line"
        " <b><a href='https://d' target='_blank'>Docs</a></b>"
        " <b><a href='https://l' target='_blank'>Logs</a></b>]\n"
    ) in out
    assert "    B[B]\n" in out


def test_node_label_without_description():
    """Empty description adds no break marker; no metadata means bare name."""
    assert node_label("A", None) == "A"
    assert node_label("A", NodeMetadata()) == "A"
    assert node_label("A", NodeMetadata(links=(NodeLink("x", "u"),))) == (
        "A <b><a href='u' target='_blank'>x</a></b>"
    )


def test_export_mermaid_metadata_keyed_by_bare_name_in_child():
    """Metadata lookup inside a child subgraph uses the un-prefixed name."""
    parent = build_workflow("p", [Node(1, "A")], [Edge("A", "Child")])
    meta = {"X": NodeMetadata(description="entry")}
    out = export_mermaid(parent, child_workflows={"Child": _xy_child()}, metadata=meta)
    assert "        Child_X[X<br>entry]\n" in out


def test_export_mermaid_edit_link_click_directive():
    """A node with edit_link gets a click line right after its declaration."""
    wf = build_workflow(
        "root",
        [Node(1, "A", edit_link="https://edit/a"), Node(2, "B")],
        [Edge("A", "B")],
    )
    out = export_mermaid(wf)
    assert '    A[A]\nclick A "https://edit/a" _blank\n' in out
    assert "click B" not in out


def test_export_mermaid_click_uses_prefixed_name():
    """Click directive inside a child binds the prefixed node name."""
    child = build_workflow("c", [Node(1, "X", edit_link="https://edit/x")])
    parent = build_workflow("p", [Node(1, "A")], [Edge("A", "K")])
    out = export_mermaid(parent, child_workflows={"K": child})
    assert 'click K_X "https://edit/x" _blank\n' in out


def test_export_mermaid_standalone_only_in_trailing_block():
    """Standalone nodes are skipped in the flow and emitted once after it."""
    wf = build_workflow(
        "root",
        [Node(1, "A"), Node(2, "Note"), Node(3, "B")],
        [Edge("A", "B")],
    )
    meta = {"Note": NodeMetadata(description="remember", standalone=True)}
    out = export_mermaid(wf, metadata=meta)
    assert out.count("Note[") == 1
    assert "\nNote[Note<br>remember]\n" in out
    assert "class Note" not in out
    assert out.index("Note[") > out.index("    A --> B")


def test_export_mermaid_standalone_start_node_not_declared_in_flow():
    """A standalone start node is excluded from the start-node pass too."""
    wf = build_workflow("root", [Node(1, "A"), Node(2, "B")], [Edge("A", "B")])
    meta = {"A": NodeMetadata(standalone=True)}
    out = export_mermaid(wf, metadata=meta)
    assert "    A[A]" not in out
    assert out.count("A[A]") == 1
    assert "class A startNode" not in out


def test_export_mermaid_standalone_driven_by_metadata_map():
    """Every standalone metadata entry renders, even if no workflow has that node."""
    meta = {
        "Legend": NodeMetadata(description="colors", standalone=True),
        "A": NodeMetadata(description="not standalone"),
    }
    out = export_mermaid(_ab_wf(), indent="  ", metadata=meta)
    assert "\n  Legend[Legend<br>colors]\n" in out
    assert out.count("Legend[") == 1


def test_export_mermaid_class_lines_after_declarations():
    """Each class line appears strictly after its node's declaration."""
    child = build_workflow(
        "c",
        [Node(1, "s"), Node(2, "p1"), Node(3, "p2"), Node(4, "j")],
        [Edge("s", "p1"), Edge("s", "p2"), Edge("p1", "j"), Edge("p2", "j")],
    )
    parent = build_workflow("p", [Node(1, "A"), Node(2, "B")], [Edge("A", "K"), Edge("A", "B")])
    out = export_mermaid(parent, child_workflows={"K": child})
    class_lines = [l for l in out.splitlines() if l.startswith("class ")]
    # A fans out to K and B, so B is a parallel branch of the parent
    assert class_lines == [
        "class A startNode",
        "class B parallelNode",
        "class K_s startNode",
        "class K_p1 parallelNode",
        "class K_p2 parallelNode",
    ]
    for line in class_lines:
        name = line.split()[1]
        decl = next(l for l in out.splitlines() if l.strip().startswith(name + "["))
        assert _line_index(out, line) > _line_index(out, decl)


def test_export_mermaid_parallel_class_uses_oracle(fixed_oracle):
    """Parallel classification comes from the supplied oracle."""
    wf = build_workflow("w", [Node(1, "a"), Node(2, "b")])
    out = export_mermaid(wf, oracle=fixed_oracle(start={"a"}, parallel={"b"}))
    assert "class a startNode\nclass b parallelNode\n" in out


def test_export_mermaid_start_nodes_use_oracle_order(fixed_oracle):
    """Start nodes are declared first, in the order the oracle returns them."""
    wf = build_workflow("w", [Node(1, "x"), Node(2, "y")])
    out = export_mermaid(wf, oracle=fixed_oracle(start={"y"}))
    assert out.startswith("flowchart TD\n    y[y]\n    x[x]\n")


def test_export_mermaid_self_reference_identical():
    """A workflow embedding itself via an edge target renders as without the self-reference."""
    wf = _ab_wf()
    assert export_mermaid(wf, child_workflows={"B": wf}) == export_mermaid(wf)


def test_export_mermaid_self_reference_exit_side_identical():
    """A workflow embedding itself via an edge source renders as without the self-reference."""
    wf = _ab_wf()
    assert export_mermaid(wf, child_workflows={"A": wf}) == export_mermaid(wf)


def test_export_mermaid_mutual_reference_stitches_to_rendered_nodes():
    """Two workflows embedding each other: one subgraph, back edge targets the root's nodes."""
    w1 = build_workflow("w1", [Node(1, "A")], [Edge("A", "K2")])
    w2 = build_workflow("w2", [Node(1, "X")], [Edge("X", "K1")])
    out = export_mermaid(w1, child_workflows={"K2": w2, "K1": w1})
    assert out.count("subgraph ") == 1
    assert out.count("A[A]") == 1
    assert out.count("K2_X[X]") == 1
    assert "    A --> K2_X\n" in out
    assert "        K2_X --> A\n" in out
    assert "K1_" not in out


def test_export_mermaid_shared_child_rendered_once():
    """Two edges into the same child workflow render one subgraph and both stitch into it."""
    parent = build_workflow(
        "p",
        [Node(1, "A"), Node(2, "B")],
        [Edge("A", "K1"), Edge("B", "K2")],
    )
    shared = _xy_child()
    out = export_mermaid(parent, child_workflows={"K1": shared, "K2": shared})
    assert out.count("subgraph ") == 1
    assert "    A --> K1_X\n" in out
    assert "    B --> K1_X\n" in out
    assert "K2_" not in out


def test_export_mermaid_to_file_writes_utf8():
    """File output equals export_mermaid with four-space base indent."""
    meta = {"A": NodeMetadata(description="日本語")}
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "chart.mmd"
        export_mermaid_to_file(_ab_wf(), path, metadata=meta)
        expected = export_mermaid(_ab_wf(), "    ", metadata=meta)
        assert path.read_text(encoding="utf-8") == expected
        assert "        A[A<br>日本語]\n" in expected


def test_export_mermaid_to_file_propagates_os_error():
    """Writing to a directory path raises the filesystem error."""
    with tempfile.TemporaryDirectory() as tmp:
        with pytest.raises(OSError):
            export_mermaid_to_file(_ab_wf(), Path(tmp))
