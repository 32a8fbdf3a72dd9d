"""Per-call traversal state shared by the DOT and Mermaid exporters."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ExportContext:
    """
    State owned by exactly one top-level export call.

    visited: workflow names already rendered (re-visit key is the name).
    prefixes: workflow name -> node-name prefix it was rendered under.
    parts: emitted text fragments, joined once at the end.
    class_assignments: deferred Mermaid `class` lines in collection order.
    """

    visited: set[str] = field(default_factory=set)
    prefixes: dict[str, str] = field(default_factory=dict)
    parts: list[str] = field(default_factory=list)
    class_assignments: list[str] = field(default_factory=list)

    def enter(self, name: str, prefix: str = "") -> bool:
        """Mark a workflow visited under prefix; False when it already was."""
        if name in self.visited:
            return False
        self.visited.add(name)
        self.prefixes[name] = prefix
        return True

    def emit(self, *fragments: str) -> None:
        self.parts.extend(fragments)

    def defer_class(self, node_name: str, class_name: str) -> None:
        self.class_assignments.append(f"class {node_name} {class_name}\n")

    def text(self) -> str:
        return "".join(self.parts)
