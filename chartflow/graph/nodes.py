"""Node types for workflow graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Node:
    """
    A workflow node.

    `id` is what the graph oracle reports; `activity_name` is the label and
    the key for metadata and child-workflow lookups.
    """

    id: int | str
    activity_name: str
    edit_link: str | None = None


@dataclass(frozen=True)
class NodeLink:
    """A clickable link rendered inside a Mermaid node label."""

    name: str
    uri: str


@dataclass(frozen=True)
class NodeMetadata:
    """Display metadata for a Mermaid node: description, links, standalone flag."""

    description: str = ""
    links: tuple[NodeLink, ...] = field(default_factory=tuple)
    standalone: bool = False
