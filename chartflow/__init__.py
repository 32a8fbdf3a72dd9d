"""Chartflow: DOT and Mermaid export for workflow graphs with nested child workflows."""
