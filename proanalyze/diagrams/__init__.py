"""Workflow diagram construction and layout."""

from .engine import GraphvizEngine, LayoutEngine, LayoutEngineHandle, create_graphviz_engine
from .renderer import DiagramRenderer, build_diagram_spec, to_dot, wrap_text

__all__ = [
    "DiagramRenderer",
    "GraphvizEngine",
    "LayoutEngine",
    "LayoutEngineHandle",
    "build_diagram_spec",
    "create_graphviz_engine",
    "to_dot",
    "wrap_text",
]
