"""Builds linear step diagrams and lays them out as SVG."""

from __future__ import annotations

from typing import Dict, List, Sequence

import graphviz

from ..logging import get_logger
from ..models import DiagramNode, DiagramSpec, WorkflowStep
from .engine import LayoutEngineHandle

DEFAULT_WRAP_WIDTH = 30

_PALETTES: Dict[bool, Dict[str, str]] = {
    True: {"fillcolor": "#dbeafe", "color": "#2563eb"},
    False: {"fillcolor": "#dcfce7", "color": "#16a34a"},
}


def wrap_text(text: str, width: int = DEFAULT_WRAP_WIDTH) -> List[str]:
    """Greedily pack words into lines of at most ``width`` characters.

    A word longer than ``width`` gets a line of its own rather than being split.
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        if not current:
            current = word
        elif len(current) + 1 + len(word) <= width:
            current = f"{current} {word}"
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def build_label(step: WorkflowStep, width: int = DEFAULT_WRAP_WIDTH) -> str:
    title = "\n".join(wrap_text(step.title, width))
    description = "\n".join(wrap_text(step.description, width))
    if not description:
        return title
    return f"{title}\n\n{description}"


def build_diagram_spec(steps: Sequence[WorkflowStep], width: int = DEFAULT_WRAP_WIDTH) -> DiagramSpec:
    """One node per step and an edge from each step to the next one only."""
    nodes = [
        DiagramNode(id=f"step{index}", label=build_label(step, width))
        for index, step in enumerate(steps, start=1)
    ]
    edges = [(first.id, second.id) for first, second in zip(nodes, nodes[1:])]
    return DiagramSpec(nodes=nodes, edges=edges)


def to_dot(spec: DiagramSpec, *, name: str = "workflow", is_system: bool = True) -> str:
    """Render the diagram as DOT source with top-to-bottom ranking."""
    palette = _PALETTES[is_system]
    dot = graphviz.Digraph(name)
    dot.attr(rankdir="TB", nodesep="0.4", ranksep="0.5")
    dot.attr(
        "node",
        shape="box",
        style="rounded,filled",
        fontname="Helvetica",
        fontsize="11",
        margin="0.2,0.1",
        **palette,
    )
    dot.attr("edge", color=palette["color"], arrowsize="0.8")
    for node in spec.nodes:
        dot.node(node.id, graphviz.nohtml(_dot_label(node.label)))
    for tail, head in spec.edges:
        dot.edge(tail, head)
    return dot.source


def _dot_label(label: str) -> str:
    escaped = label.replace("\\", "\\\\")
    return escaped.replace("\n", "\\n")


class DiagramRenderer:
    """Turns one step sequence into SVG via the shared layout engine."""

    def __init__(
        self,
        engine_handle: LayoutEngineHandle | None = None,
        *,
        wrap_width: int = DEFAULT_WRAP_WIDTH,
    ) -> None:
        self.engine_handle = engine_handle or LayoutEngineHandle()
        self.wrap_width = wrap_width
        self.logger = get_logger("diagrams")

    async def render(self, steps: Sequence[WorkflowStep], *, is_system: bool = True) -> str:
        spec = build_diagram_spec(steps, self.wrap_width)
        variant = "system" if is_system else "user"
        source = to_dot(spec, name=f"{variant}_workflow", is_system=is_system)
        engine = await self.engine_handle.get()
        self.logger.debug("Rendering %s diagram with %d nodes", variant, len(spec.nodes))
        return await engine.render(source, fmt="svg")


__all__ = [
    "DEFAULT_WRAP_WIDTH",
    "DiagramRenderer",
    "build_diagram_spec",
    "build_label",
    "to_dot",
    "wrap_text",
]
