"""Core data models shared across proanalyze components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class SourceFile:
    """A decoded file handed over by the file collaborator."""

    name: str
    path: str
    content: str
    size: int

    @property
    def suffix(self) -> str:
        dot = self.name.rfind(".")
        if dot <= 0:
            return ""
        return self.name[dot:].lower()


@dataclass
class AnalysisResult:
    """Formatted analysis text plus the per-section mapping it was built from."""

    full_text: str
    sections: Dict[str, str] = field(default_factory=dict)

    def section(self, name: str) -> Optional[str]:
        return self.sections.get(name)

    @property
    def has_sections(self) -> bool:
        return bool(self.sections)


@dataclass(frozen=True)
class WorkflowStep:
    """A single step in a system or user workflow."""

    id: str
    title: str
    description: str
    is_system: bool


@dataclass
class WorkflowSteps:
    """The two step sequences extracted from a workflow description."""

    system: List[WorkflowStep]
    user: List[WorkflowStep]


@dataclass(frozen=True)
class DiagramNode:
    """Graph node with a pre-wrapped label."""

    id: str
    label: str


@dataclass
class DiagramSpec:
    """Linear chain graph: nodes in order and one edge per adjacent pair."""

    nodes: List[DiagramNode]
    edges: List[Tuple[str, str]]


@dataclass
class DiagramBundle:
    """Rendered SVG markup for both workflow variants."""

    system_svg: str
    user_svg: str
    steps: WorkflowSteps


@dataclass
class AnalysisReport:
    """Combined outcome of one run; diagrams fail independently of the analysis."""

    result: AnalysisResult
    files: List[str] = field(default_factory=list)
    diagrams: Optional[DiagramBundle] = None
    diagram_error: Optional[str] = None
