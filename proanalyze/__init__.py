"""Python project analysis and workflow diagrams backed by a hosted LLM."""

from .config import AnalysisConfig, load_config
from .models import AnalysisReport, AnalysisResult, SourceFile, WorkflowStep
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "AnalysisConfig",
    "AnalysisReport",
    "AnalysisResult",
    "Orchestrator",
    "SourceFile",
    "WorkflowStep",
    "load_config",
]
