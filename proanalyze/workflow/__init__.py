"""Workflow step extraction for the diagram stage."""

from .extractor import WorkflowStepExtractor, find_step_array, parse_steps

__all__ = ["WorkflowStepExtractor", "find_step_array", "parse_steps"]
