"""Tests for the critical section validator."""

from __future__ import annotations

from proanalyze.validators import CriticalSectionValidator, ValidationContext


def test_reports_missing_and_blank_sections_in_document_order() -> None:
    context = ValidationContext(
        sections={
            "Project Overview": "- present",
            "Project Strengths": "   ",
        }
    )
    issues = CriticalSectionValidator().validate(context)

    assert [issue.section for issue in issues] == [
        "Project Workflow",
        "Project Strengths",
        "Areas for Improvement",
    ]
    assert issues[0].detail == "Section 'Project Workflow' is missing or empty"


def test_passes_when_all_critical_sections_have_content() -> None:
    context = ValidationContext(
        sections={
            "Project Workflow": "- flow",
            "Project Strengths": "- strong",
            "Areas for Improvement": "- improve",
        }
    )
    assert CriticalSectionValidator().validate(context) == []


def test_custom_required_sections() -> None:
    validator = CriticalSectionValidator(required=["Key Features"])
    issues = validator.validate(ValidationContext(sections={}))
    assert [issue.section for issue in issues] == ["Key Features"]
