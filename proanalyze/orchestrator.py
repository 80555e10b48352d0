"""Pipeline orchestration for analysis, diagram, and question flows."""

from __future__ import annotations

import asyncio
from typing import Callable, Dict, Iterable, Optional, Sequence, TypeVar

from .config import AnalysisConfig
from .diagrams import DiagramRenderer, LayoutEngineHandle
from .errors import AnalysisFailedError
from .llm import Completer, CompletionClient, ResilientInvoker
from .llm.invoker import Sleeper
from .logging import get_logger
from .models import AnalysisReport, AnalysisResult, DiagramBundle, SourceFile
from .postproc import AnalysisFormatter
from .prompting import PromptBuilder, PromptRequest
from .prompting.constants import NO_ELIGIBLE_FILES_MESSAGE
from .selection import select_files
from .workflow import WorkflowStepExtractor

T = TypeVar("T")

WORKFLOW_SECTION = "Project Workflow"

_FAILURE_REASONS: Dict[str, str] = {
    "invalid": "The model response was invalid.",
    "throttled": "The completion service was rate limited or unavailable.",
}


class Orchestrator:
    """Coordinates selection, prompting, retries, formatting and diagrams."""

    def __init__(
        self,
        config: AnalysisConfig | None = None,
        *,
        client: Completer | None = None,
        invoker: ResilientInvoker | None = None,
        prompt_builder: PromptBuilder | None = None,
        formatter: AnalysisFormatter | None = None,
        extractor: WorkflowStepExtractor | None = None,
        renderer: DiagramRenderer | None = None,
        engine_handle: LayoutEngineHandle | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.config = config or AnalysisConfig()
        self.client = client or CompletionClient(self.config)
        self.invoker = invoker or ResilientInvoker(self.client, self.config, sleep=sleep)
        self.prompt_builder = prompt_builder or PromptBuilder(
            max_tokens=self.config.max_tokens,
            min_steps=self.config.min_steps,
        )
        self.formatter = formatter or AnalysisFormatter()
        self.extractor = extractor or WorkflowStepExtractor(
            self.client,
            self.prompt_builder,
            min_steps=self.config.min_steps,
        )
        self.engine_handle = engine_handle or LayoutEngineHandle()
        self.renderer = renderer or DiagramRenderer(
            self.engine_handle,
            wrap_width=self.config.wrap_width,
        )
        self.logger = get_logger("orchestrator")

    async def analyze(self, files: Iterable[SourceFile]) -> AnalysisResult:
        """Produce the formatted analysis for ``files``.

        Returns the fixed informational result without any network call when no
        file is eligible.
        """
        return await self._analyze_selected(select_files(files, self.config))

    async def generate_diagrams(self, source: AnalysisResult | str) -> DiagramBundle:
        """Extract workflow steps and render the system and user diagrams."""
        if isinstance(source, AnalysisResult):
            workflow_text = source.section(WORKFLOW_SECTION) or ""
        else:
            workflow_text = source
        if not workflow_text.strip():
            raise ValueError("No project workflow text available for diagram generation")

        steps = await self.extractor.extract(workflow_text)
        system_svg, user_svg = await asyncio.gather(
            self.renderer.render(steps.system, is_system=True),
            self.renderer.render(steps.user, is_system=False),
        )
        return DiagramBundle(system_svg=system_svg, user_svg=user_svg, steps=steps)

    async def run(self, files: Iterable[SourceFile], *, diagrams: bool = True) -> AnalysisReport:
        """Analysis followed by diagrams; a diagram failure keeps the analysis."""
        selected = select_files(files, self.config)
        result = await self._analyze_selected(selected)
        report = AnalysisReport(result=result, files=[file.path for file in selected])
        if not diagrams or result.section(WORKFLOW_SECTION) is None:
            return report

        try:
            report.diagrams = await self.generate_diagrams(result)
        except Exception as exc:
            self._log_exception("Diagram generation failed", exc)
            report.diagram_error = str(exc) or exc.__class__.__name__
        return report

    async def ask(
        self,
        question: str,
        files: Iterable[SourceFile],
        *,
        project_name: str | None = None,
        summary: str | None = None,
    ) -> str:
        """Answer one question about the project from its selected files."""
        if not question.strip():
            raise ValueError("Question must not be empty")
        selected = select_files(files, self.config)
        if not selected:
            return NO_ELIGIBLE_FILES_MESSAGE
        request = self.prompt_builder.build_question_request(
            question,
            selected,
            project_name=project_name,
            summary=summary,
        )
        return await self._with_retries(request, _accept_answer, subject="Question")

    def render_markdown(self, result: AnalysisResult) -> str:
        """Wrap a formatted analysis in the report header and footer."""
        if not result.has_sections:
            return result.full_text + "\n"
        return (
            "# Python Project Analysis\n\n"
            f"{result.full_text}\n\n"
            "---\n"
            f"*Analysis performed using {self.config.model_name}. "
            f"Covers up to {self.config.max_files} Python files, with a maximum of "
            f"{self.config.max_file_content_chars} characters per file.*\n"
        )

    async def _analyze_selected(self, selected: Sequence[SourceFile]) -> AnalysisResult:
        if not selected:
            self.logger.info("No eligible Python files; skipping analysis")
            return AnalysisResult(full_text=NO_ELIGIBLE_FILES_MESSAGE, sections={})

        request = self.prompt_builder.build_analysis_request(selected)
        self.logger.info(
            "Analyzing %d files (prompt length %d)", len(selected), len(request.prompt_text)
        )
        return await self._with_retries(request, self.formatter.format, subject="Analysis")

    async def _with_retries(
        self,
        request: PromptRequest,
        accept: Callable[[str], Optional[T]],
        *,
        subject: str,
    ) -> T:
        failure = "invalid"
        for attempt in range(1, self.config.max_retries + 1):
            try:
                text = await self.invoker.invoke(request, attempt)
            except Exception as exc:
                self.logger.error("Attempt %d failed: %s", attempt, exc)
                raise
            if text is None:
                failure = getattr(self.invoker, "last_failure", None) or "invalid"
                continue
            value = accept(text)
            if value is None:
                failure = "invalid"
                self.logger.warning("Attempt %d produced an incomplete response; regenerating", attempt)
                continue
            self.logger.info("%s completed on attempt %d", subject, attempt)
            return value

        reason = _FAILURE_REASONS.get(failure, _FAILURE_REASONS["invalid"])
        raise AnalysisFailedError(f"{subject} failed after multiple attempts. {reason}")

    def _log_exception(self, message: str, exc: Exception) -> None:
        self.logger.warning("%s: %s", message, exc)
        self.logger.debug("Exception details", exc_info=exc)


def _accept_answer(text: str) -> Optional[str]:
    answer = text.strip()
    return answer or None


__all__ = ["Orchestrator", "WORKFLOW_SECTION"]
