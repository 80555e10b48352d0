"""Second-stage extraction of system and user workflow steps."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from ..errors import ExtractionParseError, InvalidResponseError
from ..failsafe import pad_steps
from ..llm.invoker import Completer
from ..logging import get_logger
from ..models import WorkflowStep, WorkflowSteps
from ..prompting.builder import PromptBuilder

_TRUE_STRINGS = {"true", "yes", "1", "system"}
_FALSE_STRINGS = {"false", "no", "0", "user"}


def find_step_array(text: str) -> List[Any]:
    """Decode the first JSON array embedded in free-form ``text``.

    Every ``[`` is tried in order; prose such as ``[note]`` before the real
    payload is skipped.
    """
    decoder = json.JSONDecoder()
    position = text.find("[")
    while position != -1:
        try:
            value, _ = decoder.raw_decode(text, position)
        except json.JSONDecodeError:
            value = None
        if isinstance(value, list):
            return value
        position = text.find("[", position + 1)
    raise ExtractionParseError("Workflow response did not contain a JSON array of steps")


def parse_steps(items: List[Any]) -> List[WorkflowStep]:
    """Coerce decoded records into steps, dropping anything without a title."""
    steps: List[WorkflowStep] = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            continue
        title = _clean(item.get("title"))
        if not title:
            continue
        is_system = _as_flag(item.get("isSystem", item.get("is_system")))
        if is_system is None:
            continue
        raw_id = item.get("id")
        step_id = _clean(raw_id) if isinstance(raw_id, (str, int)) else ""
        steps.append(
            WorkflowStep(
                id=step_id or f"step-{index}",
                title=title,
                description=_clean(item.get("description")),
                is_system=is_system,
            )
        )
    return steps


class WorkflowStepExtractor:
    """Asks the model for workflow steps and guarantees renderable sequences."""

    def __init__(
        self,
        client: Completer,
        prompt_builder: PromptBuilder | None = None,
        *,
        min_steps: int = 4,
    ) -> None:
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder(min_steps=min_steps)
        self.min_steps = min_steps
        self.logger = get_logger("workflow")

    async def extract(self, workflow_text: str) -> WorkflowSteps:
        request = self.prompt_builder.build_workflow_request(workflow_text)
        self.logger.info("Extracting workflow steps")
        try:
            response = await self.client.complete(request.messages, max_tokens=request.max_tokens)
        except InvalidResponseError as exc:
            raise ExtractionParseError(f"Workflow extraction returned no content: {exc}") from exc

        steps = parse_steps(find_step_array(response))
        system = [step for step in steps if step.is_system]
        user = [step for step in steps if not step.is_system]
        self.logger.debug("Model produced %d system and %d user steps", len(system), len(user))

        return WorkflowSteps(
            system=self._pad(system, is_system=True),
            user=self._pad(user, is_system=False),
        )

    def _pad(self, steps: List[WorkflowStep], *, is_system: bool) -> List[WorkflowStep]:
        if len(steps) < self.min_steps:
            self.logger.info(
                "Padding %s workflow from %d to %d steps with fallback steps",
                "system" if is_system else "user",
                len(steps),
                self.min_steps,
            )
        return pad_steps(steps, is_system=is_system, minimum=self.min_steps)


def _clean(value: Any) -> str:
    if value is None:
        return ""
    return " ".join(str(value).split())


def _as_flag(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


__all__ = ["WorkflowStepExtractor", "find_step_array", "parse_steps"]
