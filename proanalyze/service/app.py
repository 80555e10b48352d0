"""FastAPI application entrypoint for proanalyze service mode."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import load_config
from ..errors import AuthenticationError, ProAnalyzeError
from ..models import SourceFile, WorkflowStep
from ..orchestrator import Orchestrator


class FilePayload(BaseModel):
    name: str
    path: str
    content: str
    size: int = 0

    def to_source(self) -> SourceFile:
        return SourceFile(name=self.name, path=self.path, content=self.content, size=self.size)


class AnalyzeRequest(BaseModel):
    files: List[FilePayload]
    diagrams: bool = True


class StepPayload(BaseModel):
    id: str
    title: str
    description: str
    is_system: bool

    @classmethod
    def from_step(cls, step: WorkflowStep) -> "StepPayload":
        return cls(id=step.id, title=step.title, description=step.description, is_system=step.is_system)


class DiagramResponse(BaseModel):
    system_svg: str
    user_svg: str
    system_steps: List[StepPayload]
    user_steps: List[StepPayload]


class AnalyzeResponse(BaseModel):
    analysis: str
    sections: Dict[str, str]
    files: List[str]
    diagrams: Optional[DiagramResponse] = None
    diagram_error: Optional[str] = None


class DiagramRequest(BaseModel):
    workflow: str = Field(min_length=1)


class ChatRequest(BaseModel):
    question: str = Field(min_length=1)
    files: List[FilePayload]
    project_name: Optional[str] = None
    summary: Optional[str] = None


class ChatResponse(BaseModel):
    answer: str


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator(load_config())


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing proanalyze operations.

    One orchestrator serves every request so the layout engine is initialized
    once per process.
    """
    app = FastAPI(title="ProAnalyze Service", version="1.0.0")
    app.state.orchestrator = orchestrator_factory()

    async def get_orchestrator(request: Request) -> Orchestrator:
        return request.app.state.orchestrator

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> AnalyzeResponse:
        files = [item.to_source() for item in payload.files]
        report = await orchestrator.run(files, diagrams=payload.diagrams)
        diagrams = None
        if report.diagrams is not None:
            diagrams = DiagramResponse(
                system_svg=report.diagrams.system_svg,
                user_svg=report.diagrams.user_svg,
                system_steps=[StepPayload.from_step(step) for step in report.diagrams.steps.system],
                user_steps=[StepPayload.from_step(step) for step in report.diagrams.steps.user],
            )
        return AnalyzeResponse(
            analysis=orchestrator.render_markdown(report.result),
            sections=report.result.sections,
            files=report.files,
            diagrams=diagrams,
            diagram_error=report.diagram_error,
        )

    @app.post("/diagrams", response_model=DiagramResponse)
    async def diagrams(
        payload: DiagramRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> DiagramResponse:
        bundle = await orchestrator.generate_diagrams(payload.workflow)
        return DiagramResponse(
            system_svg=bundle.system_svg,
            user_svg=bundle.user_svg,
            system_steps=[StepPayload.from_step(step) for step in bundle.steps.system],
            user_steps=[StepPayload.from_step(step) for step in bundle.steps.user],
        )

    @app.post("/chat", response_model=ChatResponse)
    async def chat(
        payload: ChatRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> ChatResponse:
        answer = await orchestrator.ask(
            payload.question,
            [item.to_source() for item in payload.files],
            project_name=payload.project_name,
            summary=payload.summary,
        )
        return ChatResponse(answer=answer)

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(_: Any, exc: AuthenticationError) -> JSONResponse:
        return JSONResponse(status_code=401, content={"detail": str(exc)})

    @app.exception_handler(ProAnalyzeError)
    async def pipeline_error_handler(_: Any, exc: ProAnalyzeError) -> JSONResponse:
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)
