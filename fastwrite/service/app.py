"""FastAPI application entrypoint for fastwrite service mode."""

from __future__ import annotations

from typing import Any, Callable, List, Literal, Optional

from fastapi import Depends, FastAPI, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..catalog import DEFAULT_CATALOG
from ..config import FastWriteConfig, load_config
from ..errors import ValidationError
from ..logging import get_logger
from ..models import ArchiveHandle
from ..orchestrator import SubmissionState
from ..prompting.constants import (
    CODE_SECTION_DESCRIPTIONS,
    CODE_SECTION_TITLES,
    REPORT_SECTION_DESCRIPTIONS,
    REPORT_SECTION_TITLES,
)
from ..stores import MemoryStore
from ..workspace import Workspace, open_workspace

logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str


class ModelInfo(BaseModel):
    id: str
    name: str


class ProviderInfo(BaseModel):
    id: str
    name: str
    key_url: str
    has_key: bool
    models: List[ModelInfo]


class CredentialRequest(BaseModel):
    secret: str


class ArchiveInfo(BaseModel):
    name: str
    content_type: str = ""


class FormModel(BaseModel):
    source_type: Literal["repository", "archive"]
    repository_url: str
    archive: Optional[ArchiveInfo] = None
    description: str
    provider_id: str
    model_id: str
    code_section_ids: List[str]
    report_section_ids: List[str]
    literature_mode: Literal["auto", "manual"]
    manual_references: str


class FormUpdate(BaseModel):
    source_type: Optional[Literal["repository", "archive"]] = None
    repository_url: Optional[str] = None
    archive: Optional[ArchiveInfo] = None
    clear_archive: bool = False
    description: Optional[str] = None
    provider_id: Optional[str] = None
    model_id: Optional[str] = None
    code_section_ids: Optional[List[str]] = None
    report_section_ids: Optional[List[str]] = None
    literature_mode: Optional[Literal["auto", "manual"]] = None
    manual_references: Optional[str] = None


class PromptResponse(BaseModel):
    prompt: str


class ResultModel(BaseModel):
    textContent: str
    visualContent: str


class SectionInfo(BaseModel):
    id: str
    title: str
    description: str


class SectionCatalog(BaseModel):
    code: List[SectionInfo]
    report: List[SectionInfo]


class GenerateResponse(BaseModel):
    status: str
    message: str
    kind: Optional[str] = None
    result: Optional[ResultModel] = None


def _default_workspace() -> Workspace:
    # Session storage lives as long as the service process.
    return open_workspace(load_config(), session=MemoryStore())


def create_app(
    workspace_factory: Callable[[], Workspace] = _default_workspace,
) -> FastAPI:
    """Create the FastAPI application exposing fastwrite operations."""

    app = FastAPI(title="FastWrite Service", version="0.1.0")
    workspace = workspace_factory()
    app.state.workspace = workspace

    async def get_workspace() -> Workspace:
        return workspace

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/providers", response_model=List[ProviderInfo])
    async def providers(ws: Workspace = Depends(get_workspace)) -> List[ProviderInfo]:
        return [
            ProviderInfo(
                id=provider.id,
                name=provider.name,
                key_url=provider.key_url,
                has_key=ws.credentials.has(provider.id),
                models=[
                    ModelInfo(id=model, name=DEFAULT_CATALOG.display_name(model))
                    for model in provider.models
                ],
            )
            for provider in DEFAULT_CATALOG
        ]

    @app.get("/sections", response_model=SectionCatalog)
    async def sections() -> SectionCatalog:
        return SectionCatalog(
            code=_section_infos(CODE_SECTION_TITLES, CODE_SECTION_DESCRIPTIONS),
            report=_section_infos(REPORT_SECTION_TITLES, REPORT_SECTION_DESCRIPTIONS),
        )

    @app.put("/credentials/{provider_id}", status_code=204)
    async def set_credential(
        provider_id: str,
        payload: CredentialRequest,
        ws: Workspace = Depends(get_workspace),
    ) -> Response:
        ws.credentials.set(provider_id, payload.secret)
        return Response(status_code=204)

    @app.delete("/credentials/{provider_id}", status_code=204)
    async def remove_credential(
        provider_id: str, ws: Workspace = Depends(get_workspace)
    ) -> Response:
        ws.credentials.remove(provider_id)
        return Response(status_code=204)

    @app.get("/form", response_model=FormModel)
    async def get_form(ws: Workspace = Depends(get_workspace)) -> FormModel:
        return _form_model(ws)

    @app.patch("/form", response_model=FormModel)
    async def update_form(
        payload: FormUpdate, ws: Workspace = Depends(get_workspace)
    ) -> FormModel:
        form = ws.form
        # Provider first: selecting one resets the model to its default.
        if payload.provider_id is not None:
            form.select_provider(payload.provider_id)
        if payload.clear_archive:
            form.clear_archive()
        if payload.archive is not None:
            form.select_archive(
                ArchiveHandle(name=payload.archive.name, content_type=payload.archive.content_type)
            )
        changes = payload.model_dump(
            exclude_none=True, exclude={"provider_id", "archive", "clear_archive"}
        )
        if changes:
            form.update(**changes)
        return _form_model(ws)

    @app.post("/prompt/preview", response_model=PromptResponse)
    async def preview_prompt(ws: Workspace = Depends(get_workspace)) -> PromptResponse:
        return PromptResponse(prompt=ws.orchestrator.compiler.compile(ws.form.state))

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(ws: Workspace = Depends(get_workspace)) -> Any:
        outcome = await ws.orchestrator.submit(ws.form.state)
        if outcome.state is SubmissionState.REJECTED:
            return JSONResponse(status_code=422, content={"detail": outcome.message})
        result = None
        if outcome.result is not None:
            result = ResultModel(**outcome.result.to_dict())
        return GenerateResponse(
            status=outcome.state.value,
            message=outcome.message,
            kind=outcome.kind,
            result=result,
        )

    @app.get("/result", response_model=ResultModel)
    async def latest_result(ws: Workspace = Depends(get_workspace)) -> Any:
        result = ws.results.load()
        if result is None:
            return JSONResponse(status_code=404, content={"detail": "No documentation has been generated yet."})
        return ResultModel(**result.to_dict())

    @app.exception_handler(ValidationError)
    async def validation_error_handler(
        _: Any, exc: ValidationError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=422, content={"detail": exc.message, "field": exc.field})

    return app


def _section_infos(titles: dict[str, str], descriptions: dict[str, str]) -> List[SectionInfo]:
    return [
        SectionInfo(id=section_id, title=title, description=descriptions.get(section_id, ""))
        for section_id, title in titles.items()
    ]


def _form_model(ws: Workspace) -> FormModel:
    state = ws.form.state
    archive = None
    if state.archive is not None:
        archive = ArchiveInfo(name=state.archive.name, content_type=state.archive.content_type)
    return FormModel(
        source_type=state.source_type,
        repository_url=state.repository_url,
        archive=archive,
        description=state.description,
        provider_id=state.provider_id,
        model_id=state.model_id,
        code_section_ids=list(state.code_section_ids),
        report_section_ids=list(state.report_section_ids),
        literature_mode=state.literature_mode,
        manual_references=state.manual_references,
    )


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, config: FastWriteConfig | None = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    settings = config or load_config()
    logger.info("Starting fastwrite service on %s:%d", host, port)
    app = create_app(lambda: open_workspace(settings, session=MemoryStore()))
    uvicorn.run(app, host=host, port=port)
