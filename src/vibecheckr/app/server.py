"""FastAPI application exposing the analysis over HTTP."""

from __future__ import annotations

from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from .container import Container
from ..core.domain.exceptions import AcquisitionError, InvalidRequestError
from ..core.domain.models import AnalysisRequest, UploadedArchive
from ..core.usecases.analyze import AnalyzeUseCase


def _error(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "details": details})


async def _parse_request(request: Request) -> AnalysisRequest:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise InvalidRequestError("Invalid JSON body", str(e)) from e
        url = body.get("githubUrl") if isinstance(body, dict) else None
        return AnalysisRequest(github_url=url if isinstance(url, str) else None)

    form = await request.form()
    url = form.get("githubUrl")
    upload = form.get("repo")
    archive = None
    if isinstance(upload, UploadFile) and upload.filename:
        archive = UploadedArchive(
            filename=upload.filename,
            stream=upload.file,
            content_type=upload.content_type,
        )
    return AnalysisRequest(github_url=url if isinstance(url, str) else None, archive=archive)


def create_app(
    container: Container,
    *,
    use_case_factory: Callable[[], AnalyzeUseCase] | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: Initialized container (resources already initialized)
        use_case_factory: Override for the per-request use case (tests)
    """
    factory = use_case_factory or container.analyze_uc
    logger = container.logger()

    app = FastAPI(title="VibeCheckr", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.config.server.cors_origins() or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"message": "VibeCheckr API is running"}

    @app.post("/analyze")
    async def analyze(request: Request) -> Any:
        try:
            analysis_request = await _parse_request(request)
            uc = factory()
            # the pipeline blocks on git, subprocesses and the LLM
            return await run_in_threadpool(uc.execute, analysis_request)
        except InvalidRequestError as e:
            logger.warning("request_rejected", type="request_rejected", error=e.message, details=e.details)
            return _error(400, e.message, e.details)
        except AcquisitionError as e:
            logger.error("acquisition_failed", type="acquisition_failed", error=e.message, details=e.details)
            return _error(500, e.message, e.details)
        except Exception as e:
            logger.exception("analysis_failed", type="analysis_failed", error=str(e))
            return _error(500, "Analysis failed", str(e))

    return app
