"""Video Merge API - FastAPI application.

Endpoints:
- POST /merge: x-api-key header, multipart "video" and "audio" files.
  Merges them with ffmpeg and publishes the result to GitHub.
- GET /health: liveness check, no auth.

Run with:
    python -m services.merge_api
    uvicorn services.merge_api.main:app --port 8080  # dev server
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, File, Header, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import MergeConfig
from app.errors import MergeApiError, MergeErrorCode
from app.ingress import check_api_key
from app.schemas import HealthResponse, MergeErrorResponse, MergeSuccessResponse
from services.merge_api.service import MergePipeline

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred"

# --- Pipeline Setup ---

# Module-level pipeline (initialized on startup)
_pipeline: MergePipeline | None = None


def get_pipeline() -> MergePipeline:
    """Dependency that provides the merge pipeline.

    Raises:
        RuntimeError: If the pipeline is not initialized (app lifespan not invoked).
    """
    if _pipeline is None:
        raise RuntimeError("Merge pipeline not initialized. App lifespan not invoked?")
    return _pipeline


def require_api_key(
    pipeline: Annotated[MergePipeline, Depends(get_pipeline)],
    x_api_key: Annotated[str | None, Header(description="Shared API secret")] = None,
) -> None:
    """Dependency that rejects requests without the shared secret.

    Runs before the multipart body is validated, so a bad key is always a 401.

    Raises:
        AuthError: Missing or wrong x-api-key.
    """
    check_api_key(x_api_key, pipeline.config.api_secret_key)


# --- Lifespan ---


def _prepare_upload_dir_safe(config: MergeConfig) -> None:
    """Create the upload directory and remove orphan temp files (best-effort).

    Never crashes startup; requests retry directory creation themselves.
    """
    from app.utils.atomic_io import cleanup_orphan_temp_files
    from app.utils.paths import ensure_dir

    try:
        ensure_dir(config.upload_dir)
        removed = cleanup_orphan_temp_files(config.upload_dir)
        if removed > 0:
            logger.info("Startup cleanup: removed %d orphan temp files", removed)
    except Exception:
        logger.warning("Startup upload dir preparation failed (non-fatal)", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Reads configuration, prepares the working directory and builds the pipeline.
    """
    global _pipeline
    config = MergeConfig.from_env()
    _prepare_upload_dir_safe(config)
    _pipeline = MergePipeline.from_config(config)

    logger.info("Video Merge API running on port %d", config.port)
    logger.info("Environment configured: %s", config.presence_summary())

    yield
    _pipeline = None


# --- FastAPI App ---


app = FastAPI(
    title="Video Merge API",
    description="Merge a video and an audio upload with ffmpeg and publish to GitHub.",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Error Handling ---


def error_code_to_status(error_code: str) -> int:
    """Map error codes to HTTP status codes.

    - AUTH_FAILED -> 401
    - VALIDATION_FAILED -> 400
    - MERGE_FAILED, PUBLISH_FAILED, STORAGE_FAILED -> 500
    """
    if error_code == MergeErrorCode.AUTH_FAILED:
        return 401
    if error_code == MergeErrorCode.VALIDATION_FAILED:
        return 400
    return 500


def make_error_response(status_code: int, error_message: str) -> JSONResponse:
    """Create a JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content=MergeErrorResponse(error=error_message).model_dump(),
    )


def error_response_for(error: MergeApiError) -> JSONResponse:
    """Build the response for a pipeline error.

    Storage failures get the generic message; their detail is only logged.
    """
    if error.error_code == MergeErrorCode.STORAGE_FAILED:
        return make_error_response(500, GENERIC_ERROR_MESSAGE)
    return make_error_response(error_code_to_status(error.error_code), error.message)


@app.exception_handler(MergeApiError)
async def merge_api_error_handler(request: Request, exc: MergeApiError):
    """Report pipeline errors raised outside the endpoint body (auth dependency)."""
    return error_response_for(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 with an error string."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    return make_error_response(400, f"Invalid request: {details}" if details else "Invalid request")


# --- Endpoints ---


@app.post(
    "/merge",
    response_model=MergeSuccessResponse,
    responses={
        400: {"model": MergeErrorResponse, "description": "Invalid upload"},
        401: {"model": MergeErrorResponse, "description": "Missing or invalid API key"},
        500: {"model": MergeErrorResponse, "description": "Merge or publish failed"},
    },
    summary="Merge video and audio and publish to GitHub",
    dependencies=[Depends(require_api_key)],
)
async def merge(
    pipeline: Annotated[MergePipeline, Depends(get_pipeline)],
    x_api_key: Annotated[str | None, Header(description="Shared API secret")] = None,
    video: Annotated[
        list[UploadFile] | None, File(description="Video file (mp4, mov, avi, m4s)")
    ] = None,
    audio: Annotated[
        list[UploadFile] | None, File(description="Audio file (mp3, wav, m4a, m4s)")
    ] = None,
):
    """Merge one video and one audio upload and return the published URL."""
    try:
        result = await pipeline.run(x_api_key, video, audio)
    except MergeApiError as e:
        return error_response_for(e)
    except Exception:
        # Log full exception server-side, return generic message to client
        logger.exception("Unexpected error during merge request")
        return make_error_response(500, GENERIC_ERROR_MESSAGE)

    return MergeSuccessResponse(video_url=result.public_url)


@app.get("/health", response_model=HealthResponse, summary="Health check")
def health_check():
    """Simple health check endpoint."""
    return HealthResponse()
