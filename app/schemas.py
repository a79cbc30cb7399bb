"""Video Merge API - Pydantic models for API responses."""

from pydantic import BaseModel, ConfigDict, Field


class MergeSuccessResponse(BaseModel):
    """Response for a successful merge and publish."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    status: str = Field(default="success", description="Operation status")
    message: str = Field(
        default="Video merged and uploaded successfully",
        description="Human-readable result",
    )
    video_url: str = Field(
        ...,
        alias="videoUrl",
        description="GitHub Pages URL of the published video",
    )


class MergeErrorResponse(BaseModel):
    """Response for any failed request."""

    model_config = ConfigDict(extra="forbid")

    error: str = Field(..., description="Human-readable error description")


class HealthResponse(BaseModel):
    """Response for the health check."""

    model_config = ConfigDict(extra="forbid")

    status: str = Field(default="ok", description="Service status")
    message: str = Field(default="API is running", description="Status detail")


__all__ = [
    "MergeSuccessResponse",
    "MergeErrorResponse",
    "HealthResponse",
]
