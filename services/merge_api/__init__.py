"""Video Merge API - HTTP service.

FastAPI service that merges an uploaded video and audio file with ffmpeg
and publishes the result to a GitHub repository.
"""

__all__: list[str] = []
