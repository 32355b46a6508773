from __future__ import annotations

from typing import Any

from google import genai
from google.genai import types

from nova.config.loader import resolve_api_key
from nova.config.schema import VideoModelSettings
from nova.models.provider import VideoOperation


def _first_asset_uri(operation: Any) -> str | None:
    response = getattr(operation, "response", None) or getattr(operation, "result", None)
    videos = getattr(response, "generated_videos", None) if response is not None else None
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    uri = getattr(video, "uri", None) if video is not None else None
    if isinstance(uri, str) and uri:
        return uri
    return None


def _error_text(operation: Any) -> str | None:
    error = getattr(operation, "error", None)
    if not error:
        return None
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return str(error)


def to_video_operation(operation: Any) -> VideoOperation:
    return VideoOperation(
        handle=operation,
        done=bool(getattr(operation, "done", False)),
        asset_uri=_first_asset_uri(operation),
        error=_error_text(operation),
        name=getattr(operation, "name", None),
    )


class GenAIVideoClient:
    def __init__(
        self,
        client: genai.Client,
        model: str,
        *,
        resolution: str,
        number_of_videos: int,
    ) -> None:
        self._client = client
        self._model = model
        self._resolution = resolution
        self._number_of_videos = number_of_videos

    async def submit(self, prompt: str, aspect_ratio: str) -> VideoOperation:
        operation = await self._client.aio.models.generate_videos(
            model=self._model,
            prompt=prompt,
            config=types.GenerateVideosConfig(
                number_of_videos=self._number_of_videos,
                resolution=self._resolution,
                aspect_ratio=aspect_ratio,
            ),
        )
        return to_video_operation(operation)

    async def poll(self, operation: VideoOperation) -> VideoOperation:
        updated = await self._client.aio.operations.get(operation.handle)
        return to_video_operation(updated)


def init_video_client(settings: VideoModelSettings) -> tuple[GenAIVideoClient, str]:
    """Build the Veo client and return it with the credential used for playback URLs."""

    api_key = resolve_api_key(settings.api_key)
    if not api_key:
        raise ValueError("Veo API key is not configured")
    client = GenAIVideoClient(
        genai.Client(api_key=api_key),
        model=settings.model,
        resolution=settings.resolution,
        number_of_videos=settings.number_of_videos,
    )
    return client, api_key
