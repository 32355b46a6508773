from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Protocol


class ChatModel(Protocol):
    def astream(
        self,
        input: Any,
        config: Any | None = None,
        **kwargs: Any,
    ) -> AsyncIterator[Any]: ...


@dataclass(frozen=True)
class VideoOperation:
    """Provider-side view of one video generation job."""

    handle: Any
    done: bool
    asset_uri: str | None = None
    error: str | None = None
    name: str | None = None


class VideoClient(Protocol):
    async def submit(self, prompt: str, aspect_ratio: str) -> VideoOperation: ...

    async def poll(self, operation: VideoOperation) -> VideoOperation: ...


class ActivitySink(Protocol):
    def record(self, feature: Any, prompt: str, status: int) -> Any: ...


class MaintenancePolicy(Protocol):
    def is_maintenance(self) -> bool: ...
