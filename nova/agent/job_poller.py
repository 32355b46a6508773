from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field

from nova.models.entities import VideoJob
from nova.models.enums import JobStatus
from nova.models.errors import NoAssetProduced, PollTimeout, TransportFailure
from nova.models.provider import VideoClient, VideoOperation

logger = logging.getLogger(__name__)


def playable_url(asset_uri: str, credential: str) -> str:
    # The provider serves assets only with the key appended to the signed URI.
    return f"{asset_uri}&key={credential}"


@dataclass(frozen=True)
class JobPoller:
    """Drive one video operation from submission to a terminal state.

    The poller sleeps ``interval`` seconds before every status request and
    never gives up on its own unless ``max_attempts`` is set. Transport errors
    and empty results end the job as failed; nothing is retried.
    """

    client: VideoClient
    credential: str
    interval: float = 5.0
    max_attempts: int | None = None
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def watch(self, prompt: str, aspect_ratio: str) -> AsyncIterator[VideoJob]:
        job = VideoJob(prompt=prompt, aspect_ratio=aspect_ratio)
        try:
            operation = await self._submit(prompt, aspect_ratio)
            job.handle = operation.handle
            job.handle_name = operation.name
            logger.info("video job %s submitted (handle=%s)", job.id, operation.name)
            yield job

            while not operation.done:
                if self.max_attempts is not None and job.polls >= self.max_attempts:
                    raise PollTimeout(
                        f"video job did not finish after {self.max_attempts} status checks"
                    )
                await self.sleep(self.interval)
                operation = await self._poll(operation)
                job.polls += 1
                job.handle = operation.handle
                logger.debug("video job %s poll #%d done=%s", job.id, job.polls, operation.done)
                if not operation.done:
                    yield job

            job.video_url = self._resolve(operation)
            job.status = JobStatus.done
            logger.info("video job %s done after %d polls", job.id, job.polls)
            yield job
        except (TransportFailure, NoAssetProduced, PollTimeout) as e:
            job.status = JobStatus.failed
            job.error = str(e)
            logger.warning("video job %s failed: %s", job.id, e)
            raise

    async def run(self, prompt: str, aspect_ratio: str) -> VideoJob:
        last: VideoJob | None = None
        async for job in self.watch(prompt, aspect_ratio):
            last = job
        if last is None:
            raise NoAssetProduced("video job produced no state")
        return last

    async def _submit(self, prompt: str, aspect_ratio: str) -> VideoOperation:
        try:
            return await self.client.submit(prompt, aspect_ratio)
        except Exception as e:
            raise TransportFailure(str(e) or type(e).__name__) from e

    async def _poll(self, operation: VideoOperation) -> VideoOperation:
        try:
            return await self.client.poll(operation)
        except Exception as e:
            raise TransportFailure(str(e) or type(e).__name__) from e

    def _resolve(self, operation: VideoOperation) -> str:
        if operation.error:
            raise TransportFailure(operation.error)
        if not operation.asset_uri:
            raise NoAssetProduced("Video generation failed: No download link returned.")
        return playable_url(operation.asset_uri, self.credential)
