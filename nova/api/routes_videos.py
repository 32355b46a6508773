from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from nova.agent.gateway import ModelGateway
from nova.agent.video_handler import compose_video_prompt
from nova.api.deps import get_gateway, get_job_store, run_in_background
from nova.api.job_store import InMemoryJobStore
from nova.models.entities import VideoJob
from nova.models.enums import AspectRatio
from nova.models.errors import JobNotFound, NovaError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class StartVideoBody(BaseModel):
    prompt: str
    aspect_ratio: AspectRatio = AspectRatio.landscape
    camera_movement: str = "Default"
    lighting: str = "Default"
    motion_speed: str = "Normal"
    duration: str = "5s"
    atmosphere: str = ""


class StartVideoResponse(BaseModel):
    job_id: str


@router.post("/videos", response_model=StartVideoResponse)
async def start_video(
    body: StartVideoBody,
    store: InMemoryJobStore = Depends(get_job_store),
    gateway: ModelGateway = Depends(get_gateway),
) -> StartVideoResponse:
    """Start a standalone video job.

    Args:
        body: Prompt, aspect ratio and optional directives.

    Returns:
        The job id to poll.
    """

    if not body.prompt.strip():
        raise ValueError("prompt is required")
    prompt = compose_video_prompt(
        body.prompt,
        camera_movement=body.camera_movement,
        lighting=body.lighting,
        motion_speed=body.motion_speed,
        duration=body.duration,
        atmosphere=body.atmosphere,
    )
    gateway.ensure_available(prompt)
    job = store.create(prompt=prompt, aspect_ratio=body.aspect_ratio.value)
    logger.info("video job %s queued (%s)", job.id, job.aspect_ratio)

    async def worker() -> None:
        try:
            async for state in gateway.watch_video(prompt, job.aspect_ratio):
                store.update(job.id, state)
        except NovaError as e:
            store.fail(job.id, str(e))

    run_in_background(worker(), label=f"video job {job.id}")
    return StartVideoResponse(job_id=job.id)


@router.get("/videos/{job_id}", response_model=VideoJob)
async def get_video(job_id: str, store: InMemoryJobStore = Depends(get_job_store)) -> VideoJob:
    """Get video job detail.

    Args:
        job_id: Job identifier.

    Returns:
        Job detail, including the playable URL once done.
    """

    job = store.get(job_id)
    if not job:
        raise JobNotFound(job_id)
    return job
