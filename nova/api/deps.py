from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from datetime import timedelta
from typing import Any

from fastapi import Depends

from nova.agent.chat_handler import ChatService
from nova.agent.gateway import ModelGateway
from nova.agent.turn import Turn
from nova.agent.video_handler import VideoService
from nova.api.activity_log import InMemoryActivityLog
from nova.api.job_store import InMemoryJobStore
from nova.api.session_store import InMemorySessionStore
from nova.api.settings_store import InMemorySettingsStore
from nova.config.loader import load_config
from nova.config.schema import AppConfig
from nova.models.chat_model import init_chat_model_factory
from nova.models.video_model import init_video_client
from nova.prompt.personas import PersonaRegistry
from nova.utils.attachments import AttachmentIngestor

logger = logging.getLogger(__name__)

_sessions = InMemorySessionStore()
_personas = PersonaRegistry()
_jobs: InMemoryJobStore | None = None
_settings = InMemorySettingsStore()
_activity: InMemoryActivityLog | None = None
_background: set[asyncio.Task[Any]] = set()


def get_config() -> AppConfig:
    return load_config()


def get_session_store() -> InMemorySessionStore:
    return _sessions


def get_persona_registry() -> PersonaRegistry:
    return _personas


def get_job_store() -> InMemoryJobStore:
    global _jobs
    if _jobs is None:
        _jobs = InMemoryJobStore(ttl=timedelta(seconds=load_config().jobs.ttl_seconds))
    return _jobs


def get_settings_store() -> InMemorySettingsStore:
    return _settings


def get_activity_log() -> InMemoryActivityLog:
    global _activity
    if _activity is None:
        _activity = InMemoryActivityLog(capacity=load_config().activity_log.capacity)
    return _activity


def get_ingestor(config: AppConfig = Depends(get_config)) -> AttachmentIngestor:
    return AttachmentIngestor(max_bytes=config.limits.max_attachment_bytes)


def get_gateway(
    config: AppConfig = Depends(get_config),
    activity: InMemoryActivityLog = Depends(get_activity_log),
    settings: InMemorySettingsStore = Depends(get_settings_store),
) -> ModelGateway:
    video_client, credential = init_video_client(config.models.video_model)
    return ModelGateway(
        chat_model_factory=init_chat_model_factory(config.models.chat_model),
        video_client=video_client,
        activity=activity,
        credential=credential,
        maintenance=settings,
        poll_interval=config.polling.interval_seconds,
        max_poll_attempts=config.polling.max_attempts,
    )


def get_chat_service(
    gateway: ModelGateway = Depends(get_gateway),
    store: InMemorySessionStore = Depends(get_session_store),
) -> ChatService:
    return ChatService(gateway=gateway, store=store)


def get_video_service(
    gateway: ModelGateway = Depends(get_gateway),
    store: InMemorySessionStore = Depends(get_session_store),
) -> VideoService:
    return VideoService(gateway=gateway, store=store)


async def drain(turn: Turn) -> None:
    try:
        async for _ in turn:
            pass
    finally:
        await turn.aclose()


def run_in_background(work: Coroutine[Any, Any, None], label: str) -> asyncio.Task[None]:
    """Schedule work on the running loop, keeping a reference until it finishes."""

    async def worker() -> None:
        try:
            await work
        except Exception:
            logger.exception("background %s failed", label)

    task = asyncio.create_task(worker())
    _background.add(task)
    task.add_done_callback(_background.discard)
    return task
