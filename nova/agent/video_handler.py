from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing
from dataclasses import dataclass

from nova.agent.gateway import ModelGateway
from nova.agent.turn import Turn, TurnLease
from nova.api.session_store import InMemorySessionStore
from nova.models.entities import Message, Session
from nova.models.enums import AspectRatio, JobStatus
from nova.models.errors import NoAssetProduced, NovaError, SessionNotFound

logger = logging.getLogger(__name__)

SYNTHESIZING_NOTICE = "Synthesizing Visual Layers..."
INTERRUPTED_NOTICE = "### Failed to Render\nRendering was interrupted."

CAMERA_DEFAULT = "Default"
LIGHTING_DEFAULT = "Default"
SPEED_DEFAULT = "Normal"
DURATION_DEFAULT = "5s"


def compose_video_prompt(
    prompt: str,
    camera_movement: str = CAMERA_DEFAULT,
    lighting: str = LIGHTING_DEFAULT,
    motion_speed: str = SPEED_DEFAULT,
    duration: str = DURATION_DEFAULT,
    atmosphere: str = "",
) -> str:
    out = prompt
    if camera_movement != CAMERA_DEFAULT:
        out += f". Camera movement: {camera_movement}."
    if lighting != LIGHTING_DEFAULT:
        out += f". Lighting style: {lighting}."
    if motion_speed != SPEED_DEFAULT:
        out += f". Motion speed: {motion_speed}."
    if duration != DURATION_DEFAULT:
        out += f". Video duration: approximately {duration}."
    if atmosphere.strip():
        out += f". Atmosphere/Vibe: {atmosphere.strip()}."
    return out


def success_notice(aspect_ratio: str) -> str:
    return f"### Synthesis Complete\nVisual data successfully rendered at **{aspect_ratio}**."


def failure_notice(error: Exception) -> str:
    return f"### Failed to Render\n{error}"


@dataclass(frozen=True)
class VideoService:
    gateway: ModelGateway
    store: InMemorySessionStore

    def open_turn(
        self,
        session_id: str,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.landscape,
    ) -> Turn:
        if not prompt.strip():
            raise ValueError("prompt is required")
        ratio = AspectRatio(aspect_ratio).value
        started = self.store.begin_turn(session_id, Message(role="user", content=prompt))
        lease = TurnLease(self.store, session_id, INTERRUPTED_NOTICE)
        return Turn(lambda held: self._consume(held, started, prompt, ratio), lease)

    async def render_turn(
        self,
        session_id: str,
        prompt: str,
        aspect_ratio: AspectRatio = AspectRatio.landscape,
    ) -> Session:
        last: Session | None = None
        turn = self.open_turn(session_id, prompt, aspect_ratio)
        try:
            async for snapshot in turn:
                last = snapshot
        finally:
            await turn.aclose()
        if last is None:
            raise SessionNotFound(session_id)
        return last

    async def _consume(
        self, lease: TurnLease, started: Session, prompt: str, aspect_ratio: str
    ) -> AsyncGenerator[Session, None]:
        session_id = started.id
        try:
            yield started
            placeholder = self.store.start_assistant(session_id, content=SYNTHESIZING_NOTICE)
            snapshot = self.store.get_session(session_id)
            if snapshot is not None:
                yield snapshot

            video_url: str | None = None
            try:
                async with aclosing(self.gateway.watch_video(prompt, aspect_ratio)) as jobs:
                    async for job in jobs:
                        if job.status == JobStatus.done:
                            video_url = job.video_url
                            continue
                        yield self.store.set_content(
                            session_id,
                            placeholder.id,
                            f"{SYNTHESIZING_NOTICE} (status checks: {job.polls})",
                        )
                if not video_url:
                    raise NoAssetProduced("Video generation failed: No download link returned.")
            except SessionNotFound:
                raise
            except NovaError as e:
                logger.warning("video turn failed for session %s: %s", session_id, e)
                yield self.store.finalize(session_id, placeholder.id, content=failure_notice(e))
                return
            yield self.store.finalize(
                session_id,
                placeholder.id,
                content=success_notice(aspect_ratio),
                video_url=video_url,
            )
        except SessionNotFound:
            logger.info("session %s was deleted during a video turn", session_id)
        finally:
            lease.release()
