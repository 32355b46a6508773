from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from nova.agent.job_poller import JobPoller
from nova.models.chat_model import extract_text
from nova.models.entities import Attachment, Message, VideoJob
from nova.models.enums import Feature
from nova.models.errors import (
    MaintenanceRefusal,
    NoAssetProduced,
    PollTimeout,
    TransportFailure,
)
from nova.models.provider import ActivitySink, ChatModel, MaintenancePolicy, VideoClient
from nova.models.tuning import Tuning, select_tuning
from nova.utils.attachments import DEFAULT_MIME_TYPE, strip_data_uri

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_FAILED = 500
STATUS_MAINTENANCE = 503
STATUS_TIMEOUT = 504


def build_conversation(
    prior_turns: Sequence[Message],
    new_user_text: str,
    attachments: Sequence[Attachment],
    system_instruction: str,
) -> list[Any]:
    messages: list[Any] = [SystemMessage(content=system_instruction)]
    for m in prior_turns:
        if m.streaming:
            raise ValueError("prior turns must be finalized before a new completion")
        if m.role == "user":
            messages.append(HumanMessage(content=m.content))
        else:
            messages.append(AIMessage(content=m.content))

    parts: list[Any] = [{"type": "text", "text": new_user_text}]
    for attachment in attachments:
        if not attachment.data:
            continue
        parts.append(
            {
                "type": "media",
                "mime_type": attachment.mime_type or DEFAULT_MIME_TYPE,
                "data": strip_data_uri(attachment.data),
            }
        )
    messages.append(HumanMessage(content=parts))
    return messages


@dataclass
class ModelGateway:
    """The only component that talks to the remote generative service.

    Every invocation leaves exactly one record in the activity sink. Remote
    errors come back as :class:`TransportFailure`; the gateway itself never
    retries.
    """

    chat_model_factory: Callable[[Tuning], ChatModel]
    video_client: VideoClient
    activity: ActivitySink
    credential: str
    maintenance: MaintenancePolicy | None = None
    poll_interval: float = 5.0
    max_poll_attempts: int | None = None
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def stream_completion(
        self,
        prior_turns: Sequence[Message],
        new_user_text: str,
        attachments: Sequence[Attachment],
        system_instruction: str,
        persona_id: str,
    ) -> AsyncGenerator[str, None]:
        conversation = build_conversation(
            prior_turns, new_user_text, attachments, system_instruction
        )
        tuning = select_tuning(persona_id)
        # A stream abandoned by its consumer counts as failed.
        status = STATUS_FAILED
        try:
            model = self.chat_model_factory(tuning)
            async for chunk in model.astream(conversation):
                text = extract_text(chunk)
                if text:
                    yield text
            status = STATUS_OK
        except Exception as e:
            logger.error("chat completion failed for persona %s: %s", persona_id, e)
            raise TransportFailure(str(e) or type(e).__name__) from e
        finally:
            self.activity.record(Feature.chat, new_user_text, status)

    def ensure_available(self, prompt: str) -> None:
        if self.maintenance is not None and self.maintenance.is_maintenance():
            logger.warning("video generation refused: maintenance mode")
            self.activity.record(Feature.video, prompt, STATUS_MAINTENANCE)
            raise MaintenanceRefusal()

    async def watch_video(self, prompt: str, aspect_ratio: str) -> AsyncGenerator[VideoJob, None]:
        self.ensure_available(prompt)
        poller = JobPoller(
            client=self.video_client,
            credential=self.credential,
            interval=self.poll_interval,
            max_attempts=self.max_poll_attempts,
            sleep=self.sleep,
        )
        status = STATUS_FAILED
        try:
            async for job in poller.watch(prompt, aspect_ratio):
                yield job
            status = STATUS_OK
        except PollTimeout as e:
            logger.error("video generation timed out: %s", e)
            status = STATUS_TIMEOUT
            raise
        except (TransportFailure, NoAssetProduced) as e:
            logger.error("video generation failed: %s", e)
            raise
        finally:
            self.activity.record(Feature.video, prompt, status)

    async def synthesize_video(self, prompt: str, aspect_ratio: str) -> str:
        last: VideoJob | None = None
        async for job in self.watch_video(prompt, aspect_ratio):
            last = job
        if last is None or not last.video_url:
            raise NoAssetProduced("Video generation failed: No download link returned.")
        return last.video_url
