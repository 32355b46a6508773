from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from nova.models.enums import Category, Feature, JobStatus, Mode


def _new_id() -> str:
    return uuid.uuid4().hex


class Attachment(BaseModel):
    name: str
    mime_type: str = "application/octet-stream"
    size_bytes: int = Field(ge=0)
    data: str | None = None


class Message(BaseModel):
    id: str = Field(default_factory=_new_id)
    role: Literal["user", "assistant"]
    content: str
    attachments: list[Attachment] = Field(default_factory=list)
    video_url: str | None = None
    streaming: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Session(BaseModel):
    id: str
    title: str
    persona_id: str
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class SessionSummary(BaseModel):
    id: str
    title: str
    persona_id: str
    updated_at: datetime
    snippet: str | None = None


class Persona(BaseModel):
    model_config = {"frozen": True}

    id: str
    name: str
    role: str
    description: str
    system_instruction: str
    avatar: str = "🤖"
    category: Category = Category.general
    mode: Mode = Mode.chat
    is_custom: bool = False


class VideoJob(BaseModel):
    id: str = Field(default_factory=_new_id)
    prompt: str
    aspect_ratio: str
    handle: Any | None = Field(default=None, exclude=True)
    handle_name: str | None = None
    status: JobStatus = JobStatus.pending
    video_url: str | None = None
    error: str | None = None
    polls: int = 0
    created_at: datetime = Field(default_factory=datetime.utcnow)
    finished_at: datetime | None = None


class ActivityEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    feature: Feature
    prompt_preview: str
    status: int


class SiteSettings(BaseModel):
    gemini_api_key: str = ""
    veo_api_key: str = ""
    is_maintenance: bool = False
