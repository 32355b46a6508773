from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

DEFAULT_MAX_ATTACHMENT_BYTES = 100 * 1024 * 1024


class ChatModelSettings(BaseModel):
    model: str = "gemini-3-pro-preview"
    api_key: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class VideoModelSettings(BaseModel):
    model: str = "veo-3.1-fast-generate-preview"
    api_key: str | None = None
    resolution: str = "1080p"
    number_of_videos: int = 1


class ModelsConfig(BaseModel):
    chat_model: ChatModelSettings = Field(default_factory=ChatModelSettings)
    video_model: VideoModelSettings = Field(default_factory=VideoModelSettings)


class LimitsConfig(BaseModel):
    max_attachment_bytes: int = Field(default=DEFAULT_MAX_ATTACHMENT_BYTES, gt=0)


class PollingConfig(BaseModel):
    interval_seconds: float = Field(default=5.0, ge=0)
    # None keeps polling until the provider reports a terminal state.
    max_attempts: int | None = Field(default=None, gt=0)


class ActivityLogConfig(BaseModel):
    capacity: int = Field(default=100, gt=0)


class JobsConfig(BaseModel):
    ttl_seconds: float = Field(default=3600, gt=0)


class AdminConfig(BaseModel):
    email: str = "admin@novaai.com"
    password_hash: str | None = None
    salt: str | None = None
    iterations: int = 200_000


class LoggingConfig(BaseModel):
    level: str = "INFO"


class AppConfig(BaseModel):
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    activity_log: ActivityLogConfig = Field(default_factory=ActivityLogConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
