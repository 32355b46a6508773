from __future__ import annotations

from enum import StrEnum


class Mode(StrEnum):
    chat = "chat"
    video = "video"


class JobStatus(StrEnum):
    pending = "pending"
    done = "done"
    failed = "failed"


class Feature(StrEnum):
    chat = "Chat"
    video = "Video"


class Category(StrEnum):
    general = "General"
    professional = "Professional"
    creative = "Creative"
    technical = "Technical"
    custom = "Custom"


class AspectRatio(StrEnum):
    landscape = "16:9"
    portrait = "9:16"
