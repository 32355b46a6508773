from __future__ import annotations

import base64
from collections.abc import Iterable
from dataclasses import dataclass, field

from nova.config.schema import DEFAULT_MAX_ATTACHMENT_BYTES
from nova.models.entities import Attachment
from nova.models.errors import AttachmentTooLarge

DEFAULT_MIME_TYPE = "application/octet-stream"


def to_data_uri(mime_type: str, data: bytes) -> str:
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def strip_data_uri(data: str) -> str:
    """Return the raw base64 payload of a ``data:`` URI (or the input unchanged)."""

    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


def decoded_length(payload: str) -> int:
    payload = payload.strip()
    padding = len(payload) - len(payload.rstrip("="))
    return len(payload) * 3 // 4 - padding


@dataclass(frozen=True)
class RawFile:
    name: str
    mime_type: str | None
    data: bytes


@dataclass
class IngestResult:
    accepted: list[Attachment] = field(default_factory=list)
    rejected: list[AttachmentTooLarge] = field(default_factory=list)


@dataclass(frozen=True)
class AttachmentIngestor:
    max_bytes: int = DEFAULT_MAX_ATTACHMENT_BYTES

    def check(self, name: str, size_bytes: int) -> None:
        if size_bytes > self.max_bytes:
            raise AttachmentTooLarge(name, self.max_bytes)

    def ingest(self, name: str, mime_type: str | None, data: bytes) -> Attachment:
        self.check(name, len(data))
        mime = mime_type or DEFAULT_MIME_TYPE
        return Attachment(
            name=name,
            mime_type=mime,
            size_bytes=len(data),
            data=to_data_uri(mime, data),
        )

    def ingest_many(self, files: Iterable[RawFile]) -> IngestResult:
        result = IngestResult()
        for f in files:
            try:
                result.accepted.append(self.ingest(f.name, f.mime_type, f.data))
            except AttachmentTooLarge as e:
                result.rejected.append(e)
        return result

    def validate(self, attachments: Iterable[Attachment]) -> IngestResult:
        """Re-check already-encoded attachments before they reach the gateway.

        Both the declared size and the decoded payload must fit; each failing
        attachment is rejected on its own.
        """

        result = IngestResult()
        for attachment in attachments:
            try:
                self.check(attachment.name, attachment.size_bytes)
                if attachment.data:
                    self.check(attachment.name, decoded_length(strip_data_uri(attachment.data)))
            except AttachmentTooLarge as e:
                result.rejected.append(e)
                continue
            result.accepted.append(attachment)
        return result
