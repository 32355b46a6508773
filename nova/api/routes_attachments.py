from __future__ import annotations

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from nova.api.deps import get_ingestor
from nova.models.entities import Attachment
from nova.models.errors import AttachmentTooLarge
from nova.utils.attachments import AttachmentIngestor, IngestResult, RawFile

router = APIRouter(prefix="/api")


class RejectedAttachment(BaseModel):
    filename: str
    limit_bytes: int
    error: str


class IngestAttachmentsResponse(BaseModel):
    accepted: list[Attachment]
    rejected: list[RejectedAttachment]


@router.post("/attachments", response_model=IngestAttachmentsResponse)
async def ingest_attachments(
    files: list[UploadFile] = File(...),
    ingestor: AttachmentIngestor = Depends(get_ingestor),
) -> IngestAttachmentsResponse:
    """Encode uploaded files for a later message.

    Oversized files are rejected one by one; the rest are still accepted.

    Args:
        files: Uploaded files.

    Returns:
        Encoded attachments and the rejections.
    """

    result = IngestResult()
    raw: list[RawFile] = []
    for file in files:
        if not file.filename:
            raise HTTPException(status_code=400, detail="filename is required")
        if file.size is not None:
            try:
                ingestor.check(file.filename, file.size)
            except AttachmentTooLarge as e:
                result.rejected.append(e)
                continue
        raw.append(RawFile(name=file.filename, mime_type=file.content_type, data=await file.read()))

    ingested = ingestor.ingest_many(raw)
    result.accepted.extend(ingested.accepted)
    result.rejected.extend(ingested.rejected)
    return IngestAttachmentsResponse(
        accepted=result.accepted,
        rejected=[
            RejectedAttachment(filename=e.filename, limit_bytes=e.limit_bytes, error=str(e))
            for e in result.rejected
        ],
    )
