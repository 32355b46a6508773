from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, Response
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from starlette.background import BackgroundTask

from nova.agent.chat_handler import ChatService
from nova.agent.turn import Turn
from nova.agent.video_handler import VideoService
from nova.api.deps import (
    drain,
    get_chat_service,
    get_ingestor,
    get_persona_registry,
    get_session_store,
    get_video_service,
    run_in_background,
)
from nova.api.session_store import InMemorySessionStore
from nova.models.entities import Attachment, Persona, Session, SessionSummary
from nova.models.enums import AspectRatio, Mode
from nova.models.errors import SessionNotFound
from nova.prompt.personas import DEFAULT_PERSONA_ID, PersonaRegistry
from nova.utils.attachments import AttachmentIngestor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class CreateSessionBody(BaseModel):
    persona_id: str = DEFAULT_PERSONA_ID


class CreateMessageBody(BaseModel):
    content: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    aspect_ratio: AspectRatio = AspectRatio.landscape


def _session_persona(
    session_id: str, store: InMemorySessionStore, personas: PersonaRegistry
) -> tuple[Session, Persona]:
    session = store.get_session(session_id)
    if not session:
        raise SessionNotFound(session_id)
    return session, personas.get(session.persona_id)


def _open_turn(
    session_id: str,
    body: CreateMessageBody,
    store: InMemorySessionStore,
    personas: PersonaRegistry,
    ingestor: AttachmentIngestor,
    chat_service: ChatService,
    video_service: VideoService,
) -> tuple[Persona, Turn]:
    if not body.content.strip() and not body.attachments:
        raise ValueError("content or attachments are required")
    _, persona = _session_persona(session_id, store, personas)
    if persona.mode == Mode.video:
        turn = video_service.open_turn(session_id, body.content, body.aspect_ratio)
    else:
        checked = ingestor.validate(body.attachments)
        if checked.rejected and not body.content.strip() and not checked.accepted:
            raise checked.rejected[0]
        for rejected in checked.rejected:
            logger.warning("dropped attachment for session %s: %s", session_id, rejected)
        turn = chat_service.open_turn(session_id, persona, body.content, checked.accepted)
    return persona, turn


@router.post("/sessions", response_model=Session)
async def create_session(
    body: CreateSessionBody,
    store: InMemorySessionStore = Depends(get_session_store),
    personas: PersonaRegistry = Depends(get_persona_registry),
) -> Session:
    """Create a new session bound to a persona.

    Args:
        body: Session creation payload.

    Returns:
        The created session.
    """

    persona = personas.get(body.persona_id)
    return store.create_session(persona_id=persona.id, title=f"Briefing {persona.name}")


@router.get("/sessions", response_model=list[SessionSummary])
async def list_sessions(
    q: str = "",
    store: InMemorySessionStore = Depends(get_session_store),
) -> list[SessionSummary]:
    """List sessions, newest first, optionally filtered by a search query.

    Args:
        q: Case-insensitive text matched against titles and message content.

    Returns:
        Session summaries; content matches carry a snippet.
    """

    return store.search_sessions(q)


@router.get("/sessions/{session_id}", response_model=Session)
async def get_session(
    session_id: str,
    store: InMemorySessionStore = Depends(get_session_store),
) -> Session:
    """Get session detail.

    Args:
        session_id: Session identifier.

    Returns:
        Session detail.
    """

    session = store.get_session(session_id)
    if not session:
        raise SessionNotFound(session_id)
    return session


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    store: InMemorySessionStore = Depends(get_session_store),
) -> Response:
    store.delete_session(session_id)
    return Response(status_code=204)


@router.post("/sessions/{session_id}/messages", response_model=Session)
async def post_message(
    session_id: str,
    body: CreateMessageBody,
    store: InMemorySessionStore = Depends(get_session_store),
    personas: PersonaRegistry = Depends(get_persona_registry),
    ingestor: AttachmentIngestor = Depends(get_ingestor),
    chat_service: ChatService = Depends(get_chat_service),
    video_service: VideoService = Depends(get_video_service),
) -> Session:
    """Submit a user turn.

    Chat personas answer before this returns. Video personas return at once
    with a placeholder message that a background worker keeps updating; poll
    the session to follow it.

    Oversized attachments are dropped one by one and the rest of the message
    still goes through; a message left with nothing to send fails with 413.
    Upload through ``/api/attachments`` to get a per-file report.

    Args:
        session_id: Session identifier.
        body: Message payload.

    Returns:
        Updated session.
    """

    persona, turn = _open_turn(
        session_id, body, store, personas, ingestor, chat_service, video_service
    )
    if persona.mode == Mode.video:
        run_in_background(drain(turn), label=f"video turn {session_id}")
    else:
        await drain(turn)

    updated = store.get_session(session_id)
    if not updated:
        raise SessionNotFound(session_id)
    return updated


@router.post("/sessions/{session_id}/messages/stream")
async def stream_message(
    session_id: str,
    body: CreateMessageBody,
    store: InMemorySessionStore = Depends(get_session_store),
    personas: PersonaRegistry = Depends(get_persona_registry),
    ingestor: AttachmentIngestor = Depends(get_ingestor),
    chat_service: ChatService = Depends(get_chat_service),
    video_service: VideoService = Depends(get_video_service),
) -> StreamingResponse:
    """Submit a user turn and stream every session snapshot as server-sent events.

    Args:
        session_id: Session identifier.
        body: Message payload.

    Returns:
        A ``text/event-stream`` response, one ``data:`` line per snapshot.
    """

    _, turn = _open_turn(
        session_id, body, store, personas, ingestor, chat_service, video_service
    )
    # Start the turn here so its cleanup no longer depends on the body being sent.
    try:
        first = await anext(turn)
    except BaseException:
        await turn.aclose()
        raise

    async def events() -> AsyncIterator[str]:
        try:
            yield _event(first)
            async for snapshot in turn:
                yield _event(snapshot)
        finally:
            await turn.aclose()

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        background=BackgroundTask(turn.aclose),
    )


def _event(snapshot: Session) -> str:
    return f"data: {snapshot.model_dump_json()}\n\n"
