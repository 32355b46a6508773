from __future__ import annotations

import threading
import uuid
from datetime import datetime

from nova.models.entities import Message, Session, SessionSummary
from nova.models.errors import MessageFrozen, SessionNotFound, TurnInProgress

TITLE_LIMIT = 40
DEFAULT_TITLE = "Brief Session"
_SNIPPET_BEFORE = 25
_SNIPPET_AFTER = 35


def derive_title(text: str) -> str:
    return text[:TITLE_LIMIT] or DEFAULT_TITLE


def _snippet(content: str, query: str) -> str:
    index = content.lower().find(query)
    start = max(0, index - _SNIPPET_BEFORE)
    end = min(len(content), index + len(query) + _SNIPPET_AFTER)
    prefix = "..." if start > 0 else ""
    suffix = "..." if end < len(content) else ""
    return f"{prefix}{content[start:end]}{suffix}"


class InMemorySessionStore:
    """Sessions and their messages, guarded by a single lock.

    Readers always get deep copies, so a published snapshot never changes
    under an observer. At most one turn per session is in flight, and only
    that turn's placeholder message may be streaming.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._in_flight: set[str] = set()
        self._lock = threading.RLock()

    def create_session(self, persona_id: str, title: str) -> Session:
        session_id = uuid.uuid4().hex
        session = Session(id=session_id, title=title, persona_id=persona_id)
        with self._lock:
            self._sessions[session_id] = session
            return session.model_copy(deep=True)

    def get_session(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    def list_sessions(self) -> list[Session]:
        with self._lock:
            sessions = [s.model_copy(deep=True) for s in self._sessions.values()]
        return sorted(sessions, key=lambda s: s.updated_at, reverse=True)

    def search_sessions(self, query: str) -> list[SessionSummary]:
        q = query.strip().lower()
        out: list[SessionSummary] = []
        for session in self.list_sessions():
            snippet: str | None = None
            if q and q not in session.title.lower():
                match = next((m for m in session.messages if q in m.content.lower()), None)
                if match is None:
                    continue
                snippet = _snippet(match.content, q)
            out.append(
                SessionSummary(
                    id=session.id,
                    title=session.title,
                    persona_id=session.persona_id,
                    updated_at=session.updated_at,
                    snippet=snippet,
                )
            )
        return out

    def delete_session(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFound(session_id)
            self._in_flight.discard(session_id)

    def is_in_flight(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._in_flight

    def begin_turn(self, session_id: str, message: Message) -> Session:
        """Mark the session busy and append the user's message.

        The first user message of a session also becomes its title.
        """

        with self._lock:
            session = self._require(session_id)
            if session_id in self._in_flight:
                raise TurnInProgress(session_id)
            if not any(m.role == "user" for m in session.messages):
                session.title = derive_title(message.content)
            session.messages.append(message.model_copy(update={"streaming": False}))
            session.updated_at = datetime.utcnow()
            self._in_flight.add(session_id)
            return session.model_copy(deep=True)

    def start_assistant(self, session_id: str, content: str = "") -> Message:
        with self._lock:
            session = self._require(session_id)
            if session_id not in self._in_flight:
                raise ValueError("no turn in progress for this session")
            if any(m.streaming for m in session.messages):
                raise TurnInProgress(session_id)
            message = Message(role="assistant", content=content, streaming=True)
            session.messages.append(message)
            session.updated_at = datetime.utcnow()
            return message.model_copy(deep=True)

    def append_fragment(self, session_id: str, message_id: str, fragment: str) -> Session:
        with self._lock:
            session = self._require(session_id)
            message = self._streaming_message(session, message_id)
            message.content += fragment
            session.updated_at = datetime.utcnow()
            return session.model_copy(deep=True)

    def set_content(self, session_id: str, message_id: str, content: str) -> Session:
        with self._lock:
            session = self._require(session_id)
            message = self._streaming_message(session, message_id)
            message.content = content
            session.updated_at = datetime.utcnow()
            return session.model_copy(deep=True)

    def finalize(
        self,
        session_id: str,
        message_id: str,
        content: str | None = None,
        video_url: str | None = None,
    ) -> Session:
        with self._lock:
            session = self._require(session_id)
            message = self._streaming_message(session, message_id)
            if content is not None:
                message.content = content
            if video_url is not None:
                message.video_url = video_url
            message.streaming = False
            session.updated_at = datetime.utcnow()
            return session.model_copy(deep=True)

    def end_turn(self, session_id: str, fallback: str) -> None:
        """Release the session and freeze anything a broken turn left streaming."""

        with self._lock:
            self._in_flight.discard(session_id)
            session = self._sessions.get(session_id)
            if session is None:
                return
            for message in session.messages:
                if message.streaming:
                    message.content = fallback
                    message.streaming = False

    def _require(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    @staticmethod
    def _streaming_message(session: Session, message_id: str) -> Message:
        for message in reversed(session.messages):
            if message.id == message_id:
                if not message.streaming:
                    raise MessageFrozen(f"message {message_id} is finalized")
                return message
        raise ValueError(f"message {message_id} not found")
