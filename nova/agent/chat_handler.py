from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import aclosing
from dataclasses import dataclass

from nova.agent.gateway import ModelGateway
from nova.agent.turn import Turn, TurnLease
from nova.api.session_store import InMemorySessionStore
from nova.models.entities import Attachment, Message, Persona, Session
from nova.models.errors import SessionNotFound, TransportFailure

logger = logging.getLogger(__name__)

CHAT_FAILURE_NOTICE = "### System Alert\nCritical neural pipeline failure."


@dataclass(frozen=True)
class ChatService:
    gateway: ModelGateway
    store: InMemorySessionStore

    def open_turn(
        self,
        session_id: str,
        persona: Persona,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> Turn:
        """Start a chat turn and return the stream of session snapshots it produces.

        The user message is appended and the session marked busy before this
        returns, so a concurrent second turn fails with ``TurnInProgress``
        immediately rather than on first iteration. Closing the returned turn
        releases the session whether or not it was iterated.
        """

        started = self.store.begin_turn(
            session_id,
            Message(role="user", content=text, attachments=list(attachments)),
        )
        # The started snapshot is taken under the store lock, so it holds
        # every turn that finished before this one.
        history = [m for m in started.messages[:-1] if not m.streaming]
        lease = TurnLease(self.store, session_id, CHAT_FAILURE_NOTICE)
        return Turn(
            lambda held: self._consume(held, started, persona, text, list(attachments), history),
            lease,
        )

    async def stream_turn(
        self,
        session_id: str,
        persona: Persona,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> Session:
        last: Session | None = None
        turn = self.open_turn(session_id, persona, text, attachments)
        try:
            async for snapshot in turn:
                last = snapshot
        finally:
            await turn.aclose()
        if last is None:
            raise SessionNotFound(session_id)
        return last

    async def _consume(
        self,
        lease: TurnLease,
        started: Session,
        persona: Persona,
        text: str,
        attachments: list[Attachment],
        history: list[Message],
    ) -> AsyncGenerator[Session, None]:
        session_id = started.id
        try:
            yield started
            placeholder = self.store.start_assistant(session_id)
            snapshot = self.store.get_session(session_id)
            if snapshot is not None:
                yield snapshot

            try:
                async with aclosing(
                    self.gateway.stream_completion(
                        history, text, attachments, persona.system_instruction, persona.id
                    )
                ) as fragments:
                    async for fragment in fragments:
                        yield self.store.append_fragment(session_id, placeholder.id, fragment)
            except TransportFailure as e:
                logger.warning("chat turn failed for session %s: %s", session_id, e)
                yield self.store.finalize(session_id, placeholder.id, content=CHAT_FAILURE_NOTICE)
                return
            yield self.store.finalize(session_id, placeholder.id)
        except SessionNotFound:
            logger.info("session %s was deleted during a chat turn", session_id)
        finally:
            lease.release()
