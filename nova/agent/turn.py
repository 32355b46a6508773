from __future__ import annotations

from collections.abc import AsyncGenerator, Callable

from nova.api.session_store import InMemorySessionStore
from nova.models.entities import Session


class TurnLease:
    """The in-flight mark a started turn holds on its session.

    Released at most once, so a late close can never free a newer turn.
    """

    def __init__(self, store: InMemorySessionStore, session_id: str, fallback: str) -> None:
        self._store = store
        self._session_id = session_id
        self._fallback = fallback
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._store.end_turn(self._session_id, fallback=self._fallback)


class Turn:
    """Session snapshots of one started turn.

    ``aclose`` releases the session even when iteration never began.
    """

    def __init__(
        self,
        consume: Callable[[TurnLease], AsyncGenerator[Session, None]],
        lease: TurnLease,
    ) -> None:
        self._lease = lease
        self._snapshots = consume(lease)

    @property
    def lease(self) -> TurnLease:
        return self._lease

    def __aiter__(self) -> Turn:
        return self

    async def __anext__(self) -> Session:
        return await self._snapshots.__anext__()

    async def aclose(self) -> None:
        try:
            await self._snapshots.aclose()
        finally:
            self._lease.release()
