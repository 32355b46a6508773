from __future__ import annotations

import asyncio

import pytest

from nova.agent.video_handler import (
    SYNTHESIZING_NOTICE,
    VideoService,
    compose_video_prompt,
    success_notice,
)
from nova.api.activity_log import InMemoryActivityLog
from nova.api.session_store import InMemorySessionStore
from nova.models.entities import Session
from nova.models.enums import AspectRatio
from tests.fakes import FakeVideoClient, FlagPolicy, done, make_gateway, pending


def _setup(
    client: FakeVideoClient, maintenance: bool = False
) -> tuple[VideoService, InMemorySessionStore, str, InMemoryActivityLog]:
    store = InMemorySessionStore()
    activity = InMemoryActivityLog()
    gateway, _, _ = make_gateway(
        video_client=client,
        activity=activity,
        maintenance=FlagPolicy(maintenance=maintenance),
        credential="CRED",
    )
    session = store.create_session(persona_id="veo-director", title="Briefing Veo Director")
    return VideoService(gateway=gateway, store=store), store, session.id, activity


def _snapshots(service: VideoService, sid: str, prompt: str, ar: AspectRatio) -> list[Session]:
    async def run() -> list[Session]:
        return [s async for s in service.open_turn(sid, prompt, ar)]

    return asyncio.run(run())


def test_successful_render_attaches_playable_url() -> None:
    client = FakeVideoClient(polls=[pending(), done("https://provider/asset123")])
    service, store, sid, activity = _setup(client)

    snapshots = _snapshots(service, sid, "a fox running", AspectRatio.portrait)

    reply = snapshots[-1].messages[-1]
    assert reply.video_url == "https://provider/asset123&key=CRED"
    assert reply.content == success_notice("9:16")
    assert reply.streaming is False
    assert client.submit_calls == [("a fox running", "9:16")]
    assert not store.is_in_flight(sid)
    assert [e.status for e in activity.entries()] == [200]


def test_placeholder_reports_status_checks() -> None:
    client = FakeVideoClient(polls=[pending(), done("https://provider/x")])
    service, _, sid, _ = _setup(client)

    snapshots = _snapshots(service, sid, "rain", AspectRatio.landscape)

    contents = [s.messages[-1].content for s in snapshots[1:-1]]
    assert contents == [
        SYNTHESIZING_NOTICE,
        f"{SYNTHESIZING_NOTICE} (status checks: 0)",
        f"{SYNTHESIZING_NOTICE} (status checks: 1)",
    ]


def test_missing_asset_becomes_failure_notice() -> None:
    service, _, sid, activity = _setup(FakeVideoClient(polls=[done(None)]))

    final = asyncio.run(service.render_turn(sid, "empty", AspectRatio.landscape))

    reply = final.messages[-1]
    assert reply.content.startswith("### Failed to Render")
    assert "No download link returned" in reply.content
    assert reply.video_url is None
    assert [e.status for e in activity.entries()] == [500]


def test_maintenance_mode_is_reported_in_the_session() -> None:
    client = FakeVideoClient()
    service, store, sid, activity = _setup(client, maintenance=True)

    final = asyncio.run(service.render_turn(sid, "city at night", AspectRatio.landscape))

    assert final.messages[-1].content == "### Failed to Render\nMaintenance Mode"
    assert client.submit_calls == []
    assert [e.status for e in activity.entries()] == [503]
    assert not store.is_in_flight(sid)


def test_empty_prompt_is_rejected_before_the_turn_starts() -> None:
    service, store, sid, _ = _setup(FakeVideoClient())

    with pytest.raises(ValueError):
        service.open_turn(sid, "   ", AspectRatio.landscape)
    assert not store.is_in_flight(sid)


def test_compose_video_prompt_skips_defaults() -> None:
    assert compose_video_prompt("a cat") == "a cat"
    composed = compose_video_prompt("a cat", camera_movement="Drone", atmosphere=" moody ")
    assert composed == "a cat. Camera movement: Drone.. Atmosphere/Vibe: moody."


def test_closing_an_unstarted_video_turn_releases_the_session() -> None:
    client = FakeVideoClient(polls=[done("https://provider/x")])
    service, store, sid, _ = _setup(client)

    turn = service.open_turn(sid, "a storm", AspectRatio.landscape)
    asyncio.run(turn.aclose())

    assert not store.is_in_flight(sid)
    assert client.submit_calls == []


def test_abandoned_render_logs_one_failure() -> None:
    client = FakeVideoClient(polls=[pending(), pending(), done("https://provider/x")])
    service, store, sid, activity = _setup(client)

    async def run() -> None:
        turn = service.open_turn(sid, "a storm", AspectRatio.landscape)
        async for snapshot in turn:
            if "status checks: 1" in snapshot.messages[-1].content:
                break
        await turn.aclose()

    asyncio.run(run())

    session = store.get_session(sid)
    assert session is not None
    assert session.messages[-1].streaming is False
    assert [e.status for e in activity.entries()] == [500]
    assert not store.is_in_flight(sid)
