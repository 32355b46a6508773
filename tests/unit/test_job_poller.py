from __future__ import annotations

import asyncio

import pytest

from nova.agent.job_poller import JobPoller
from nova.models.entities import VideoJob
from nova.models.enums import JobStatus
from nova.models.errors import NoAssetProduced, PollTimeout, TransportFailure
from tests.fakes import FakeVideoClient, RecordingSleep, done, pending


def _collect(poller: JobPoller) -> list[VideoJob]:
    async def run() -> list[VideoJob]:
        return [job.model_copy() async for job in poller.watch("a cat", "16:9")]

    return asyncio.run(run())


def test_pending_pending_done_issues_two_polls() -> None:
    client = FakeVideoClient(
        submitted=pending(),
        polls=[pending(), done("https://provider/asset123")],
    )
    sleep = RecordingSleep()
    poller = JobPoller(client=client, credential="KEY", interval=5, sleep=sleep)

    job = asyncio.run(poller.run("a cat", "16:9"))

    assert len(client.poll_calls) == 2
    assert sleep.calls == [5, 5]
    assert job.status == JobStatus.done
    assert job.video_url == "https://provider/asset123&key=KEY"
    assert job.polls == 2


def test_watch_yields_each_tick() -> None:
    client = FakeVideoClient(polls=[pending(), done("https://provider/x")])
    states = _collect(JobPoller(client=client, credential="k", sleep=RecordingSleep()))

    assert [s.status for s in states] == [JobStatus.pending, JobStatus.pending, JobStatus.done]
    assert [s.polls for s in states] == [0, 1, 2]


def test_done_on_submission_needs_no_poll() -> None:
    client = FakeVideoClient(submitted=done("https://provider/now"))
    job = asyncio.run(JobPoller(client=client, credential="k", sleep=RecordingSleep()).run("p", "9:16"))

    assert client.poll_calls == []
    assert job.video_url == "https://provider/now&key=k"


def test_done_without_asset_is_no_asset_produced() -> None:
    client = FakeVideoClient(polls=[done(None)])
    poller = JobPoller(client=client, credential="k", sleep=RecordingSleep())

    with pytest.raises(NoAssetProduced):
        asyncio.run(poller.run("p", "16:9"))


def test_done_with_provider_error_is_transport_failure() -> None:
    client = FakeVideoClient(polls=[done(None, error="safety filter")])
    poller = JobPoller(client=client, credential="k", sleep=RecordingSleep())

    with pytest.raises(TransportFailure, match="safety filter"):
        asyncio.run(poller.run("p", "16:9"))


def test_submission_error_is_transport_failure() -> None:
    client = FakeVideoClient(submit_error=ConnectionError("quota exceeded"))
    poller = JobPoller(client=client, credential="k", sleep=RecordingSleep())

    with pytest.raises(TransportFailure, match="quota exceeded"):
        asyncio.run(poller.run("p", "16:9"))
    assert client.poll_calls == []


def test_poll_error_marks_job_failed() -> None:
    client = FakeVideoClient(polls=[pending(), TimeoutError("read timed out")])
    poller = JobPoller(client=client, credential="k", sleep=RecordingSleep())
    seen: list[VideoJob] = []

    async def run() -> None:
        async for job in poller.watch("p", "16:9"):
            seen.append(job)

    with pytest.raises(TransportFailure):
        asyncio.run(run())
    assert seen[-1].status == JobStatus.failed
    assert seen[-1].error == "read timed out"


def test_max_attempts_surfaces_timeout() -> None:
    client = FakeVideoClient(polls=[pending(), pending(), pending()])
    poller = JobPoller(client=client, credential="k", max_attempts=2, sleep=RecordingSleep())

    with pytest.raises(PollTimeout):
        asyncio.run(poller.run("p", "16:9"))
    assert len(client.poll_calls) == 2
