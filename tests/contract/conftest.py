from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient

from nova.api import auth, deps
from nova.api.activity_log import InMemoryActivityLog
from nova.api.job_store import InMemoryJobStore
from nova.api.session_store import InMemorySessionStore
from nova.api.settings_store import InMemorySettingsStore
from nova.cli.server import create_app
from nova.config.schema import AdminConfig
from nova.prompt.personas import PersonaRegistry
from nova.utils.attachments import AttachmentIngestor
from tests.fakes import (
    ADMIN_EMAIL,
    ADMIN_PASSWORD,
    ADMIN_SALT,
    FakeChatModel,
    FakeVideoClient,
    done,
    make_gateway,
    pending,
)


@dataclass
class Api:
    client: TestClient
    sessions: InMemorySessionStore
    jobs: InMemoryJobStore
    settings: InMemorySettingsStore
    activity: InMemoryActivityLog
    chat_model: FakeChatModel
    video_client: FakeVideoClient


@pytest.fixture()
def api() -> Iterator[Api]:
    app = create_app()
    sessions = InMemorySessionStore()
    personas = PersonaRegistry()
    jobs = InMemoryJobStore()
    settings = InMemorySettingsStore()
    activity = InMemoryActivityLog()
    chat_model = FakeChatModel(["Hello", " there!"])
    video_client = FakeVideoClient(polls=[pending(), done("https://provider/asset123")])
    gateway, _, _ = make_gateway(
        chat_model=chat_model,
        video_client=video_client,
        activity=activity,
        maintenance=settings,
        credential="CRED",
    )
    authenticator = auth.AdminAuthenticator(
        settings=AdminConfig(
            email=ADMIN_EMAIL,
            password_hash=auth.hash_password(ADMIN_PASSWORD, ADMIN_SALT, 1000),
            salt=ADMIN_SALT,
            iterations=1000,
        )
    )

    app.dependency_overrides[deps.get_session_store] = lambda: sessions
    app.dependency_overrides[deps.get_persona_registry] = lambda: personas
    app.dependency_overrides[deps.get_job_store] = lambda: jobs
    app.dependency_overrides[deps.get_settings_store] = lambda: settings
    app.dependency_overrides[deps.get_activity_log] = lambda: activity
    app.dependency_overrides[deps.get_gateway] = lambda: gateway
    app.dependency_overrides[deps.get_ingestor] = lambda: AttachmentIngestor(max_bytes=16)
    app.dependency_overrides[auth.get_authenticator] = lambda: authenticator

    with TestClient(app) as client:
        yield Api(
            client=client,
            sessions=sessions,
            jobs=jobs,
            settings=settings,
            activity=activity,
            chat_model=chat_model,
            video_client=video_client,
        )
