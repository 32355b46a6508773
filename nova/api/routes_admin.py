from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from nova.api.activity_log import InMemoryActivityLog
from nova.api.auth import require_admin
from nova.api.deps import get_activity_log, get_settings_store
from nova.api.settings_store import InMemorySettingsStore
from nova.models.entities import ActivityEntry, SiteSettings

router = APIRouter(prefix="/api/admin", dependencies=[Depends(require_admin)])


class UpdateSettingsBody(BaseModel):
    gemini_api_key: str | None = None
    veo_api_key: str | None = None
    is_maintenance: bool | None = None


@router.get("/settings", response_model=SiteSettings)
async def get_settings(
    store: InMemorySettingsStore = Depends(get_settings_store),
) -> SiteSettings:
    """Current settings with API keys masked."""

    return store.masked()


@router.put("/settings", response_model=SiteSettings)
async def update_settings(
    body: UpdateSettingsBody,
    store: InMemorySettingsStore = Depends(get_settings_store),
) -> SiteSettings:
    """Merge the provided fields into the settings.

    Args:
        body: Fields to change; omitted fields keep their value.

    Returns:
        The updated settings, keys masked.
    """

    store.update(body.model_dump(exclude_none=True))
    return store.masked()


@router.get("/logs", response_model=list[ActivityEntry])
async def get_logs(
    activity: InMemoryActivityLog = Depends(get_activity_log),
) -> list[ActivityEntry]:
    return activity.entries()
