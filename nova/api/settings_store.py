from __future__ import annotations

import threading
from typing import Any

from nova.models.entities import SiteSettings

MASK = "••••••••"


def mask_secret(value: str) -> str:
    if not value:
        return ""
    return MASK


class InMemorySettingsStore:
    def __init__(self, settings: SiteSettings | None = None) -> None:
        self._settings = settings or SiteSettings()
        self._lock = threading.Lock()

    def get(self) -> SiteSettings:
        with self._lock:
            return self._settings.model_copy()

    def update(self, changes: dict[str, Any]) -> SiteSettings:
        with self._lock:
            merged = {**self._settings.model_dump(), **changes}
            self._settings = SiteSettings.model_validate(merged)
            return self._settings.model_copy()

    def is_maintenance(self) -> bool:
        with self._lock:
            return self._settings.is_maintenance

    def masked(self) -> SiteSettings:
        current = self.get()
        return current.model_copy(
            update={
                "gemini_api_key": mask_secret(current.gemini_api_key),
                "veo_api_key": mask_secret(current.veo_api_key),
            }
        )
