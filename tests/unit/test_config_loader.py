from __future__ import annotations

from pathlib import Path

import yaml
from _pytest.monkeypatch import MonkeyPatch

from nova.config import loader
from nova.config.schema import DEFAULT_MAX_ATTACHMENT_BYTES


def _point_at(monkeypatch: MonkeyPatch, global_path: Path, project_path: Path) -> None:
    monkeypatch.setattr(loader, "get_global_config_path", lambda: global_path)
    monkeypatch.setattr(loader, "get_project_config_path", lambda: project_path)


def test_merge_and_env_resolution(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    global_path = tmp_path / "global.yaml"
    project_path = tmp_path / "project.yaml"
    global_path.write_text(
        yaml.safe_dump(
            {
                "models": {
                    "chat_model": {
                        "model": "gemini-test",
                        "api_key": "$TEST_KEY",
                    }
                },
                "polling": {"interval_seconds": 2},
            }
        ),
        encoding="utf-8",
    )
    project_path.write_text(
        yaml.safe_dump({"polling": {"max_attempts": 10}}),
        encoding="utf-8",
    )

    monkeypatch.setenv("TEST_KEY", "abc")
    _point_at(monkeypatch, global_path, project_path)

    raw = loader.load_raw_config()
    assert raw["models"]["chat_model"]["api_key"] == "abc"
    assert raw["polling"] == {"interval_seconds": 2, "max_attempts": 10}

    config = loader.load_config()
    assert config.models.chat_model.model == "gemini-test"
    assert config.polling.interval_seconds == 2
    assert config.polling.max_attempts == 10


def test_missing_files_give_defaults(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    _point_at(monkeypatch, tmp_path / "none.yaml", tmp_path / "also-none.yaml")

    config = loader.load_config()

    assert config.limits.max_attachment_bytes == DEFAULT_MAX_ATTACHMENT_BYTES
    assert config.polling.interval_seconds == 5.0
    assert config.polling.max_attempts is None
    assert config.activity_log.capacity == 100
    assert config.jobs.ttl_seconds == 3600


def test_resolve_api_key_falls_back_to_environment(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setenv("API_KEY", "from-env")

    assert loader.resolve_api_key("configured") == "configured"
    assert loader.resolve_api_key(None) == "from-env"

    monkeypatch.delenv("API_KEY")
    assert loader.resolve_api_key("") is None
