from __future__ import annotations

from nova.api.activity_log import InMemoryActivityLog, preview
from nova.models.enums import Feature


def test_newest_first_and_capped() -> None:
    log = InMemoryActivityLog(capacity=100)
    for i in range(105):
        log.record(Feature.chat, f"prompt {i}", 200)

    entries = log.entries()
    assert len(entries) == 100
    assert entries[0].prompt_preview == "prompt 104"
    assert entries[-1].prompt_preview == "prompt 5"


def test_preview_is_capped_at_100_chars() -> None:
    assert preview("a" * 100) == "a" * 100
    long = preview("b" * 150)
    assert len(long) == 100
    assert long.endswith("...")
