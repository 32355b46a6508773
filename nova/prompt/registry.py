from __future__ import annotations

from pathlib import Path


def get_prompt_text(persona_id: str) -> str:
    templates_dir = Path(__file__).resolve().parent / "templates"
    path = templates_dir / f"{persona_id}.md"
    return path.read_text(encoding="utf-8").strip()
