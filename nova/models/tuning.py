from __future__ import annotations

from dataclasses import dataclass

ANALYTICAL_PERSONAS = frozenset({"default", "code-master", "aggressive-debater"})


@dataclass(frozen=True)
class Tuning:
    temperature: float
    top_p: float
    thinking_budget: int


ANALYTICAL = Tuning(temperature=0.4, top_p=0.95, thinking_budget=12000)
CREATIVE = Tuning(temperature=0.8, top_p=0.95, thinking_budget=0)


def select_tuning(persona_id: str) -> Tuning:
    if persona_id in ANALYTICAL_PERSONAS:
        return ANALYTICAL
    return CREATIVE
