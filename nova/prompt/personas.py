from __future__ import annotations

import threading
import uuid

from nova.models.entities import Persona
from nova.models.enums import Category, Mode
from nova.models.errors import PersonaNotFound
from nova.prompt.registry import get_prompt_text

DEFAULT_PERSONA_ID = "default"


def _builtin(
    id: str,
    name: str,
    role: str,
    description: str,
    avatar: str,
    category: Category,
    mode: Mode = Mode.chat,
) -> Persona:
    return Persona(
        id=id,
        name=name,
        role=role,
        description=description,
        system_instruction=get_prompt_text(id),
        avatar=avatar,
        category=category,
        mode=mode,
    )


BUILTIN_PERSONAS: tuple[Persona, ...] = (
    _builtin(
        "default",
        "Nova Pro",
        "General Intelligence",
        "Highly balanced and sophisticated model for research, coding, and reasoning.",
        "✨",
        Category.general,
    ),
    _builtin(
        "veo-director",
        "Veo Director",
        "Cinematic Architect",
        "Generate high-fidelity cinematic videos from text prompts using Google Veo.",
        "🎬",
        Category.creative,
        Mode.video,
    ),
    _builtin(
        "aggressive-debater",
        "The Adversary",
        "Brutal Debater",
        "Aggressive, logical, and won't back down. Designed for high-stakes intellectual sparring.",
        "⚔️",
        Category.professional,
    ),
    _builtin(
        "cyber-psychic",
        "Ghost",
        "Digital Oracle",
        "Predicts your future with eerie AI accuracy. Analyzes digital footprints for deeper truths.",
        "👻",
        Category.creative,
    ),
    _builtin(
        "roast-master",
        "Burn",
        "Roast Master",
        "Sarcastic AI that points out every flaw. Sharp wit, low patience.",
        "⚡",
        Category.creative,
    ),
    _builtin(
        "code-master",
        "Byte",
        "Systems Architect",
        "Deep technical wisdom and coding mastery for enterprise-grade engineering.",
        "💻",
        Category.technical,
    ),
)


def synthesize_instruction(
    base: str,
    communication_style: str,
    emotional_state: str,
    cognitive_biases: str,
) -> str:
    return (
        f"{base.strip()}\n"
        f"[COMMUNICATION STYLE]: {communication_style}\n"
        f"[EMOTIONAL STATE]: {emotional_state}\n"
        f"[COGNITIVE BIASES]: {cognitive_biases}"
    )


class PersonaRegistry:
    """Built-in personas plus user-authored ones; neither can be edited."""

    def __init__(self, builtins: tuple[Persona, ...] = BUILTIN_PERSONAS) -> None:
        self._builtins = {p.id: p for p in builtins}
        self._custom: dict[str, Persona] = {}
        self._lock = threading.Lock()

    def list(self) -> list[Persona]:
        with self._lock:
            return [*self._builtins.values(), *self._custom.values()]

    def get(self, persona_id: str) -> Persona:
        with self._lock:
            persona = self._builtins.get(persona_id) or self._custom.get(persona_id)
        if persona is None:
            raise PersonaNotFound(persona_id)
        return persona

    def create(
        self,
        name: str,
        role: str,
        description: str,
        system_instruction: str,
        *,
        avatar: str = "🤖",
        mode: Mode = Mode.chat,
        communication_style: str = "Technical & Concise",
        emotional_state: str = "Neutral",
        cognitive_biases: str = "None",
    ) -> Persona:
        if not name.strip() or not system_instruction.strip():
            raise ValueError("name and system_instruction are required")
        persona = Persona(
            id=f"custom-{uuid.uuid4().hex[:12]}",
            name=name.strip(),
            role=role.strip() or "Custom Persona",
            description=description.strip(),
            system_instruction=synthesize_instruction(
                system_instruction, communication_style, emotional_state, cognitive_biases
            ),
            avatar=avatar,
            category=Category.custom,
            mode=mode,
            is_custom=True,
        )
        with self._lock:
            self._custom[persona.id] = persona
        return persona
