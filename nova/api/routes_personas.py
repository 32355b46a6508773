from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from nova.api.deps import get_persona_registry
from nova.models.entities import Persona
from nova.models.enums import Mode
from nova.prompt.personas import PersonaRegistry

router = APIRouter(prefix="/api")


class CreatePersonaBody(BaseModel):
    name: str
    role: str = ""
    description: str = ""
    system_instruction: str
    avatar: str = "🤖"
    mode: Mode = Mode.chat
    communication_style: str = "Technical & Concise"
    emotional_state: str = "Neutral"
    cognitive_biases: str = "None"


@router.get("/personas", response_model=list[Persona])
async def list_personas(registry: PersonaRegistry = Depends(get_persona_registry)) -> list[Persona]:
    return registry.list()


@router.get("/personas/{persona_id}", response_model=Persona)
async def get_persona(
    persona_id: str,
    registry: PersonaRegistry = Depends(get_persona_registry),
) -> Persona:
    return registry.get(persona_id)


@router.post("/personas", response_model=Persona)
async def create_persona(
    body: CreatePersonaBody,
    registry: PersonaRegistry = Depends(get_persona_registry),
) -> Persona:
    """Author a custom persona.

    The personality parameters are folded into the system instruction; the
    persona cannot be changed afterwards.

    Args:
        body: Persona definition.

    Returns:
        The stored persona.
    """

    return registry.create(
        name=body.name,
        role=body.role,
        description=body.description,
        system_instruction=body.system_instruction,
        avatar=body.avatar,
        mode=body.mode,
        communication_style=body.communication_style,
        emotional_state=body.emotional_state,
        cognitive_biases=body.cognitive_biases,
    )
