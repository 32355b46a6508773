from __future__ import annotations

from collections.abc import Callable
from typing import Any

from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import SecretStr

from nova.config.loader import resolve_api_key
from nova.config.schema import ChatModelSettings
from nova.models.provider import ChatModel
from nova.models.tuning import Tuning


def extract_text(chunk: Any) -> str:
    """Return the visible text of a streamed message chunk.

    Gemini may interleave thinking parts with text parts; only the latter are
    surfaced.
    """

    content = getattr(chunk, "content", chunk)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                text = part.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "".join(parts)
    return ""


def init_chat_model_factory(settings: ChatModelSettings) -> Callable[[Tuning], ChatModel]:
    key = resolve_api_key(settings.api_key)
    if not key:
        raise ValueError("Gemini API key is not configured")
    api_key = SecretStr(key)
    model = settings.model
    extra = dict(settings.extra)

    def factory(tuning: Tuning) -> ChatModel:
        return ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=tuning.temperature,
            top_p=tuning.top_p,
            thinking_budget=tuning.thinking_budget,
            **extra,
        )

    return factory
