"""Chat message models."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single chat turn sent by the browser."""

    role: Literal["user", "assistant", "system"] = Field(
        description="Role: 'user', 'assistant' or 'system'"
    )
    content: str = Field(description="Message content")


def parse_messages(raw: object) -> list[ChatMessage]:
    """Keep only well-formed chat turns from an untrusted payload."""
    if not isinstance(raw, list):
        return []
    messages: list[ChatMessage] = []
    for item in raw:
        if (
            isinstance(item, dict)
            and item.get("role") in ("user", "assistant", "system")
            and isinstance(item.get("content"), str)
        ):
            messages.append(ChatMessage(role=item["role"], content=item["content"]))
    return messages


def format_transcript(messages: list[ChatMessage]) -> str:
    """Render chat turns as ``role: content`` lines."""
    return "\n".join(f"{m.role}: {m.content}" for m in messages)
