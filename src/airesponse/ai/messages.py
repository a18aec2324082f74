"""Conversation turn model passed to provider adapters."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class AIMessage(BaseModel):
    """One turn in a conversation. Sequence order is conversation history."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Role
    content: str
    image_url: str | None = Field(default=None, alias="imageUrl")

    def to_provider(self) -> dict[str, object]:
        """OpenAI-compatible message dict; images become multi-part content."""
        if self.image_url:
            return {
                "role": self.role,
                "content": [
                    {"type": "text", "text": self.content},
                    {"type": "image_url", "image_url": {"url": self.image_url}},
                ],
            }
        return {"role": self.role, "content": self.content}


def system(content: str) -> AIMessage:
    return AIMessage(role="system", content=content)


def user(content: str, image_url: str | None = None) -> AIMessage:
    return AIMessage(role="user", content=content, image_url=image_url)


def assistant(content: str) -> AIMessage:
    return AIMessage(role="assistant", content=content)
