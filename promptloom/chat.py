"""
Chat request envelope.

A ChatRequest is the wire-ready output of the formatter: a model name and
an ordered list of role/content messages.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from .constants import DEFAULT_PERSONA_ROLE, ROLES, SYSTEM_ROLE_MODELS


@dataclass
class Message:
    """A single chat message."""
    role: str
    content: str
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unknown role '{self.role}', expected one of {', '.join(ROLES)}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name is not None:
            data["name"] = self.name
        return data


@dataclass
class ChatRequest:
    """Chat request for a target model."""
    model: str
    messages: list[Message] = field(default_factory=list)

    def add_message(self, message: Message) -> None:
        self.messages.append(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in self.messages],
        }


def get_persona_role(model: str) -> str:
    """Role used for the persona message.

    gpt-4o models take the persona as a system message; newer reasoning
    models expect the developer role.
    """
    if model in SYSTEM_ROLE_MODELS:
        return "system"
    return DEFAULT_PERSONA_ROLE


def create_request(model: str) -> ChatRequest:
    return ChatRequest(model=model)
