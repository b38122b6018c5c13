from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "assistant"]


@dataclass(frozen=True)
class ChatTurn:
    """One message of a conversation, oldest turns first."""

    role: Role
    content: str


@dataclass(frozen=True)
class AssistantReply:
    text: str
    model_id: str
    tokens_used: int | None = None
