from abc import ABC, abstractmethod
from collections.abc import Sequence

from doclens.assistant.models import AssistantReply, ChatTurn


class BaseAssistantClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        turns: Sequence[ChatTurn],
    ) -> AssistantReply:
        """Return the provider's reply to the conversation."""
