from abc import ABC, abstractmethod
from collections.abc import Sequence

from doclens.assistant.models import AssistantReply, ChatTurn


class BaseAssistant(ABC):
    """Contract for the AI assistant used by the pipeline and interactions."""

    @abstractmethod
    async def complete(
        self, system_prompt: str, turns: Sequence[ChatTurn]
    ) -> AssistantReply:
        """Send a conversation and return the assistant's reply.

        Args:
            system_prompt: Instructions for the assistant.
            turns: Prior user/assistant exchanges oldest first, then the new user turn.

        Raises:
            AssistantUnavailableError: if the assistant is not configured.
            AssistantCallError: if the provider call fails.
        """
