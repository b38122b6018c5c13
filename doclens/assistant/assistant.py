from collections.abc import Sequence

from doclens.assistant.base import BaseAssistant
from doclens.assistant.client_base import BaseAssistantClient
from doclens.assistant.exceptions import AssistantUnavailableError
from doclens.assistant.models import AssistantReply, ChatTurn
from doclens.logging.logger import Log


class Assistant(BaseAssistant):
    """Chat assistant with fixed sampling settings.

    Temperature and output length are set once here; callers cannot override them.
    """

    def __init__(
        self,
        *,
        client: BaseAssistantClient,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(2.0, temperature))
        self._max_tokens = max_tokens

    async def complete(
        self, system_prompt: str, turns: Sequence[ChatTurn]
    ) -> AssistantReply:
        if not turns or turns[-1].role != "user":
            raise ValueError("Conversation must end with a user turn")
        Log.debug(f"Assistant request: {len(turns)} turns, model {self._model}")
        reply = await self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=system_prompt,
            turns=list(turns),
        )
        Log.info(f"Assistant replied with {len(reply.text)} chars ({reply.tokens_used} tokens)")
        return reply


class UnconfiguredAssistant(BaseAssistant):
    """Stands in when no API key is set; every call fails fast."""

    MESSAGE = (
        "AI assistant is not configured. "
        "Set OPENAI_API_KEY to enable explanations, queries and summaries."
    )

    async def complete(
        self, system_prompt: str, turns: Sequence[ChatTurn]
    ) -> AssistantReply:
        raise AssistantUnavailableError(self.MESSAGE)
