"""Offline assistant client.

Answers every conversation with a fixed acknowledgement of the last user turn.
Useful for local development without an API key and as a template for new
provider adapters: implement BaseAssistantClient and register it in
AssistantFactory.
"""

from collections.abc import Sequence

from doclens.assistant.client_base import BaseAssistantClient
from doclens.assistant.models import AssistantReply, ChatTurn


class ExampleClientAdapter(BaseAssistantClient):
    """Returns a canned reply. No network calls."""

    REPLY_PREFIX = "Example assistant reply"

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        turns: Sequence[ChatTurn],
    ) -> AssistantReply:
        _ = temperature, system_prompt
        last_user = next((t.content for t in reversed(turns) if t.role == "user"), "")
        preview = " ".join(last_user.split())[:80]
        text = f"{self.REPLY_PREFIX}: {preview}"[:max_tokens]
        return AssistantReply(text=text, model_id=model, tokens_used=len(text.split()))
