from collections.abc import Sequence

import httpx
import openai

from doclens.assistant.client_base import BaseAssistantClient
from doclens.assistant.exceptions import AssistantCallError
from doclens.assistant.models import AssistantReply, ChatTurn


class OpenAIClientAdapter(BaseAssistantClient):
    """Assistant client built on the OpenAI-compatible async chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        turns: Sequence[ChatTurn],
    ) -> AssistantReply:
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn.role, "content": turn.content} for turn in turns)
        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=messages,  # type: ignore[arg-type]
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise AssistantCallError(f"AI provider network error: {exc}") from exc
        except openai.APIError as exc:
            raise AssistantCallError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise AssistantCallError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise AssistantCallError("AI returned empty response")
        tokens_used = response.usage.total_tokens if response.usage is not None else None
        return AssistantReply(text=content, model_id=model, tokens_used=tokens_used)
