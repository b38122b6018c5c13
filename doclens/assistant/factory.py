from typing import ClassVar

from doclens.assistant.assistant import Assistant, UnconfiguredAssistant
from doclens.assistant.base import BaseAssistant
from doclens.assistant.example_client_adapter import ExampleClientAdapter
from doclens.assistant.openai_client_adapter import OpenAIClientAdapter
from doclens.config.settings import Settings
from doclens.logging.logger import Log


class AssistantFactory:
    """Creates the configured assistant once at process start."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("openai", "openai_compatible", "example")
    PLACEHOLDER_KEYS: ClassVar[frozenset[str]] = frozenset({"", "your-openai-api-key-here"})

    @classmethod
    def create(cls, settings: Settings) -> BaseAssistant:
        provider = settings.assistant_provider.lower()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown assistant provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        if provider == "example":
            return Assistant(
                client=ExampleClientAdapter(),
                model="example",
                temperature=settings.assistant_temperature,
                max_tokens=settings.assistant_max_tokens,
            )

        api_key = settings.openai_api_key.strip()
        if api_key in cls.PLACEHOLDER_KEYS:
            Log.warning("OPENAI_API_KEY is not set. AI features are disabled.")
            return UnconfiguredAssistant()

        base_url = settings.openai_base_url.strip() or None
        if provider == "openai_compatible" and base_url is None:
            raise ValueError(
                "openai_base_url is required for assistant_provider=openai_compatible"
            )
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=base_url,
        )
        return Assistant(
            client=client,
            model=settings.openai_model_name,
            temperature=settings.assistant_temperature,
            max_tokens=settings.assistant_max_tokens,
        )
