class AssistantError(Exception):
    """Base class for AI assistant failures."""


class AssistantUnavailableError(AssistantError):
    """Raised when the assistant has no credentials or configuration."""


class AssistantCallError(AssistantError):
    """Raised when a configured assistant call fails (network, API or empty reply)."""
