from doclens.assistant.base import BaseAssistant
from doclens.assistant.factory import AssistantFactory
from doclens.assistant.models import AssistantReply, ChatTurn

__all__ = ["AssistantFactory", "AssistantReply", "BaseAssistant", "ChatTurn"]
