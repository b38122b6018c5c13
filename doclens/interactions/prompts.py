"""Conversation builders for explanations, queries and summaries."""

from collections.abc import Sequence

from doclens.assistant.models import ChatTurn
from doclens.assistant.prompt_loader import load_prompt
from doclens.database.models import InteractionRecord

DEFAULT_EXPLAIN_PROMPT = "Explain this document"


def explain_system_prompt() -> str:
    return load_prompt("explain_system")


def query_system_prompt() -> str:
    return load_prompt("query_system")


def build_explain_turns(extracted_text: str, context: str | None = None) -> list[ChatTurn]:
    if context:
        content = load_prompt("explain_with_context").format(
            context=context, extracted_text=extracted_text
        )
    else:
        content = load_prompt("explain_general").format(extracted_text=extracted_text)
    return [ChatTurn(role="user", content=content)]


def build_query_turns(
    extracted_text: str,
    question: str,
    history: Sequence[InteractionRecord] = (),
) -> list[ChatTurn]:
    """Replay ``history`` (given newest first) oldest first, then ask the question."""
    turns: list[ChatTurn] = []
    for interaction in reversed(history):
        turns.append(ChatTurn(role="user", content=interaction.prompt))
        turns.append(ChatTurn(role="assistant", content=interaction.response))
    turns.append(
        ChatTurn(
            role="user",
            content=load_prompt("query").format(
                extracted_text=extracted_text, question=question
            ),
        )
    )
    return turns


def build_summary_turns(extracted_text: str, source_chars: int) -> list[ChatTurn]:
    return build_explain_turns(
        extracted_text[:source_chars], context=load_prompt("summary_instruction")
    )


def clean_summary(raw: str, max_chars: int) -> str:
    """Strip surrounding quotes and whitespace, then cap the length."""
    text = raw.strip()
    if text[:1] in {'"', "'"}:
        text = text[1:]
    if text[-1:] in {'"', "'"}:
        text = text[:-1]
    return text.strip()[:max_chars]
