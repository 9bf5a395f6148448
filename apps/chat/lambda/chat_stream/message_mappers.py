"""Conversion helpers between internal messages and provider-specific formats."""

from collections.abc import Sequence
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from .schemas import ChatMessage, ContentPart


def _text_of(content: str | list[ContentPart]) -> str:
    if isinstance(content, str):
        return content
    return "".join(part.text or "" for part in content if part.type == "text")


def _openai_parts(content: list[ContentPart]) -> list[dict[str, Any]]:
    parts: list[dict[str, Any]] = []
    for part in content:
        if part.type == "text":
            parts.append({"type": "text", "text": part.text or ""})
        else:
            parts.append(part.model_dump(exclude_none=True))
    return parts


def build_openai_messages(messages: Sequence[ChatMessage]) -> list[dict[str, Any]]:
    """Build Chat Completions API messages from internal messages."""
    openai_messages: list[dict[str, Any]] = []
    for message in messages:
        if isinstance(message.content, str) or message.role != "user":
            openai_messages.append({"role": message.role, "content": _text_of(message.content)})
        else:
            openai_messages.append({"role": message.role, "content": _openai_parts(message.content)})
    return openai_messages


def build_langchain_messages(messages: Sequence[ChatMessage]) -> list[BaseMessage]:
    """Convert internal messages to LangChain message objects for Bedrock."""
    lc_messages: list[BaseMessage] = []
    for message in messages:
        if message.role == "system":
            lc_messages.append(SystemMessage(content=_text_of(message.content)))
        elif message.role == "assistant":
            lc_messages.append(AIMessage(content=_text_of(message.content)))
        elif isinstance(message.content, str):
            lc_messages.append(HumanMessage(content=message.content))
        else:
            parts: list[str | dict[str, Any]] = [
                {"type": "text", "text": part.text or ""}
                if part.type == "text"
                else part.model_dump(exclude_none=True)
                for part in message.content
            ]
            lc_messages.append(HumanMessage(content=parts))
    return lc_messages
