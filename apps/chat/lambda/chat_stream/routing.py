"""Extraction of model/provider routing directives from chat messages."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .actions import simplify_actions
from .constants import MODEL_DIRECTIVE_PATTERN, PROVIDER_DIRECTIVE_PATTERN
from .schemas import ChatMessage, ContentPart, RoutingOverride

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutedMessages:
    messages: list[ChatMessage]
    model: str
    provider: str


def _strip_directives(text: str) -> str:
    return PROVIDER_DIRECTIVE_PATTERN.sub("", MODEL_DIRECTIVE_PATTERN.sub("", text, count=1), count=1)


def parse_routing_directive(
    text: str, default_model: str, default_provider: str
) -> tuple[RoutingOverride, str]:
    """Return the directive carried by ``text`` and the text without it.

    Fields that are missing or malformed take the given defaults; this never raises.
    """
    model_match = MODEL_DIRECTIVE_PATTERN.search(text)
    provider_match = PROVIDER_DIRECTIVE_PATTERN.search(text)
    model = model_match.group(1).strip() if model_match else ""
    provider = provider_match.group(1).strip() if provider_match else ""
    if ("[Model:" in text and not model) or ("[Provider:" in text and not provider):
        logger.info("Ignoring malformed routing directive; using defaults")

    override = RoutingOverride(
        model=model or default_model,
        provider=provider or default_provider,
    )
    return override, _strip_directives(text)


def _first_text(content: str | list[ContentPart]) -> str | None:
    if isinstance(content, str):
        return content
    for part in content:
        if part.type == "text":
            return part.text or ""
    return None


def _has_directive(text: str) -> bool:
    return bool(MODEL_DIRECTIVE_PATTERN.search(text) or PROVIDER_DIRECTIVE_PATTERN.search(text))


def route_user_message(
    message: ChatMessage, default_model: str, default_provider: str
) -> ChatMessage:
    """Copy ``message`` with directives moved from its text into ``routing_override``."""
    text = _first_text(message.content) or ""
    if not _has_directive(text) and message.routing_override is not None:
        return message.model_copy()

    override, _ = parse_routing_directive(text, default_model, default_provider)
    if isinstance(message.content, str):
        content: str | list[ContentPart] = _strip_directives(message.content)
    else:
        content = [
            part.model_copy(update={"text": _strip_directives(part.text or "")})
            if part.type == "text"
            else part
            for part in message.content
        ]
    return message.model_copy(
        update={"content": content, "routing_override": override, "model": override.model}
    )


def _simplify_assistant(message: ChatMessage, simplifier: Callable[[str], str]) -> ChatMessage:
    if isinstance(message.content, str):
        return message.model_copy(update={"content": simplifier(message.content)})
    content = [
        part.model_copy(update={"text": simplifier(part.text or "")})
        if part.type == "text"
        else part
        for part in message.content
    ]
    return message.model_copy(update={"content": content})


def route_messages(
    messages: Sequence[ChatMessage],
    *,
    default_model: str,
    default_provider: str,
    context_optimization: bool = False,
    simplifier: Callable[[str], str] = simplify_actions,
) -> RoutedMessages:
    current = RoutingOverride(model=default_model, provider=default_provider)
    routed: list[ChatMessage] = []

    for message in messages:
        if message.role == "user":
            routed_message = route_user_message(message, default_model, default_provider)
            current = routed_message.routing_override or current
            routed.append(routed_message)
        elif message.role == "assistant":
            if context_optimization:
                routed.append(_simplify_assistant(message, simplifier))
            else:
                routed.append(message.model_copy())
        else:
            routed.append(message)

    return RoutedMessages(messages=routed, model=current.model, provider=current.provider)
