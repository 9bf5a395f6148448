"""Normalization of provider usage into system-prompt-free, cost-annotated figures."""

from collections.abc import Callable
from dataclasses import dataclass

from .config import UsagePricing
from .schemas import ChatMessage, StreamResponse, TokenStats, UsageBreakdown, UsageStats

CompletionCallback = Callable[[str], None]
ResponseCallback = Callable[[StreamResponse], None]


@dataclass(frozen=True)
class StreamCallbacks:
    on_completion: CompletionCallback | None = None
    on_response: ResponseCallback | None = None


@dataclass(frozen=True)
class UsageContext:
    system_prompt_tokens: int
    last_message: ChatMessage | None = None
    pricing: UsagePricing = UsagePricing()


def extract_message_text(message: ChatMessage | None) -> str:
    if message is None:
        return ""
    if isinstance(message.content, str):
        return message.content
    if isinstance(message.content, list):
        for part in message.content:
            if part.type == "text":
                return part.text or ""
    return ""


def normalize_usage_stats(
    usage: UsageStats,
    context: UsageContext,
    message_text: str = "",
    completion_text: str = "",
) -> UsageStats:
    prompt_tokens = max(0, (usage.prompt_tokens or 0) - context.system_prompt_tokens)
    completion_tokens = usage.completion_tokens or 0
    return UsageStats(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
        stats=UsageBreakdown(
            input=TokenStats(
                character_count=len(message_text),
                token_count=prompt_tokens,
                input_cost=context.pricing.input_cost(prompt_tokens),
            ),
            output=TokenStats(
                character_count=len(completion_text),
                token_count=completion_tokens,
                output_cost=context.pricing.output_cost(completion_tokens),
            ),
        ),
    )


def normalize_usage(response: StreamResponse, context: UsageContext) -> StreamResponse:
    """Replace raw usage with figures that exclude the system prompt.

    Responses without usage are returned unchanged.
    """
    if response.usage is None:
        return response
    usage = normalize_usage_stats(
        response.usage,
        context,
        message_text=extract_message_text(context.last_message),
        completion_text=response.content or "",
    )
    return response.model_copy(update={"usage": usage})


def wrap_callbacks(callbacks: StreamCallbacks | None, context: UsageContext) -> StreamCallbacks:
    callbacks = callbacks or StreamCallbacks()

    def on_completion(completion: str) -> None:
        if callbacks.on_completion is not None:
            callbacks.on_completion(completion)

    def on_response(response: StreamResponse) -> None:
        normalized = normalize_usage(response, context)
        if callbacks.on_response is not None:
            callbacks.on_response(normalized)

    return StreamCallbacks(on_completion=on_completion, on_response=on_response)
