"""Streaming completion transport."""

import logging
import time
from collections.abc import AsyncIterator, Sequence
from typing import Any, Protocol

from .providers.base import ChatModelHandle
from .schemas import ChatMessage, StreamResponse, UsageStats
from .usage import StreamCallbacks

logger = logging.getLogger(__name__)


class StreamHandle:
    """Async iterator over text deltas of a single completion.

    Once the model stream ends, ``on_completion`` receives the full text and
    ``on_response`` receives the response with the last reported usage.
    """

    def __init__(
        self,
        model: ChatModelHandle,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        callbacks: StreamCallbacks,
        options: dict[str, Any],
    ) -> None:
        self.model_name = model.name
        self._model = model
        self._messages = list(messages)
        self._max_tokens = max_tokens
        self._callbacks = callbacks
        self._options = options
        self._started = False
        self.completion = ""
        self.usage: UsageStats | None = None

    def __aiter__(self) -> AsyncIterator[str]:
        if self._started:
            raise RuntimeError("Stream has already been consumed")
        self._started = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        start = time.time()
        parts: list[str] = []
        async for chunk in self._model.astream(self._messages, self._max_tokens, **self._options):
            if chunk.usage is not None:
                self.usage = chunk.usage
            if chunk.text:
                parts.append(chunk.text)
                yield chunk.text

        self.completion = "".join(parts)
        logger.info(
            "Stream completed",
            extra={
                "model": self.model_name,
                "duration_ms": int((time.time() - start) * 1000),
                "response_length": len(self.completion),
                "usage_prompt_tokens": self.usage.prompt_tokens if self.usage else None,
                "usage_completion_tokens": self.usage.completion_tokens if self.usage else None,
            },
        )
        if self._callbacks.on_completion is not None:
            self._callbacks.on_completion(self.completion)
        if self._callbacks.on_response is not None:
            self._callbacks.on_response(StreamResponse(content=self.completion, usage=self.usage))

    async def text(self) -> str:
        async for _ in self:
            pass
        return self.completion


class Transport(Protocol):
    async def __call__(
        self,
        model: ChatModelHandle,
        messages: Sequence[ChatMessage],
        max_tokens: int,
        callbacks: StreamCallbacks,
        **options: Any,
    ) -> StreamHandle:
        """Start a streaming completion."""
        ...


async def stream_text(
    model: ChatModelHandle,
    messages: Sequence[ChatMessage],
    max_tokens: int,
    callbacks: StreamCallbacks,
    **options: Any,
) -> StreamHandle:
    return StreamHandle(model, messages, max_tokens, callbacks, options)
