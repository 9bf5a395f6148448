"""Orchestration interfaces for stream execution."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from chat_stream.providers.base import ProviderCredentials
from chat_stream.schemas import ChatMessage, FileMap
from chat_stream.transport import StreamHandle
from chat_stream.usage import StreamCallbacks


@dataclass(frozen=True)
class StreamContext:
    """Everything a single streaming request needs, built fresh per call."""

    messages: list[ChatMessage]
    credentials: ProviderCredentials = field(default_factory=ProviderCredentials)
    env: Mapping[str, str] = field(default_factory=dict)
    files: FileMap | None = None
    context_files: FileMap | None = None
    summary: str | None = None
    prompt_id: str | None = None
    context_optimization: bool = False
    callbacks: StreamCallbacks | None = None
    options: dict[str, Any] = field(default_factory=dict)


class StreamOrchestrator(Protocol):
    async def run(self, context: StreamContext) -> StreamHandle:
        """Route, resolve, assemble and dispatch a streaming completion."""
        ...
