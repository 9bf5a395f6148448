"""Application service for streaming chat requests."""

import logging
from collections.abc import Mapping
from typing import Any

from chat_stream.orchestration.base import StreamContext, StreamOrchestrator
from chat_stream.providers.base import ProviderCredentials
from chat_stream.schemas import ChatStreamRequest
from chat_stream.transport import StreamHandle
from chat_stream.usage import StreamCallbacks

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(
        self,
        orchestrator: StreamOrchestrator,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._env = env or {}

    async def stream_chat(
        self,
        request: ChatStreamRequest,
        callbacks: StreamCallbacks | None = None,
        options: dict[str, Any] | None = None,
    ) -> StreamHandle:
        logger.info(
            "Chat request received",
            extra={
                "message_count": len(request.messages),
                "context_optimization": request.context_optimization,
            },
        )
        context = StreamContext(
            messages=request.messages,
            credentials=ProviderCredentials(
                api_keys=request.api_keys,
                provider_settings=request.provider_settings,
            ),
            env=self._env,
            files=request.files,
            context_files=request.context_files,
            summary=request.summary,
            prompt_id=request.prompt_id,
            context_optimization=request.context_optimization,
            callbacks=callbacks,
            options=options or {},
        )
        return await self._orchestrator.run(context)
