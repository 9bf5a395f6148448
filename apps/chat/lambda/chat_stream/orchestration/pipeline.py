"""Steps shared by the stream orchestration strategies."""

import logging

from chat_stream.config import StreamSettings
from chat_stream.model_resolver import ModelResolver, ResolvedModel
from chat_stream.prompt_assembler import AssembledPrompt, PromptAssembler
from chat_stream.routing import RoutedMessages, route_messages
from chat_stream.schemas import ChatMessage
from chat_stream.transport import StreamHandle, Transport, stream_text
from chat_stream.usage import UsageContext, wrap_callbacks

from .base import StreamContext

logger = logging.getLogger(__name__)


class StreamPipeline:
    def __init__(
        self,
        resolver: ModelResolver,
        assembler: PromptAssembler,
        transport: Transport = stream_text,
        settings: StreamSettings | None = None,
    ) -> None:
        self._resolver = resolver
        self._assembler = assembler
        self._transport = transport
        self._settings = settings or StreamSettings()

    def route(self, context: StreamContext) -> RoutedMessages:
        return route_messages(
            context.messages,
            default_model=self._settings.default_model,
            default_provider=self._settings.default_provider,
            context_optimization=context.context_optimization,
        )

    async def resolve(self, context: StreamContext, routed: RoutedMessages) -> ResolvedModel:
        return await self._resolver.resolve(
            routed.provider, routed.model, context.credentials, context.env
        )

    def assemble(self, context: StreamContext, routed: RoutedMessages) -> AssembledPrompt:
        return self._assembler.assemble(
            routed.messages,
            prompt_id=context.prompt_id,
            files=context.files,
            context_files=context.context_files,
            summary=context.summary,
            context_optimization=context.context_optimization,
        )

    def max_tokens_for(self, resolved: ResolvedModel) -> int:
        return resolved.model.max_token_allowed or self._settings.max_tokens

    async def dispatch(
        self, context: StreamContext, resolved: ResolvedModel, prompt: AssembledPrompt
    ) -> StreamHandle:
        messages = [ChatMessage(role="system", content=prompt.system_prompt), *prompt.messages]
        usage_context = UsageContext(
            system_prompt_tokens=prompt.token_count,
            last_message=context.messages[-1] if context.messages else None,
            pricing=self._settings.pricing,
        )
        model = resolved.provider.get_model_instance(
            resolved.model.name, context.credentials, context.env
        )

        logger.info(
            "Sending llm call to %s with model %s",
            resolved.provider.name,
            resolved.model.name,
            extra={
                "provider": resolved.provider.name,
                "model": resolved.model.name,
                "message_count": len(messages),
                "system_prompt_tokens": prompt.token_count,
            },
        )
        return await self._transport(
            model,
            messages,
            self.max_tokens_for(resolved),
            wrap_callbacks(context.callbacks, usage_context),
            **context.options,
        )
