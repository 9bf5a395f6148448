"""OpenAI and OpenAI-compatible providers."""

import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any

from langsmith import traceable
from openai import AsyncOpenAI

from chat_stream.errors import BadRequestError
from chat_stream.message_mappers import build_openai_messages
from chat_stream.schemas import ChatMessage, ModelInfo, UsageStats

from .base import ProviderCredentials, StreamChunk

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., AsyncOpenAI]

CHAT_MODEL_PREFIXES = ("gpt-", "o1", "o3", "o4", "chatgpt-")
DYNAMIC_MAX_TOKENS = 8000


@traceable(run_type="llm", name="openai.chat.completions.create")
async def _create_completion_stream(client: AsyncOpenAI, request_params: dict[str, Any]) -> Any:
    return await client.chat.completions.create(**request_params)


class OpenAIChatModel:
    def __init__(self, name: str, client: AsyncOpenAI) -> None:
        self.name = name
        self._client = client

    async def astream(
        self, messages: Sequence[ChatMessage], max_tokens: int, **options: Any
    ) -> AsyncIterator[StreamChunk]:
        request_params: dict[str, Any] = {
            **options,
            "model": self.name,
            "messages": build_openai_messages(messages),
            "max_tokens": max_tokens,
            "stream": True,
            "stream_options": {"include_usage": True},
        }
        stream = await _create_completion_stream(self._client, request_params)
        async for chunk in stream:
            text = chunk.choices[0].delta.content if chunk.choices else None
            usage = None
            if chunk.usage is not None:
                usage = UsageStats(
                    prompt_tokens=chunk.usage.prompt_tokens or 0,
                    completion_tokens=chunk.usage.completion_tokens or 0,
                    total_tokens=chunk.usage.total_tokens or 0,
                )
            if text or usage is not None:
                yield StreamChunk(text=text or "", usage=usage)


class OpenAIProvider:
    name = "OpenAI"
    api_key_env = "OPENAI_API_KEY"
    base_url_env: str | None = None
    static_models: tuple[ModelInfo, ...] = (
        ModelInfo(name="gpt-4o", label="GPT-4o", provider="OpenAI", max_token_allowed=8000),
        ModelInfo(name="gpt-4o-mini", label="GPT-4o Mini", provider="OpenAI", max_token_allowed=8000),
        ModelInfo(name="gpt-4.1", label="GPT-4.1", provider="OpenAI", max_token_allowed=32768),
        ModelInfo(name="gpt-4.1-mini", label="GPT-4.1 Mini", provider="OpenAI", max_token_allowed=32768),
    )

    def __init__(self, client_factory: ClientFactory = AsyncOpenAI) -> None:
        self._client_factory = client_factory

    def _base_url(self, credentials: ProviderCredentials, env: Mapping[str, str]) -> str | None:
        base_url = credentials.settings_for(self.name).base_url
        if not base_url and self.base_url_env:
            base_url = env.get(self.base_url_env)
        return base_url or None

    def _client(self, credentials: ProviderCredentials, env: Mapping[str, str]) -> AsyncOpenAI:
        api_key = credentials.api_key(self.name, env, self.api_key_env)
        if not api_key:
            raise BadRequestError(f"Missing API key for {self.name} provider")
        base_url = self._base_url(credentials, env)
        if base_url:
            return self._client_factory(api_key=api_key, base_url=base_url)
        return self._client_factory(api_key=api_key)

    def get_model_instance(
        self, model: str, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> OpenAIChatModel:
        return OpenAIChatModel(model, self._client(credentials, env))

    def _include_model(self, model_id: str) -> bool:
        return model_id.startswith(CHAT_MODEL_PREFIXES)

    async def fetch_dynamic_models(
        self, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> list[ModelInfo]:
        try:
            client = self._client(credentials, env)
            static_names = {model.name for model in self.static_models}
            models = []
            async for model in client.models.list():
                if model.id in static_names or not self._include_model(model.id):
                    continue
                models.append(
                    ModelInfo(
                        name=model.id,
                        label=model.id,
                        provider=self.name,
                        max_token_allowed=DYNAMIC_MAX_TOKENS,
                    )
                )
        except Exception:
            logger.warning(
                "Failed to fetch dynamic models", extra={"provider": self.name}, exc_info=True
            )
            return []
        logger.info(
            "Fetched dynamic models", extra={"provider": self.name, "model_count": len(models)}
        )
        return models


class OpenAILikeProvider(OpenAIProvider):
    """Any server exposing the OpenAI API at a configurable base URL."""

    name = "OpenAILike"
    api_key_env = "OPENAI_LIKE_API_KEY"
    base_url_env = "OPENAI_LIKE_API_BASE_URL"
    static_models: tuple[ModelInfo, ...] = ()

    def _client(self, credentials: ProviderCredentials, env: Mapping[str, str]) -> AsyncOpenAI:
        if not self._base_url(credentials, env):
            raise BadRequestError(f"Missing base URL for {self.name} provider")
        return super()._client(credentials, env)

    def _include_model(self, model_id: str) -> bool:
        return True
