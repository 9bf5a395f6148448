"""Provider interfaces and shared streaming primitives."""

from collections.abc import AsyncIterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from chat_stream.schemas import ChatMessage, ModelInfo, ProviderSetting, UsageStats


@dataclass(frozen=True)
class ProviderCredentials:
    api_keys: Mapping[str, str] = field(default_factory=dict)
    provider_settings: Mapping[str, ProviderSetting] = field(default_factory=dict)

    def api_key(self, provider: str, env: Mapping[str, str], env_key: str | None) -> str | None:
        """Caller-supplied key first, then the environment."""
        if self.api_keys.get(provider):
            return self.api_keys[provider]
        if env_key:
            return env.get(env_key) or None
        return None

    def settings_for(self, provider: str) -> ProviderSetting:
        return self.provider_settings.get(provider) or ProviderSetting()


@dataclass(frozen=True)
class StreamChunk:
    text: str = ""
    usage: UsageStats | None = None


class ChatModelHandle(Protocol):
    name: str

    def astream(
        self, messages: Sequence[ChatMessage], max_tokens: int, **options: Any
    ) -> AsyncIterator[StreamChunk]:
        """Stream completion chunks for ``messages``."""
        ...


class ProviderDescriptor(Protocol):
    name: str
    static_models: tuple[ModelInfo, ...]

    def get_model_instance(
        self, model: str, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> ChatModelHandle:
        """Create a callable model handle for ``model``."""
        ...

    async def fetch_dynamic_models(
        self, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> list[ModelInfo]:
        """Fetch the provider's live model list; may be empty."""
        ...
