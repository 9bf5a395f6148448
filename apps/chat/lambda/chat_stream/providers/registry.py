"""Immutable registry of the configured providers.

The registry is built once at process start (see ``chat_stream.infra.runtime``) and is
only read afterwards; it is passed explicitly to the components that need it.
"""

from collections.abc import Iterable

from chat_stream.schemas import ModelInfo

from .base import ProviderDescriptor


class ProviderRegistry:
    def __init__(self, providers: Iterable[ProviderDescriptor], default_provider: str) -> None:
        self._providers: dict[str, ProviderDescriptor] = {}
        for provider in providers:
            self._providers[provider.name] = provider
        if default_provider not in self._providers:
            raise ValueError(f"Default provider {default_provider} is not registered")
        self._default_name = default_provider

    @property
    def default_provider(self) -> ProviderDescriptor:
        return self._providers[self._default_name]

    def get(self, name: str) -> ProviderDescriptor | None:
        return self._providers.get(name)

    def list_providers(self) -> list[ProviderDescriptor]:
        return list(self._providers.values())

    def static_models(self) -> list[ModelInfo]:
        return [model for provider in self._providers.values() for model in provider.static_models]
