"""Resolution of a provider and model name into a concrete model."""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field

from .errors import NoModelsAvailableError
from .providers.base import ProviderCredentials, ProviderDescriptor
from .providers.registry import ProviderRegistry
from .schemas import ModelInfo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedModel:
    provider: ProviderDescriptor
    model: ModelInfo
    requested_model: str
    fallback_used: bool = False


@dataclass
class ResolutionContext:
    """Per-call lookup state; the dynamic list is fetched at most once."""

    provider: ProviderDescriptor
    model_name: str
    credentials: ProviderCredentials
    env: Mapping[str, str] = field(default_factory=dict)
    _candidates: list[ModelInfo] | None = field(default=None, init=False, repr=False)

    async def candidate_models(self) -> list[ModelInfo]:
        if self._candidates is None:
            dynamic = await self.provider.fetch_dynamic_models(self.credentials, self.env)
            self._candidates = [*self.provider.static_models, *dynamic]
        return self._candidates


ResolutionStrategy = Callable[[ResolutionContext], Awaitable[ModelInfo | None]]


def _find(models, name: str) -> ModelInfo | None:
    return next((model for model in models if model.name == name), None)


async def match_static(context: ResolutionContext) -> ModelInfo | None:
    return _find(context.provider.static_models, context.model_name)


async def match_combined(context: ResolutionContext) -> ModelInfo | None:
    return _find(await context.candidate_models(), context.model_name)


async def first_available(context: ResolutionContext) -> ModelInfo:
    models = await context.candidate_models()
    if not models:
        raise NoModelsAvailableError(context.provider.name)
    fallback = models[0]
    logger.warning(
        "MODEL [%s] not found in provider [%s]. Falling back to first model. %s",
        context.model_name,
        context.provider.name,
        fallback.name,
        extra={
            "requested_model": context.model_name,
            "provider": context.provider.name,
            "fallback_model": fallback.name,
        },
    )
    return fallback


DEFAULT_STRATEGIES: tuple[ResolutionStrategy, ...] = (match_static, match_combined, first_available)


class ModelResolver:
    def __init__(
        self,
        registry: ProviderRegistry,
        strategies: tuple[ResolutionStrategy, ...] = DEFAULT_STRATEGIES,
    ) -> None:
        self._registry = registry
        self._strategies = strategies

    def resolve_provider(self, provider_name: str) -> ProviderDescriptor:
        provider = self._registry.get(provider_name)
        if provider is None:
            provider = self._registry.default_provider
            logger.info(
                "Unknown provider requested; using default provider",
                extra={"requested_provider": provider_name, "provider": provider.name},
            )
        return provider

    async def resolve(
        self,
        provider_name: str,
        model_name: str,
        credentials: ProviderCredentials,
        env: Mapping[str, str] | None = None,
    ) -> ResolvedModel:
        provider = self.resolve_provider(provider_name)
        context = ResolutionContext(
            provider=provider,
            model_name=model_name,
            credentials=credentials,
            env=env or {},
        )
        for strategy in self._strategies:
            model = await strategy(context)
            if model is not None:
                return ResolvedModel(
                    provider=provider,
                    model=model,
                    requested_model=model_name,
                    fallback_used=model.name != model_name,
                )
        raise NoModelsAvailableError(provider.name)
