"""Runtime infrastructure helpers for credentials, tracing, and provider wiring."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from langsmith.run_trees import get_cached_client

from chat_stream.config import StreamSettings
from chat_stream.constants import (
    AWS_REGION,
    LANGSMITH_API_KEY_PARAMETER_NAME,
    LANGSMITH_PROJECT,
    OPENAI_API_KEY_PARAMETER_NAME,
)
from chat_stream.model_resolver import ModelResolver
from chat_stream.orchestration.direct import DirectStreamOrchestrator
from chat_stream.orchestration.langgraph_flow import LangGraphStreamOrchestrator
from chat_stream.orchestration.pipeline import StreamPipeline
from chat_stream.prompt_assembler import PromptAssembler
from chat_stream.prompts import PromptLibrary
from chat_stream.providers.bedrock_provider import BedrockProvider
from chat_stream.providers.openai_provider import OpenAILikeProvider, OpenAIProvider
from chat_stream.providers.registry import ProviderRegistry
from chat_stream.services.chat_service import ChatService
from chat_stream.tokens import TiktokenCounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiCredentials:
    openai_api_key: str | None
    langsmith_api_key: str | None


def _get_secure_parameter(ssm_client: Any, parameter_name: str) -> str:
    result = ssm_client.get_parameter(Name=parameter_name, WithDecryption=True)
    value = result["Parameter"].get("Value")
    if not value:
        raise RuntimeError(f"SSM parameter {parameter_name} has no value")
    return value


def _get_optional_secure_parameter(ssm_client: Any, parameter_name: str) -> str | None:
    try:
        return _get_secure_parameter(ssm_client, parameter_name)
    except Exception:
        logger.warning(
            "Optional SSM parameter is unavailable; disabling dependent feature",
            extra={"parameter_name": parameter_name},
            exc_info=True,
        )
        return None


@lru_cache(maxsize=1)
def get_api_credentials() -> ApiCredentials:
    ssm_client = boto3.client("ssm", region_name=os.environ.get("AWS_REGION", AWS_REGION))
    return ApiCredentials(
        openai_api_key=_get_optional_secure_parameter(ssm_client, OPENAI_API_KEY_PARAMETER_NAME),
        langsmith_api_key=_get_optional_secure_parameter(
            ssm_client, LANGSMITH_API_KEY_PARAMETER_NAME
        ),
    )


def _configure_langsmith(langsmith_api_key: str | None) -> None:
    if not langsmith_api_key:
        os.environ.pop("LANGSMITH_TRACING", None)
        os.environ.pop("LANGSMITH_API_KEY", None)
        logger.info("LangSmith tracing disabled because API key is unavailable")
        return

    os.environ["LANGSMITH_TRACING"] = "true"
    os.environ["LANGSMITH_API_KEY"] = langsmith_api_key
    os.environ.setdefault("LANGSMITH_PROJECT", LANGSMITH_PROJECT)


@lru_cache(maxsize=1)
def ensure_langsmith_configured() -> None:
    """Configure LangSmith environment variables (called once via lru_cache)."""
    credentials = get_api_credentials()
    _configure_langsmith(credentials.langsmith_api_key)


def flush_langsmith_traces() -> None:
    if os.environ.get("LANGSMITH_TRACING", "").lower() != "true":
        return
    if not os.environ.get("LANGSMITH_API_KEY"):
        return
    try:
        get_cached_client().flush()
    except Exception:
        logger.warning("Failed to flush LangSmith traces", exc_info=True)


def get_server_env() -> dict[str, str]:
    """Process environment plus secrets resolved from SSM."""
    env = dict(os.environ)
    if not env.get("OPENAI_API_KEY"):
        openai_api_key = get_api_credentials().openai_api_key
        if openai_api_key:
            env["OPENAI_API_KEY"] = openai_api_key
    return env


def build_provider_registry(settings: StreamSettings) -> ProviderRegistry:
    return ProviderRegistry(
        [OpenAIProvider(), OpenAILikeProvider(), BedrockProvider()],
        default_provider=settings.default_provider,
    )


@lru_cache(maxsize=1)
def get_stream_settings() -> StreamSettings:
    return StreamSettings.from_env()


@lru_cache(maxsize=1)
def get_provider_registry() -> ProviderRegistry:
    return build_provider_registry(get_stream_settings())


def build_chat_service(
    registry: ProviderRegistry,
    settings: StreamSettings,
    env: dict[str, str],
    orchestration: str = "direct",
) -> ChatService:
    pipeline = StreamPipeline(
        resolver=ModelResolver(registry),
        assembler=PromptAssembler(PromptLibrary(), TiktokenCounter()),
        settings=settings,
    )
    if orchestration == "langgraph":
        orchestrator = LangGraphStreamOrchestrator(pipeline)
    else:
        orchestrator = DirectStreamOrchestrator(pipeline)
    return ChatService(orchestrator=orchestrator, env=env)


@lru_cache(maxsize=1)
def get_chat_service() -> ChatService:
    ensure_langsmith_configured()
    return build_chat_service(
        get_provider_registry(),
        get_stream_settings(),
        get_server_env(),
        orchestration=os.environ.get("CHAT_STREAM_ORCHESTRATION", "direct"),
    )
