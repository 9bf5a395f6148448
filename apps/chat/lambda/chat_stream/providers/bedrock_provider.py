"""Amazon Bedrock provider backed by LangChain's Converse chat model."""

import asyncio
import logging
from collections.abc import AsyncIterator, Callable, Mapping, Sequence
from typing import Any

import boto3
from langchain_aws import ChatBedrockConverse
from langchain_core.language_models import BaseChatModel

from chat_stream.constants import AWS_REGION
from chat_stream.message_mappers import build_langchain_messages
from chat_stream.schemas import ChatMessage, ModelInfo, UsageStats

from .base import ProviderCredentials, StreamChunk

logger = logging.getLogger(__name__)

ChatModelFactory = Callable[..., BaseChatModel]


def _chunk_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block) for block in content
        )
    return ""


class BedrockChatModel:
    def __init__(self, name: str, region_name: str, model_factory: ChatModelFactory) -> None:
        self.name = name
        self._region_name = region_name
        self._model_factory = model_factory

    async def astream(
        self, messages: Sequence[ChatMessage], max_tokens: int, **options: Any
    ) -> AsyncIterator[StreamChunk]:
        model = self._model_factory(
            model=self.name,
            region_name=self._region_name,
            max_tokens=max_tokens,
            **({"temperature": options["temperature"]} if "temperature" in options else {}),
        )
        async for chunk in model.astream(build_langchain_messages(messages)):
            usage = None
            if chunk.usage_metadata:
                usage = UsageStats(
                    prompt_tokens=chunk.usage_metadata.get("input_tokens", 0),
                    completion_tokens=chunk.usage_metadata.get("output_tokens", 0),
                    total_tokens=chunk.usage_metadata.get("total_tokens", 0),
                )
            text = _chunk_text(chunk.content)
            if text or usage is not None:
                yield StreamChunk(text=text, usage=usage)


class BedrockProvider:
    name = "AmazonBedrock"
    static_models: tuple[ModelInfo, ...] = (
        ModelInfo(
            name="global.anthropic.claude-sonnet-4-6",
            label="Claude Sonnet 4.6 (Bedrock)",
            provider="AmazonBedrock",
            max_token_allowed=8192,
        ),
        ModelInfo(
            name="global.anthropic.claude-haiku-4-5-20251001-v1:0",
            label="Claude Haiku 4.5 (Bedrock)",
            provider="AmazonBedrock",
            max_token_allowed=8192,
        ),
    )

    def __init__(
        self,
        model_factory: ChatModelFactory = ChatBedrockConverse,
        bedrock_client_factory: Callable[..., Any] | None = None,
    ) -> None:
        self._model_factory = model_factory
        self._bedrock_client_factory = bedrock_client_factory or (
            lambda region_name: boto3.client("bedrock", region_name=region_name)
        )

    def _region(self, env: Mapping[str, str]) -> str:
        return env.get("AWS_REGION") or AWS_REGION

    def get_model_instance(
        self, model: str, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> BedrockChatModel:
        return BedrockChatModel(model, self._region(env), self._model_factory)

    def _list_text_models(self, region_name: str) -> list[dict[str, Any]]:
        client = self._bedrock_client_factory(region_name=region_name)
        response = client.list_foundation_models(
            byOutputModality="TEXT", byInferenceType="ON_DEMAND"
        )
        return response.get("modelSummaries", [])

    async def fetch_dynamic_models(
        self, credentials: ProviderCredentials, env: Mapping[str, str]
    ) -> list[ModelInfo]:
        region_name = self._region(env)
        try:
            summaries = await asyncio.to_thread(self._list_text_models, region_name)
        except Exception:
            logger.warning(
                "Failed to fetch dynamic models",
                extra={"provider": self.name, "region": region_name},
                exc_info=True,
            )
            return []

        static_names = {model.name for model in self.static_models}
        return [
            ModelInfo(
                name=summary["modelId"],
                label=summary.get("modelName") or summary["modelId"],
                provider=self.name,
            )
            for summary in summaries
            if summary.get("modelId") and summary["modelId"] not in static_names
        ]
