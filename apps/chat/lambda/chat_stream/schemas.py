"""Pydantic schemas for the chat stream core."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import FileType, Role


class ContentPart(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None


class ToolInvocation(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    args: Any = None
    result: Any = None
    state: str = "result"


class RoutingOverride(BaseModel):
    model_config = ConfigDict(frozen=True)

    model: str
    provider: str


class ChatMessage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    role: Role
    content: str | list[ContentPart]
    tool_invocations: list[ToolInvocation] | None = Field(default=None, alias="toolInvocations")
    model: str | None = None
    routing_override: RoutingOverride | None = Field(default=None, alias="routingOverride")


class FileEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: FileType = "file"
    content: str = ""
    is_binary: bool = Field(default=False, alias="isBinary")


FileMap = dict[str, FileEntry | None]


class ModelInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    label: str = ""
    provider: str
    max_token_allowed: int | None = Field(default=None, alias="maxTokenAllowed")


class ProviderSetting(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    enabled: bool | None = None
    base_url: str | None = Field(default=None, alias="baseUrl")


class ChatStreamRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    messages: list[ChatMessage]
    files: FileMap | None = None
    context_files: FileMap | None = Field(default=None, alias="contextFiles")
    summary: str | None = None
    prompt_id: str | None = Field(default=None, alias="promptId")
    context_optimization: bool = Field(default=False, alias="contextOptimization")
    api_keys: dict[str, str] = Field(default_factory=dict, alias="apiKeys")
    provider_settings: dict[str, ProviderSetting] = Field(
        default_factory=dict, alias="providerSettings"
    )

    @field_validator("messages")
    @classmethod
    def validate_messages(cls, messages: list[ChatMessage]) -> list[ChatMessage]:
        if not messages:
            raise ValueError("messages must contain at least one message")
        return messages


class TokenStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    character_count: int = Field(alias="characterCount")
    token_count: int = Field(alias="tokenCount")
    input_cost: float | None = Field(default=None, alias="inputCost")
    output_cost: float | None = Field(default=None, alias="outputCost")


class UsageBreakdown(BaseModel):
    input: TokenStats
    output: TokenStats


class UsageStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")
    stats: UsageBreakdown | None = None


class StreamResponse(BaseModel):
    content: str | None = None
    usage: UsageStats | None = None


class PromptInfo(BaseModel):
    id: str
    label: str
    description: str
