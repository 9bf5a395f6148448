"""Runtime configuration for request assembly and usage accounting."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_INPUT_COST_PER_MILLION,
    DEFAULT_MODEL,
    DEFAULT_OUTPUT_COST_PER_MILLION,
    DEFAULT_PROVIDER,
    MAX_TOKENS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UsagePricing:
    """Per-million-token rates used for cost estimates."""

    input_cost_per_million: float = DEFAULT_INPUT_COST_PER_MILLION
    output_cost_per_million: float = DEFAULT_OUTPUT_COST_PER_MILLION

    def input_cost(self, tokens: int) -> float:
        return (tokens * self.input_cost_per_million) / 1_000_000

    def output_cost(self, tokens: int) -> float:
        return (tokens * self.output_cost_per_million) / 1_000_000


@dataclass(frozen=True)
class StreamSettings:
    default_provider: str = DEFAULT_PROVIDER
    default_model: str = DEFAULT_MODEL
    max_tokens: int = MAX_TOKENS
    pricing: UsagePricing = field(default_factory=UsagePricing)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StreamSettings":
        env = os.environ if environ is None else environ
        return cls(
            default_provider=env.get("CHAT_STREAM_DEFAULT_PROVIDER", DEFAULT_PROVIDER),
            default_model=env.get("CHAT_STREAM_DEFAULT_MODEL", DEFAULT_MODEL),
            max_tokens=_read_number(env, "CHAT_STREAM_MAX_TOKENS", MAX_TOKENS, int),
            pricing=UsagePricing(
                input_cost_per_million=_read_number(
                    env, "CHAT_STREAM_INPUT_COST_PER_MILLION", DEFAULT_INPUT_COST_PER_MILLION, float
                ),
                output_cost_per_million=_read_number(
                    env,
                    "CHAT_STREAM_OUTPUT_COST_PER_MILLION",
                    DEFAULT_OUTPUT_COST_PER_MILLION,
                    float,
                ),
            ),
        )


def _read_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(
            "Ignoring invalid numeric setting", extra={"setting": name, "value": raw}
        )
        return default
