"""Token counting backed by tiktoken."""

import logging
from typing import Protocol

import tiktoken

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "cl100k_base"


class TokenCounter(Protocol):
    def count(self, text: str) -> int:
        """Return the number of tokens in ``text``."""
        ...


class TiktokenCounter:
    def __init__(self, encoding_name: str = DEFAULT_ENCODING) -> None:
        self._encoding_name = encoding_name
        self._encoding: tiktoken.Encoding | None = None

    def _get_encoding(self) -> tiktoken.Encoding:
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self._encoding_name)
            logger.info("Loaded tokenizer", extra={"encoding": self._encoding_name})
        return self._encoding

    def count(self, text: str) -> int:
        if not text:
            return 0
        return len(self._get_encoding().encode(text, disallowed_special=()))
