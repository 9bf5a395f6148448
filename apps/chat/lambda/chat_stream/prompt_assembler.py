"""Assembly of the system prompt sent with each request."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .constants import DEFAULT_PROMPT_ID
from .files_context import create_files_context, get_file_paths
from .prompts import PromptContext, PromptLibrary, get_system_prompt
from .schemas import ChatMessage, FileMap
from .tokens import TokenCounter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssembledPrompt:
    system_prompt: str
    messages: list[ChatMessage]
    token_count: int


def _files_block(file_paths: Sequence[str], code_context: str) -> str:
    paths = "\n".join(file_paths)
    return f"""
Below are all the files present in the project:
---
{paths}
---

Below is the context loaded into context buffer for you to have knowledge of and might need \
changes to fulfill current user request.
CONTEXT BUFFER:
---
{code_context}
---
"""


def _summary_block(summary: str) -> str:
    return f"""
Below is the chat history till now
CHAT SUMMARY:
---
{summary}
---
"""


class PromptAssembler:
    def __init__(
        self,
        library: PromptLibrary,
        tokenizer: TokenCounter,
        context: PromptContext = PromptContext(),
        path_lister: Callable[[FileMap], list[str]] = get_file_paths,
        files_serializer: Callable[[FileMap, bool], str] = create_files_context,
    ) -> None:
        self._library = library
        self._tokenizer = tokenizer
        self._context = context
        self._path_lister = path_lister
        self._files_serializer = files_serializer

    def base_prompt(self, prompt_id: str | None) -> str:
        prompt = self._library.get(prompt_id or DEFAULT_PROMPT_ID, self._context)
        if prompt is None:
            logger.info(
                "Prompt template not found; using baseline prompt",
                extra={"prompt_id": prompt_id},
            )
            return get_system_prompt(self._context)
        return prompt

    def assemble(
        self,
        messages: Sequence[ChatMessage],
        *,
        prompt_id: str | None = None,
        files: FileMap | None = None,
        context_files: FileMap | None = None,
        summary: str | None = None,
        context_optimization: bool = False,
    ) -> AssembledPrompt:
        system_prompt = self.base_prompt(prompt_id)
        processed = list(messages)

        if files is not None and context_files is not None and context_optimization:
            code_context = self._files_serializer(context_files, True)
            system_prompt += _files_block(self._path_lister(files), code_context)

            if summary:
                system_prompt += _summary_block(summary)
                if processed:
                    processed = [processed[-1]]

        return AssembledPrompt(
            system_prompt=system_prompt,
            messages=processed,
            token_count=self._tokenizer.count(system_prompt),
        )
