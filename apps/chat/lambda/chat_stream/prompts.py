"""System prompt templates."""

from collections.abc import Callable
from dataclasses import dataclass

from .constants import (
    ACTION_TAG,
    ALLOWED_HTML_ELEMENTS,
    ARTIFACT_TAG,
    MODIFICATIONS_TAG_NAME,
    WORK_DIR,
)
from .schemas import PromptInfo


@dataclass(frozen=True)
class PromptContext:
    cwd: str = WORK_DIR
    allowed_html_elements: tuple[str, ...] = ALLOWED_HTML_ELEMENTS
    modification_tag_name: str = MODIFICATIONS_TAG_NAME


def _allowed_elements(context: PromptContext) -> str:
    return ", ".join(f"<{element}>" for element in context.allowed_html_elements)


def get_system_prompt(context: PromptContext = PromptContext()) -> str:
    """Baseline prompt used when no library template applies."""
    return f"""You are an expert AI assistant and senior software developer working inside a \
sandboxed project environment.

<system_constraints>
  The current working directory is `{context.cwd}`.
  Only text-based files can be created or edited. Binary files cannot be executed.
  Prefer existing project tooling over installing new global dependencies.
</system_constraints>

<message_formatting_info>
  You can make the output pretty by using only the following available HTML elements: \
{_allowed_elements(context)}
</message_formatting_info>

<diff_spec>
  For user-made file modifications, a `<{context.modification_tag_name}>` section will appear \
at the start of the user message. It contains either `<diff>` or `<file>` elements for each \
modified file. Always use the latest file modifications when making edits.
</diff_spec>

<artifact_info>
  Provide a single, comprehensive artifact per response wrapped in `<{ARTIFACT_TAG}>` with a \
unique `id` and a `title`.
  Each step is a `<{ACTION_TAG}>` with a `type` of `shell`, `file` or `start`.
  For `file` actions add a `filePath` attribute relative to `{context.cwd}` and always write \
the complete, updated file contents. Never use placeholders such as "// rest of the code \
remains the same".
  Order actions so that dependencies are installed before the files that use them.
</artifact_info>

Never use the word "artifact" when talking to the user. Be concise and do not explain unless \
asked. Think first, then reply with the artifact containing every step needed.
"""


def get_optimized_prompt(context: PromptContext = PromptContext()) -> str:
    return f"""You are a senior software engineer working in `{context.cwd}`.

Reply with a `<{ARTIFACT_TAG}>` holding ordered `<{ACTION_TAG}>` steps (`shell`, `file`, \
`start`). File actions carry a `filePath` and the full file content.
User edits appear inside `<{context.modification_tag_name}>`; treat them as the current state.
Formatting may use only: {_allowed_elements(context)}.
Keep explanations short.
"""


def get_discuss_prompt(context: PromptContext = PromptContext()) -> str:
    return f"""You are a technical advisor helping plan changes to the project in \
`{context.cwd}`.

Do not write code or emit `<{ARTIFACT_TAG}>` blocks. Explain options, trade-offs and next \
steps in plain prose. Formatting may use only: {_allowed_elements(context)}.
"""


@dataclass(frozen=True)
class PromptTemplate:
    label: str
    description: str
    render: Callable[[PromptContext], str]


class PromptLibrary:
    def __init__(self, templates: dict[str, PromptTemplate] | None = None) -> None:
        self._templates = dict(DEFAULT_TEMPLATES if templates is None else templates)

    def list_prompts(self) -> list[PromptInfo]:
        return [
            PromptInfo(id=prompt_id, label=template.label, description=template.description)
            for prompt_id, template in self._templates.items()
        ]

    def get(self, prompt_id: str, context: PromptContext) -> str | None:
        template = self._templates.get(prompt_id)
        if template is None:
            return None
        return template.render(context)


DEFAULT_TEMPLATES: dict[str, PromptTemplate] = {
    "default": PromptTemplate(
        label="Default Prompt",
        description="Full instructions for building and editing projects",
        render=get_system_prompt,
    ),
    "optimized": PromptTemplate(
        label="Optimized Prompt",
        description="Shorter instructions that spend fewer tokens",
        render=get_optimized_prompt,
    ),
    "discuss": PromptTemplate(
        label="Discuss Prompt",
        description="Planning conversation without code changes",
        render=get_discuss_prompt,
    ),
}
