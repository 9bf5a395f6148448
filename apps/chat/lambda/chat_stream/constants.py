"""Shared constants and literal types for the chat stream core."""

import re
from typing import Literal

OPENAI_API_KEY_PARAMETER_NAME = "/chat-app/openai-api-key"
LANGSMITH_API_KEY_PARAMETER_NAME = "/chat-app/langsmith-api-key"
AWS_REGION = "ap-northeast-1"
LANGSMITH_PROJECT = "chat-stream"

WORK_DIR_NAME = "project"
WORK_DIR = f"/home/{WORK_DIR_NAME}"
MODIFICATIONS_TAG_NAME = "code_file_modifications"
DEFAULT_PROMPT_ID = "default"

DEFAULT_PROVIDER = "OpenAI"
DEFAULT_MODEL = "gpt-4o-mini"
MAX_TOKENS = 8000

DEFAULT_INPUT_COST_PER_MILLION = 0.14
DEFAULT_OUTPUT_COST_PER_MILLION = 0.28

MODEL_DIRECTIVE_PATTERN = re.compile(r"^\[Model: (.*?)\]\n\n")
PROVIDER_DIRECTIVE_PATTERN = re.compile(r"\[Provider: (.*?)\]\n\n")

ARTIFACT_TAG = "codeArtifact"
ACTION_TAG = "codeAction"

ALLOWED_HTML_ELEMENTS = (
    "a",
    "b",
    "blockquote",
    "br",
    "code",
    "dd",
    "del",
    "details",
    "div",
    "dl",
    "dt",
    "em",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "hr",
    "i",
    "ins",
    "kbd",
    "li",
    "ol",
    "p",
    "pre",
    "q",
    "rp",
    "rt",
    "ruby",
    "s",
    "samp",
    "source",
    "span",
    "strike",
    "strong",
    "sub",
    "summary",
    "sup",
    "table",
    "tbody",
    "td",
    "tfoot",
    "th",
    "thead",
    "tr",
    "ul",
    "var",
)

IGNORE_PATTERNS = (
    "node_modules/**",
    ".git/**",
    "dist/**",
    "build/**",
    ".next/**",
    "coverage/**",
    ".cache/**",
    ".vscode/**",
    ".idea/**",
    "**/*.log",
    "**/.DS_Store",
    "**/npm-debug.log*",
    "**/yarn-debug.log*",
    "**/yarn-error.log*",
    "**/*lock.json",
    "**/*lock.yaml",
)

Role = Literal["system", "user", "assistant"]
FileType = Literal["file", "folder"]
