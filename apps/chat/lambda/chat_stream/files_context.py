"""Project file listing and context-buffer serialization."""

from collections.abc import Iterable
from fnmatch import fnmatch

from .constants import ACTION_TAG, ARTIFACT_TAG, IGNORE_PATTERNS, WORK_DIR
from .schemas import FileMap


def _relative_path(path: str, work_dir: str = WORK_DIR) -> str:
    prefix = work_dir.rstrip("/") + "/"
    return path[len(prefix) :] if path.startswith(prefix) else path


def is_ignored(relative_path: str, patterns: Iterable[str] = IGNORE_PATTERNS) -> bool:
    for pattern in patterns:
        if fnmatch(relative_path, pattern):
            return True
        if pattern.startswith("**/") and fnmatch(relative_path, pattern[3:]):
            return True
        if pattern.endswith("/**") and relative_path == pattern[:-3]:
            return True
    return False


def get_file_paths(files: FileMap, work_dir: str = WORK_DIR) -> list[str]:
    """List every known path that is not ignored, exactly as keyed in ``files``."""
    return [path for path in files if not is_ignored(_relative_path(path, work_dir))]


def create_files_context(
    files: FileMap, use_full_path: bool = False, work_dir: str = WORK_DIR
) -> str:
    """Serialize text files into a single artifact block for the context buffer."""
    actions = []
    for path, entry in files.items():
        if entry is None or entry.type != "file" or entry.is_binary:
            continue
        relative = _relative_path(path, work_dir)
        if is_ignored(relative):
            continue
        file_path = path if use_full_path else relative
        actions.append(f'<{ACTION_TAG} type="file" filePath="{file_path}">{entry.content}</{ACTION_TAG}>')

    body = "\n".join(actions)
    return f'<{ARTIFACT_TAG} id="code-content" title="Code Content" >\n{body}\n</{ARTIFACT_TAG}>'
