"""Recovering the agent's source files from its working directory and its response text."""

import json
import re
from pathlib import Path

from lib_bench.execution.domain.events import StreamEvent
from lib_bench.execution.infrastructure.stream_parser import extract_text

CODE_FILE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

_SKIPPED_NAMES = frozenset(
    {
        "node_modules",
        ".opencode",
        "opencode.json",
        "package.json",
        "bun.lock",
        "package-lock.json",
    }
)

_CODE_BLOCK = re.compile(
    r"```(?:typescript|tsx|ts|jsx|js|javascript)?\s*(?:\n|$)([\s\S]*?)```"
)
_FILENAME_HINT = re.compile(
    r"(?:file[:\s]+|filename[:\s]+|in\s+)`?([^\s`]+\.(?:tsx?|jsx?))`?\s*$",
    re.IGNORECASE,
)


def response_text(raw_output: str, events: list[StreamEvent]) -> str:
    """
    Reconstruct the agent's answer text.

    Text events are preferred. Without any, a single ``{"response": ...}``
    document is accepted, and output that is not JSON at all is used verbatim.
    """
    text = extract_text(events)
    if text:
        return text
    try:
        parsed = json.loads(raw_output)
    except json.JSONDecodeError:
        return raw_output
    if isinstance(parsed, dict) and isinstance(parsed.get("response"), str):
        return parsed["response"]
    return ""


def extract_code_from_response(text: str) -> dict[str, str]:
    """
    Pull fenced code blocks out of text, keyed by filename.

    A filename mentioned right before a block ("file: x.ts", "in `x.tsx`")
    names it; otherwise blocks are named ``extracted-{n}.ts``. Empty blocks
    are ignored.
    """
    files: dict[str, str] = {}
    index = 0
    for match in _CODE_BLOCK.finditer(text):
        code = match.group(1).strip()
        if not code:
            continue
        hint = _FILENAME_HINT.search(text[: match.start()])
        filename = hint.group(1) if hint else f"extracted-{index}.ts"
        files[filename] = code
        index += 1
    return files


def extract_code_from_disk(work_dir: Path) -> dict[str, str]:
    """Read source files the agent wrote, keyed by POSIX path relative to work_dir."""
    files: dict[str, str] = {}
    _scan(directory=work_dir, root=work_dir, files=files)
    return files


def _scan(directory: Path, root: Path, files: dict[str, str]) -> None:
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return

    for entry in entries:
        if entry.name in _SKIPPED_NAMES or entry.name.startswith("."):
            continue
        try:
            if entry.is_dir():
                _scan(directory=entry, root=root, files=files)
            elif entry.is_file() and entry.name.endswith(CODE_FILE_EXTENSIONS):
                files[entry.relative_to(root).as_posix()] = entry.read_text(
                    encoding="utf-8"
                )
        except (OSError, UnicodeDecodeError):
            continue


def merge_extracted_files(
    disk_files: dict[str, str],
    response_files: dict[str, str],
) -> dict[str, str]:
    """Disk files win on a name collision; response files fill the remaining names."""
    return {**response_files, **disk_files}
