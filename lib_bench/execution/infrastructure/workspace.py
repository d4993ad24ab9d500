"""Filesystem side of an attempt: sandbox HOME, working directory, config and context files.

Every function here is synchronous; the executor runs them off the event loop.
"""

import contextlib
import json
import shutil
import time
import uuid
from pathlib import Path

from lib_bench.execution.domain.observer import ExecutionObserver
from lib_bench.execution.domain.sandbox import Sandbox
from lib_bench.execution.infrastructure.errors import ConfigTemplateError
from lib_bench.task.domain.task import Task

MODEL_PLACEHOLDER = "$MODEL"
SKILLS_DIR_PLACEHOLDER = "$SKILLS_DIR"
WORK_DIR_CONFIG_NAME = "opencode.json"

_HOME_CONFIG_PATH = Path(".config") / "opencode" / "opencode.json"
_HOME_AUTH_PATH = Path(".local") / "share" / "opencode" / "auth.json"

# Bare global config so nothing from the real HOME leaks into a condition.
_HOME_CONFIG = {
    "$schema": "https://opencode.ai/config.json",
    "mcp": {},
    "plugin": [],
    "permission": {"bash": "allow", "edit": "allow", "write": "allow"},
}


def _unique_suffix() -> str:
    return uuid.uuid4().hex[:6]


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def create_sandbox_home(
    base_dir: Path,
    auth_file: Path | None,
    skills_source: Path | None,
) -> Sandbox:
    """
    Create a fresh isolated HOME under base_dir.

    The auth file copy is best-effort: a missing file means the agent is
    authenticated through the environment instead. Every subdirectory of
    skills_source is copied into ``<home>/skills``.
    """
    home = base_dir / f"home-{_epoch_ms()}-{_unique_suffix()}"
    config_path = home / _HOME_CONFIG_PATH
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps(_HOME_CONFIG, indent="\t"), encoding="utf-8")

    if auth_file is not None:
        auth_dest = home / _HOME_AUTH_PATH
        with contextlib.suppress(OSError):
            auth_dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(auth_file.expanduser(), auth_dest)

    skills_dir = _copy_skills(home=home, source=skills_source)
    return Sandbox(home=home, skills_dir=skills_dir)


def _copy_skills(home: Path, source: Path | None) -> Path | None:
    if source is None:
        return None
    try:
        skills = sorted(p for p in source.iterdir() if p.is_dir())
    except OSError:
        return None
    if not skills:
        return None

    dest = home / "skills"
    for skill in skills:
        shutil.copytree(skill, dest / skill.name)
    return dest


def create_work_dir(
    base_dir: Path,
    task_id: str,
    condition: str,
    repetition_index: int,
) -> Path:
    """Create ``{ms}-{task}-{condition}-{rep}-{token}``; never reuses an existing directory."""
    stamp = _epoch_ms()
    token = _unique_suffix()
    work_dir = base_dir / f"{stamp}-{task_id}-{condition}-{repetition_index}-{token}"
    work_dir.mkdir(parents=True)
    return work_dir


def inject_config(
    work_dir: Path,
    template: Path,
    model: str,
    skills_dir: Path | None,
    observer: ExecutionObserver,
) -> Path:
    """
    Resolve placeholders in the condition template and write it into work_dir.

    Without a skills directory the template's ``skills`` section is dropped so
    no unresolved placeholder reaches the agent. A template that is not valid
    JSON is written unchanged and reported.

    Raises:
        ConfigTemplateError: if the template cannot be read.
    """
    try:
        resolved = template.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigTemplateError(path=template, reason=str(exc)) from exc

    resolved = resolved.replace(MODEL_PLACEHOLDER, model)
    if skills_dir is not None:
        resolved = resolved.replace(SKILLS_DIR_PLACEHOLDER, str(skills_dir))
    else:
        try:
            parsed = json.loads(resolved)
        except json.JSONDecodeError as exc:
            observer.config_template_malformed(path=str(template), reason=str(exc))
        else:
            if isinstance(parsed, dict) and "skills" in parsed:
                del parsed["skills"]
                resolved = json.dumps(parsed, indent="\t")

    dest = work_dir / WORK_DIR_CONFIG_NAME
    dest.write_text(resolved, encoding="utf-8")
    return dest


def inject_context(work_dir: Path, task: Task) -> None:
    """Write the task's starter manifest and code files into work_dir."""
    if task.context is None:
        return
    if task.context.package_json:
        (work_dir / "package.json").write_text(
            task.context.package_json, encoding="utf-8"
        )
    for filename, content in (task.context.code or {}).items():
        path = work_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def remove_dirs(paths: list[Path], observer: ExecutionObserver) -> None:
    """Best-effort removal; a failure is reported and never raised."""
    for path in paths:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            observer.cleanup_failed(path=str(path), reason=str(exc))
