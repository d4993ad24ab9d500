"""Tests for sandbox HOME, working directory and config/context injection."""

import json
from pathlib import Path

import pytest

from lib_bench.execution.domain.sandbox import AttemptResources, Sandbox
from lib_bench.execution.infrastructure.errors import ConfigTemplateError
from lib_bench.execution.infrastructure.workspace import (
    create_sandbox_home,
    create_work_dir,
    inject_config,
    inject_context,
    remove_dirs,
)
from tests.execution.fake_observer import FakeExecutionObserver
from tests.task.task_factory import make_task


class TestCreateSandboxHome:
    def test_writes_bare_global_config(self, tmp_path: Path) -> None:
        sandbox = create_sandbox_home(tmp_path, auth_file=None, skills_source=None)

        config = json.loads(
            (sandbox.home / ".config" / "opencode" / "opencode.json").read_text()
        )
        assert config["mcp"] == {}
        assert config["plugin"] == []
        assert sandbox.home.name.startswith("home-")
        assert sandbox.skills_dir is None

    def test_copies_auth_file_when_present(self, tmp_path: Path) -> None:
        auth = tmp_path / "auth.json"
        auth.write_text('{"token": "t"}')

        sandbox = create_sandbox_home(tmp_path, auth_file=auth, skills_source=None)

        copied = sandbox.home / ".local" / "share" / "opencode" / "auth.json"
        assert copied.read_text() == '{"token": "t"}'

    def test_missing_auth_file_is_tolerated(self, tmp_path: Path) -> None:
        sandbox = create_sandbox_home(
            tmp_path, auth_file=tmp_path / "missing.json", skills_source=None
        )

        assert sandbox.home.is_dir()

    def test_copies_skill_directories(self, tmp_path: Path) -> None:
        source = tmp_path / "skills-src"
        (source / "nia").mkdir(parents=True)
        (source / "nia" / "SKILL.md").write_text("# Nia")
        (source / "stray.txt").write_text("ignored")

        sandbox = create_sandbox_home(tmp_path, auth_file=None, skills_source=source)

        assert sandbox.skills_dir == sandbox.home / "skills"
        assert (sandbox.skills_dir / "nia" / "SKILL.md").read_text() == "# Nia"
        assert not (sandbox.skills_dir / "stray.txt").exists()

    def test_empty_skills_source_gives_no_skills_dir(self, tmp_path: Path) -> None:
        source = tmp_path / "empty"
        source.mkdir()

        sandbox = create_sandbox_home(tmp_path, auth_file=None, skills_source=source)

        assert sandbox.skills_dir is None

    def test_every_call_gets_a_fresh_home(self, tmp_path: Path) -> None:
        first = create_sandbox_home(tmp_path, auth_file=None, skills_source=None)
        second = create_sandbox_home(tmp_path, auth_file=None, skills_source=None)

        assert first.home != second.home


class TestCreateWorkDir:
    def test_name_carries_identity(self, tmp_path: Path) -> None:
        work_dir = create_work_dir(tmp_path, "task-a", "nia", 2)

        assert work_dir.is_dir()
        assert "-task-a-nia-2-" in work_dir.name

    def test_same_item_never_shares_a_directory(self, tmp_path: Path) -> None:
        first = create_work_dir(tmp_path, "task-a", "nia", 0)
        second = create_work_dir(tmp_path, "task-a", "nia", 0)

        assert first != second


class TestInjectConfig:
    def _template(self, tmp_path: Path, content: str) -> Path:
        path = tmp_path / "template.json"
        path.write_text(content)
        return path

    def test_replaces_placeholders(self, tmp_path: Path) -> None:
        template = self._template(
            tmp_path, '{"model": "$MODEL", "skills": {"paths": ["$SKILLS_DIR"]}}'
        )
        work_dir = tmp_path / "work"
        work_dir.mkdir()

        dest = inject_config(
            work_dir,
            template,
            model="anthropic/claude-test",
            skills_dir=Path("/sandbox/skills"),
            observer=FakeExecutionObserver(),
        )

        written = json.loads(dest.read_text())
        assert dest == work_dir / "opencode.json"
        assert written == {
            "model": "anthropic/claude-test",
            "skills": {"paths": ["/sandbox/skills"]},
        }

    def test_drops_skills_section_without_skills_dir(self, tmp_path: Path) -> None:
        template = self._template(
            tmp_path, '{"model": "$MODEL", "skills": {"paths": ["$SKILLS_DIR"]}}'
        )

        dest = inject_config(
            tmp_path,
            template,
            model="m",
            skills_dir=None,
            observer=FakeExecutionObserver(),
        )

        written = dest.read_text()
        assert "$SKILLS_DIR" not in written
        assert json.loads(written) == {"model": "m"}

    def test_malformed_template_written_unchanged_and_reported(
        self, tmp_path: Path
    ) -> None:
        template = self._template(tmp_path, '{"model": "$MODEL", oops')
        observer = FakeExecutionObserver()

        dest = inject_config(
            tmp_path, template, model="m", skills_dir=None, observer=observer
        )

        assert dest.read_text() == '{"model": "m", oops'
        assert len(observer.malformed_templates) == 1
        assert observer.malformed_templates[0]["path"] == str(template)

    def test_unreadable_template_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigTemplateError):
            inject_config(
                tmp_path,
                tmp_path / "missing.json",
                model="m",
                skills_dir=None,
                observer=FakeExecutionObserver(),
            )


class TestInjectContext:
    def test_writes_manifest_and_code_files(self, tmp_path: Path) -> None:
        task = make_task(
            code={"App.tsx": "app", "lib/util.ts": "util"},
            package_json='{"name": "x"}',
        )

        inject_context(tmp_path, task)

        assert (tmp_path / "package.json").read_text() == '{"name": "x"}'
        assert (tmp_path / "App.tsx").read_text() == "app"
        assert (tmp_path / "lib" / "util.ts").read_text() == "util"

    def test_no_context_writes_nothing(self, tmp_path: Path) -> None:
        inject_context(tmp_path, make_task())

        assert list(tmp_path.iterdir()) == []


class TestRemoveAttemptDirs:
    def test_removes_both_directories(self, tmp_path: Path) -> None:
        home = tmp_path / "home"
        work = tmp_path / "work"
        (home / "nested").mkdir(parents=True)
        work.mkdir()
        resources = AttemptResources(sandbox=Sandbox(home=home), work_dir=work)

        remove_dirs(resources.paths(), FakeExecutionObserver())

        assert not home.exists()
        assert not work.exists()

    def test_already_missing_is_not_a_failure(self, tmp_path: Path) -> None:
        observer = FakeExecutionObserver()
        resources = AttemptResources(
            sandbox=Sandbox(home=tmp_path / "gone-home"), work_dir=tmp_path / "gone"
        )

        remove_dirs(resources.paths(), observer)

        assert observer.cleanup_failures == []

    def test_failure_is_reported_not_raised(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")
        observer = FakeExecutionObserver()
        resources = AttemptResources(
            sandbox=Sandbox(home=tmp_path / "gone-home"), work_dir=not_a_dir
        )

        remove_dirs(resources.paths(), observer)

        assert len(observer.cleanup_failures) == 1
        assert observer.cleanup_failures[0]["path"] == str(not_a_dir)
