"""Tests for HookService"""
import json

import pytest

from tree_manager.exceptions import HookError
from tree_manager.models.outcomes import FailureKind
from tree_manager.services.hook_service import HookService, run_shell


@pytest.fixture
def recorder():
    calls = []

    def executor(command, cwd):
        calls.append(command)
        return 0

    executor.calls = calls
    return executor


def write_hooks(root, hooks):
    (root / "post-hook.json").write_text(json.dumps({"hooks": hooks}))


class TestHookFile:
    """Test reading and writing post-hook.json."""

    def test_write_empty(self, temp_dir):
        path = HookService().write_empty(temp_dir)
        assert path == temp_dir / "post-hook.json"
        assert json.loads(path.read_text()) == {"hooks": []}

    def test_load_missing_file(self, temp_dir):
        assert HookService().load(temp_dir) is None

    def test_load_hooks(self, temp_dir):
        write_hooks(temp_dir, ["npm install", "cp ../.env ."])
        config = HookService().load(temp_dir)
        assert config.hooks == ["npm install", "cp ../.env ."]

    def test_non_list_hooks_means_none(self, temp_dir):
        (temp_dir / "post-hook.json").write_text('{"hooks": "npm install"}')
        assert HookService().load(temp_dir).hooks == []

    def test_invalid_json(self, temp_dir):
        (temp_dir / "post-hook.json").write_text("{not json")
        with pytest.raises(HookError):
            HookService().load(temp_dir)


class TestHookRun:
    """Test running hooks."""

    def test_runs_in_order(self, temp_dir, recorder):
        write_hooks(temp_dir, ["first", "second", "third"])
        assert HookService(executor=recorder).run(temp_dir, temp_dir) is None
        assert recorder.calls == ["first", "second", "third"]

    def test_stops_at_first_failure(self, temp_dir):
        write_hooks(temp_dir, ["ok", "broken", "never"])
        calls = []

        def executor(command, cwd):
            calls.append(command)
            return 1 if command == "broken" else 0

        failure = HookService(executor=executor).run(temp_dir, temp_dir)

        assert calls == ["ok", "broken"]
        assert failure.kind == FailureKind.ADVISORY
        assert failure.error.exit_code == 1
        assert failure.error.hook == "broken"

    def test_invalid_file_is_advisory(self, temp_dir, recorder):
        (temp_dir / "post-hook.json").write_text("[1, 2")
        failure = HookService(executor=recorder).run(temp_dir, temp_dir)
        assert failure is not None
        assert not failure.is_fatal
        assert recorder.calls == []

    def test_no_hook_file(self, temp_dir, recorder):
        assert HookService(executor=recorder).run(temp_dir, temp_dir) is None
        assert recorder.calls == []

    def test_shell_executor_runs_in_cwd(self, temp_dir):
        worktree = temp_dir / "main"
        worktree.mkdir()
        write_hooks(temp_dir, ["echo ran > marker.txt"])

        assert HookService().run(temp_dir, worktree) is None
        assert (worktree / "marker.txt").read_text().strip() == "ran"

    def test_shell_exit_code(self, temp_dir):
        assert run_shell("exit 3", temp_dir) == 3
