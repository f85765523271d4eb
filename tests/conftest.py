"""Pytest configuration and fixtures."""

import shutil
import subprocess
from pathlib import Path

import pytest

from hookdeploy.vcs.git_runner import CommandResult, ExternalCommandFailure, GitRunner


FOREIGN_HOOK = "#!/bin/sh\n# hand written by a developer\nexit 0\n"


def write_hook(directory: Path, name: str, content: str = "#!/bin/sh\nexit 0\n", executable: bool = True) -> Path:
    """Writes a hook script into directory (created if needed)."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(content)
    if executable:
        path.chmod(0o755)
    return path


class FakeGitRunner(GitRunner):
    """GitRunner that records argv and keeps git config in memory."""

    def __init__(self, cwd, config=None, fail_set=False):
        super().__init__(cwd)
        self.calls = []
        self.config = dict(config or {})
        self.fail_set = fail_set

    def run(self, argv, check=True):
        argv = [str(arg) for arg in argv]
        self.calls.append(argv)
        args = argv[1:]

        if args[:3] == ["config", "--local", "--get"]:
            value = self.config.get(args[3])
            if value is None:
                result = CommandResult(argv, 1)
            else:
                result = CommandResult(argv, 0, value + "\n")
        elif args[:2] == ["config", "--local"] and len(args) == 4:
            if self.fail_set:
                result = CommandResult(argv, 255, "", "error: could not lock config file")
            else:
                self.config[args[2]] = args[3]
                result = CommandResult(argv, 0)
        else:
            result = CommandResult(argv, 0)

        if check and not result.ok:
            raise ExternalCommandFailure(result)
        return result

    @property
    def set_calls(self):
        return [c for c in self.calls if c[1:3] == ["config", "--local"] and c[3] != "--get"]


@pytest.fixture
def repo(tmp_path):
    """Working directory with a bare-bones .git directory (no git binary needed)."""
    repo_dir = tmp_path / "project"
    (repo_dir / ".git" / "hooks").mkdir(parents=True)
    return repo_dir


@pytest.fixture
def hooks_dir(repo):
    return repo / ".git" / "hooks"


@pytest.fixture
def source_dir(repo):
    """Default source directory of the project (git-hooks/)."""
    directory = repo / "git-hooks"
    directory.mkdir()
    return directory


@pytest.fixture
def fake_runner(repo):
    return FakeGitRunner(repo)


@pytest.fixture
def temp_git_repo(tmp_path):
    """Cria repositório git temporário."""
    if shutil.which("git") is None:
        pytest.skip("git not available")

    repo_dir = tmp_path / "test_repo"
    repo_dir.mkdir()

    subprocess.run(["git", "init"], cwd=repo_dir, check=True, capture_output=True)
    subprocess.run(
        ["git", "config", "user.email", "test@example.com"],
        cwd=repo_dir,
        check=True
    )
    subprocess.run(
        ["git", "config", "user.name", "Test User"],
        cwd=repo_dir,
        check=True
    )

    return repo_dir
