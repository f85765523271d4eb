"""Tests for the command line interface."""

import json
import subprocess

from typer.testing import CliRunner

from conftest import FOREIGN_HOOK, write_hook

from hookdeploy.__version__ import __version__
from hookdeploy.cli import app, build_caller_options


runner = CliRunner()
HOOK = "#!/bin/sh\necho checking\n"


def test_version():
    """Test --version prints the version."""
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"hookdeploy version {__version__}" in result.output


def test_build_caller_options_only_sets_given_flags():
    """Test unset flags stay undefined so the manifest is not overridden."""
    layer = build_caller_options()

    assert layer.symlink is None
    assert layer.no_symlink is None
    assert layer.strategy() is None

    layer = build_caller_options(no_symlink=True, hooks=["pre-commit"], source_dir="hooks")

    assert layer.no_symlink is True
    assert layer.hooks == ("pre-commit",)
    assert layer.source_directory == "hooks"


def test_deploy_symlink(repo, source_dir, hooks_dir):
    """Test default deploy creates symlinks and exits 0."""
    write_hook(source_dir, "pre-commit", HOOK)

    result = runner.invoke(app, ["deploy", "-C", str(repo)])

    assert result.exit_code == 0, result.output
    assert (hooks_dir / "pre-commit").is_symlink()
    assert "Deploy concluído" in result.output


def test_deploy_json(repo, source_dir, hooks_dir):
    """Test JSON output of a copy deploy."""
    write_hook(source_dir, "pre-push", HOOK)

    result = runner.invoke(app, ["deploy", "-C", str(repo), "--no-symlink", "-f", "json"])

    data = json.loads(result.output)
    assert result.exit_code == 0
    assert data["strategy"] == "copy"
    assert data["per_hook"][0]["hook"] == "pre-push"
    assert data["per_hook"][0]["outcome"] == "installed"
    assert not (hooks_dir / "pre-push").is_symlink()


def test_deploy_conflict_exit_code(repo, source_dir, hooks_dir):
    """Test conflicts give a non-zero exit code."""
    write_hook(source_dir, "commit-msg", HOOK)
    write_hook(hooks_dir, "commit-msg", FOREIGN_HOOK)

    result = runner.invoke(
        app, ["deploy", "-C", str(repo), "-S", "--hook", "commit-msg", "-f", "compact"]
    )

    assert result.exit_code == 1
    assert "[CONFLICT] commit-msg" in result.output
    assert (hooks_dir / "commit-msg").read_text() == FOREIGN_HOOK


def test_deploy_reads_manifest(repo, source_dir, hooks_dir):
    """Test the manifest extra section in the working dir is applied."""
    (repo / "composer.json").write_text(json.dumps({
        "name": "acme/app",
        "extra": {"acme/app": {"no-symlink": True}},
    }))
    write_hook(source_dir, "pre-commit", HOOK)

    result = runner.invoke(app, ["deploy", "-C", str(repo), "-f", "compact"])

    assert result.exit_code == 0, result.output
    assert (hooks_dir / "pre-commit").is_file()
    assert not (hooks_dir / "pre-commit").is_symlink()


def test_deploy_options_override_manifest(repo, source_dir, hooks_dir):
    """Test CLI flags win over the manifest."""
    (repo / "composer.json").write_text(json.dumps({
        "name": "acme/app",
        "extra": {"acme/app": {"no-symlink": True}},
    }))
    write_hook(source_dir, "pre-commit", HOOK)

    result = runner.invoke(app, ["deploy", "-C", str(repo), "--symlink"])

    assert result.exit_code == 0, result.output
    assert (hooks_dir / "pre-commit").is_symlink()


def test_deploy_contradictory_flags(repo):
    """Test contradictory strategies exit with the config error code."""
    result = runner.invoke(app, ["deploy", "-C", str(repo), "-s", "-S"])

    assert result.exit_code == 2
    assert "mutuamente exclusivos" in result.output


def test_deploy_unknown_hook(repo):
    """Test an unknown --hook value is a config error."""
    result = runner.invoke(app, ["deploy", "-C", str(repo), "--hook", "pre-comit"])

    assert result.exit_code == 2
    assert "hook desconhecido" in result.output


def test_deploy_missing_manifest(repo):
    """Test an explicit manifest that does not exist is an error."""
    result = runner.invoke(app, ["deploy", "-C", str(repo), "-m", str(repo / "nope.json")])

    assert result.exit_code == 2
    assert "Manifest não encontrado" in result.output


def test_deploy_not_a_repository(tmp_path):
    """Test deploying outside a repository exits 2."""
    write_hook(tmp_path / "git-hooks", "pre-commit", HOOK)

    result = runner.invoke(app, ["deploy", "-C", str(tmp_path)])

    assert result.exit_code == 2
    assert "Não é um repositório git" in result.output


def test_deploy_unknown_format(repo):
    """Test an unknown output format is rejected."""
    result = runner.invoke(app, ["deploy", "-C", str(repo), "-f", "xml"])

    assert result.exit_code == 2
    assert "Formato desconhecido" in result.output


def test_deploy_hooks_path(temp_git_repo):
    """Test -p sets core.hooksPath in the repository."""
    result = runner.invoke(app, ["deploy", "-C", str(temp_git_repo), "-p", "/custom/hooks", "-f", "compact"])

    assert result.exit_code == 0, result.output
    configured = subprocess.run(
        ["git", "config", "--local", "--get", "core.hooksPath"],
        cwd=temp_git_repo,
        capture_output=True,
        text=True,
        check=True,
    )
    assert configured.stdout.strip() == "/custom/hooks"


def test_status_does_not_deploy(repo, source_dir, hooks_dir):
    """Test status shows the plan and changes nothing."""
    write_hook(source_dir, "pre-commit", HOOK)

    result = runner.invoke(app, ["status", "-C", str(repo), "-f", "json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["plan"][0]["hook"] == "pre-commit"
    assert data["plan"][0]["action"] == "install"
    assert list(hooks_dir.iterdir()) == []


def test_hooks_command():
    """Test the recognized hooks are listed."""
    result = runner.invoke(app, ["hooks"])

    assert result.exit_code == 0
    assert "pre-commit" in result.output
    assert "post-index-change" in result.output


def test_deploy_help_explains_exit_codes():
    """Test the deploy help documents the exit codes."""
    result = runner.invoke(app, ["deploy", "--help"])

    assert result.exit_code == 0
    assert "Exit code" in result.output
    assert "distinguir" in result.output
