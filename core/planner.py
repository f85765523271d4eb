"""
hookdeploy - Deployment Planner
Inspeciona o estado atual do repositório e decide a ação de cada hook.
"""

import logging
import os
import re
import stat
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..vcs.git_runner import GitError, GitRunner
from .models import (
    HOOKS_PATH_ENTRY_NAME,
    CatalogEntry,
    Configuration,
    ErrorKind,
    HookDeployError,
    HookPlanEntry,
    PlanAction,
    Strategy,
)


logger = logging.getLogger(__name__)


# Linha que marca um script como gerenciado pelo hookdeploy
MANAGED_MARKER = "# hookdeploy: managed"
_MANAGED_MARKER_RE = re.compile(r"^\s*#\s*hookdeploy:\s*managed\s*$", re.IGNORECASE | re.MULTILINE)


class RepositoryNotFound(HookDeployError):
    """Diretório não é um repositório git."""
    pass


# =============================================================================
# Repository helpers
# =============================================================================

def find_hooks_dir(working_dir: Union[str, Path]) -> Path:
    """
    Encontra o diretório de hooks do repositório (suporta worktrees).

    Não cria o diretório; o installer faz isso na hora de instalar.

    Raises:
        RepositoryNotFound: Se não houver .git no working dir
    """
    working_dir = Path(working_dir)
    git_dir = working_dir / ".git"

    if git_dir.is_dir():
        return git_dir / "hooks"

    # Worktree / submodule: arquivo .git apontando para o git dir real
    if git_dir.is_file():
        try:
            git_content = git_dir.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise RepositoryNotFound(f"Erro ao ler {git_dir}: {e}") from e

        if git_content.startswith("gitdir:"):
            real_git_dir = Path(git_content.split(":", 1)[1].strip())
            if not real_git_dir.is_absolute():
                real_git_dir = working_dir / real_git_dir
            return _common_git_dir(real_git_dir) / "hooks"

    raise RepositoryNotFound(
        f"Não é um repositório git: {working_dir}\n"
        "Execute 'git init' primeiro."
    )


def _common_git_dir(git_dir: Path) -> Path:
    """
    Git dir compartilhado de um worktree (arquivo commondir).

    O Git lê os hooks do common dir; submodules não têm commondir e
    usam o próprio git dir.
    """
    commondir_file = git_dir / "commondir"
    if not commondir_file.is_file():
        return git_dir

    try:
        common = Path(commondir_file.read_text(encoding="utf-8").strip())
    except OSError as e:
        raise RepositoryNotFound(f"Erro ao ler {commondir_file}: {e}") from e

    if not common.is_absolute():
        common = git_dir / common
    return common


def has_managed_marker(content: str) -> bool:
    """Verifica se o conteúdo tem a linha de marcação do hookdeploy."""
    return bool(_MANAGED_MARKER_RE.search(content))


def _same_path(link: Path, source: Path) -> bool:
    """True se o symlink resolve para o mesmo arquivo de origem."""
    try:
        return os.path.realpath(link) == os.path.realpath(source)
    except (OSError, ValueError):
        return False


def _is_executable(path: Path) -> bool:
    return bool(path.stat().st_mode & stat.S_IXUSR)


# =============================================================================
# Planner
# =============================================================================

class DeploymentPlanner:
    """
    Decide a ação (install, overwrite, skip, fail) de cada hook.

    Não altera nada: só lê o filesystem e, na estratégia hooks-path,
    a config local do Git.
    """

    def __init__(self, working_dir: Union[str, Path], runner: Optional[GitRunner] = None):
        """
        Args:
            working_dir: Raiz do working tree do repositório
            runner: Runner de comandos git (default: GitRunner no working dir)
        """
        self.working_dir = Path(working_dir)
        self.runner = runner or GitRunner(self.working_dir)

    def plan(self, entries: Sequence[CatalogEntry], config: Configuration) -> List[HookPlanEntry]:
        """
        Monta o plano de deploy.

        Args:
            entries: Saída do catálogo (ignorada na estratégia hooks-path)
            config: Configuração resolvida

        Returns:
            Uma entrada por hook, ou uma única entrada para hooks-path

        Raises:
            RepositoryNotFound: Se o working dir não for um repositório git
        """
        if config.strategy == Strategy.HOOKS_PATH:
            return [self._plan_hooks_path(config)]

        hooks_dir = find_hooks_dir(self.working_dir)
        if entries:
            self._warn_if_shadowed(hooks_dir)
        return [self._plan_hook(entry, config.strategy, hooks_dir) for entry in entries]

    def _warn_if_shadowed(self, hooks_dir: Path):
        """Avisa quando um core.hooksPath local faz o Git ignorar hooks_dir."""
        try:
            current = self.runner.get_config("core.hooksPath")
        except GitError as e:
            logger.debug("Could not read core.hooksPath: %s", e)
            return

        if current:
            logger.warning(
                "core.hooksPath=%s está definido: o Git ignora os hooks instalados em %s",
                current,
                hooks_dir,
            )

    def _plan_hook(self, entry: CatalogEntry, strategy: Strategy, hooks_dir: Path) -> HookPlanEntry:
        target = hooks_dir / entry.hook_name

        def make(action: PlanAction, reason: Optional[str] = None,
                 error_kind: Optional[ErrorKind] = None) -> HookPlanEntry:
            logger.debug("Plan %s: %s (%s)", entry.hook_name, action.value, reason or "-")
            return HookPlanEntry(
                hook_name=entry.hook_name,
                strategy=strategy,
                action=action,
                source_path=entry.source_path,
                target_path=target,
                conflict_reason=reason,
                error_kind=error_kind,
            )

        if not entry.source_exists:
            return make(
                PlanAction.FAIL,
                f"Script de origem não encontrado: {entry.source_path}",
                ErrorKind.SOURCE_MISSING,
            )

        # Symlink quebrado ainda "existe" para is_symlink()
        if target.is_symlink():
            if strategy == Strategy.SYMLINK and _same_path(target, entry.source_path):
                return make(PlanAction.SKIP, "Symlink já aponta para a origem")
            return make(PlanAction.OVERWRITE, f"Symlink existente -> {os.readlink(target)}")

        if not target.exists():
            return make(PlanAction.INSTALL)

        if not target.is_file():
            return make(
                PlanAction.FAIL,
                f"{target} existe e não é um arquivo regular",
                ErrorKind.HOOK_CONFLICT,
            )

        try:
            target_bytes = target.read_bytes()
            source_bytes = entry.source_path.read_bytes()
            target_executable = _is_executable(target)
        except OSError as e:
            return make(PlanAction.FAIL, f"Erro ao ler hook existente: {e}", ErrorKind.FILE_SYSTEM_ERROR)

        if target_bytes == source_bytes:
            if strategy == Strategy.COPY and target_executable:
                return make(PlanAction.SKIP, "Cópia idêntica à origem")
            return make(PlanAction.OVERWRITE, "Conteúdo idêntico à origem")

        if has_managed_marker(target_bytes.decode("utf-8", errors="replace")):
            return make(PlanAction.OVERWRITE, "Hook gerenciado pelo hookdeploy (versão anterior)")

        return make(
            PlanAction.FAIL,
            f"Hook existente não gerenciado pelo hookdeploy: {target}",
            ErrorKind.HOOK_CONFLICT,
        )

    def _plan_hooks_path(self, config: Configuration) -> HookPlanEntry:
        value = config.hooks_path_value
        action = PlanAction.INSTALL
        reason = None

        try:
            current = self.runner.get_config("core.hooksPath")
        except GitError as e:
            # O installer reporta a falha real ao tentar gravar
            logger.debug("Could not read core.hooksPath: %s", e)
            current = None

        if current == value:
            action, reason = PlanAction.SKIP, f"core.hooksPath já é {value}"
        elif current:
            action, reason = PlanAction.OVERWRITE, f"core.hooksPath atual: {current}"

        logger.debug("Plan %s: %s (%s)", HOOKS_PATH_ENTRY_NAME, action.value, reason or "-")

        return HookPlanEntry(
            hook_name=HOOKS_PATH_ENTRY_NAME,
            strategy=Strategy.HOOKS_PATH,
            action=action,
            hooks_path_value=value,
            conflict_reason=reason,
        )


def plan_deployment(
    entries: Sequence[CatalogEntry],
    config: Configuration,
    working_dir: Union[str, Path],
    runner: Optional[GitRunner] = None,
) -> List[HookPlanEntry]:
    """Helper: monta o plano sem instanciar o planner manualmente."""
    return DeploymentPlanner(working_dir, runner).plan(entries, config)


__all__ = [
    "MANAGED_MARKER",
    "RepositoryNotFound",
    "DeploymentPlanner",
    "find_hooks_dir",
    "has_managed_marker",
    "plan_deployment",
]
