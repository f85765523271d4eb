"""
hookdeploy - Hook Installer
Aplica as entradas do plano: symlink, cópia ou core.hooksPath.
"""

import logging
import shutil
import stat
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..core.models import (
    ErrorKind,
    HookOutcome,
    HookPlanEntry,
    OutcomeStatus,
    PlanAction,
    Strategy,
)
from ..vcs.git_runner import GitError, GitRunner


logger = logging.getLogger(__name__)


# Status final quando a ação de install/overwrite dá certo
_DONE_STATUS = {
    PlanAction.INSTALL: OutcomeStatus.INSTALLED,
    PlanAction.OVERWRITE: OutcomeStatus.OVERWRITTEN,
}

# Status final de uma entrada que já veio do planner como FAIL
_FAIL_STATUS = {
    ErrorKind.HOOK_CONFLICT: OutcomeStatus.CONFLICT,
    ErrorKind.SOURCE_MISSING: OutcomeStatus.SOURCE_MISSING,
    ErrorKind.FILE_SYSTEM_ERROR: OutcomeStatus.FAILED,
    ErrorKind.EXTERNAL_COMMAND_FAILURE: OutcomeStatus.FAILED,
}

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


# =============================================================================
# Hook Installer Class
# =============================================================================

class HookInstaller:
    """Executa o plano, uma entrada por vez, sem abortar nos erros por hook."""

    def __init__(self, working_dir: Union[str, Path], runner: Optional[GitRunner] = None):
        """
        Inicializa o instalador.

        Args:
            working_dir: Raiz do working tree do repositório
            runner: Runner de comandos git (usado só na estratégia hooks-path)
        """
        self.working_dir = Path(working_dir)
        self.runner = runner or GitRunner(self.working_dir)

    def apply(self, entry: HookPlanEntry) -> HookOutcome:
        """
        Aplica uma entrada do plano.

        Args:
            entry: Entrada produzida pelo planner

        Returns:
            HookOutcome com o status e a mensagem
        """
        if entry.action == PlanAction.SKIP:
            return HookOutcome(entry.hook_name, OutcomeStatus.UNCHANGED, entry.conflict_reason)

        if entry.action == PlanAction.FAIL:
            return HookOutcome(
                entry.hook_name,
                _FAIL_STATUS[entry.error_kind],
                entry.conflict_reason,
                entry.error_kind,
            )

        try:
            if entry.strategy == Strategy.HOOKS_PATH:
                message = self._set_hooks_path(entry)
            elif entry.strategy == Strategy.SYMLINK:
                message = self._install_symlink(entry)
            else:
                message = self._install_copy(entry)

        except GitError as e:
            # Inclui ExternalCommandFailure; sem retry
            logger.debug("External command failed for %s: %s", entry.hook_name, e)
            return HookOutcome(
                entry.hook_name,
                OutcomeStatus.FAILED,
                str(e),
                ErrorKind.EXTERNAL_COMMAND_FAILURE,
            )
        except OSError as e:
            logger.debug("Filesystem error for %s: %s", entry.hook_name, e)
            return HookOutcome(
                entry.hook_name,
                OutcomeStatus.FAILED,
                f"Erro de filesystem: {e}",
                ErrorKind.FILE_SYSTEM_ERROR,
            )

        logger.info("%s: %s", entry.hook_name, message)
        return HookOutcome(entry.hook_name, _DONE_STATUS[entry.action], message)

    def apply_all(self, entries: Sequence[HookPlanEntry]) -> List[HookOutcome]:
        """Aplica todas as entradas em ordem."""
        return [self.apply(entry) for entry in entries]

    # =========================================================================
    # Helpers Privados
    # =========================================================================

    def _prepare_target(self, target: Path):
        """Garante o diretório de hooks e remove o alvo existente."""
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.is_symlink() or target.exists():
            target.unlink()

    def _install_symlink(self, entry: HookPlanEntry) -> str:
        source = entry.source_path.resolve()
        target = entry.target_path

        self._prepare_target(target)
        target.symlink_to(source)

        return f"Symlink {target} -> {source}"

    def _install_copy(self, entry: HookPlanEntry) -> str:
        source = entry.source_path
        target = entry.target_path

        self._prepare_target(target)
        shutil.copyfile(source, target)
        # copyfile não preserva permissões
        target.chmod(target.stat().st_mode | _EXEC_BITS)

        return f"Copiado {source} -> {target}"

    def _set_hooks_path(self, entry: HookPlanEntry) -> str:
        self.runner.set_config("core.hooksPath", entry.hooks_path_value)
        return f"core.hooksPath = {entry.hooks_path_value}"


# =============================================================================
# Helper Functions
# =============================================================================

def apply_plan(
    entries: Sequence[HookPlanEntry],
    working_dir: Union[str, Path],
    runner: Optional[GitRunner] = None,
) -> List[HookOutcome]:
    """Aplica um plano completo no repositório."""
    installer = HookInstaller(working_dir, runner)
    return installer.apply_all(entries)


__all__ = [
    "HookInstaller",
    "apply_plan",
]
