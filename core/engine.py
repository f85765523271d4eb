"""
hookdeploy - Core Engine
Orquestra resolve -> catálogo -> plano -> instalação -> relatório.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..hooks.catalog import list_deployable
from ..hooks.install import HookInstaller
from ..vcs.git_runner import GitRunner
from .config_resolver import LayerInput, resolve_config
from .models import Configuration, DeploymentResult, HookPlanEntry
from .planner import DeploymentPlanner
from .report import summarize


logger = logging.getLogger(__name__)


# =============================================================================
# Engine Principal
# =============================================================================

class HookDeployer:
    """
    Motor principal do hookdeploy.

    Responsabilidades:
    - Selecionar hooks e scripts de origem (catálogo)
    - Montar o plano contra o estado atual do repositório
    - Aplicar o plano hook a hook, em ordem
    - Consolidar o relatório

    Cada instância é amarrada a um working dir; nenhum estado é
    compartilhado entre execuções.
    """

    def __init__(self, working_dir: Union[str, Path], runner: Optional[GitRunner] = None):
        """
        Args:
            working_dir: Raiz do working tree do repositório alvo
            runner: Runner de comandos git (default: GitRunner no working dir)
        """
        self.working_dir = Path(working_dir)
        self.runner = runner or GitRunner(self.working_dir)
        self.planner = DeploymentPlanner(self.working_dir, self.runner)
        self.installer = HookInstaller(self.working_dir, self.runner)

    def inspect(self, config: Configuration) -> List[HookPlanEntry]:
        """
        Monta o plano sem alterar nada (usado pelo `status`).

        Raises:
            RepositoryNotFound: Se o working dir não for um repositório git
        """
        entries = list_deployable(config, self.working_dir)
        return self.planner.plan(entries, config)

    def deploy(self, config: Configuration) -> DeploymentResult:
        """
        Executa o deploy completo.

        Erros de configuração/repositório abortam antes de qualquer mutação;
        erros por hook são coletados no resultado.

        Returns:
            DeploymentResult com exit code e outcome de cada hook
        """
        plan = self.inspect(config)
        logger.debug("Applying %d plan entries (%s)", len(plan), config.strategy.value)

        outcomes = self.installer.apply_all(plan)

        return summarize(outcomes, config.strategy)


# =============================================================================
# Helper Functions
# =============================================================================

def deploy_hooks(
    working_dir: Union[str, Path],
    defaults: LayerInput = None,
    manifest_extra: LayerInput = None,
    caller_options: LayerInput = None,
    runner: Optional[GitRunner] = None,
) -> DeploymentResult:
    """
    Resolve a configuração e faz o deploy.

    Raises:
        ConfigInvalid: Configuração contraditória (nada é alterado)
        RepositoryNotFound: Working dir sem repositório git
    """
    config = resolve_config(defaults, manifest_extra, caller_options)
    return HookDeployer(working_dir, runner).deploy(config)


__all__ = [
    "HookDeployer",
    "deploy_hooks",
]
