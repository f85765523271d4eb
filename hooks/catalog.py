"""
hookdeploy - Hook Catalog
Hooks reconhecidos pelo Git e os scripts de origem de cada um.
"""

import logging
from pathlib import Path
from typing import List, Union

from ..core.models import CatalogEntry, Configuration


logger = logging.getLogger(__name__)


# Order follows githooks(5).
RECOGNIZED_HOOKS = (
    "applypatch-msg",
    "pre-applypatch",
    "post-applypatch",
    "pre-commit",
    "pre-merge-commit",
    "prepare-commit-msg",
    "commit-msg",
    "post-commit",
    "pre-rebase",
    "post-checkout",
    "post-merge",
    "pre-push",
    "pre-receive",
    "update",
    "proc-receive",
    "post-receive",
    "post-update",
    "reference-transaction",
    "push-to-checkout",
    "pre-auto-gc",
    "post-rewrite",
    "sendemail-validate",
    "fsmonitor-watchman",
    "p4-changelist",
    "p4-prepare-changelist",
    "p4-post-changelist",
    "p4-pre-submit",
    "post-index-change",
)


def is_recognized_hook(name: str) -> bool:
    """Verifica se o nome é um hook conhecido pelo Git."""
    return name in RECOGNIZED_HOOKS


def resolve_source_directory(config: Configuration, working_dir: Union[str, Path]) -> Path:
    """Diretório de origem absoluto (relativo ao working dir quando necessário)."""
    source_dir = Path(config.source_directory).expanduser()
    if not source_dir.is_absolute():
        source_dir = Path(working_dir) / source_dir
    return source_dir


def list_deployable(config: Configuration, working_dir: Union[str, Path]) -> List[CatalogEntry]:
    """
    Lista pares (hook, script de origem) para deploy.

    Hook sem script é mantido (source_exists=False) quando a lista foi
    restringida explicitamente, para o planner reportar SourceMissing.
    Com a lista default ele é simplesmente omitido.

    Args:
        config: Configuração resolvida
        working_dir: Working directory do repositório

    Returns:
        Entradas na ordem de config.hook_names
    """
    source_dir = resolve_source_directory(config, working_dir)
    entries: List[CatalogEntry] = []

    for hook_name in config.hook_names:
        source_path = source_dir / hook_name

        if source_path.is_file():
            entries.append(CatalogEntry(hook_name, source_path, source_exists=True))
        elif config.hook_names_explicit:
            logger.debug("Requested hook %s has no source at %s", hook_name, source_path)
            entries.append(CatalogEntry(hook_name, source_path, source_exists=False))

    return entries


__all__ = [
    "RECOGNIZED_HOOKS",
    "is_recognized_hook",
    "resolve_source_directory",
    "list_deployable",
]
