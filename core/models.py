"""
hookdeploy - Core Data Models
Estruturas de dados compartilhadas por resolver, planner, installer e report.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


# =============================================================================
# Exceptions
# =============================================================================

class HookDeployError(Exception):
    """Erro base: aborta a execução inteira antes de qualquer mutação."""
    pass


# =============================================================================
# Enums
# =============================================================================

class Strategy(str, Enum):
    """Como os scripts de hook chegam ao Git."""
    SYMLINK = "symlink"
    COPY = "copy"
    HOOKS_PATH = "hooks-path"


class PlanAction(str, Enum):
    """Decisão do planner para um hook."""
    INSTALL = "install"
    OVERWRITE = "overwrite"
    SKIP = "skip"
    FAIL = "fail"


class OutcomeStatus(str, Enum):
    """Resultado da aplicação de uma entrada do plano."""
    INSTALLED = "installed"
    OVERWRITTEN = "overwritten"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"
    SOURCE_MISSING = "source_missing"
    FAILED = "failed"

    @property
    def is_failure(self) -> bool:
        return self in (
            OutcomeStatus.CONFLICT,
            OutcomeStatus.SOURCE_MISSING,
            OutcomeStatus.FAILED,
        )


class ErrorKind(str, Enum):
    """Categorias de erro por hook (coletadas nos outcomes, nunca levantadas)."""
    SOURCE_MISSING = "SourceMissing"
    HOOK_CONFLICT = "HookConflict"
    FILE_SYSTEM_ERROR = "FileSystemError"
    EXTERNAL_COMMAND_FAILURE = "ExternalCommandFailure"


# Nome da entrada única do plano na estratégia hooks-path
HOOKS_PATH_ENTRY_NAME = "core.hooksPath"


# =============================================================================
# Configuration
# =============================================================================

@dataclass(frozen=True)
class Configuration:
    """Configuração normalizada de uma execução."""
    source_directory: Path
    strategy: Strategy
    hook_names: Tuple[str, ...]
    hooks_path_value: Optional[str] = None
    hook_names_explicit: bool = False

    def __post_init__(self):
        """Valida que hooks-path e hooks_path_value andam juntos."""
        if self.strategy == Strategy.HOOKS_PATH and not self.hooks_path_value:
            raise ValueError("strategy 'hooks-path' requires hooks_path_value")
        if self.strategy != Strategy.HOOKS_PATH and self.hooks_path_value is not None:
            raise ValueError(
                f"hooks_path_value is only valid with strategy 'hooks-path', "
                f"not '{self.strategy.value}'"
            )


# =============================================================================
# Catalog / Plan
# =============================================================================

@dataclass(frozen=True)
class CatalogEntry:
    """Hook selecionado para deploy e seu script de origem."""
    hook_name: str
    source_path: Path
    source_exists: bool = True


@dataclass
class HookPlanEntry:
    """O que o installer deve fazer para um hook."""
    hook_name: str
    strategy: Strategy
    action: PlanAction
    source_path: Optional[Path] = None
    target_path: Optional[Path] = None
    hooks_path_value: Optional[str] = None
    conflict_reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self):
        if self.action == PlanAction.FAIL and not self.error_kind:
            raise ValueError(f"Plan entry {self.hook_name}: action 'fail' requires error_kind")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hook": self.hook_name,
            "strategy": self.strategy.value,
            "action": self.action.value,
            "source": str(self.source_path) if self.source_path else None,
            "target": str(self.target_path) if self.target_path else None,
            "hooks_path": self.hooks_path_value,
            "reason": self.conflict_reason,
            "error": self.error_kind.value if self.error_kind else None,
        }


# =============================================================================
# Outcomes / Result
# =============================================================================

@dataclass
class HookOutcome:
    """Resultado registrado para um hook."""
    hook_name: str
    status: OutcomeStatus
    message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hook": self.hook_name,
            "outcome": self.status.value,
            "message": self.message,
            "error": self.error_kind.value if self.error_kind else None,
        }


@dataclass
class DeploymentResult:
    """Relatório final de um deploy."""
    exit_code: int
    per_hook: List[HookOutcome] = field(default_factory=list)
    strategy: Optional[Strategy] = None

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    @property
    def failures(self) -> List[HookOutcome]:
        """Outcomes que tornam o exit code diferente de zero."""
        return [o for o in self.per_hook if o.status.is_failure]

    def outcomes_by_status(self) -> Dict[OutcomeStatus, List[HookOutcome]]:
        """Agrupa outcomes por status (mantém a ordem do plano)."""
        result: Dict[OutcomeStatus, List[HookOutcome]] = {}
        for outcome in self.per_hook:
            result.setdefault(outcome.status, []).append(outcome)
        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "strategy": self.strategy.value if self.strategy else None,
            "per_hook": [o.to_dict() for o in self.per_hook],
            "summary": {
                status.value: len(outcomes)
                for status, outcomes in self.outcomes_by_status().items()
            },
        }


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Exceptions
    "HookDeployError",

    # Enums
    "Strategy",
    "PlanAction",
    "OutcomeStatus",
    "ErrorKind",
    "HOOKS_PATH_ENTRY_NAME",

    # Models
    "Configuration",
    "CatalogEntry",
    "HookPlanEntry",
    "HookOutcome",
    "DeploymentResult",
]
