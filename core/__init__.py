"""Core modules for the hookdeploy engine."""

from .models import (
    CatalogEntry,
    Configuration,
    DeploymentResult,
    ErrorKind,
    HookDeployError,
    HookOutcome,
    HookPlanEntry,
    OutcomeStatus,
    PlanAction,
    Strategy,
)

__all__ = [
    # Models
    "CatalogEntry",
    "Configuration",
    "DeploymentResult",
    "ErrorKind",
    "HookDeployError",
    "HookOutcome",
    "HookPlanEntry",
    "OutcomeStatus",
    "PlanAction",
    "Strategy",
]
