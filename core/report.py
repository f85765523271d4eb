"""
hookdeploy - Deployment Report
Consolida os outcomes de cada hook no resultado final.
"""

from typing import Iterable, Optional

from .models import DeploymentResult, HookOutcome, Strategy


def summarize(outcomes: Iterable[HookOutcome], strategy: Optional[Strategy] = None) -> DeploymentResult:
    """
    Calcula o resultado final do deploy.

    Exit code:
        0 = todos os hooks installed / overwritten / unchanged
        N = número de hooks com conflict, source_missing ou failed

    A ordem de per_hook é a ordem do plano (não é reordenada).
    """
    per_hook = list(outcomes)
    failed = sum(1 for outcome in per_hook if outcome.status.is_failure)

    return DeploymentResult(exit_code=failed, per_hook=per_hook, strategy=strategy)


__all__ = ["summarize"]
