"""Git hook catalog and installation."""

from .catalog import RECOGNIZED_HOOKS, is_recognized_hook, list_deployable
from .install import HookInstaller, apply_plan

__all__ = [
    "RECOGNIZED_HOOKS",
    "HookInstaller",
    "apply_plan",
    "is_recognized_hook",
    "list_deployable",
]
