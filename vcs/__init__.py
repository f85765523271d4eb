"""External command execution (git)."""

from .git_runner import (
    CommandResult,
    CommandRunner,
    ExternalCommandFailure,
    GitError,
    GitRunner,
)

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExternalCommandFailure",
    "GitError",
    "GitRunner",
]
