"""
hookdeploy - Git Command Runner
Executa o binário do Git (ou outro comando externo) e captura o resultado.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union


logger = logging.getLogger(__name__)


# =============================================================================
# Exceções
# =============================================================================

class GitError(Exception):
    """Erro ao executar comando git."""
    pass


class ExternalCommandFailure(GitError):
    """Comando externo terminou com exit code diferente de zero."""

    def __init__(self, result: "CommandResult"):
        self.result = result
        stderr = result.stderr.strip()
        message = f"Comando falhou ({result.exit_code}): {' '.join(result.argv)}"
        if stderr:
            message += f"\nStderr: {stderr}"
        super().__init__(message)


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class CommandResult:
    """Resultado de um comando externo."""
    argv: List[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


# =============================================================================
# Runners
# =============================================================================

class CommandRunner:
    """
    Executa comandos externos num diretório fixo.

    É o único ponto do hookdeploy que bloqueia em processo externo; os
    testes trocam esta classe por um fake que só registra argv.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None):
        """
        Args:
            cwd: Diretório onde os comandos rodam (default: diretório atual)
        """
        self.cwd = Path(cwd) if cwd else Path.cwd()

    def run(self, argv: Sequence[str], check: bool = True) -> CommandResult:
        """
        Executa comando e retorna o resultado.

        Args:
            argv: Comando e argumentos
            check: Se True, levanta ExternalCommandFailure em exit code != 0

        Returns:
            CommandResult com exit code, stdout e stderr

        Raises:
            GitError: Se o executável não for encontrado
            ExternalCommandFailure: Se o comando falhar e check=True
        """
        argv = [str(arg) for arg in argv]
        logger.debug("Running %s in %s", argv, self.cwd)

        try:
            completed = subprocess.run(
                argv,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitError(f"Executável não encontrado no PATH: {argv[0]}") from e
        except OSError as e:
            raise GitError(f"Erro ao executar {argv[0]}: {e}") from e

        result = CommandResult(
            argv=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

        if check and not result.ok:
            raise ExternalCommandFailure(result)

        return result


class GitRunner(CommandRunner):
    """Runner para comandos git no repositório alvo."""

    def __init__(self, cwd: Optional[Union[str, Path]] = None, executable: str = "git"):
        super().__init__(cwd)
        self.executable = executable

    def git(self, *args: str, check: bool = True) -> CommandResult:
        """Executa `git <args>`."""
        return self.run([self.executable, *args], check=check)

    def get_config(self, key: str) -> Optional[str]:
        """
        Lê um valor da config local do repositório.

        Returns:
            Valor ou None se a chave não estiver definida

        Raises:
            ExternalCommandFailure: Para erros que não sejam "chave ausente"
        """
        result = self.git("config", "--local", "--get", key, check=False)
        if result.ok:
            return result.stdout.strip()
        # git config --get: exit 1 = chave não definida
        if result.exit_code == 1:
            return None
        raise ExternalCommandFailure(result)

    def set_config(self, key: str, value: str) -> CommandResult:
        """Define um valor na config local do repositório."""
        return self.git("config", "--local", key, value)


__all__ = [
    # Classes
    "CommandRunner",
    "GitRunner",
    "CommandResult",

    # Exceptions
    "GitError",
    "ExternalCommandFailure",
]
