"""
hookdeploy - Command Line Interface
Entry point para deploy e inspeção dos git hooks do projeto.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from hookdeploy.__version__ import __version__
from hookdeploy.core.config_resolver import ConfigLayer, resolve_config
from hookdeploy.core.engine import HookDeployer
from hookdeploy.core.formatters import FORMATS, FormatterFactory
from hookdeploy.core.manifest import DEFAULT_MANIFEST_FILE, ManifestLoadError, load_extra_config
from hookdeploy.core.models import Configuration, HookDeployError
from hookdeploy.hooks.catalog import RECOGNIZED_HOOKS


# Exit code para erros de configuração, manifest ou repositório
EXIT_CONFIG_ERROR = 2


# =============================================================================
# Typer App Setup
# =============================================================================

app = typer.Typer(
    name="hookdeploy",
    help="🪝 hookdeploy - Deploy de git hooks versionados",
    add_completion=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)


def setup_logging(verbose: bool = False):
    """Configura logging com RichHandler no stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# =============================================================================
# Global Options
# =============================================================================

def version_callback(value: bool):
    """Callback para --version."""
    if value:
        console.print(f"🪝 hookdeploy version {__version__}", style="bold cyan")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Mostra versão do hookdeploy"
    )
):
    """
    🪝 hookdeploy - Deploy de git hooks versionados

    Instala os scripts do diretório de origem no repositório Git, via
    symlink, cópia ou core.hooksPath.
    """
    pass


# =============================================================================
# Helpers
# =============================================================================

def build_caller_options(
    symlink: bool = False,
    no_symlink: bool = False,
    core_hooks_path: Optional[str] = None,
    hooks: Optional[List[str]] = None,
    source_dir: Optional[str] = None,
) -> ConfigLayer:
    """
    Converte as opções da CLI numa ConfigLayer.

    Flags não passadas ficam ausentes (não viram False), senão
    sobrescreveriam a config do manifest.
    """
    options: Dict[str, Any] = {}

    if symlink:
        options["symlink"] = True
    if no_symlink:
        options["no-symlink"] = True
    if core_hooks_path is not None:
        options["core-hooks-path"] = core_hooks_path
    if hooks:
        options["hooks"] = list(hooks)
    if source_dir is not None:
        options["source-directory"] = source_dir

    return ConfigLayer.from_mapping(options, source="options")


def load_configuration(
    working_dir: Path,
    manifest: Optional[Path],
    package_name: Optional[str],
    caller_options: ConfigLayer,
) -> Configuration:
    """Lê o manifest e resolve a configuração final."""
    manifest_path = manifest or (working_dir / DEFAULT_MANIFEST_FILE)
    if manifest is not None and not manifest_path.exists():
        raise ManifestLoadError(f"Manifest não encontrado: {manifest_path}")

    manifest_extra = load_extra_config(manifest_path, package_name)

    return resolve_config(None, manifest_extra, caller_options)


def _fail_fatal(error: Exception):
    err_console.print(f"❌ {error}", style="red", markup=False)
    raise typer.Exit(EXIT_CONFIG_ERROR)


# =============================================================================
# Command: deploy
# =============================================================================

@app.command()
def deploy(
    symlink: bool = typer.Option(
        False,
        "--symlink",
        "-s",
        help="Cria symlinks em .git/hooks"
    ),
    no_symlink: bool = typer.Option(
        False,
        "--no-symlink",
        "-S",
        help="Copia os scripts para .git/hooks"
    ),
    core_hooks_path: Optional[str] = typer.Option(
        None,
        "--core-hooks-path",
        "-p",
        help="Valor para a config core.hooksPath"
    ),
    hook: Optional[List[str]] = typer.Option(
        None,
        "--hook",
        help="Hook específico (pode repetir)"
    ),
    source_dir: Optional[str] = typer.Option(
        None,
        "--source-dir",
        help="Diretório com os scripts de hook"
    ),
    manifest: Optional[Path] = typer.Option(
        None,
        "--manifest",
        "-m",
        help=f"Manifest do projeto (default: {DEFAULT_MANIFEST_FILE})"
    ),
    package_name: Optional[str] = typer.Option(
        None,
        "--package-name",
        help="Chave da seção extra (default: campo 'name' do manifest)"
    ),
    cwd: Path = typer.Option(
        Path("."),
        "--cwd",
        "-C",
        help="Working directory do repositório"
    ),
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help=f"Formato de output: {', '.join(FORMATS)}"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Modo verbose (logs de debug + mensagens completas)"
    ),
):
    """
    🪝 Faz o deploy dos git hooks

    Exemplos:

    \b
    # Symlinks (default)
    hookdeploy deploy

    \b
    # Cópia em vez de symlink
    hookdeploy deploy --no-symlink

    \b
    # Apontar core.hooksPath para o diretório dos scripts
    hookdeploy deploy -p git-hooks

    Exit code: número de hooks com falha, ou 2 para erro de configuração.
    Como 2 hooks com falha também saem com 2, use --format json para
    distinguir (o campo exit_code só existe no relatório de deploy).
    """
    setup_logging(verbose)

    try:
        formatter = FormatterFactory.create(format_type=format, verbose=verbose)
        caller_options = build_caller_options(symlink, no_symlink, core_hooks_path, hook, source_dir)
        config = load_configuration(cwd, manifest, package_name, caller_options)
        result = HookDeployer(cwd).deploy(config)

    except (HookDeployError, ValueError) as e:
        # ValueError: formato de output inválido
        _fail_fatal(e)

    typer.echo(formatter.format_result(result))

    raise typer.Exit(result.exit_code)


# =============================================================================
# Command: status
# =============================================================================

@app.command()
def status(
    symlink: bool = typer.Option(False, "--symlink", "-s", help="Simula estratégia symlink"),
    no_symlink: bool = typer.Option(False, "--no-symlink", "-S", help="Simula estratégia cópia"),
    core_hooks_path: Optional[str] = typer.Option(
        None, "--core-hooks-path", "-p", help="Simula core.hooksPath"
    ),
    hook: Optional[List[str]] = typer.Option(None, "--hook", help="Hook específico (pode repetir)"),
    source_dir: Optional[str] = typer.Option(None, "--source-dir", help="Diretório com os scripts"),
    manifest: Optional[Path] = typer.Option(None, "--manifest", "-m", help="Manifest do projeto"),
    package_name: Optional[str] = typer.Option(None, "--package-name", help="Chave da seção extra"),
    cwd: Path = typer.Option(Path("."), "--cwd", "-C", help="Working directory do repositório"),
    format: str = typer.Option("table", "--format", "-f", help=f"Formato: {', '.join(FORMATS)}"),
    verbose: bool = typer.Option(False, "--verbose", help="Logs de debug"),
):
    """
    📊 Mostra o que o deploy faria (não altera nada)

    Exemplo:

    \b
    hookdeploy status --no-symlink
    """
    setup_logging(verbose)

    try:
        formatter = FormatterFactory.create(format_type=format, verbose=verbose)
        caller_options = build_caller_options(symlink, no_symlink, core_hooks_path, hook, source_dir)
        config = load_configuration(cwd, manifest, package_name, caller_options)
        plan = HookDeployer(cwd).inspect(config)

    except (HookDeployError, ValueError) as e:
        _fail_fatal(e)

    typer.echo(formatter.format_plan(plan))


# =============================================================================
# Command: hooks
# =============================================================================

@app.command("hooks")
def list_hooks():
    """
    📋 Lista os hooks reconhecidos

    Exemplo:

    \b
    hookdeploy hooks
    """
    table = Table(show_header=True, title="Git Hooks Reconhecidos")
    table.add_column("#", style="dim")
    table.add_column("Hook", style="cyan")

    for index, name in enumerate(RECOGNIZED_HOOKS, start=1):
        table.add_row(str(index), name)

    console.print(table)


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Entry point principal."""
    app()


if __name__ == "__main__":
    main()
