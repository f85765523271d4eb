"""
hookdeploy - Output Formatters
Formatação do relatório e do plano para terminal, CI e JSON.
"""

import io
import json
import sys
from typing import List, Optional, Sequence, TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import DeploymentResult, HookOutcome, HookPlanEntry, OutcomeStatus, PlanAction


# =============================================================================
# ANSI Color Codes
# =============================================================================

class Colors:
    """Códigos de cor ANSI para terminal."""

    RESET = "\033[0m"
    BOLD = "\033[1m"

    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    @staticmethod
    def is_tty(file: TextIO = sys.stdout) -> bool:
        """Verifica se o output é um terminal (suporta cores)."""
        return hasattr(file, "isatty") and file.isatty()


STATUS_ICONS = {
    OutcomeStatus.INSTALLED: "✅",
    OutcomeStatus.OVERWRITTEN: "♻️",
    OutcomeStatus.UNCHANGED: "✔️",
    OutcomeStatus.CONFLICT: "❌",
    OutcomeStatus.SOURCE_MISSING: "⚠️",
    OutcomeStatus.FAILED: "💥",
}

STATUS_STYLES = {
    OutcomeStatus.INSTALLED: "green",
    OutcomeStatus.OVERWRITTEN: "cyan",
    OutcomeStatus.UNCHANGED: "dim",
    OutcomeStatus.CONFLICT: "red",
    OutcomeStatus.SOURCE_MISSING: "yellow",
    OutcomeStatus.FAILED: "red",
}

ACTION_STYLES = {
    PlanAction.INSTALL: "green",
    PlanAction.OVERWRITE: "cyan",
    PlanAction.SKIP: "dim",
    PlanAction.FAIL: "red",
}


# =============================================================================
# Base Formatter
# =============================================================================

class BaseFormatter:
    """Classe base para formatters."""

    def __init__(self, use_colors: Optional[bool] = None):
        """
        Args:
            use_colors: Se True, usa cores ANSI. Se None, detecta automaticamente.
        """
        if use_colors is None:
            self.use_colors = Colors.is_tty()
        else:
            self.use_colors = use_colors

    def colorize(self, text: str, color: str) -> str:
        """Aplica cor ao texto se use_colors=True."""
        if not self.use_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def format_result(self, result: DeploymentResult) -> str:
        """Formata DeploymentResult (deve ser implementado por subclasses)."""
        raise NotImplementedError

    def format_plan(self, plan: Sequence[HookPlanEntry]) -> str:
        """Formata o plano (deve ser implementado por subclasses)."""
        raise NotImplementedError


# =============================================================================
# Table Formatter (Default)
# =============================================================================

class TableFormatter(BaseFormatter):
    """Tabela rich para leitura humana."""

    def __init__(self, use_colors: Optional[bool] = None, verbose: bool = False, width: int = 120):
        """
        Args:
            use_colors: Usar cores ANSI
            verbose: Se True, mostra a mensagem completa de cada hook
            width: Largura do console renderizado
        """
        super().__init__(use_colors)
        self.verbose = verbose
        self.width = width

    def format_result(self, result: DeploymentResult) -> str:
        table = Table(title="Deploy de Hooks")
        table.add_column("Hook", style="cyan", no_wrap=True)
        table.add_column("Status")
        table.add_column("Mensagem")

        for outcome in result.per_hook:
            status = f"{STATUS_ICONS[outcome.status]} {outcome.status.value}"
            table.add_row(
                outcome.hook_name,
                f"[{STATUS_STYLES[outcome.status]}]{status}[/]",
                escape(self._message(outcome)),
            )

        if not result.per_hook:
            return self._render(table, "Nenhum hook para instalar.")

        summary = self._summary_line(result)
        return self._render(table, summary)

    def format_plan(self, plan: Sequence[HookPlanEntry]) -> str:
        table = Table(title="Plano de Deploy")
        table.add_column("Hook", style="cyan", no_wrap=True)
        table.add_column("Estratégia", style="magenta")
        table.add_column("Ação")
        table.add_column("Destino")
        table.add_column("Motivo")

        for entry in plan:
            destination = entry.hooks_path_value or (str(entry.target_path) if entry.target_path else "")
            table.add_row(
                entry.hook_name,
                entry.strategy.value,
                f"[{ACTION_STYLES[entry.action]}]{entry.action.value}[/]",
                escape(destination),
                escape(entry.conflict_reason or ""),
            )

        return self._render(table)

    def _message(self, outcome: HookOutcome) -> str:
        message = outcome.message or ""
        if not self.verbose and len(message) > 70:
            message = message[:67] + "..."
        return message

    def _summary_line(self, result: DeploymentResult) -> str:
        if result.succeeded:
            return "✅ Deploy concluído"
        return f"❌ {len(result.failures)} hook(s) com falha"

    def _render(self, table: Table, footer: Optional[str] = None) -> str:
        buffer = io.StringIO()
        console = Console(
            file=buffer,
            force_terminal=self.use_colors,
            no_color=not self.use_colors,
            width=self.width,
        )
        console.print(table)
        if footer:
            console.print(footer, markup=False)
        return buffer.getvalue().rstrip("\n")


# =============================================================================
# Compact Formatter
# =============================================================================

class CompactFormatter(BaseFormatter):
    """
    Formatter compacto (uma linha por hook).
    Útil para CI/CD e para o output do post-install.
    """

    def format_result(self, result: DeploymentResult) -> str:
        lines: List[str] = [self.format_outcome(o) for o in result.per_hook]

        if result.succeeded:
            lines.append(self.colorize("✅ OK", Colors.GREEN))
        else:
            lines.append(self.colorize(f"❌ {len(result.failures)} hook(s) com falha", Colors.RED))

        return "\n".join(lines)

    def format_outcome(self, outcome: HookOutcome) -> str:
        """Formata outcome em uma linha: [STATUS] hook: mensagem"""
        tag = self.colorize(f"[{outcome.status.value.upper()}]", self._status_color(outcome.status))
        if outcome.message:
            return f"{tag} {outcome.hook_name}: {outcome.message}"
        return f"{tag} {outcome.hook_name}"

    def format_plan(self, plan: Sequence[HookPlanEntry]) -> str:
        lines = []
        for entry in plan:
            line = f"[{entry.action.value.upper()}] {entry.hook_name}"
            if entry.conflict_reason:
                line += f": {entry.conflict_reason}"
            lines.append(line)
        return "\n".join(lines)

    def _status_color(self, status: OutcomeStatus) -> str:
        if status.is_failure:
            return Colors.RED
        if status == OutcomeStatus.UNCHANGED:
            return Colors.GRAY
        return Colors.GREEN


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter(BaseFormatter):
    """
    Formatter JSON (machine-readable).
    Útil para integração com outras ferramentas.
    """

    def __init__(self, pretty: bool = True):
        """
        Args:
            pretty: Se True, formata JSON com indentação
        """
        super().__init__(use_colors=False)  # JSON não usa cores
        self.pretty = pretty

    def format_result(self, result: DeploymentResult) -> str:
        return self._dump(result.to_dict())

    def format_plan(self, plan: Sequence[HookPlanEntry]) -> str:
        return self._dump({"plan": [entry.to_dict() for entry in plan]})

    def _dump(self, data) -> str:
        if self.pretty:
            return json.dumps(data, indent=2, ensure_ascii=False)
        return json.dumps(data, ensure_ascii=False)


# =============================================================================
# Formatter Factory
# =============================================================================

FORMATS = ("table", "compact", "json")


class FormatterFactory:
    """Factory para criar formatters."""

    @staticmethod
    def create(
        format_type: str,
        use_colors: Optional[bool] = None,
        verbose: bool = False,
        pretty: bool = True
    ) -> BaseFormatter:
        """
        Cria formatter apropriado.

        Args:
            format_type: Tipo do formatter (table, compact, json)
            use_colors: Usar cores (apenas table/compact)
            verbose: Mensagens completas (apenas table)
            pretty: Pretty print JSON (apenas json)

        Returns:
            BaseFormatter configurado
        """
        format_type = format_type.lower()

        if format_type == "table":
            return TableFormatter(use_colors=use_colors, verbose=verbose)

        elif format_type == "compact":
            return CompactFormatter(use_colors=use_colors)

        elif format_type == "json":
            return JSONFormatter(pretty=pretty)

        else:
            raise ValueError(
                f"Formato desconhecido: {format_type}. "
                f"Formatos válidos: {', '.join(FORMATS)}"
            )


# =============================================================================
# Exports
# =============================================================================

__all__ = [
    # Formatters
    "BaseFormatter",
    "TableFormatter",
    "CompactFormatter",
    "JSONFormatter",

    # Factory
    "FormatterFactory",
    "FORMATS",

    # Utils
    "Colors",
]
