"""
hookdeploy - Config Resolver
Combina defaults, config "extra" do manifest e opções do caller numa
Configuration normalizada.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from ..config import DEFAULT_CONFIG_FILE
from ..hooks.catalog import RECOGNIZED_HOOKS, is_recognized_hook
from .models import Configuration, HookDeployError, Strategy


logger = logging.getLogger(__name__)


# =============================================================================
# Exceções Customizadas
# =============================================================================

class ConfigInvalid(HookDeployError):
    """Configuração contraditória ou malformada."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


# =============================================================================
# Config Layer
# =============================================================================

# Chave no manifest -> campo do ConfigLayer
LAYER_KEYS = {
    "symlink": "symlink",
    "no-symlink": "no_symlink",
    "core-hooks-path": "core_hooks_path",
    "hooks": "hooks",
    "source-directory": "source_directory",
}


@dataclass(frozen=True)
class ConfigLayer:
    """
    Uma fonte de configuração (defaults, manifest ou caller).

    None significa "não definido"; um campo só participa do merge quando
    foi definido explicitamente.
    """
    symlink: Optional[bool] = None
    no_symlink: Optional[bool] = None
    core_hooks_path: Optional[str] = None
    hooks: Optional[Tuple[str, ...]] = None
    source_directory: Optional[str] = None
    source: str = "options"

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], source: str = "options") -> "ConfigLayer":
        """
        Cria layer a partir de um dict com as chaves do manifest.

        Aceita também os nomes dos campos (no_symlink, core_hooks_path...).

        Raises:
            ConfigInvalid: Chave desconhecida ou valor com tipo errado
        """
        if data is None:
            return cls(source=source)

        if not isinstance(data, Mapping):
            raise ConfigInvalid(
                f"configuração deve ser um objeto, encontrado: {type(data).__name__}",
                source,
            )

        field_names = {f.name for f in fields(cls)} - {"source"}
        values: Dict[str, Any] = {}

        for key, value in data.items():
            attr = LAYER_KEYS.get(key, key if key in field_names else None)
            if attr is None:
                raise ConfigInvalid(
                    f"chave desconhecida '{key}'. "
                    f"Chaves válidas: {sorted(LAYER_KEYS)}",
                    source,
                )
            if attr in values:
                raise ConfigInvalid(f"chave '{key}' definida duas vezes", source)
            values[attr] = value

        return cls(
            symlink=_check_bool(values.get("symlink"), "symlink", source),
            no_symlink=_check_bool(values.get("no_symlink"), "no-symlink", source),
            core_hooks_path=_check_path(values.get("core_hooks_path"), "core-hooks-path", source),
            hooks=_check_hooks(values.get("hooks"), source),
            source_directory=_check_path(values.get("source_directory"), "source-directory", source),
            source=source,
        )

    def strategy(self) -> Optional[Strategy]:
        """
        Estratégia pedida por esta layer (None se nenhuma).

        Raises:
            ConfigInvalid: Se a layer pedir duas estratégias diferentes
        """
        votes: List[Strategy] = []

        if self.symlink is not None:
            votes.append(Strategy.SYMLINK if self.symlink else Strategy.COPY)
        if self.no_symlink is not None:
            votes.append(Strategy.COPY if self.no_symlink else Strategy.SYMLINK)
        if self.core_hooks_path is not None:
            votes.append(Strategy.HOOKS_PATH)

        if self.symlink and self.no_symlink:
            raise ConfigInvalid("'symlink' e 'no-symlink' são mutuamente exclusivos", self.source)

        distinct = set(votes)
        if len(distinct) > 1:
            names = ", ".join(sorted(s.value for s in distinct))
            raise ConfigInvalid(f"estratégias contraditórias: {names}", self.source)

        return votes[0] if votes else None


# =============================================================================
# Validadores
# =============================================================================

def _check_bool(value: Any, key: str, source: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise ConfigInvalid(f"'{key}' deve ser booleano, encontrado: {value!r}", source)


def _check_path(value: Any, key: str, source: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Path):
        value = str(value)
    if not isinstance(value, str):
        raise ConfigInvalid(f"'{key}' deve ser string, encontrado: {value!r}", source)
    if not value.strip():
        raise ConfigInvalid(f"'{key}' não pode ser vazio", source)
    return value


def _check_hooks(value: Any, source: str) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None

    if isinstance(value, str):
        value = [value]

    if not isinstance(value, (list, tuple)):
        raise ConfigInvalid(f"'hooks' deve ser uma lista, encontrado: {value!r}", source)

    if not value:
        raise ConfigInvalid("'hooks' deve conter pelo menos um hook", source)

    names: List[str] = []
    for name in value:
        if not isinstance(name, str) or not is_recognized_hook(name):
            raise ConfigInvalid(f"hook desconhecido: {name!r}", source)
        # Remove duplicados mantendo a ordem
        if name not in names:
            names.append(name)

    return tuple(names)


# =============================================================================
# Loader / Resolver
# =============================================================================

def load_defaults(filepath: Union[str, Path] = DEFAULT_CONFIG_FILE) -> ConfigLayer:
    """
    Carrega a layer de defaults embutida (YAML).

    Raises:
        ConfigInvalid: Se o arquivo não puder ser lido ou for inválido
    """
    filepath = Path(filepath)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigInvalid(f"Erro ao parsear YAML: {e}", str(filepath)) from e
    except OSError as e:
        raise ConfigInvalid(f"Erro ao ler arquivo: {e}", str(filepath)) from e

    return ConfigLayer.from_mapping(data or {}, source=str(filepath))


LayerInput = Union[ConfigLayer, Mapping[str, Any], None]


def _as_layer(value: LayerInput, source: str) -> ConfigLayer:
    if isinstance(value, ConfigLayer):
        return value
    return ConfigLayer.from_mapping(value, source=source)


def resolve_config(
    defaults: LayerInput = None,
    manifest_extra: LayerInput = None,
    caller_options: LayerInput = None,
) -> Configuration:
    """
    Resolve a configuração final.

    Precedência (maior vence): caller > manifest > defaults.
    Função pura: não toca no filesystem nem no Git.

    Args:
        defaults: Layer de defaults (None = config/defaults.yaml)
        manifest_extra: Seção "extra" do manifest para este pacote
        caller_options: Opções explícitas (CLI)

    Returns:
        Configuration normalizada

    Raises:
        ConfigInvalid: Configuração contraditória ou incompleta
    """
    layers = [
        load_defaults() if defaults is None else _as_layer(defaults, "defaults"),
        _as_layer(manifest_extra, "manifest"),
        _as_layer(caller_options, "options"),
    ]

    strategy: Optional[Strategy] = None
    hooks_path_value: Optional[str] = None
    hook_names: Optional[Tuple[str, ...]] = None
    hook_names_explicit = False
    source_directory: Optional[str] = None

    for index, layer in enumerate(layers):
        layer_strategy = layer.strategy()
        if layer_strategy is not None:
            strategy = layer_strategy
            hooks_path_value = layer.core_hooks_path if layer_strategy == Strategy.HOOKS_PATH else None

        if layer.hooks is not None:
            hook_names = layer.hooks
            # A lista dos defaults não conta como pedido explícito
            hook_names_explicit = index > 0

        if layer.source_directory is not None:
            source_directory = layer.source_directory

    if strategy is None:
        raise ConfigInvalid("nenhuma estratégia definida (symlink, no-symlink ou core-hooks-path)")

    if source_directory is None:
        raise ConfigInvalid("'source-directory' não definido")

    if strategy == Strategy.HOOKS_PATH and hook_names_explicit:
        logger.warning("Lista de hooks ignorada: core.hooksPath aponta para o diretório inteiro")

    config = Configuration(
        source_directory=Path(source_directory),
        strategy=strategy,
        hook_names=hook_names if hook_names is not None else RECOGNIZED_HOOKS,
        hooks_path_value=hooks_path_value,
        hook_names_explicit=hook_names_explicit,
    )
    logger.debug("Resolved configuration: %s", config)

    return config


__all__ = [
    "ConfigInvalid",
    "ConfigLayer",
    "LAYER_KEYS",
    "load_defaults",
    "resolve_config",
]
