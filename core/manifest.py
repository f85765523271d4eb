"""
hookdeploy - Manifest Reader
Lê o manifest do projeto e extrai a seção "extra" do pacote.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .models import HookDeployError


DEFAULT_MANIFEST_FILE = "composer.json"


class ManifestLoadError(HookDeployError):
    """Erro ao carregar o manifest."""
    pass


def load_manifest(filepath: Union[str, Path]) -> Dict[str, Any]:
    """
    Carrega o manifest (JSON para *.json, YAML para o resto).

    Raises:
        ManifestLoadError: Arquivo ilegível, inválido ou sem objeto na raiz
    """
    filepath = Path(filepath)

    if not filepath.is_file():
        raise ManifestLoadError(f"Manifest não encontrado: {filepath}")

    try:
        text = filepath.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestLoadError(f"Erro ao ler manifest: {e}") from e

    try:
        if filepath.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ManifestLoadError(f"Erro ao parsear {filepath.name}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestLoadError(f"{filepath.name} deve conter um objeto na raiz")

    return data


def get_extra_config(manifest: Dict[str, Any], package_name: Optional[str] = None) -> Dict[str, Any]:
    """
    Retorna manifest["extra"][<nome do pacote>], ou {} se ausente.

    Args:
        manifest: Manifest já parseado
        package_name: Chave da seção (default: manifest["name"])
    """
    name = package_name or manifest.get("name")
    if not name:
        return {}

    extra = manifest.get("extra") or {}
    if not isinstance(extra, dict):
        raise ManifestLoadError("Campo 'extra' deve ser um objeto")

    section = extra.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ManifestLoadError(f"Campo 'extra.{name}' deve ser um objeto")

    return section


def load_extra_config(
    filepath: Union[str, Path],
    package_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Lê a seção extra do pacote direto do arquivo; manifest ausente = {}."""
    filepath = Path(filepath)
    if not filepath.exists():
        return {}
    return get_extra_config(load_manifest(filepath), package_name)


__all__ = [
    "DEFAULT_MANIFEST_FILE",
    "ManifestLoadError",
    "load_manifest",
    "get_extra_config",
    "load_extra_config",
]
