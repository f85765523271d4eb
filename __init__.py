"""
🪝 hookdeploy - Deploy de git hooks versionados

Instala os scripts de hook mantidos no repositório do projeto dentro do
Git, via symlink, cópia ou apontando core.hooksPath para o diretório.
"""

from .__version__ import __version__

__all__ = ["__version__"]
