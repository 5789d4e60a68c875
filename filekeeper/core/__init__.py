"""Pacote core: orquestração da linha de comandos.

Contém o parsing de argumentos e o despacho dos comandos.
"""

from .core import run_command

__all__ = ["run_command"]
