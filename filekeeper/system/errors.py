"""Tipos de erro partilhados pelo splitter e pelo housekeeper.

``InvalidArgumentError`` sinaliza violação de pré-condição (sempre detectada
antes de qualquer alteração no filesystem). ``FileOperationError`` embrulha
qualquer falha de I/O e guarda o caminho envolvido e a causa original.
"""

from __future__ import annotations

from pathlib import Path


class InvalidArgumentError(ValueError):
    """Valor fornecido pelo chamador viola uma pré-condição."""


class FileOperationError(OSError):
    """Falha ao interagir com o filesystem (abrir, criar, ler, escrever, mover, remover)."""

    def __init__(self, message: str, path: str | Path | None = None, cause: BaseException | None = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message
