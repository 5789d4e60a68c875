"""Subsistema de logs: o sink usado pelo splitter e pelo housekeeper.

Os componentes recebem o logger explicitamente na construção (não há
instância global). Qualquer objeto com ``info``, ``warning``, ``error`` e
``summary`` (formato + args no estilo `%`) serve; aqui estão as duas
implementações do projeto:

- ``RunLogger``: anexa linhas datadas a ``<root>/<app>_<YYYY-MM-DD>.log`` e
  ecoa no stdout.
- ``MemoryLogger``: guarda os registos em memória (testes, embedding).
"""

import os
import sys
import logging
from pathlib import Path

from .log_helpers import (
    build_human_line,
    ensure_dir_writable,
    format_date_for_log,
    format_ts_for_log,
    render_message,
    sanitize_log_name,
    write_text,
)

logger = logging.getLogger(__name__)

# ========================
# 0. Configuração padrão
# ========================

LOG_ROOT = "logs"
DEFAULT_APP_NAME = "script"

SUMMARY = 25
logging.addLevelName(SUMMARY, "SUMMARY")

_LEVELS = {
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "SUMMARY": SUMMARY,
}

# Registos do RunLogger também chegam ao logging da stdlib por este nome
RUN_LOGGER_NAME = "filekeeper.run"


# ========================
# 1. Diretórios e Paths
# ========================


def resolve_log_root(root: str | Path | None = None) -> Path:
    """Resolve raiz de logs e garante o diretório criado e gravável.

    Prioridade: `root` explícito, depois ``FILEKEEPER_LOG_ROOT``, depois
    ``LOG_ROOT``.
    """
    env_root = os.getenv("FILEKEEPER_LOG_ROOT")
    candidate = root if root else (env_root.strip() if env_root and env_root.strip() else LOG_ROOT)
    log_root = Path(candidate)
    # ensure_dir_writable returns bool; falha já foi registada
    ensure_dir_writable(log_root)
    return log_root


# Gera o nome do ficheiro de log do dia; consumido por RunLogger
def _resolve_filename(app_name: str) -> str:
    """Gera nome `<app>_<data>.log` com nome sanitizado."""
    base = sanitize_log_name(app_name or DEFAULT_APP_NAME, DEFAULT_APP_NAME)
    return f"{base}_{format_date_for_log(None)}.log"


# ========================
# 2. Sinks
# ========================


class RunLogger:
    """Logger de execução: ficheiro datado + console.

    Cada chamada compõe ``<YYYY-MM-DD HH:MM:SS> [LEVEL] mensagem`` e anexa-a
    ao ficheiro (escrita durável com lock) e ao stdout. O mesmo registo é
    encaminhado ao logger ``filekeeper.run`` da stdlib.
    """

    def __init__(self, app_name: str = DEFAULT_APP_NAME, root: str | Path | None = None, stream=None):
        self.app_name = app_name or DEFAULT_APP_NAME
        self.root = resolve_log_root(root)
        self._log_path = self.root / _resolve_filename(self.app_name)
        self._stream = stream
        self._closed = False
        self._std = logging.getLogger(RUN_LOGGER_NAME)

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Deixa de escrever no ficheiro; mensagens seguintes vão só para o console."""
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def _out(self):
        return self._stream if self._stream is not None else sys.stdout

    def _raw(self, text: str) -> None:
        out = self._out()
        out.write(text)
        out.flush()
        if not self._closed:
            write_text(self._log_path, text)

    def log(self, level: str, fmt, *args) -> None:
        message = render_message(fmt, args)
        self._raw(build_human_line(format_ts_for_log(), level, message))
        self._std.log(_LEVELS.get(level, logging.INFO), message)

    def info(self, fmt, *args) -> None:
        self.log("INFO", fmt, *args)

    def warning(self, fmt, *args) -> None:
        self.log("WARNING", fmt, *args)

    def error(self, fmt, *args) -> None:
        self.log("ERROR", fmt, *args)

    def summary(self, fmt, *args) -> None:
        self.log("SUMMARY", fmt, *args)

    def display_credits(self, banner: str, app_name: str, app_version: str) -> None:
        """Escreve o banner da aplicação e regista o arranque."""
        app_upper = (app_name or self.app_name).upper()
        text = render_message(banner, (app_upper, app_version)) if "%" in banner else banner
        self._raw(text)
        self.info("%s v%s started", app_upper, app_version)


class MemoryLogger:
    """Sink em memória com a mesma interface do RunLogger."""

    def __init__(self):
        self.records: list[tuple[str, str]] = []

    def log(self, level: str, fmt, *args) -> None:
        self.records.append((level, render_message(fmt, args)))

    def info(self, fmt, *args) -> None:
        self.log("INFO", fmt, *args)

    def warning(self, fmt, *args) -> None:
        self.log("WARNING", fmt, *args)

    def error(self, fmt, *args) -> None:
        self.log("ERROR", fmt, *args)

    def summary(self, fmt, *args) -> None:
        self.log("SUMMARY", fmt, *args)

    def messages(self, level: str | None = None) -> list[str]:
        """Retorna as mensagens gravadas, opcionalmente filtradas por nível."""
        return [msg for lvl, msg in self.records if level is None or lvl == level]
