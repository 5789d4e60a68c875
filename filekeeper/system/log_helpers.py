"""Helpers de baixo nível partilhados pelo logger, splitter e housekeeper.

Fornece escrita durável com lock, formatação de linhas humanas,
criação de diretórios e movimentação atômica de ficheiros.
"""

from pathlib import Path
import os
from datetime import datetime, date
import logging
import re

import portalocker

from ..config.settings import LOGS_DURABLE_WRITES
from .errors import FileOperationError

logger = logging.getLogger(__name__)

DURABLE_WRITES = bool(LOGS_DURABLE_WRITES)

BYTES_PER_MB = 1024 * 1024


# -----------------------
# Escrita segura
# -----------------------
def write_text(path: Path, text: str) -> None:
    """Anexe texto a `path` de forma segura, usando lock e fsync.

    Cria o diretório pai quando necessário e aplica um lock exclusivo via
    `portalocker` durante a escrita. Falhas de I/O são registadas e não
    propagadas: o sink de logs funciona em modo best-effort.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            locked = False
            try:
                try:
                    portalocker.lock(fh, portalocker.LOCK_EX)
                    locked = True
                except portalocker.exceptions.LockException as exc:
                    logger.debug("write_text: portalocker.lock falhou em %s: %s", path, exc)

                fh.write(text)
                fh.flush()

                if DURABLE_WRITES:
                    try:
                        os.fsync(fh.fileno())
                    except OSError as exc:
                        logger.debug("write_text: fsync falhou em %s: %s", path, exc)
            finally:
                if locked:
                    try:
                        portalocker.unlock(fh)
                    except portalocker.exceptions.LockException as exc:
                        logger.debug("write_text: portalocker.unlock falhou em %s: %s", path, exc)
    except OSError as exc:
        logger.error("write_text: falhou em %s: %s", path, exc, exc_info=True)


# -----------------------
# Normalização e formatação
# -----------------------
def sanitize_log_name(raw_name: str, fallback: str = "script") -> str:
    """Sanitize o nome base de um ficheiro de log para uso seguro no filesystem.

    Remove caracteres potencialmente perigosos e limita o comprimento.
    """
    rn = Path(raw_name or fallback).name.lstrip(".")
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", rn)
    if not name:
        name = fallback
    if len(name) > 200:
        name = name[:200]
    return name


def render_message(fmt, args: tuple) -> str:
    """Aplica formatação `%` à mensagem sem nunca levantar exceção.

    Quando a formatação falha, devolve o formato e os argumentos lado a lado.
    """
    try:
        s = "" if fmt is None else str(fmt)
    except (TypeError, ValueError):
        s = "<unrepr>"
    if not args:
        return s
    try:
        return s % args
    except (TypeError, ValueError, KeyError) as exc:
        logger.debug("render_message: formatação inválida %r: %s", s, exc)
        return f"{s} {args!r}"


def build_human_line(ts: str, level: str, msg_str: str) -> str:
    r"""Compõe linha legível por humanos.

    Formato:
      <ts> [LEVEL] <msg_str>\n

    Novas linhas internas são achatadas para espaços.
    """
    body = "" if msg_str is None else str(msg_str)
    single = body.replace("\n", " ").replace("\r", " ").rstrip()
    return f"{ts} [{level}] {single}\n"


def format_date_for_log(dt=None) -> str:
    """Retorna data no formato YYYY-MM-DD (segura para nomes)."""
    if dt is None:
        return date.today().isoformat()
    if isinstance(dt, datetime):
        return dt.date().isoformat()
    return dt.isoformat()


def format_ts_for_log(dt: datetime | None = None) -> str:
    """Retorna timestamp local no formato YYYY-MM-DD HH:MM:SS."""
    return (dt or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")


def to_megabytes(size: int | float) -> float:
    """Converte bytes para MB (base 1024)."""
    return float(size) / BYTES_PER_MB


# -----------------------
# Diretórios / permissões
# -----------------------
def ensure_dir_writable(p: Path) -> bool:
    """Garante, em melhor esforço, que `p` existe e é gravável."""
    try:
        p.mkdir(parents=True, exist_ok=True)
        test = p / f".touch-{os.getpid()}"
        try:
            with open(test, "a", encoding="utf-8") as f:
                f.write("ok")
                f.flush()
        except OSError as exc:
            logger.error("ensure_dir_writable: write test failed for %s: %s", p, exc, exc_info=True)
            return False
        finally:
            try:
                if test.exists():
                    test.unlink()
            except OSError:
                # nosec B110 - cleanup must not raise in best-effort path
                pass
        return True
    except OSError as exc:
        logger.error("ensure_dir_writable: failed for %s: %s", p, exc, exc_info=True)
        return False


def ensure_directory(p: Path, label: str) -> Path:
    """Cria `p` (com pais) ou levanta `FileOperationError`.

    `label` identifica o diretório na mensagem de erro (ex.: "output").
    """
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileOperationError(f"failed to create {label} directory {p}", p, exc) from exc
    if not p.is_dir():
        raise FileOperationError(f"failed to create {label} directory {p}: not a directory", p)
    return p


# -----------------------
# Movimentação
# -----------------------
def _attempt_rename(s: Path, d: Path) -> bool:
    try:
        s.rename(d)
        return True
    except OSError as exc:
        logger.debug("atomic_move: rename failed: %s", exc)
        return False


def atomic_move(src: Path, dst: Path) -> Path:
    """Move `src` para `dst` via rename atômico.

    Tenta `Path.rename` e, se recusado (ex.: destino existente no Windows),
    `os.replace`. Não há cópia nem nova tentativa; a falha de `os.replace`
    é propagada como `OSError`.
    """
    if _attempt_rename(src, dst):
        return dst
    os.replace(src, dst)
    return dst
