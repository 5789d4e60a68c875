"""Housekeeper: políticas de retenção por idade e por contagem.

Cada chamada faz um ciclo completo de varrimento e remoção sobre o estado
atual do diretório; nada é guardado entre chamadas. Falhas ao remover um
ficheiro individual são registadas, devolvidas em ``PruneResult.failures`` e
não interrompem o lote. Falhar ao listar o diretório alvo é erro fatal.
"""

from __future__ import annotations

import logging
import os
import stat
import time
from dataclasses import dataclass, field
from pathlib import Path

from .errors import FileOperationError, InvalidArgumentError

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

AGE_OPERATION = "age-based cleanup"
COUNT_OPERATION = "count-based cleanup"


# ========================
# 0. Políticas e resultados
# ========================


def _check_non_negative(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{name} must be >= 0, got {value!r}")


@dataclass(frozen=True)
class AgePolicy:
    """Remove ficheiros com mtime anterior a agora - `max_age_days`."""

    max_age_days: int
    recursive: bool = False
    kind = "age"

    def validate(self) -> None:
        _check_non_negative("max_age_days", self.max_age_days)


@dataclass(frozen=True)
class CountPolicy:
    """Mantém apenas os `max_files` ficheiros mais recentes (não recursivo)."""

    max_files: int
    kind = "count"

    def validate(self) -> None:
        _check_non_negative("max_files", self.max_files)


@dataclass(frozen=True)
class FileCandidate:
    path: Path
    mtime: float


@dataclass(frozen=True)
class DeletionFailure:
    path: Path
    cause: OSError


@dataclass
class PruneResult:
    """Resultado best-effort: removidos (ordenados) e falhas por ficheiro."""

    directory: Path
    operation: str
    scanned: int = 0
    removed: list[Path] = field(default_factory=list)
    failures: list[DeletionFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def removed_count(self) -> int:
        return len(self.removed)


# ========================
# 1. Housekeeper
# ========================


class Housekeeper:
    """Aplica políticas de retenção a um diretório."""

    def __init__(self, log):
        self.log = log

    def apply(self, directory: str | Path, policy) -> PruneResult:
        """Executa `policy` (AgePolicy ou CountPolicy) sobre `directory`."""
        if isinstance(policy, AgePolicy):
            return self.prune_by_age(directory, policy.max_age_days, recursive=policy.recursive)
        if isinstance(policy, CountPolicy):
            return self.prune_by_count(directory, policy.max_files)
        raise InvalidArgumentError(f"unknown housekeeping policy: {policy!r}")

    def prune_by_age(self, directory: str | Path, max_age_days: int, *, recursive: bool = False) -> PruneResult:
        """Remove ficheiros regulares com mtime estritamente anterior ao cutoff.

        Com ``recursive=False`` só os ficheiros diretamente em `directory`
        são considerados; subdiretórios não são percorridos. Com
        ``recursive=True`` toda a subárvore é percorrida. Diretórios nunca
        são removidos.
        """
        policy = AgePolicy(max_age_days, recursive=bool(recursive))
        policy.validate()
        root = _require_directory(directory)

        cutoff = time.time() - policy.max_age_days * SECONDS_PER_DAY
        result = PruneResult(root, AGE_OPERATION)

        if policy.recursive:
            candidates = self._walk_candidates(root, result)
        else:
            candidates = self._list_candidates(root, result)

        for cand in candidates:
            result.scanned += 1
            if cand.mtime < cutoff:
                self._remove(cand.path, result)

        self._log_removals(result)
        return result

    def prune_by_count(self, directory: str | Path, max_files: int) -> PruneResult:
        """Mantém apenas os `max_files` ficheiros mais recentes de `directory`.

        Ordena do mais antigo para o mais recente por mtime (ordenação
        estável: empates preservam a ordem de listagem do filesystem, que
        não é especificada) e remove os excedentes.
        """
        policy = CountPolicy(max_files)
        policy.validate()
        root = _require_directory(directory)

        result = PruneResult(root, COUNT_OPERATION)
        candidates = self._list_candidates(root, result)
        result.scanned = len(candidates)

        if len(candidates) <= policy.max_files:
            self.log.info("No files to remove (current: %d, max: %d)", len(candidates), policy.max_files)
            return result

        candidates.sort(key=lambda c: c.mtime)
        for cand in candidates[: len(candidates) - policy.max_files]:
            self._remove(cand.path, result)

        self._log_removals(result)
        return result

    # ========================
    # 2. Varrimento
    # ========================

    # Auxiliar: ficheiros regulares diretamente em `root`, ordem de listagem
    def _list_candidates(self, root: Path, result: PruneResult) -> list[FileCandidate]:
        candidates: list[FileCandidate] = []
        try:
            with os.scandir(root) as it:
                entries = list(it)
        except OSError as exc:
            raise FileOperationError(f"failed to read directory {root}", root, exc) from exc

        for entry in entries:
            cand = self._candidate(Path(entry.path), entry, result)
            if cand is not None:
                candidates.append(cand)
        return candidates

    # Auxiliar: percorre toda a subárvore; erros de acesso não param o walk
    def _walk_candidates(self, root: Path, result: PruneResult) -> list[FileCandidate]:
        # a raiz tem de ser legível; o resto da árvore é best-effort
        try:
            with os.scandir(root):
                pass
        except OSError as exc:
            raise FileOperationError(f"failed to read directory {root}", root, exc) from exc

        def _on_error(exc: OSError) -> None:
            self.log.error("Error accessing path %s: %s", exc.filename, exc)
            failed = Path(exc.filename) if exc.filename else root
            result.failures.append(DeletionFailure(failed, exc))

        candidates: list[FileCandidate] = []
        for dirpath, _dirnames, filenames in os.walk(root, onerror=_on_error):
            for name in filenames:
                path = Path(dirpath) / name
                cand = self._candidate(path, None, result)
                if cand is not None:
                    candidates.append(cand)
        return candidates

    def _candidate(self, path: Path, entry, result: PruneResult) -> FileCandidate | None:
        try:
            if entry is not None:
                if not entry.is_file(follow_symlinks=False):
                    return None
                st = entry.stat(follow_symlinks=False)
            else:
                st = os.lstat(path)
                if not stat.S_ISREG(st.st_mode):
                    return None
        except OSError as exc:
            self.log.error("Error accessing path %s: %s", path, exc)
            result.failures.append(DeletionFailure(path, exc))
            return None
        return FileCandidate(path, st.st_mtime)

    # ========================
    # 3. Remoção e relatório
    # ========================

    def _remove(self, path: Path, result: PruneResult) -> None:
        try:
            path.unlink()
        except OSError as exc:
            self.log.error("Failed to remove file %s: %s", path, exc)
            logger.debug("housekeeper: unlink falhou em %s", path, exc_info=True)
            result.failures.append(DeletionFailure(path, exc))
            return
        result.removed.append(path)

    def _log_removals(self, result: PruneResult) -> None:
        result.removed.sort(key=str)
        if not result.removed:
            self.log.summary("No files removed during %s", result.operation)
        else:
            self.log.summary("Removed %d files during %s:", len(result.removed), result.operation)
            for p in result.removed:
                self.log.summary("  - %s", p)
        if result.failures:
            self.log.error("%d files could not be removed during %s", len(result.failures), result.operation)


def _require_directory(directory: str | Path) -> Path:
    if directory is None or str(directory) == "":
        raise InvalidArgumentError("directory must not be empty")
    root = Path(directory)
    if not root.exists():
        raise FileOperationError(f"directory does not exist: {root}", root)
    if not root.is_dir():
        raise FileOperationError(f"not a directory: {root}", root)
    return root
