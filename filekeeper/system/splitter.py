"""Splitter: particiona um ficheiro de linhas em partes de tamanho limitado.

Lê o ficheiro de origem em streaming, escreve ``<base>_part<i><ext>`` com no
máximo ``lines_per_part`` linhas cada e, no fim, move a origem para o
diretório de processados com um rename atômico.

Partes já gravadas não são desfeitas quando uma falha ocorre a meio do
stream ou na relocação da origem.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field
from pathlib import Path

from .errors import FileOperationError, InvalidArgumentError
from .log_helpers import atomic_move, ensure_directory, to_megabytes

logger = logging.getLogger(__name__)


# ========================
# 0. Tipos
# ========================


@dataclass(frozen=True)
class SplitJob:
    """Parâmetros de uma divisão; construído por chamada."""

    source_path: str | Path
    lines_per_part: int
    output_dir: str | Path
    processed_dir: str | Path

    def validate(self) -> None:
        """Levanta `InvalidArgumentError` sem tocar no filesystem."""
        lpp = self.lines_per_part
        if isinstance(lpp, bool) or not isinstance(lpp, int) or lpp <= 0:
            raise InvalidArgumentError(f"lines per part must be positive, got {lpp!r}")
        if any(p is None or str(p) == "" for p in (self.source_path, self.output_dir, self.processed_dir)):
            raise InvalidArgumentError("source_path, output_dir and processed_dir must not be empty")
        # Path("") vira "." e não nomeia um ficheiro
        if not Path(self.source_path).name:
            raise InvalidArgumentError(f"source_path must name a file, got {str(self.source_path)!r}")


@dataclass(frozen=True)
class PartFile:
    """Parte gerada; imutável depois de fechada."""

    index: int
    path: Path
    line_count: int


@dataclass
class SplitResult:
    source_path: Path
    processed_path: Path
    parts: list[PartFile] = field(default_factory=list)
    source_size: int = 0
    total_lines: int = 0
    elapsed: float = 0.0

    @property
    def part_count(self) -> int:
        return len(self.parts)

    @property
    def bytes_per_second(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.source_size / self.elapsed


def part_file_name(source_name: str, index: int) -> str:
    """Nome da parte `index` (1-based) para a origem `source_name`."""
    base, ext = os.path.splitext(source_name)
    return f"{base}_part{index}{ext}"


def _strip_terminator(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
    return raw


# ========================
# 1. Splitter
# ========================


class Splitter:
    """Divide ficheiros por número de linhas e arquiva a origem."""

    def __init__(self, log):
        self.log = log

    def split(
        self,
        source_path: str | Path,
        lines_per_part: int,
        output_dir: str | Path,
        processed_dir: str | Path,
    ) -> SplitResult:
        """Divide `source_path` em partes de `lines_per_part` linhas.

        As partes vão para `output_dir`; a origem é movida para
        `processed_dir` com o nome original. Levanta `InvalidArgumentError`
        para argumentos inválidos e `FileOperationError` para falhas de I/O.
        """
        return self.run(SplitJob(source_path, lines_per_part, output_dir, processed_dir))

    def run(self, job: SplitJob) -> SplitResult:
        job.validate()
        start = time.monotonic()

        source = Path(job.source_path)
        output_dir = ensure_directory(Path(job.output_dir), "output")
        processed_dir = ensure_directory(Path(job.processed_dir), "processed")

        try:
            src_fh = source.open("rb")
        except OSError as exc:
            raise FileOperationError(f"failed to open file {source}", source, exc) from exc

        with src_fh:
            try:
                source_size = os.fstat(src_fh.fileno()).st_size
            except OSError as exc:
                raise FileOperationError(f"failed to get file stats for {source}", source, exc) from exc

            self.log.info("Starting to process file: %s (size: %.2f MB)", source, to_megabytes(source_size))
            parts, total_lines = self._stream_parts(src_fh, source, job.lines_per_part, output_dir)

        processed_path = processed_dir / source.name
        try:
            atomic_move(source, processed_path)
        except OSError as exc:
            raise FileOperationError(
                f"failed to move file {source} to processed directory {processed_dir}", source, exc
            ) from exc

        result = SplitResult(
            source_path=source,
            processed_path=processed_path,
            parts=parts,
            source_size=source_size,
            total_lines=total_lines,
            elapsed=time.monotonic() - start,
        )
        self._report(result)
        return result

    # Auxiliar de run: escreve as partes; garante o fecho da parte corrente
    def _stream_parts(self, src_fh, source: Path, lines_per_part: int, output_dir: Path):
        parts: list[PartFile] = []
        lines_count = 0
        part_lines = 0
        out_fh = None
        out_path = None
        try:
            while True:
                try:
                    raw = src_fh.readline()
                except OSError as exc:
                    raise FileOperationError(f"error reading file {source}", source, exc) from exc
                if not raw:
                    break

                if lines_count % lines_per_part == 0:
                    if out_fh is not None:
                        self._close_part(out_fh, out_path)
                        out_fh = None
                        parts.append(PartFile(len(parts) + 1, out_path, part_lines))
                        self.log.info("Created output file part %d", len(parts))
                    out_path = output_dir / part_file_name(source.name, len(parts) + 1)
                    try:
                        out_fh = out_path.open("wb")
                    except OSError as exc:
                        raise FileOperationError(f"failed to create output file {out_path}", out_path, exc) from exc
                    part_lines = 0

                try:
                    out_fh.write(_strip_terminator(raw) + b"\n")
                except OSError as exc:
                    raise FileOperationError(f"failed to write to output file {out_path}", out_path, exc) from exc
                lines_count += 1
                part_lines += 1

            if out_fh is not None:
                self._close_part(out_fh, out_path)
                out_fh = None
                parts.append(PartFile(len(parts) + 1, out_path, part_lines))
                self.log.info("Created final output file part %d", len(parts))
        finally:
            if out_fh is not None:
                try:
                    out_fh.close()
                except OSError as exc:
                    logger.debug("split: falha ao fechar %s após erro: %s", out_path, exc)
        return parts, lines_count

    @staticmethod
    def _close_part(out_fh, out_path: Path) -> None:
        # close() faz o flush do buffer; um erro aqui é um erro de escrita
        try:
            out_fh.close()
        except OSError as exc:
            raise FileOperationError(f"failed to write to output file {out_path}", out_path, exc) from exc

    def _report(self, result: SplitResult) -> None:
        size_mb = to_megabytes(result.source_size)
        rate_mb = to_megabytes(result.bytes_per_second)
        self.log.summary("Processed file: %s", result.source_path.name)
        self.log.summary("  - Original size: %.2f MB", size_mb)
        self.log.summary("  - Files created: %d", result.part_count)
        self.log.summary("  - Processing time: %.2f seconds", result.elapsed)
        self.log.summary("  - Processing rate: %.2f MB/sec (%.0f bytes/sec)", rate_mb, result.bytes_per_second)
        self.log.summary("  - Processed file moved to: %s", result.processed_path)
