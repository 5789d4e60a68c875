"""Pacote system: splitter, housekeeper, logs e helpers de I/O.

Re-exports úteis para quem só precisa dos componentes principais.
"""

from .errors import FileOperationError, InvalidArgumentError
from .housekeeper import AgePolicy, CountPolicy, Housekeeper, PruneResult
from .logs import MemoryLogger, RunLogger
from .splitter import SplitJob, SplitResult, Splitter

__all__ = [
    "AgePolicy",
    "CountPolicy",
    "FileOperationError",
    "Housekeeper",
    "InvalidArgumentError",
    "MemoryLogger",
    "PruneResult",
    "RunLogger",
    "SplitJob",
    "SplitResult",
    "Splitter",
]
