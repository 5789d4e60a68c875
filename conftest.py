# conftest.py
# Configuração global para pytest: adiciona a raiz do projeto ao sys.path para permitir imports absolutos
import sys
from pathlib import Path

import pytest

ROOT_PATH = Path(__file__).parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))


@pytest.fixture
def memory_log():
    """Sink de logs em memória injetado nos componentes."""
    from filekeeper.system.logs import MemoryLogger

    return MemoryLogger()
