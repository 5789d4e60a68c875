"""Ponto de entrada do filekeeper.

Este módulo realiza a inicialização: parsing de argumentos CLI, configuração
do logging da stdlib, criação do logger de execução (ficheiro datado +
console), banner e despacho do subcomando. A lógica de runtime fica em
`core` para facilitar testes e reutilização.
"""

import logging as _logging
import sys

from . import __version__
from .core.args import parse_args, get_log_config
from .core.core import EXIT_INVALID, run_command
from .system.logs import RUN_LOGGER_NAME, RunLogger

APP_NAME = "filekeeper"

BANNER = """
=========================================
  %s v%s
  split by lines / housekeep by age or count
=========================================
"""


def main(argv: list[str] | None = None) -> int:
    """Inicializa a aplicação e executa o subcomando pedido.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.

    Returns:
        Código de saída (0 sucesso, 1 remoções parciais, 2 argumentos
        inválidos, 3 falha de I/O).
    """
    try:
        args = parse_args(argv)
    except ValueError as exc:
        print(f"filekeeper: erro: {exc}", file=sys.stderr)
        return EXIT_INVALID
    log_conf = get_log_config(args)

    level = getattr(_logging, log_conf.get("level", "WARNING"), _logging.WARNING)
    _logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # o RunLogger já escreve no console; evita linhas duplicadas no stderr
    run_std = _logging.getLogger(RUN_LOGGER_NAME)
    prev_propagate = run_std.propagate
    prev_hook = sys.excepthook
    run_std.propagate = False
    try:
        with RunLogger(app_name=log_conf.get("app_name") or APP_NAME, root=log_conf.get("root")) as log:
            _install_excepthook(log)
            log.display_credits(BANNER, APP_NAME, __version__)
            return run_command(args, log)
    finally:
        # o hook referencia um logger já fechado
        sys.excepthook = prev_hook
        run_std.propagate = prev_propagate


def _install_excepthook(log) -> None:
    """Instala ``sys.excepthook`` que envia exceções não tratadas para o log de execução."""

    def _exc_hook(exc_type, exc_value, exc_tb):
        try:
            log.error("Unhandled exception: %s: %s", exc_type.__name__, exc_value)
        finally:
            sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _exc_hook


if __name__ == "__main__":
    sys.exit(main())
