"""Core do filekeeper: despacho dos subcomandos para os componentes.

Constrói o Splitter/Housekeeper com o logger recebido, executa o comando e
traduz o resultado em código de saída do processo.
"""

import argparse
import logging

from ..system.errors import FileOperationError, InvalidArgumentError
from ..system.housekeeper import AgePolicy, CountPolicy, Housekeeper
from ..system.splitter import Splitter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARTIAL = 1
EXIT_INVALID = 2
EXIT_IO = 3


def _run_split(args: argparse.Namespace, log) -> int:
    Splitter(log).split(args.source, args.lines, args.output_dir, args.processed_dir)
    return EXIT_OK


def _run_prune(args: argparse.Namespace, log) -> int:
    if args.command == "prune-age":
        policy = AgePolicy(args.max_age_days, recursive=args.recursive)
    else:
        policy = CountPolicy(args.max_files)
    result = Housekeeper(log).apply(args.directory, policy)
    return EXIT_OK if result.ok else EXIT_PARTIAL


_COMMANDS = {
    "split": _run_split,
    "prune-age": _run_prune,
    "prune-count": _run_prune,
}


# Função principal do módulo; executa um comando já validado
def run_command(args: argparse.Namespace, log) -> int:
    """Executa o subcomando de `args` e retorna o código de saída.

    Erros de argumento e de I/O são registados no `log` e convertidos em
    códigos (2 e 3); remoções parciais no housekeeping resultam em 1.
    """
    handler = _COMMANDS.get(getattr(args, "command", None))
    if handler is None:
        log.error("Comando desconhecido: %s", getattr(args, "command", None))
        return EXIT_INVALID
    try:
        return handler(args, log)
    except InvalidArgumentError as exc:
        log.error("Argumento inválido: %s", exc)
        return EXIT_INVALID
    except FileOperationError as exc:
        log.error("%s", exc)
        logger.debug("run_command: falha de I/O em %s", exc.path, exc_info=True)
        return EXIT_IO
