"""Parser de argumentos da linha de comandos.

Este módulo fornece um parser com três subcomandos:
- ``split``: divide um ficheiro por número de linhas
- ``prune-age``: remove ficheiros mais antigos que N dias
- ``prune-count``: mantém apenas os N ficheiros mais recentes

Opções globais: verbosidade (-v), nível e raiz de logs, nome da aplicação.
Valores omitidos na CLI vêm das configurações (``FILEKEEPER_*`` no ambiente)
e, na falta destas, dos padrões. Prioridade: CLI > ENV > default.
"""

import argparse
from typing import Sequence

from ..config.settings import load_settings

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================

# destino no Namespace -> chave nas configurações
_SETTINGS_FALLBACKS = {
    "lines": "lines_per_part",
    "output_dir": "output_dir",
    "processed_dir": "processed_dir",
    "max_age_days": "max_age_days",
    "max_files": "max_files",
    "recursive": "recursive",
    "log_root": "log_root",
    "app_name": "app_name",
}


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o filekeeper."""
    parser = argparse.ArgumentParser(
        prog="filekeeper",
        description="Utilitários de ficheiros: divisão por linhas e limpeza por idade/contagem",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v, -vv)",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Caminho raiz para os logs (substitui FILEKEEPER_LOG_ROOT)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )
    parser.add_argument(
        "--app-name",
        dest="app_name",
        type=str,
        default=None,
        help="Nome usado no ficheiro de log (<app>_<data>.log)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sp = sub.add_parser("split", help="Divide um ficheiro em partes de N linhas")
    sp.add_argument("source", help="Ficheiro de origem")
    sp.add_argument("-n", "--lines", type=int, default=None, help="Linhas por parte")
    sp.add_argument("-o", "--output-dir", dest="output_dir", default=None, help="Diretório das partes")
    sp.add_argument(
        "-p", "--processed-dir", dest="processed_dir", default=None, help="Diretório para a origem processada"
    )

    pa = sub.add_parser("prune-age", help="Remove ficheiros mais antigos que N dias")
    pa.add_argument("directory", help="Diretório alvo")
    pa.add_argument("-d", "--max-age-days", dest="max_age_days", type=int, default=None, help="Idade máxima em dias")
    pa.add_argument(
        "-r",
        "--recursive",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Percorre também os subdiretórios",
    )

    pc = sub.add_parser("prune-count", help="Mantém apenas os N ficheiros mais recentes")
    pc.add_argument("directory", help="Diretório alvo")
    pc.add_argument("-m", "--max-files", dest="max_files", type=int, default=None, help="Número máximo de ficheiros")

    return parser


# ========================
# 1. Funções auxiliares para análise e validação de argumentos
# ========================


# Auxilia filekeeper.main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None, settings: dict | None = None) -> argparse.Namespace:
    """Analisa argv, completa valores omitidos e retorna Namespace validado."""
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    if settings is None:
        settings = load_settings()
    apply_settings_fallbacks(ns, settings)
    validate_args(ns)
    return ns


def apply_settings_fallbacks(ns: argparse.Namespace, settings: dict) -> None:
    """Preenche argumentos ausentes (None) com valores das configurações."""
    for arg, key in _SETTINGS_FALLBACKS.items():
        if not hasattr(ns, arg):
            continue
        if getattr(ns, arg) is None and key in settings:
            setattr(ns, arg, settings[key])
    if getattr(ns, "log_level", None) is None and settings.get("log_level") and not getattr(ns, "verbose", 0):
        ns.log_level = settings["log_level"]


# Auxilia parse_args; criado para garantir valores corretos antes de tocar no disco
def validate_args(args: argparse.Namespace) -> None:
    """Valida argumentos numéricos do subcomando escolhido."""
    command = getattr(args, "command", None)
    if command == "split":
        try:
            args.lines = int(args.lines)
        except (TypeError, ValueError) as exc:
            raise ValueError("lines deve ser um inteiro > 0") from exc
        if args.lines <= 0:
            raise ValueError("lines deve ser > 0")
    elif command == "prune-age":
        try:
            args.max_age_days = int(args.max_age_days)
        except (TypeError, ValueError) as exc:
            raise ValueError("max-age-days deve ser um inteiro >= 0") from exc
        if args.max_age_days < 0:
            raise ValueError("max-age-days deve ser >= 0")
        args.recursive = bool(args.recursive)
    elif command == "prune-count":
        try:
            args.max_files = int(args.max_files)
        except (TypeError, ValueError) as exc:
            raise ValueError("max-files deve ser um inteiro >= 0") from exc
        if args.max_files < 0:
            raise ValueError("max-files deve ser >= 0")


# ========================
# 2. Função auxiliar para configuração de logging
# ========================


# Auxilia filekeeper.main; criado para extrair configuração de logging dos argumentos
def get_log_config(args: argparse.Namespace) -> dict:
    """Retorna dict com configuração de logging ('level', 'root' e 'app_name')."""
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = "WARNING"

    return {
        "level": level,
        "root": getattr(args, "log_root", None),
        "app_name": getattr(args, "app_name", None),
    }
