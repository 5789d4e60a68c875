"""Configurações do filekeeper.

Este módulo centraliza os valores padrão do splitter, do housekeeper e do
subsistema de logs. Carrega ``DEFAULT_SETTINGS`` e aplica overrides a partir
de variáveis de ambiente com prefixo ``FILEKEEPER_*`` (não há ficheiro de
configuração). As funções públicas principais são:

- ``load_settings()`` -> dicionário com as chaves de ``DEFAULT_SETTINGS``.
- ``validate_settings()`` -> valida tipos e limites, levanta ``ValueError``.
"""

import logging
import os

logger = logging.getLogger(__name__)

# ========================
# Constantes e padrões globais
# ========================

ENV_PREFIX = "FILEKEEPER_"

DEFAULT_SETTINGS = {
    "log_root": "logs",
    "log_level": "INFO",
    "app_name": "filekeeper",
    "lines_per_part": 100000,
    "output_dir": "output",
    "processed_dir": "processed",
    "max_age_days": 7,
    "max_files": 100,
    "recursive": False,
}

_INT_KEYS = ("lines_per_part", "max_age_days", "max_files")
_BOOL_KEYS = ("recursive",)
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")

# Durabilidade das escritas de log (fsync por linha)
LOGS_DURABLE_WRITES = os.environ.get("LOGS_DURABLE_WRITES", "1").lower() in _TRUE_VALUES


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; carrega todas as configurações do ambiente
def load_settings(env: dict | None = None) -> dict:
    """Carrega configurações combinando DEFAULT_SETTINGS + ambiente.

    `env` permite injetar um mapeamento (testes); por omissão usa
    ``os.environ``. Valores inválidos são registados e o padrão mantido.
    """
    settings = dict(DEFAULT_SETTINGS)
    env_items = dict(os.environ if env is None else env)
    _apply_env_overrides(env_items, settings)
    return settings


# ========================
# 2. Funções auxiliares para overrides
# ========================


# Auxilia load_settings; converte cada FILEKEEPER_<KEY> para o tipo do padrão
def _apply_env_overrides(env_items: dict, settings: dict) -> None:
    """Aplica overrides ``FILEKEEPER_<KEY>`` sobre ``settings``."""
    for key in DEFAULT_SETTINGS:
        env_key = f"{ENV_PREFIX}{key.upper()}"
        if env_key not in env_items:
            continue
        raw_val = env_items[env_key]
        if key in _INT_KEYS:
            try:
                settings[key] = int(raw_val)
            except (TypeError, ValueError):
                logger.warning("%s inválido: %s", env_key, raw_val)
        elif key in _BOOL_KEYS:
            parsed = parse_bool(raw_val)
            if parsed is None:
                logger.warning("%s inválido: %s", env_key, raw_val)
            else:
                settings[key] = parsed
        else:
            val = str(raw_val).strip()
            if val:
                settings[key] = val


def parse_bool(raw) -> bool | None:
    """Interpreta strings tipo flag ("1", "yes", "off"...); None se irreconhecível."""
    if isinstance(raw, bool):
        return raw
    s = str(raw).strip().lower()
    if s in _TRUE_VALUES:
        return True
    if s in _FALSE_VALUES:
        return False
    return None


# ========================
# 3. Validação
# ========================


# Função principal de validação; garante tipos e limites corretos
def validate_settings(settings: dict) -> dict:
    """Normaliza e valida o dicionário de configurações.

    Completa chaves ausentes com os padrões e levanta ``ValueError`` para
    valores fora dos limites.
    """
    if not isinstance(settings, dict):
        raise TypeError("settings deve ser um dict")

    for key, default in DEFAULT_SETTINGS.items():
        settings.setdefault(key, default)

    for key in _INT_KEYS:
        try:
            settings[key] = int(settings[key])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{key} deve ser inteiro: {settings[key]!r}") from exc

    if settings["lines_per_part"] <= 0:
        raise ValueError(f"lines_per_part deve ser > 0: {settings['lines_per_part']}")
    if settings["max_age_days"] < 0:
        raise ValueError(f"max_age_days deve ser >= 0: {settings['max_age_days']}")
    if settings["max_files"] < 0:
        raise ValueError(f"max_files deve ser >= 0: {settings['max_files']}")

    recursive = parse_bool(settings["recursive"])
    if recursive is None:
        raise ValueError(f"recursive deve ser booleano: {settings['recursive']!r}")
    settings["recursive"] = recursive

    settings["log_level"] = str(settings["log_level"]).upper()
    logger.debug("Configurações validadas e normalizadas")
    return settings
