import pytest

from filekeeper.config import settings as settings_mod


def test_load_settings_defaults():
    """Sem variáveis de ambiente, devolve uma cópia dos padrões."""
    s = settings_mod.load_settings(env={})
    assert s == settings_mod.DEFAULT_SETTINGS
    assert s is not settings_mod.DEFAULT_SETTINGS


def test_load_settings_env_overrides():
    """Variáveis FILEKEEPER_* sobrescrevem e são convertidas para o tipo do padrão."""
    env = {
        "FILEKEEPER_LINES_PER_PART": "250",
        "FILEKEEPER_RECURSIVE": "yes",
        "FILEKEEPER_OUTPUT_DIR": "/data/out",
        "FILEKEEPER_MAX_FILES": "12",
        "UNRELATED": "x",
    }
    s = settings_mod.load_settings(env=env)
    assert s["lines_per_part"] == 250
    assert s["recursive"] is True
    assert s["output_dir"] == "/data/out"
    assert s["max_files"] == 12


def test_load_settings_invalid_values_keep_defaults(caplog):
    """Valores inválidos são registados e o padrão mantido."""
    s = settings_mod.load_settings(env={"FILEKEEPER_MAX_AGE_DAYS": "abc", "FILEKEEPER_RECURSIVE": "talvez"})
    assert s["max_age_days"] == settings_mod.DEFAULT_SETTINGS["max_age_days"]
    assert s["recursive"] is False
    assert any("FILEKEEPER_MAX_AGE_DAYS" in r.getMessage() for r in caplog.records)


def test_load_settings_reads_process_env(monkeypatch):
    """Por omissão usa os.environ."""
    monkeypatch.setenv("FILEKEEPER_APP_NAME", "batch")
    assert settings_mod.load_settings()["app_name"] == "batch"


def test_parse_bool():
    assert settings_mod.parse_bool("ON") is True
    assert settings_mod.parse_bool("0") is False
    assert settings_mod.parse_bool(True) is True
    assert settings_mod.parse_bool("maybe") is None


def test_validate_settings_ok_and_fills_missing():
    """validate_settings completa chaves e normaliza tipos."""
    s = settings_mod.validate_settings({"lines_per_part": "10", "log_level": "debug", "recursive": "1"})
    assert s["lines_per_part"] == 10
    assert s["log_level"] == "DEBUG"
    assert s["recursive"] is True
    assert s["max_files"] == settings_mod.DEFAULT_SETTINGS["max_files"]


@pytest.mark.parametrize(
    "bad",
    [
        {"lines_per_part": 0},
        {"max_age_days": -1},
        {"max_files": -5},
        {"max_files": "x"},
        {"recursive": "sometimes"},
    ],
)
def test_validate_settings_errors(bad):
    with pytest.raises(ValueError):
        settings_mod.validate_settings(dict(bad))


def test_validate_settings_type_error():
    with pytest.raises(TypeError):
        settings_mod.validate_settings(["not", "a", "dict"])
