import io
import logging
import re

from filekeeper.system import logs as logs_mod
from filekeeper.system.logs import MemoryLogger, RunLogger

LINE_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[(INFO|WARNING|ERROR|SUMMARY)\] .*\n$")


def test_run_logger_creates_dated_file(tmp_path):
    """RunLogger cria <root>/<app>_<data>.log e grava linhas formatadas."""
    out = io.StringIO()
    log = RunLogger("splitter_test", root=tmp_path / "logs", stream=out)
    log.info("hello %s", "world")
    log.error("falhou %d", 3)

    assert log.log_path.parent == tmp_path / "logs"
    assert re.fullmatch(r"splitter_test_\d{4}-\d{2}-\d{2}\.log", log.log_path.name)
    lines = log.log_path.read_text(encoding="utf-8").splitlines(keepends=True)
    assert len(lines) == 2
    assert all(LINE_RE.match(line) for line in lines)
    assert lines[0].rstrip().endswith("[INFO] hello world")
    assert lines[1].rstrip().endswith("[ERROR] falhou 3")
    assert out.getvalue().splitlines(keepends=True) == lines


def test_run_logger_env_root_and_default_name(tmp_path, monkeypatch):
    """Sem root explícito usa FILEKEEPER_LOG_ROOT; nome vazio cai para 'script'."""
    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "envlogs"))
    log = RunLogger("", stream=io.StringIO())
    log.summary("done")

    assert log.log_path.parent == tmp_path / "envlogs"
    assert log.log_path.name.startswith("script_")
    assert "[SUMMARY] done" in log.log_path.read_text(encoding="utf-8")


def test_run_logger_close_stops_file_writes(tmp_path):
    """Após close() as mensagens só vão para o console."""
    out = io.StringIO()
    with RunLogger("app", root=tmp_path, stream=out) as log:
        log.info("before")
    assert log.closed
    log.warning("after")

    content = log.log_path.read_text(encoding="utf-8")
    assert "before" in content and "after" not in content
    assert "[WARNING] after" in out.getvalue()


def test_run_logger_bad_format_does_not_raise(tmp_path):
    """Formato inconsistente com os args não levanta exceção."""
    log = RunLogger("app", root=tmp_path, stream=io.StringIO())
    log.info("sem placeholder", 1, 2)
    assert "sem placeholder" in log.log_path.read_text(encoding="utf-8")


def test_display_credits(tmp_path):
    """Banner é escrito em bruto e seguido de uma linha INFO de arranque."""
    out = io.StringIO()
    log = RunLogger("app", root=tmp_path, stream=out)
    log.display_credits("== %s %s ==\n", "tool", "1.2.3")

    content = log.log_path.read_text(encoding="utf-8")
    assert content.startswith("== TOOL 1.2.3 ==\n")
    assert "[INFO] TOOL v1.2.3 started" in content
    assert out.getvalue().startswith("== TOOL 1.2.3 ==")


def test_run_logger_forwards_to_stdlib(tmp_path, caplog, monkeypatch):
    """Registos chegam também ao logger 'filekeeper.run' da stdlib."""
    monkeypatch.setattr(logging.getLogger(logs_mod.RUN_LOGGER_NAME), "propagate", True)
    log = RunLogger("app", root=tmp_path, stream=io.StringIO())
    with caplog.at_level(logging.INFO, logger=logs_mod.RUN_LOGGER_NAME):
        log.summary("total %d", 4)
    assert any(r.getMessage() == "total 4" and r.levelname == "SUMMARY" for r in caplog.records)


def test_memory_logger_records():
    """MemoryLogger guarda nível e mensagem formatada."""
    m = MemoryLogger()
    m.info("a %d", 1)
    m.error("b")
    m.summary("c")
    m.warning("d")
    assert m.records == [("INFO", "a 1"), ("ERROR", "b"), ("SUMMARY", "c"), ("WARNING", "d")]
    assert m.messages("ERROR") == ["b"]
    assert m.messages() == ["a 1", "b", "c", "d"]
