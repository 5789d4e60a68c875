import os

import pytest


def test_main_split_end_to_end(tmp_path, monkeypatch, capsys):
    """main divide o ficheiro, escreve o log datado e devolve 0."""
    from filekeeper.main import main

    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "logs"))
    src = tmp_path / "big.txt"
    src.write_text("".join(f"l{i}\n" for i in range(10)))

    rc = main(["split", str(src), "-n", "4", "-o", str(tmp_path / "out"), "-p", str(tmp_path / "done")])

    assert rc == 0
    assert sorted(os.listdir(tmp_path / "out")) == ["big_part1.txt", "big_part2.txt", "big_part3.txt"]
    assert (tmp_path / "done" / "big.txt").exists()
    logs = os.listdir(tmp_path / "logs")
    assert len(logs) == 1 and logs[0].startswith("filekeeper_")
    out = capsys.readouterr().out
    assert "FILEKEEPER v" in out
    assert "[SUMMARY]   - Files created: 3" in out


def test_main_invalid_number_returns_2(tmp_path, monkeypatch, capsys):
    """Validação de argumentos falha antes de criar o logger."""
    from filekeeper.main import main

    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "logs"))
    assert main(["prune-count", str(tmp_path), "-m", "-1"]) == 2
    assert "max-files" in capsys.readouterr().err
    assert not (tmp_path / "logs").exists()


def test_main_missing_directory_returns_3(tmp_path, monkeypatch):
    from filekeeper.main import main

    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "logs"))
    assert main(["--app-name", "hk", "prune-age", str(tmp_path / "nope"), "-d", "1"]) == 3
    assert any(n.startswith("hk_") for n in os.listdir(tmp_path / "logs"))


def test_main_scopes_excepthook_and_propagation_to_the_run(tmp_path, monkeypatch):
    """O excepthook e o propagate=False valem só durante a execução."""
    import logging

    import filekeeper.main as main_mod
    from filekeeper.system.logs import RUN_LOGGER_NAME

    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "logs"))
    original_hook = main_mod.sys.excepthook
    monkeypatch.setattr(main_mod.sys, "excepthook", original_hook)
    run_std = logging.getLogger(RUN_LOGGER_NAME)
    monkeypatch.setattr(run_std, "propagate", True)

    seen = {}

    def fake_run_command(args, log):
        seen["hook"] = main_mod.sys.excepthook.__name__
        seen["propagate"] = run_std.propagate
        return 0

    monkeypatch.setattr(main_mod, "run_command", fake_run_command)

    assert main_mod.main(["prune-count", str(tmp_path), "-m", "5"]) == 0
    assert seen == {"hook": "_exc_hook", "propagate": False}
    assert main_mod.sys.excepthook is original_hook
    assert run_std.propagate is True


def test_main_restores_excepthook_when_run_raises(tmp_path, monkeypatch):
    import filekeeper.main as main_mod

    monkeypatch.setenv("FILEKEEPER_LOG_ROOT", str(tmp_path / "logs"))
    original_hook = main_mod.sys.excepthook
    monkeypatch.setattr(main_mod.sys, "excepthook", original_hook)

    def boom(args, log):
        raise RuntimeError("boom")

    monkeypatch.setattr(main_mod, "run_command", boom)

    with pytest.raises(RuntimeError):
        main_mod.main(["prune-count", str(tmp_path), "-m", "5"])
    assert main_mod.sys.excepthook is original_hook


def test_main_argparse_error_exits():
    from filekeeper.main import main

    with pytest.raises(SystemExit):
        main(["unknown-command"])
