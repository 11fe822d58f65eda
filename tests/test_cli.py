# test_cli.py - CLI commands, batch mode and interactive loop

import io

import pytest
from rich.console import Console

from prefix_autocompleter.cli import CLI, main
from prefix_autocompleter.utils.config_manager import Config
from prefix_autocompleter.utils.logger_utils import Log


@pytest.fixture
def session():
    buf = io.StringIO()
    console = Console(file=buf, width=200, color_system=None)
    cli = CLI(cfg=Config(), log=Log(use_color=False, stream=io.StringIO()), console=console)
    yield cli, buf
    cli.close()


@pytest.fixture
def history(tmp_path):
    path = tmp_path / "history.txt"
    path.write_text("git status\ngit status\ngit commit\n\nls -la\nbad\x01line\n", encoding="utf8")
    return path


def test_learn_then_complete(session):
    cli, buf = session
    for line in ["git status", "git stash", "git stash"]:
        cli.handle(line)
    cli.handle("/complete git st")
    assert buf.getvalue().splitlines()[-1] == "git stash"


def test_complete_without_match_echoes_prefix(session):
    cli, buf = session
    cli.handle("/complete nope")
    assert buf.getvalue().splitlines()[-1] == "nope"


def test_invalid_line_reports_error(session):
    cli, buf = session
    cli.handle("tab\there")
    assert "err: invalid character" in buf.getvalue()
    assert cli.trie.stats()["words_allocated"] == 0


def test_freq_and_dump(session):
    cli, buf = session
    cli.handle("make")
    cli.handle("make")
    cli.handle("/freq make")
    assert "make: 2" in buf.getvalue()
    cli.handle("/dump")
    assert "stored words" in buf.getvalue()


def test_train_file_skips_bad_lines(session, history):
    cli, buf = session
    assert cli.train_file(str(history)) == (4, 1)
    assert cli.trie.autocomplete("git") == "git status"
    assert "trained on 4 lines (1 skipped)" in buf.getvalue()


def test_train_missing_file(session, tmp_path):
    cli, buf = session
    assert cli.train_file(str(tmp_path / "missing.txt")) is None
    assert "err:" in buf.getvalue()


def test_config_command(session):
    cli, buf = session
    cli.handle("/config show_timings yes")
    assert cli.cfg.get("show_timings") is True
    cli.handle("ls")
    assert "learnt (" in buf.getvalue()
    cli.handle("/config theme dark")
    assert "No such option" in buf.getvalue()


def test_stats_and_unknown_command(session):
    cli, buf = session
    cli.handle("x")
    cli.handle("/stats")
    assert "live_nodes" in buf.getvalue()
    cli.handle("/frobnicate")
    assert "unknown cmd" in buf.getvalue()


def test_interactive_loop(monkeypatch):
    lines = iter(["cargo build", "cargo build", "cargo test", "/complete car", "/quit"])
    monkeypatch.setattr("builtins.input", lambda *a: next(lines))
    buf = io.StringIO()
    cli = CLI(cfg=Config(), log=Log(use_color=False, stream=io.StringIO()),
              console=Console(file=buf, width=200, color_system=None))
    cli.start()
    out = buf.getvalue()
    assert "cargo build" in out
    assert "bye." in out
    assert cli.trie.destroyed


def test_interactive_loop_ends_on_eof(monkeypatch):
    def _eof(*a):
        raise EOFError

    monkeypatch.setattr("builtins.input", _eof)
    buf = io.StringIO()
    cli = CLI(cfg=Config(), log=Log(use_color=False, stream=io.StringIO()),
              console=Console(file=buf, width=200, color_system=None))
    cli.start()
    assert "bye." in buf.getvalue()


def test_main_batch_mode(history, capsys):
    rc = main(["--train", str(history), "--complete", "git", "--complete", "zzz"])
    assert rc == 0
    out = capsys.readouterr().out.splitlines()
    assert out[-2:] == ["git status", "zzz"]


def test_main_batch_mode_missing_file(tmp_path, capsys):
    rc = main(["--train", str(tmp_path / "nope.txt"), "--complete", "a"])
    assert rc == 1


def test_main_budget_exhaustion(history):
    assert main(["--train", str(history), "--max-nodes", "2", "--complete", "g"]) == 1


def test_main_rejects_bad_log_level(capsys):
    assert main(["--log-level", "LOUD", "--complete", "a"]) == 2
    assert "unknown level" in capsys.readouterr().err


def test_dump_table_keeps_words_with_next_line_byte(session):
    cli, _ = session
    cli.handle("ab\x85cd")
    cli.handle("ab\x85cd")
    cli.handle("zz")
    table = cli._dump_table()
    assert table.row_count == 2
    assert list(table.columns[0].cells) == ["ab\x85cd", "zz"]
    assert list(table.columns[1].cells) == ["2", "1"]


def test_double_slash_learns_leading_slash(session):
    cli, buf = session
    cli.handle("//usr/bin/python")
    assert cli.trie.frequency("/usr/bin/python") == 1
    assert "unknown cmd" not in buf.getvalue()
    cli.handle("/complete /us")
    assert buf.getvalue().splitlines()[-1] == "/usr/bin/python"


def test_config_max_nodes_applies_next_session(session):
    cli, buf = session
    cli.handle("/config max_nodes 5")
    assert cli.cfg.get("max_nodes") == 5
    assert cli.trie.stats()["max_nodes"] == 0
    assert "applies to the next session" in buf.getvalue()


def test_main_destroys_store_when_training_blows_up(monkeypatch):
    seen = []

    def _boom(self, path):
        seen.append(self)
        raise RuntimeError("disk gone")

    monkeypatch.setattr(CLI, "train_file", _boom)
    with pytest.raises(RuntimeError):
        main(["--train", "history.txt"])
    assert seen[0].trie.destroyed
