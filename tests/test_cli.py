import json
from pathlib import Path

from fakes import FakeTools

from mp4batch.cli import confirm, main, resolve_mode
from mp4batch.model import RunMode


def _write_cfg(tmp_path: Path) -> Path:
    base = Path(__file__).resolve().parents[1]
    ex = (base / "config.example.toml").read_text()
    ex = ex.replace('"/srv/video/script.txt"', f'"{tmp_path / "script.txt"}"')
    ex = ex.replace('"/srv/video/source"', f'"{tmp_path / "source"}"')
    ex = ex.replace('"/srv/video/converted"', f'"{tmp_path / "dest"}"')
    ex = ex.replace('"/srv/video/joined"', f'"{tmp_path / "join"}"')
    cfg_file = tmp_path / "config.toml"
    cfg_file.write_text(ex)
    (tmp_path / "source").mkdir()
    return cfg_file


def test_print_config(tmp_path, capsys):
    cfg_file = _write_cfg(tmp_path)
    assert main(["--config", str(cfg_file), "--print-config"]) == 0
    out = capsys.readouterr().out
    assert "mp4batch config summary" in out
    assert "mode        : normal" in out


def test_missing_config_exit_code(tmp_path, capsys):
    assert main(["--config", str(tmp_path / "missing.toml")]) == 2
    assert "config error" in capsys.readouterr().err


def test_dry_run_lists_plan_without_converting(tmp_path, capsys):
    cfg_file = _write_cfg(tmp_path)
    (tmp_path / "source" / "a.avi").write_bytes(b"x")
    tools = FakeTools()

    assert main(["--config", str(cfg_file), "--dry-run"], tools=tools) == 0
    out = capsys.readouterr().out
    assert "(SINGLE)" in out
    assert "DRY RUN" in out
    assert tools.calls == 0
    assert (tmp_path / "source" / "a.avi").exists()


def test_full_run_converts_joins_and_cleans_up(tmp_path, capsys):
    cfg_file = _write_cfg(tmp_path)
    src = tmp_path / "source"
    for n in ("a.avi", "b.avi", "c.mkv", "d.mov"):
        (src / n).write_bytes(b"x")
    (tmp_path / "script.txt").write_text("bv:900 all | a.avi b.avi\n", encoding="utf-8")
    report = tmp_path / "report.json"
    tools = FakeTools(transcode_fail={"d.mov"})

    rc = main(
        ["--config", str(cfg_file), "--yes", "--write-report", str(report)],
        tools=tools,
    )

    assert rc == 5  # d.mov failed
    assert (tmp_path / "join" / "all.mp4").exists()
    assert (tmp_path / "dest" / "c.mp4").exists()
    assert not (tmp_path / "dest" / "d.mp4").exists()
    assert sorted(p.name for p in src.iterdir()) == ["d.mov"]
    assert {c["bv"] for c in tools.transcoded if c["input"].name in {"a.avi", "b.avi"}} == {900}

    data = json.loads(report.read_text())
    assert data["deleted"] == ["a.avi", "b.avi", "c.mkv"]
    assert data["kept"] == ["d.mov"]
    assert data["entities"][0]["status"] == "successful"
    assert len(data["entities"][0]["children"]) == 2


def test_declined_prompt_aborts(tmp_path, monkeypatch):
    cfg_file = _write_cfg(tmp_path)
    (tmp_path / "source" / "a.avi").write_bytes(b"x")
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    tools = FakeTools()
    assert main(["--config", str(cfg_file)], tools=tools) == 1
    assert tools.calls == 0


def test_confirm_treats_eof_as_no():
    def reader(prompt):
        raise EOFError

    assert confirm("go?", reader=reader) is False
    assert confirm("go?", reader=lambda p: " YES ") is True


def test_resolve_mode_prefers_argument_then_env():
    assert resolve_mode("legacy_join", environ={}) is RunMode.LEGACY_JOIN
    assert resolve_mode(None, environ={"MP4BATCH_MODE": "Legacy_Convert"}) is RunMode.LEGACY_CONVERT
    assert resolve_mode(None, environ={}) is RunMode.NORMAL


def test_confirm_reads_patched_input(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    assert confirm("go?") is True
    monkeypatch.setattr("builtins.input", lambda prompt: "")
    assert confirm("go?") is False
