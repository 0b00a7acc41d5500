from __future__ import annotations

from pathlib import Path

from record_ingest.cli import main as cli_main

"""Exit code contract: 0 all accepted, 2 some rejected, 1 fatal."""


def test_exit_code_fatal_no_input(temp_workdir: Path, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_missing_input(temp_workdir: Path, capsys):
    code = cli_main(["--input", "data/missing.csv"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR input: cannot open input" in out
    assert "SUMMARY" not in out


def test_exit_code_fatal_invalid_config(temp_workdir: Path, capsys):
    cfg = temp_workdir / "config" / "bad.yml"
    cfg.write_text("output_path: x.csv\n", encoding="utf-8")
    assert cli_main(["--config", str(cfg)]) == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_all_success(write_input, capsys):
    write_input("Laptop,1299.99", "Mouse,49.99")
    code = cli_main(["--input", "data/products.csv"])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY lines=2 accepted=2 rejected=0 success_rate=100.0%" in out


def test_exit_code_partial(write_input, capsys):
    write_input("Laptop,1299.99", "Gadget,abc")
    code = cli_main(["--input", "data/products.csv"])
    out = capsys.readouterr().out
    assert code == 2
    assert "SUMMARY lines=2 accepted=1 rejected=1 success_rate=50.0%" in out
