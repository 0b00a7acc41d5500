from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from record_ingest.cli import main as cli_main
from record_ingest.cli.__main__ import _parse_args, _resolve_config
from record_ingest.config.loader import ConfigError


def test_overrides_take_precedence_over_config(write_config: Path):
    args = _parse_args(["--input", "other.csv", "--no-threshold", "--rejections", "r.csv"])
    cfg = _resolve_config(args)
    assert cfg.input_path == "other.csv"
    assert cfg.price_threshold is None
    assert cfg.rejection_log_path == "r.csv"
    assert cfg.output_path == "./out/expensive_products.csv"  # from config


def test_input_only_uses_defaults(temp_workdir: Path):
    cfg = _resolve_config(_parse_args(["--input", "in.csv", "--threshold", "10"]))
    assert cfg.input_path == "in.csv"
    assert cfg.price_threshold == 10.0
    assert cfg.output_path == "expensive_products.csv"


def test_no_input_no_config(temp_workdir: Path):
    with pytest.raises(ConfigError, match="no input"):
        _resolve_config(_parse_args([]))


def test_threshold_flags_are_exclusive():
    with pytest.raises(SystemExit):
        _parse_args(["--threshold", "5", "--no-threshold"])


def test_debug_mode_sets_debug_level(write_input, capsys):
    write_input("Ok,1")
    with patch("record_ingest.cli.__main__.set_debug") as mock_debug:
        cli_main(["--input", "data/products.csv", "--debug"])
    mock_debug.assert_called_once()
    assert isinstance(mock_debug.call_args.args[0], logging.Logger)


def test_debug_output_contains_rejection_detail(write_input, capsys):
    write_input("Bad,x")
    cli_main(["--input", "data/products.csv", "--debug"])
    out = capsys.readouterr().out
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG rejected line=1 reason=MALFORMED_PRICE" in out
