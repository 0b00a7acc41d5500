# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from record_ingest.logging.init import reset_logging
from record_ingest.samples import write_sample_csv


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def write_input(temp_workdir: Path):
    """Write ``Name,Price`` header + given lines to data/products.csv."""
    def _write(*lines: str, header: str = "Name,Price", newline: str = "\n") -> Path:
        path = temp_workdir / "data" / "products.csv"
        path.write_bytes((newline.join([header, *lines]) + newline).encode("utf-8"))
        return path
    return _write


@pytest.fixture()
def sample_csv(temp_workdir: Path) -> Path:
    return write_sample_csv(temp_workdir / "data" / "products.csv")


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_path: ./data/products.csv
output_path: ./out/expensive_products.csv
rejection_log_path: ./out/invalid_products.csv
price_threshold: 1000.0
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
  table: products
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    (temp_workdir / "out").mkdir()
    cfg = temp_workdir / "config" / "ingest.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
