from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import (
    DEFAULT_ENCODING,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_PRICE_THRESHOLD,
    DEFAULT_REJECTION_LOG_PATH,
    DEFAULT_TABLE,
    DatabaseConfig,
    IngestConfig,
)

"""Config loader.

Responsibilities:
- Load YAML (default config/ingest.yml)
- Validate against the packaged JSON schema
- Apply defaults for optional keys
"""

DEFAULT_CONFIG_PATH = Path("config/ingest.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")


class ConfigError(Exception):
    pass


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or data violates the schema
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def config_from_dict(data: dict[str, Any]) -> IngestConfig:
    """Build an IngestConfig from already-validated data."""
    db_raw = data.get("database") or {}
    db = DatabaseConfig(
        host=db_raw.get("host"),
        port=db_raw.get("port"),
        user=db_raw.get("user"),
        password=db_raw.get("password"),
        database=db_raw.get("database"),
        dsn=db_raw.get("dsn"),
        table=db_raw.get("table", DEFAULT_TABLE),
    )
    threshold = data.get("price_threshold", DEFAULT_PRICE_THRESHOLD)
    return IngestConfig(
        input_path=data["input_path"],
        output_path=data.get("output_path", DEFAULT_OUTPUT_PATH),
        rejection_log_path=data.get("rejection_log_path", DEFAULT_REJECTION_LOG_PATH),
        price_threshold=float(threshold) if threshold is not None else None,
        encoding=data.get("encoding", DEFAULT_ENCODING),
        database=db,
    )


def load_config(path: Path) -> IngestConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)
    return config_from_dict(data)
