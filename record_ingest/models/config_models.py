from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the ingestion tool.

These are produced by record_ingest.config.loader and consumed by the
pipeline and the CLI.
"""

DEFAULT_OUTPUT_PATH = "expensive_products.csv"
DEFAULT_REJECTION_LOG_PATH = "invalid_products.csv"
DEFAULT_PRICE_THRESHOLD = 1000.0
DEFAULT_ENCODING = "utf-8"
DEFAULT_TABLE = "products"


@dataclass(frozen=True)
class DatabaseConfig:
    """Database connection configuration.

    Used as fallback when environment variables are not set.
    Environment variables take precedence over these values.
    """
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str | None = None
    dsn: str | None = None
    table: str = DEFAULT_TABLE


@dataclass(frozen=True)
class IngestConfig:
    """Root configuration for one ingestion run."""
    input_path: str
    output_path: str = DEFAULT_OUTPUT_PATH
    rejection_log_path: str = DEFAULT_REJECTION_LOG_PATH
    price_threshold: float | None = DEFAULT_PRICE_THRESHOLD  # None = フィルタなし
    encoding: str = DEFAULT_ENCODING
    database: DatabaseConfig = DatabaseConfig()
