from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from record_ingest.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from record_ingest.db.record_store import (
    InMemoryRecordStore,
    PostgresRecordStore,
    StoreResult,
    persist_records,
)
from record_ingest.logging.init import log_summary, set_debug, setup_logging
from record_ingest.models.config_models import IngestConfig
from record_ingest.models.record import Record
from record_ingest.samples import write_sample_csv
from record_ingest.services.pipeline import IngestionError, IngestionResult, run_pipeline
from record_ingest.services.reporter import render_table
from record_ingest.services.summary import render_reason_lines, render_summary_fields

"""CLI entrypoint.

Flow:
- Resolve config (YAML file and/or command-line overrides)
- Run the pipeline: input CSV -> filtered output CSV + rejection log
- Print record tables, reason breakdown and the SUMMARY line
- Optionally persist accepted records and echo the written files
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


@contextmanager
def _db_connection(cfg: IngestConfig) -> Iterator[Any]:  # pragma: no cover (thin wrapper)
    """Provide a psycopg2 cursor inside one transaction.

    接続情報の解決優先順位:
        1. `.env` で読み込まれた環境変数 (main() で上書きモード読み込み済み)
        2. DATABASE_URL / PGDSN、または個別 PGHOST / PGPORT / PGUSER / PGPASSWORD / PGDATABASE
        3. 設定ファイルの database セクション
    """
    import psycopg2

    db_cfg = cfg.database
    dsn = os.getenv("DATABASE_URL") or os.getenv("PGDSN") or db_cfg.dsn
    if not dsn:
        host = os.getenv("PGHOST", db_cfg.host or "localhost")
        port = os.getenv("PGPORT", str(db_cfg.port) if db_cfg.port else "5432")
        user = os.getenv("PGUSER", db_cfg.user or "postgres")
        password = os.getenv("PGPASSWORD", db_cfg.password or "")
        database = os.getenv("PGDATABASE", db_cfg.database or "postgres")
        dsn = f"host={host} port={port} user={user} dbname={database}"
        if password:
            dsn += f" password={password}"

    conn = psycopg2.connect(dsn)
    try:
        with conn:  # commit on success, rollback on exception
            with conn.cursor() as cur:
                yield cur
    finally:
        try:
            conn.close()
        except Exception as e:
            logging.getLogger(__name__).warning("error closing database connection: %s", e)


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv; a failure is only a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except Exception as e:  # pragma: no cover
        logging.getLogger(__name__).warning("failed to load .env via python-dotenv: %s", e)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="record-ingest", description="CSV record ingestion with rejection log"
    )
    p.add_argument("--config", type=Path, help=f"YAML config (default: {DEFAULT_CONFIG_PATH} if present)")
    p.add_argument("--input", help="Input CSV (Name,Price)")
    p.add_argument("--output", help="Output CSV for records above the threshold")
    p.add_argument("--rejections", help="Rejection log CSV (Line,Data,Error)")
    threshold = p.add_mutually_exclusive_group()
    threshold.add_argument("--threshold", type=float, help="Write only records with price > THRESHOLD")
    threshold.add_argument("--no-threshold", action="store_true", help="Write every accepted record")
    p.add_argument("--persist", action="store_true", help="Store accepted records in PostgreSQL")
    p.add_argument("--verify", action="store_true", help="Echo the output file and rejection log")
    p.add_argument("--write-sample", type=Path, metavar="PATH", help="Write a sample input CSV and exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(list(argv))


def _resolve_config(args: argparse.Namespace) -> IngestConfig:
    if args.config is not None:
        cfg = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    elif args.input:
        cfg = IngestConfig(input_path=args.input)
    else:
        raise ConfigError(f"no input: pass --input or provide {DEFAULT_CONFIG_PATH}")

    overrides: dict[str, Any] = {}
    if args.input:
        overrides["input_path"] = args.input
    if args.output:
        overrides["output_path"] = args.output
    if args.rejections:
        overrides["rejection_log_path"] = args.rejections
    if args.threshold is not None:
        overrides["price_threshold"] = args.threshold
    if args.no_threshold:
        overrides["price_threshold"] = None
    return dataclasses.replace(cfg, **overrides) if overrides else cfg


def _persist(records: Sequence[Record], cfg: IngestConfig, logger: logging.Logger) -> list[StoreResult]:
    # DB 接続制御: テスト等で完全に無効化したい場合 DISABLE_DB_CONNECT=1
    if os.getenv("DISABLE_DB_CONNECT") == "1":
        logger.debug("DB connect disabled via DISABLE_DB_CONNECT=1 -> mock mode")
        return persist_records(records, InMemoryRecordStore())
    try:
        with _db_connection(cfg) as cur:
            results = persist_records(records, PostgresRecordStore(cur, table=cfg.database.table))
        logger.info(f"mode=live stored={sum(r.ok for r in results)} table={cfg.database.table}")
        return results
    except Exception as db_e:
        logger.info(f"DB connection failed -> fallback to mock mode: {db_e}")
        return persist_records(records, InMemoryRecordStore())


def _echo_file(title: str, path: Path, encoding: str) -> None:
    print(f"\n--- {title} ({path}) ---")
    if not path.exists():
        print("(missing)")
        return
    print(path.read_text(encoding=encoding), end="")


def _report(result: IngestionResult, cfg: IngestConfig) -> None:
    print("\n--- Valid Records ---")
    print(render_table(result.accepted))
    if cfg.price_threshold is not None:
        print(f"\n--- Records with Price > {cfg.price_threshold} ---")
        print(render_table(result.selected))


def main(argv: Sequence[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はそのまま使う)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.write_sample is not None:
        path = write_sample_csv(args.write_sample)
        logger.info(f"sample written: {path}")
        return EXIT_SUCCESS_ALL

    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    logger.info(f"Reading from: {cfg.input_path}")
    logger.info(f"Writing to: {cfg.output_path}")
    logger.info(f"Rejection log: {cfg.rejection_log_path}")
    if cfg.price_threshold is not None:
        logger.info(f"Price threshold: {cfg.price_threshold}")

    try:
        result = run_pipeline(cfg)
    except IngestionError as e:
        logger.error(f"input: {e}")
        return EXIT_FATAL

    _report(result, cfg)
    logger.info(f"written_rows={result.written_rows} output={cfg.output_path}")
    if result.rejection_log_degraded:
        logger.warning(f"rejection log incomplete: {cfg.rejection_log_path}")
    for line in render_reason_lines(result.summary):
        logger.info(line)

    if args.persist:
        stored = _persist(result.accepted, cfg, logger)
        failed = sum(not r.ok for r in stored)
        logger.info(f"persisted={len(stored) - failed} persist_failed={failed}")

    if args.verify:
        _echo_file("Output File Content", Path(cfg.output_path), cfg.encoding)
        _echo_file("Rejection Log", Path(cfg.rejection_log_path), cfg.encoding)

    # "SUMMARY " ラベルは log_summary 側で付与される
    log_summary(render_summary_fields(result.summary))

    if result.summary.rejected > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
