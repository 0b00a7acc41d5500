#!/usr/bin/env python3
"""Sample input generation script.

Writes the canonical mixed sample (14 valid + 6 invalid product rows) and,
optionally, extra synthetic valid rows for volume runs.

Usage:
    python scripts/gen_sample_products.py --out data/products.csv --extra 100000
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from record_ingest.samples import SAMPLE_ROWS, write_sample_csv


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate sample product CSV input")
    parser.add_argument("--out", type=Path, default=Path("products.csv"), help="Output CSV path")
    parser.add_argument("--extra", type=int, default=0, help="Synthetic valid rows to append")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for synthetic rows")
    args = parser.parse_args(argv)

    if args.extra < 0:
        print("--extra must be >= 0", file=sys.stderr)
        return 1

    path = write_sample_csv(args.out, extra_rows=args.extra, seed=args.seed)
    total = len(SAMPLE_ROWS) + args.extra
    print(f"wrote {path} data_lines={total}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
