from __future__ import annotations

import random
from pathlib import Path

"""Sample input generation.

The canonical sample mixes 14 valid product rows with 6 invalid ones, one
for each way a row commonly goes wrong.
"""

__all__ = [
    "SAMPLE_HEADER",
    "SAMPLE_ROWS",
    "synthetic_rows",
    "write_sample_csv",
]

SAMPLE_HEADER = "Name,Price"

SAMPLE_ROWS: tuple[str, ...] = (
    "Laptop,1299.99",
    "Smartphone,899.50",
    "Headphones,299.99",
    "Mouse,49.99",
    "Keyboard,129.99",
    "Monitor,349.99",
    "Tablet,599.99",
    "Gaming Console,499.99",
    "Camera,799.99",
    "Speaker,199.99",
    "Microphone,89.99",
    "Webcam,159.99",
    "Printer,249.99",
    "Scanner,179.99",
    ",199.99",  # empty name
    "Invalid Product,abc",  # non-numeric price
    "Negative Product,-50.00",  # negative price
    "Expensive Product,2000000.00",  # implausibly high
    "Null Price,",  # empty price
    "Only Name",  # missing price
)

_CATEGORIES = ("Cable", "Adapter", "Charger", "Dock", "Stand", "Case")


def synthetic_rows(count: int, seed: int = 42) -> list[str]:
    """Generate ``count`` valid rows with reproducible names and prices."""
    rng = random.Random(seed)
    rows = []
    for i in range(count):
        name = f"{rng.choice(_CATEGORIES)} {i + 1:05d}"
        price = round(rng.uniform(0.01, 4999.99), 2)
        rows.append(f"{name},{price:.2f}")
    return rows


def write_sample_csv(path: Path, extra_rows: int = 0, seed: int = 42) -> Path:
    """Write the sample input (plus optional synthetic valid rows) to ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [SAMPLE_HEADER, *SAMPLE_ROWS, *synthetic_rows(extra_rows, seed)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
