from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display service with tqdm (TTY only).

非 TTY (CI やパイプ出力) では ANSI 制御文字を出さないよう無効化する。
"""

__all__ = [
    "LineProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True when stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class LineProgress:
    """Line counter for one input stream.

    The total is unknown up front, so the bar shows a running count and rate.
    """

    def __init__(self, *, description: str = "Reading lines") -> None:
        self.description = description
        self.count = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=None,
                desc=description,
                unit="line",
                disable=False,
                leave=False,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, accepted: int, rejected: int) -> None:
        self.count += 1
        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            self.pbar.set_postfix(accepted=accepted, rejected=rejected, refresh=False)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> LineProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
