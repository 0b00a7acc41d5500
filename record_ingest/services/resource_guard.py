from __future__ import annotations

import logging
from typing import Any, Protocol

"""Scoped lifecycle for the I/O handles of one pipeline run.

Every handle acquired through a ResourceGuard is closed exactly once when
the guard exits, on normal completion as well as on any exception.
Close failures are logged as warnings and never stop the remaining closes.
"""

__all__ = [
    "Closeable",
    "ResourceGuard",
]

logger = logging.getLogger(__name__)


class Closeable(Protocol):
    def close(self) -> Any: ...


class ResourceGuard:
    """Owns a set of named handles and releases them on exit.

    Usage::

        with ResourceGuard() as guard:
            reader = guard.acquire("input reader", path.open(encoding="utf-8"))
            ...
    """

    def __init__(self) -> None:
        self._handles: list[tuple[str, Closeable]] = []
        self.closed: list[str] = []
        self.close_failures: list[str] = []

    def acquire(self, name: str, handle: Any) -> Any:
        """Register an opened handle and return it unchanged."""
        self._handles.append((name, handle))
        return handle

    def close_all(self) -> None:
        """Close every registered handle, most recent first."""
        while self._handles:
            name, handle = self._handles.pop()
            try:
                handle.close()
            except Exception as e:
                self.close_failures.append(name)
                logger.warning("error closing %s: %s", name, e)
            else:
                self.closed.append(name)
                logger.debug("%s closed", name)

    def __enter__(self) -> ResourceGuard:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close_all()
