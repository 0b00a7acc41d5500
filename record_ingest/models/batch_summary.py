from __future__ import annotations

from dataclasses import dataclass, field

"""BatchSummary: aggregate counts for one pipeline run."""

__all__ = [
    "BatchSummary",
]


@dataclass(frozen=True)
class BatchSummary:
    """Counts for one run.

    Invariant: accepted + rejected == total_lines (header excluded).
    """
    total_lines: int
    accepted: int
    rejected: int
    rejections_by_reason: dict[str, int] = field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        """Accepted / total as a percentage; 0.0 for an empty input."""
        if self.total_lines == 0:
            return 0.0
        return self.accepted * 100.0 / self.total_lines
