from __future__ import annotations

from ..models.batch_summary import BatchSummary

"""Summary line rendering.

Format::

    SUMMARY lines={total} accepted={accepted} rejected={rejected} success_rate={rate}%

The ``SUMMARY`` label itself is added by the logging formatter when the line is
logged at the SUMMARY level, so the CLI logs only the fields part.
"""


def format_success_rate(summary: BatchSummary) -> str:
    """Success rate as a percentage with one decimal, e.g. ``70.0%``."""
    return f"{summary.success_rate:.1f}%"


def render_summary_fields(summary: BatchSummary) -> str:
    """Render the ``key=value`` fields of the SUMMARY line, without the label.

    Examples:
        >>> render_summary_fields(BatchSummary(total_lines=20, accepted=14, rejected=6))
        'lines=20 accepted=14 rejected=6 success_rate=70.0%'
    """
    return (
        f"lines={summary.total_lines} "
        f"accepted={summary.accepted} "
        f"rejected={summary.rejected} "
        f"success_rate={format_success_rate(summary)}"
    )


def render_summary_line(summary: BatchSummary) -> str:
    """Render the SUMMARY line for one run.

    Examples:
        >>> render_summary_line(BatchSummary(total_lines=20, accepted=14, rejected=6))
        'SUMMARY lines=20 accepted=14 rejected=6 success_rate=70.0%'
        >>> render_summary_line(BatchSummary(total_lines=0, accepted=0, rejected=0))
        'SUMMARY lines=0 accepted=0 rejected=0 success_rate=0.0%'
    """
    return f"SUMMARY {render_summary_fields(summary)}"


def render_reason_lines(summary: BatchSummary) -> list[str]:
    """One ``reason=<CODE> count=<n>`` line per rejection reason, in first-seen order."""
    return [f"reason={code} count={count}" for code, count in summary.rejections_by_reason.items()]
