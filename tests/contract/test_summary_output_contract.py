from __future__ import annotations

import re

from record_ingest.models.batch_summary import BatchSummary
from record_ingest.services.summary import render_summary_line

SUMMARY_REGEX = re.compile(
    r"^SUMMARY lines=\d+ accepted=\d+ rejected=\d+ success_rate=\d+\.\d%$"
)


def test_summary_regex_contract():
    for total, accepted in [(0, 0), (1, 1), (20, 14), (3, 1)]:
        line = render_summary_line(
            BatchSummary(total_lines=total, accepted=accepted, rejected=total - accepted)
        )
        assert SUMMARY_REGEX.match(line), line
