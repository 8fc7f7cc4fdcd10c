# notecheck/resolve.py

from __future__ import annotations

import logging
from typing import Iterable, List

from notecheck.models import RawFinding, Span

logger = logging.getLogger(__name__)


def build_spans(
    findings: Iterable[RawFinding], text_length: int, first_id: int = 0
) -> List[Span]:
    """
    Turn checker findings into disjoint spans sorted by start.

    - findings whose range does not fit the buffer are dropped
    - on overlap the earlier (lowest start) span wins and later ones are dropped
    """

    candidates: List[Span] = []
    next_id = first_id
    for finding in findings:
        start = finding.offset
        end = finding.offset + finding.length
        if start < 0 or finding.length < 0 or end > text_length:
            logger.debug(
                "Dropping finding [%d, %d) outside buffer of length %d",
                start,
                end,
                text_length,
            )
            continue
        candidates.append(
            Span(
                id=next_id,
                start=start,
                end=end,
                message=finding.message,
                choices=tuple(finding.replacement_candidates),
            )
        )
        next_id += 1

    # stable sort keeps service order for equal starts
    candidates.sort(key=lambda s: s.start)

    result: List[Span] = []
    for span in candidates:
        if result and span.start < result[-1].end:
            logger.debug("Dropping span %d overlapping span %d", span.id, result[-1].id)
            continue
        result.append(span)

    return result
