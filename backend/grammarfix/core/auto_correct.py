"""Auto-correct engine: splices the best replacement for every match.

Service offsets always refer to the original text. Matches are applied
left to right in offset order, and a running delta (the net length change
of every splice so far) maps each later offset into the partially
corrected buffer. Splices to the left of an offset are the only ones that
can move it, which is why the sort is required.
"""

import logging
from collections.abc import Sequence

from grammarfix.models.match import CorrectionResult, Match

logger = logging.getLogger(__name__)


def sort_by_offset(matches: Sequence[Match]) -> list[Match]:
    """Stable sort by offset; ties keep their input order."""
    return sorted(matches, key=lambda m: m.offset)


def apply_corrections(
    text: str,
    matches: Sequence[Match],
    auto_fix: bool = True,
) -> CorrectionResult:
    """Apply the first replacement candidate of every match to *text*.

    Args:
        text: Original text the matches were computed against
        matches: Matches in any order; may overlap or be out of range
        auto_fix: When False, only count what would have been fixed

    Returns:
        CorrectionResult with the corrected text, the matches in the order
        received, and the fixed/needs-review accounting
    """
    if not text.strip():
        return CorrectionResult.empty(text)

    received = tuple(matches)
    total = len(received)

    if not auto_fix:
        return CorrectionResult(
            corrected_text=text,
            matches=received,
            total_issues=total,
            auto_corrected=0,
        )

    buffer = text
    offset_delta = 0
    fixed = 0

    for match in sort_by_offset(received):
        replacement = match.best_replacement
        if replacement is None:
            continue

        start = match.offset + offset_delta
        end = start + match.length

        if not (0 <= start <= len(buffer) and 0 <= end <= len(buffer)) or start > end:
            logger.debug(
                "Skipping span %d+%d (rule=%s): maps to [%d, %d) in buffer of %d",
                match.offset, match.length, match.rule_id or "-", start, end, len(buffer),
            )
            continue

        buffer = buffer[:start] + replacement + buffer[end:]
        offset_delta += len(replacement) - (end - start)
        fixed += 1

    if fixed < total:
        logger.debug("Auto-corrected %d of %d matches", fixed, total)

    return CorrectionResult(
        corrected_text=buffer,
        matches=received,
        total_issues=total,
        auto_corrected=fixed,
    )
