"""Review controller: resolves clicked spans and applies chosen fixes.

Everything here reads from a :class:`CheckSession`. Replacements are
spliced at the match's *original* offsets with no delta adjustment, which
is only correct against the unmodified text the session was computed on.
"""

import logging

from grammarfix.models.match import Match
from grammarfix.models.session import CheckSession
from grammarfix.utils.text_offsets import clamp

logger = logging.getLogger(__name__)


class ReviewError(Exception):
    """Base class for review failures."""


class StaleSessionError(ReviewError):
    """The text was edited after the session was computed."""


class UnknownMatchError(ReviewError):
    """The match does not belong to the session."""


def splice_at_original_offsets(text: str, match: Match, replacement: str) -> str:
    """Replace the clamped span of *match* in *text* with *replacement*."""
    size = len(text)
    start = clamp(match.offset, 0, size)
    end = clamp(match.end, 0, size)
    if start > end:
        return text
    return text[:start] + replacement + text[end:]


class ReviewController:
    """Interactive review over one check session."""

    def __init__(self, session: CheckSession):
        self.session = session

    @property
    def source_text(self) -> str:
        return self.session.source_text

    def match_at(self, position: int) -> Match | None:
        """Match under a clicked character position of the original text."""
        return self.session.annotated.match_at(position)

    def match_for(self, index: int) -> Match | None:
        """Match for an annotation index (offset-sorted order)."""
        return self.session.annotated.match_for(index)

    def suggestions(self, match: Match) -> tuple[str, ...]:
        return match.replacements

    def apply(self, match: Match, replacement: str, current_text: str | None = None) -> str:
        """Splice *replacement* for *match* into the session's source text.

        Raises:
            StaleSessionError: *current_text* no longer matches the session
            UnknownMatchError: *match* is not one of the session's matches
        """
        if current_text is not None and not self.session.is_current(current_text):
            raise StaleSessionError("Text changed since the check ran; run a new check")
        if match not in self.session.matches:
            raise UnknownMatchError(f"Match at offset {match.offset} is not part of this session")

        updated = splice_at_original_offsets(self.source_text, match, replacement)
        logger.debug(
            "Applied %r at %d+%d (rule=%s)",
            replacement, match.offset, match.length, match.rule_id or "-",
        )
        return updated

    def apply_at(self, position: int, replacement: str) -> str | None:
        """Resolve *position* and apply *replacement*; None if nothing is tagged there."""
        match = self.match_at(position)
        if match is None:
            return None
        return self.apply(match, replacement)
