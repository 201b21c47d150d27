"""Span annotator: marks flagged spans on the unmodified text."""

from collections.abc import Sequence

from grammarfix.core.auto_correct import sort_by_offset
from grammarfix.models.annotation import AnnotatedText, TagRange
from grammarfix.models.match import Match
from grammarfix.utils.text_offsets import clamp


def annotate(text: str, matches: Sequence[Match]) -> AnnotatedText:
    """Tag every flagged span of *text* with its offset-sorted match index.

    The text itself is never changed. Spans are clamped to the text, and a
    span that starts inside an earlier tag is trimmed to the end of that
    tag, so tags come out sorted and non-overlapping.
    """
    if not text or not matches:
        return AnnotatedText(text=text)

    ordered = sort_by_offset(matches)
    size = len(text)
    tags: list[TagRange] = []
    cursor = 0

    for index, match in enumerate(ordered):
        start = clamp(match.offset, 0, size)
        end = clamp(match.end, 0, size)
        start = max(start, cursor)
        if start < end:
            tags.append(TagRange(start=start, end=end, match_index=index))
            cursor = end

    return AnnotatedText(text=text, tags=tuple(tags), matches=tuple(ordered))
