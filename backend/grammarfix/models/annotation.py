"""Annotated view of the original text used for click-to-review."""

from bisect import bisect_right

from pydantic import BaseModel, ConfigDict

from grammarfix.models.match import Match


class TagRange(BaseModel):
    """Half-open ``[start, end)`` range tagged with a sorted match index."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    match_index: int

    def contains(self, position: int) -> bool:
        return self.start <= position < self.end


class Segment(BaseModel):
    """Contiguous piece of the annotated text."""

    model_config = ConfigDict(frozen=True)

    text: str
    match_index: int | None = None

    @property
    def tagged(self) -> bool:
        return self.match_index is not None


class AnnotatedText(BaseModel):
    """Original text plus sorted, non-overlapping tag ranges.

    ``matches`` holds the offset-sorted sequence the tags were built from;
    a tag's ``match_index`` is a position in that sequence, not in the
    order the service returned the matches.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    tags: tuple[TagRange, ...] = ()
    matches: tuple[Match, ...] = ()

    def segments(self) -> list[Segment]:
        """Split the text into untagged and tagged segments, in order."""
        segments: list[Segment] = []
        cursor = 0
        for tag in self.tags:
            if tag.start > cursor:
                segments.append(Segment(text=self.text[cursor:tag.start]))
            segments.append(
                Segment(text=self.text[tag.start:tag.end], match_index=tag.match_index)
            )
            cursor = tag.end
        if cursor < len(self.text):
            segments.append(Segment(text=self.text[cursor:]))
        return segments

    def tag_at(self, position: int) -> TagRange | None:
        """Return the tag covering character *position*, if any."""
        starts = [tag.start for tag in self.tags]
        i = bisect_right(starts, position) - 1
        if i >= 0 and self.tags[i].contains(position):
            return self.tags[i]
        return None

    def match_for(self, index: int) -> Match | None:
        if 0 <= index < len(self.matches):
            return self.matches[index]
        return None

    def match_at(self, position: int) -> Match | None:
        """Resolve a clicked character position to its match."""
        tag = self.tag_at(position)
        if tag is None:
            return None
        return self.match_for(tag.match_index)
