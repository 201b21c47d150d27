"""Offset helpers shared by the adapter, the engine and the annotator.

Every component in this package indexes text with Python ``str`` indices
(Unicode code points). LanguageTool reports offsets in UTF-16 code units,
so spans coming off the wire are converted here before anything else
touches them. For BMP-only text both schemes agree and conversion is a
no-op.
"""


def clamp(value: int, low: int, high: int) -> int:
    """Restrict *value* to ``[low, high]``."""
    return max(low, min(value, high))


def _units(char: str) -> int:
    return 2 if ord(char) > 0xFFFF else 1


def utf16_to_index(text: str, units: int) -> int:
    """Map a UTF-16 code-unit offset onto a code-point index into *text*.

    Offsets past the end map past the end by the same distance, so stale
    spans stay out of range instead of being silently pulled back in.
    An offset that lands inside a surrogate pair resolves to the start of
    that character. Negative offsets are returned unchanged.
    """
    if units <= 0:
        return units

    consumed = 0
    for index, char in enumerate(text):
        width = _units(char)
        if consumed + width > units:
            return index
        consumed += width
        if consumed == units:
            return index + 1
    return len(text) + (units - consumed)


def convert_utf16_span(text: str, offset: int, length: int) -> tuple[int, int]:
    """Convert a UTF-16 ``(offset, length)`` span into code-point terms."""
    start = utf16_to_index(text, offset)
    if length <= 0:
        return start, length
    end = utf16_to_index(text, offset + length)
    return start, end - start


def needs_utf16_conversion(text: str) -> bool:
    """True when *text* contains characters outside the BMP."""
    return any(ord(c) > 0xFFFF for c in text)
