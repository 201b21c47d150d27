"""Check request models."""

from pydantic import BaseModel, Field

from grammarfix.models.match import Match


class CheckRequest(BaseModel):
    """Request for a grammar check."""

    text: str
    language: str | None = None
    auto_fix: bool | None = None


class AnnotateRequest(BaseModel):
    """Annotate text with matches from an earlier check."""

    text: str
    matches: list[Match] = []


class ApplyRequest(BaseModel):
    """Apply one reviewed suggestion to the checked text.

    ``match_index`` is the annotation index (offset-sorted order) that the
    clicked span carried.
    """

    text: str
    matches: list[Match]
    match_index: int = Field(ge=0)
    replacement: str
