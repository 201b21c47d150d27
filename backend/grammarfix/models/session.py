"""Snapshot of one grammar check."""

from pydantic import BaseModel, ConfigDict

from grammarfix.models.annotation import AnnotatedText
from grammarfix.models.match import CorrectionResult, Match


class CheckSession(BaseModel):
    """Everything a check produced, frozen against the text it ran on.

    Review actions read only from a session. Once the user edits the
    source text the session is stale and must be replaced by a new check.
    """

    model_config = ConfigDict(frozen=True)

    source_text: str
    language: str
    matches: tuple[Match, ...] = ()
    result: CorrectionResult
    annotated: AnnotatedText
    service_ok: bool = True
    error: str | None = None

    def is_current(self, text: str) -> bool:
        return text == self.source_text
