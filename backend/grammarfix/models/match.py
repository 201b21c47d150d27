"""Match and correction result models."""

from pydantic import BaseModel, ConfigDict, computed_field


class Match(BaseModel):
    """One flagged span of the original text with its candidate fixes.

    Offsets are code-point indices into the text the match was computed
    against. Nothing is validated against that text here: stale or
    out-of-range spans are accepted and left to consumers to clamp or skip.
    """

    model_config = ConfigDict(frozen=True)

    offset: int
    length: int
    message: str = ""
    rule_id: str = ""
    replacements: tuple[str, ...] = ()

    # Extra detail from the service, shown in the review dialog
    short_message: str = ""
    category: str = ""
    issue_type: str = ""
    context: str = ""
    sentence: str = ""

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def best_replacement(self) -> str | None:
        return self.replacements[0] if self.replacements else None


class CorrectionResult(BaseModel):
    """Outcome of one auto-correction pass."""

    model_config = ConfigDict(frozen=True)

    corrected_text: str
    matches: tuple[Match, ...] = ()
    total_issues: int = 0
    auto_corrected: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def needs_review(self) -> int:
        return self.total_issues - self.auto_corrected

    @classmethod
    def empty(cls, text: str) -> "CorrectionResult":
        """Zero result for text that was never checked."""
        return cls(corrected_text=text)
