"""Check orchestration: one call produces one immutable session."""

import logging
from collections.abc import Sequence

from grammarfix.config import settings
from grammarfix.core.annotator import annotate
from grammarfix.core.auto_correct import apply_corrections
from grammarfix.models.match import Match
from grammarfix.models.session import CheckSession
from grammarfix.services.languagetool_client import LanguageToolClient

logger = logging.getLogger(__name__)


def build_session(
    text: str,
    matches: Sequence[Match],
    language: str,
    auto_fix: bool = True,
    *,
    service_ok: bool = True,
    error: str | None = None,
) -> CheckSession:
    """Auto-correct and annotate *text* against one set of matches."""
    received = tuple(matches) if text.strip() else ()
    return CheckSession(
        source_text=text,
        language=language,
        matches=received,
        result=apply_corrections(text, received, auto_fix=auto_fix),
        annotated=annotate(text, received),
        service_ok=service_ok,
        error=error,
    )


async def run_check(
    text: str,
    language: str | None = None,
    auto_fix: bool | None = None,
    client: LanguageToolClient | None = None,
) -> CheckSession:
    """Check *text* and build the session the review surface works from.

    1. Blank text short-circuits without a service call
    2. Ask the grammar service for matches (failures yield no matches)
    3. Auto-correct and annotate against the same snapshot of *text*
    """
    language = language or settings.default_language
    if auto_fix is None:
        auto_fix = settings.auto_fix

    if not text.strip():
        return build_session(text, (), language)

    client = client or LanguageToolClient()
    response = await client.check(text, language)
    if not response.ok:
        logger.warning("Check degraded to zero matches: %s", response.error)

    session = build_session(
        text,
        response.matches,
        language=response.language or language,
        auto_fix=auto_fix,
        service_ok=response.ok,
        error=response.error,
    )
    logger.info(
        "%d issues found, %d auto-corrected, %d need review",
        session.result.total_issues, session.result.auto_corrected, session.result.needs_review,
    )
    return session
