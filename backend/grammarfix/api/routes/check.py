"""Grammar check endpoints."""

import time
import uuid

from fastapi import APIRouter, HTTPException

from grammarfix.api.dependencies import LanguageTool
from grammarfix.config import settings
from grammarfix.models.check import AnnotateRequest, ApplyRequest, CheckRequest
from grammarfix.models.envelope import success_response
from grammarfix.models.session import CheckSession
from grammarfix.services.checker import build_session, run_check
from grammarfix.services.review import ReviewController, ReviewError

router = APIRouter()


def _check_meta(start: float, **extra: object) -> dict:
    """Build standard meta dict for check responses."""
    return {
        "request_id": str(uuid.uuid4()),
        "processing_time_ms": round((time.perf_counter() - start) * 1000, 2),
        **extra,
    }


def _ensure_size(text: str) -> None:
    if len(text) > settings.max_text_chars:
        raise HTTPException(
            status_code=413,
            detail=f"Text exceeds {settings.max_text_chars} characters",
        )


def _annotation_payload(session: CheckSession) -> dict:
    annotated = session.annotated
    return {
        "tags": [t.model_dump() for t in annotated.tags],
        "matches": [m.model_dump() for m in annotated.matches],
        "segments": [s.model_dump() for s in annotated.segments()],
    }


@router.post("")
async def check_endpoint(body: CheckRequest, client: LanguageTool) -> dict:
    """Check text, auto-correct it and annotate the original."""
    start = time.perf_counter()
    _ensure_size(body.text)
    session = await run_check(
        body.text, language=body.language, auto_fix=body.auto_fix, client=client,
    )
    result = session.result
    data = {
        "corrected_text": result.corrected_text,
        "total_issues": result.total_issues,
        "auto_corrected": result.auto_corrected,
        "needs_review": result.needs_review,
        "language": session.language,
        "matches": [m.model_dump() for m in session.matches],
        "annotation": _annotation_payload(session),
    }
    return success_response(
        data, **_check_meta(start, service_ok=session.service_ok, service_error=session.error),
    )


@router.post("/annotate")
async def annotate_endpoint(body: AnnotateRequest) -> dict:
    """Annotate text with matches from an earlier check (no service call)."""
    start = time.perf_counter()
    _ensure_size(body.text)
    session = build_session(
        body.text, body.matches, language=settings.default_language, auto_fix=False,
    )
    return success_response(_annotation_payload(session), **_check_meta(start))


@router.post("/apply")
async def apply_endpoint(body: ApplyRequest) -> dict:
    """Apply a reviewed suggestion at the chosen match's original offsets."""
    start = time.perf_counter()
    _ensure_size(body.text)
    session = build_session(
        body.text, body.matches, language=settings.default_language, auto_fix=False,
    )
    controller = ReviewController(session)
    match = controller.match_for(body.match_index)
    if match is None:
        raise HTTPException(
            status_code=404, detail=f"No annotated match at index {body.match_index}",
        )
    try:
        updated = controller.apply(match, body.replacement, current_text=body.text)
    except ReviewError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return success_response(
        {"text": updated, "match": match.model_dump()}, **_check_meta(start),
    )
