"""Tests for check orchestration."""

from unittest.mock import AsyncMock

import httpx

from grammarfix.models.match import Match
from grammarfix.services.checker import build_session, run_check
from grammarfix.services.languagetool_client import LanguageToolClient, ServiceResponse


async def test_run_check_builds_consistent_session(make_client, lt_body, lt_match):
    text = "I has a apple."
    body = lt_body(lt_match(6, 1, ["an"]), lt_match(2, 3, ["have"]))
    session = await run_check(text, client=make_client(lambda r: httpx.Response(200, text=body)))

    assert session.source_text == text
    assert session.service_ok
    assert session.result.corrected_text == "I have an apple."
    assert session.result.auto_corrected == 2
    # Matches keep service order; annotation uses offset order
    assert [m.offset for m in session.matches] == [6, 2]
    assert [m.offset for m in session.annotated.matches] == [2, 6]
    assert session.annotated.text == text


async def test_run_check_without_auto_fix(make_client, lt_body, lt_match):
    body = lt_body(lt_match(2, 3, ["have"]))
    session = await run_check(
        "I has a apple.",
        auto_fix=False,
        client=make_client(lambda r: httpx.Response(200, text=body)),
    )
    assert session.result.corrected_text == "I has a apple."
    assert session.result.needs_review == 1
    assert len(session.annotated.tags) == 1


async def test_blank_text_skips_service():
    client = AsyncMock(spec=LanguageToolClient)
    session = await run_check("   ", client=client)
    client.check.assert_not_awaited()
    assert session.result.corrected_text == "   "
    assert session.result.total_issues == 0
    assert session.annotated.tags == ()


async def test_service_failure_leaves_text_unchanged(make_client):
    session = await run_check(
        "I has a apple.", client=make_client(lambda r: httpx.Response(500)),
    )
    assert not session.service_ok
    assert session.error
    assert session.result.corrected_text == "I has a apple."
    assert session.result.total_issues == 0
    assert session.matches == ()


async def test_unencodable_text_leaves_text_unchanged(make_client):
    text = "I has\ud800 a apple."
    session = await run_check(text, client=make_client(lambda r: httpx.Response(200)))
    assert not session.service_ok
    assert session.result.corrected_text == text
    assert session.annotated.text == text
    assert session.matches == ()


async def test_language_defaults_and_detected_language_wins():
    client = AsyncMock(spec=LanguageToolClient)
    client.check.return_value = ServiceResponse(language="en-GB")
    session = await run_check("Colour me happy", client=client)
    client.check.assert_awaited_once_with("Colour me happy", "en-US")
    assert session.language == "en-GB"


def test_build_session_drops_matches_for_blank_text():
    session = build_session(" ", [Match(offset=0, length=1, replacements=("x",))], "en-US")
    assert session.matches == ()
    assert session.annotated.tags == ()
    assert session.is_current(" ")
    assert not session.is_current("x")
