"""Shared test fixtures for grammarfix tests."""

import json
from collections.abc import Callable

import httpx
import pytest

from grammarfix.config import Settings
from grammarfix.core.circuit_breaker import CircuitBreaker
from grammarfix.services.languagetool_client import LanguageToolClient, get_circuit_breaker


def _lt_match(
    offset: int,
    length: int,
    replacements: list[str] | None = None,
    message: str = "Possible error",
    rule_id: str | None = "TEST_RULE",
) -> dict:
    """One match as the LanguageTool API returns it."""
    raw: dict = {
        "offset": offset,
        "length": length,
        "message": message,
        "shortMessage": "",
        "replacements": [{"value": v} for v in (replacements or [])],
        "context": {"text": "", "offset": 0, "length": length},
        "sentence": "",
    }
    if rule_id is not None:
        raw["rule"] = {
            "id": rule_id,
            "description": "",
            "issueType": "grammar",
            "category": {"id": "GRAMMAR", "name": "Grammar"},
        }
    return raw


def _lt_body(*matches: dict, language: str = "en-US") -> str:
    return json.dumps({
        "software": {"name": "LanguageTool"},
        "language": {"name": "English (US)", "code": language},
        "matches": list(matches),
    })


@pytest.fixture
def lt_match() -> Callable[..., dict]:
    return _lt_match


@pytest.fixture
def lt_body() -> Callable[..., str]:
    return _lt_body


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fast failure behaviour for tests."""
    return Settings(
        languagetool_url="https://lt.test/v2/check",
        retry_attempts=1,
        retry_backoff_seconds=0,
        circuit_breaker_failure_threshold=3,
        circuit_breaker_cooldown_seconds=60,
        max_replacements=0,
    )


@pytest.fixture
def breaker() -> CircuitBreaker:
    return CircuitBreaker("test", failure_threshold=3, cooldown_seconds=1)


@pytest.fixture
def make_client(test_settings: Settings, breaker: CircuitBreaker) -> Callable[..., LanguageToolClient]:
    """Build a client whose requests are answered by *handler*."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **overrides) -> LanguageToolClient:
        config = test_settings.model_copy(update=overrides) if overrides else test_settings
        return LanguageToolClient(
            config,
            breaker=breaker,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture(autouse=True)
def _reset_shared_breaker():
    get_circuit_breaker().reset()
    yield
    get_circuit_breaker().reset()
