"""LanguageTool client: the only network boundary of the package.

Sends text to a LanguageTool ``/v2/check`` endpoint as a form-encoded POST
and normalizes the JSON response into :class:`Match` values. Failures of
any kind (transport, timeout, non-2xx, unusable body, open circuit) are
absorbed here and come back as an empty, ``ok=False`` response; callers
never see a transport exception.
"""

import logging

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from grammarfix.config import Settings, settings
from grammarfix.core.circuit_breaker import CircuitBreaker, CircuitBreakerOpen
from grammarfix.models.languagetool import LTCheckResponse, LTMatch
from grammarfix.models.match import Match
from grammarfix.utils.text_offsets import convert_utf16_span, needs_utf16_conversion

logger = logging.getLogger(__name__)

# Module-level circuit breaker: shared by every client using the default settings
_lt_circuit_breaker = CircuitBreaker(
    "languagetool",
    failure_threshold=settings.circuit_breaker_failure_threshold,
    cooldown_seconds=settings.circuit_breaker_cooldown_seconds,
)


def get_circuit_breaker() -> CircuitBreaker:
    """Return the shared LanguageTool circuit breaker (used by health endpoint)."""
    return _lt_circuit_breaker


class LanguageToolError(Exception):
    """Raised inside the client when a response cannot be used."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ServiceResponse(BaseModel):
    """Normalized outcome of one check request."""

    model_config = ConfigDict(frozen=True)

    matches: tuple[Match, ...] = ()
    ok: bool = True
    status_code: int | None = None
    error: str | None = None
    language: str = ""

    @classmethod
    def failed(cls, error: str, status_code: int | None = None) -> "ServiceResponse":
        return cls(ok=False, error=error, status_code=status_code)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_match(text: str, raw: LTMatch, max_replacements: int = 0) -> Match:
    """Convert one wire match into a :class:`Match`.

    Blank replacement values are dropped. When *text* contains characters
    outside the BMP, the UTF-16 offsets from the service are converted to
    code-point indices.
    """
    replacements = [r.value for r in raw.replacements if r.value.strip()]
    if max_replacements > 0:
        replacements = replacements[:max_replacements]

    offset, length = raw.offset, raw.length
    if needs_utf16_conversion(text):
        offset, length = convert_utf16_span(text, offset, length)

    rule = raw.rule
    return Match(
        offset=offset,
        length=length,
        message=raw.message,
        rule_id=rule.id if rule is not None else "",
        replacements=tuple(replacements),
        short_message=raw.short_message,
        category=rule.category.name if rule is not None else "",
        issue_type=rule.issue_type if rule is not None else "",
        context=raw.context.text if raw.context is not None else "",
        sentence=raw.sentence,
    )


def normalize_response(
    text: str,
    payload: LTCheckResponse,
    max_replacements: int = 0,
) -> list[Match]:
    """Normalize every match of a parsed response, keeping service order."""
    return [normalize_match(text, m, max_replacements) for m in payload.matches]


def parse_response_body(body: str) -> LTCheckResponse:
    """Parse a raw response body; raises LanguageToolError when unusable."""
    try:
        return LTCheckResponse.model_validate_json(body)
    except ValidationError as exc:
        raise LanguageToolError(f"Unparseable LanguageTool response: {exc.error_count()} error(s)") from exc


def _is_service_failure(status_code: int) -> bool:
    """Statuses that say the service itself is unhealthy or overloaded."""
    return status_code >= 500 or status_code == 429


def _status_error(response: httpx.Response) -> LanguageToolError:
    logger.error("LanguageTool error body: %s", response.text[:500])
    return LanguageToolError(
        f"LanguageTool returned HTTP {response.status_code}",
        status_code=response.status_code,
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class LanguageToolClient:
    """Async client for a LanguageTool-compatible check endpoint."""

    def __init__(
        self,
        config: Settings | None = None,
        *,
        breaker: CircuitBreaker | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            config: Settings to use (defaults to the process settings)
            breaker: Circuit breaker (defaults to the shared breaker)
            transport: Optional httpx transport, used by tests
        """
        self.config = config or settings
        self.breaker = breaker or _lt_circuit_breaker
        self._transport = transport

    def _build_form(self, text: str, language: str) -> dict[str, str]:
        cfg = self.config
        form = {"language": language, "text": text}
        if cfg.languagetool_username and cfg.languagetool_api_key:
            form["username"] = cfg.languagetool_username
            form["apiKey"] = cfg.languagetool_api_key
        if cfg.disabled_rules:
            form["disabledRules"] = ",".join(cfg.disabled_rules)
        if cfg.mother_tongue:
            form["motherTongue"] = cfg.mother_tongue
        if cfg.check_level and cfg.check_level != "default":
            form["level"] = cfg.check_level
        return form

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            self.config.request_timeout_seconds,
            connect=self.config.connect_timeout_seconds,
        )

    async def _post(self, form: dict[str, str]) -> httpx.Response:
        """POST the form, retrying on connection errors only."""
        url = self.config.languagetool_url
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.config.retry_attempts),
            wait=wait_exponential(multiplier=self.config.retry_backoff_seconds, max=5),
            retry=retry_if_exception_type((httpx.ConnectError,)),
            reraise=True,
        ):
            with attempt:
                async with httpx.AsyncClient(
                    timeout=self._timeout(), transport=self._transport,
                ) as client:
                    return await client.post(
                        url, data=form, headers={"Accept": "application/json"},
                    )
        raise LanguageToolError("LanguageTool request was not attempted")  # pragma: no cover

    async def _request(self, text: str, language: str) -> tuple[LTCheckResponse, int]:
        form = self._build_form(text, language)
        logger.info(
            "POST %s  language=%s  text_len=%d",
            self.config.languagetool_url, language, len(text),
        )
        payload = None
        async with self.breaker.guard():
            response = await self._post(form)
            logger.info("LanguageTool response status: %d", response.status_code)
            if _is_service_failure(response.status_code):
                raise _status_error(response)
            if response.is_success:
                payload = parse_response_body(response.text)

        # A rejected request (bad language, text too long) is the caller's
        # fault and must not count against the shared breaker
        if payload is None:
            raise _status_error(response)
        return payload, response.status_code

    async def check(self, text: str, language: str | None = None) -> ServiceResponse:
        """Check *text* and return normalized matches.

        Blank text is never sent. Any failure yields an empty response with
        ``ok=False``; the text is then treated as having no issues.
        """
        language = language or self.config.default_language
        if not text.strip():
            return ServiceResponse(language=language)

        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            logger.warning("Text cannot be sent to LanguageTool: %s", exc)
            return ServiceResponse.failed(f"Text is not valid UTF-8: {exc.reason}")

        try:
            payload, status_code = await self._request(text, language)
        except CircuitBreakerOpen as exc:
            logger.warning("LanguageTool circuit OPEN — skipping check: %s", exc)
            return ServiceResponse.failed(str(exc))
        except LanguageToolError as exc:
            logger.warning("LanguageTool check failed: %s", exc)
            return ServiceResponse.failed(str(exc), status_code=exc.status_code)
        except httpx.HTTPError as exc:
            logger.warning("LanguageTool request failed: %s: %s", type(exc).__name__, exc)
            return ServiceResponse.failed(f"{type(exc).__name__}: {exc}")

        matches = normalize_response(text, payload, self.config.max_replacements)
        detected = language
        if payload.language is not None:
            detected_lang = payload.language.detected_language
            detected = (detected_lang.code if detected_lang else "") or payload.language.code or language
        logger.info("LanguageTool found %d match(es)", len(matches))
        return ServiceResponse(matches=tuple(matches), status_code=status_code, language=detected)
