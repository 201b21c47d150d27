"""API dependencies."""

from typing import Annotated

from fastapi import Depends

from grammarfix.services.languagetool_client import LanguageToolClient


def get_languagetool_client() -> LanguageToolClient:
    """Client for the configured grammar service (overridden in tests)."""
    return LanguageToolClient()


LanguageTool = Annotated[LanguageToolClient, Depends(get_languagetool_client)]
