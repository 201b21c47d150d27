"""Wire schema of the LanguageTool ``/v2/check`` response.

Only the fields this package reads are modelled; everything else in the
payload is ignored. Every field has a default, and a null is treated the
same as a missing field, so a sparse or partially broken match still
parses instead of sinking the whole response.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: object) -> object:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


def _without_nulls(items: object) -> object:
    if items is None:
        return []
    if isinstance(items, list):
        return [item for item in items if item is not None]
    return items


class LTReplacement(_Lenient):
    value: str = ""


class LTCategory(_Lenient):
    id: str = ""
    name: str = ""


class LTRule(_Lenient):
    id: str = ""
    description: str = ""
    issue_type: str = Field(default="", alias="issueType")
    category: LTCategory = LTCategory()


class LTContext(_Lenient):
    text: str = ""
    offset: int = 0
    length: int = 0


class LTMatch(_Lenient):
    offset: int = 0
    length: int = 0
    message: str = ""
    short_message: str = Field(default="", alias="shortMessage")
    replacements: list[LTReplacement] = []
    rule: LTRule | None = None
    context: LTContext | None = None
    sentence: str = ""

    @field_validator("replacements", mode="before")
    @classmethod
    def _null_replacements(cls, v: object) -> object:
        return _without_nulls(v)


class LTDetectedLanguage(_Lenient):
    name: str = ""
    code: str = ""


class LTLanguage(_Lenient):
    name: str = ""
    code: str = ""
    detected_language: LTDetectedLanguage | None = Field(
        default=None, alias="detectedLanguage"
    )


class LTCheckResponse(_Lenient):
    matches: list[LTMatch] = []
    language: LTLanguage | None = None

    @field_validator("matches", mode="before")
    @classmethod
    def _null_matches(cls, v: object) -> object:
        return _without_nulls(v)
