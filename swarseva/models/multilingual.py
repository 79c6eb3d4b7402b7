"""
Multilingual text value type and fallback resolution
"""
from enum import Enum
from typing import Any, Mapping, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Language(str, Enum):
    """Languages supported across service content"""
    EN = "en"
    HI = "hi"
    BN = "bn"
    TA = "ta"
    TE = "te"
    MR = "mr"
    GU = "gu"
    KN = "kn"
    ML = "ml"
    PA = "pa"
    OR = "or"
    AS = "as"


SUPPORTED_LANGUAGES = [language.value for language in Language]
DEFAULT_LANGUAGE = Language.EN.value


class MultilingualText(BaseModel):
    """Text keyed by language code; every code is optional"""
    en: Optional[str] = None
    hi: Optional[str] = None
    bn: Optional[str] = None
    ta: Optional[str] = None
    te: Optional[str] = None
    mr: Optional[str] = None
    gu: Optional[str] = None
    kn: Optional[str] = None
    ml: Optional[str] = None
    pa: Optional[str] = None
    # "or" and "as" are Python keywords
    or_: Optional[str] = Field(None, alias="or")
    as_: Optional[str] = Field(None, alias="as")

    @field_validator("*", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def get(self, language: str) -> Optional[str]:
        return self.model_dump(by_alias=True).get(language)

    def values(self):
        """Non-empty translations in declaration order"""
        return [text for text in self.model_dump(by_alias=True).values() if text]

    model_config = ConfigDict(
        extra="forbid",
        validate_by_name=True,
        validate_by_alias=True,
        serialize_by_alias=True
    )


class RequiredMultilingualText(MultilingualText):
    """Multilingual text whose English value is mandatory"""
    en: str = Field(..., min_length=1)


TextLike = Union[MultilingualText, Mapping[str, Any], None]


def resolve(field: TextLike, language: str = DEFAULT_LANGUAGE) -> Optional[str]:
    """
    Resolve a multilingual field for the requested language

    Returns the requested translation when present and non-empty, otherwise
    the English text, otherwise None.
    """
    if field is None:
        return None
    if isinstance(field, MultilingualText):
        requested, english = field.get(language), field.en
    else:
        requested, english = field.get(language), field.get(DEFAULT_LANGUAGE)
    return requested or english or None
