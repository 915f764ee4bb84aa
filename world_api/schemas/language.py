from pydantic import BaseModel, Field, field_validator
from typing import Optional

from world_api.schemas.base import Filter, InputModel, UpdateModel, normalize_code


class LanguageRead(BaseModel):
    language_code: str = Field(..., description="ISO 639-3 code")
    language_code2: Optional[str] = Field(None, description="ISO 639-1 code")
    language_name: str
    language_notes: Optional[str] = None


class LanguageFilter(Filter):
    language_name: Optional[str] = Field(None, description="Name or part of the name")


class _LanguageFields(BaseModel):
    language_code: Optional[str] = Field(None, description="ISO 639-3 code")
    language_code2: Optional[str] = Field(None, description="ISO 639-1 code")
    language_name: Optional[str] = Field(None, max_length=255)
    language_notes: Optional[str] = Field(None, max_length=1024)

    @field_validator("language_code")
    @classmethod
    def validate_language_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (3,), "language_code")

    @field_validator("language_code2")
    @classmethod
    def validate_language_code2(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (2,), "language_code2")


class LanguageCreate(_LanguageFields, InputModel):
    required_fields = ("language_code", "language_name")


class LanguageUpdate(_LanguageFields, UpdateModel):
    required_fields = ("language_code", "language_name")
