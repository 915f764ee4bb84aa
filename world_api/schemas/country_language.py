from pydantic import BaseModel, Field, field_validator
from typing import Optional

from world_api.schemas.base import InputModel, UpdateModel, normalize_code
from world_api.schemas.refs import CountryRef, LanguageRef


class LanguageDetail(BaseModel):
    """Per-pair attributes of a country / language association."""
    country_language_id: Optional[int] = None
    is_official: bool = Field(False, description="Officially recognized language of the country")
    language_percentage: float = Field(0.0, ge=0, description="Share of the population speaking it")


class CountryLanguageRead(LanguageDetail):
    country: CountryRef
    language: LanguageRef


class CountryLanguageDetail(LanguageDetail):
    """A language spoken in a given country."""
    language: LanguageRef


class LanguageCountryDetail(LanguageDetail):
    """A country where a given language is spoken."""
    country: CountryRef


class LanguageDetailCreate(InputModel):
    language_code: Optional[str] = Field(None, description="ISO 639-1 or 639-3 code")
    is_official: bool = False
    language_percentage: float = Field(0.0, ge=0)

    required_fields = ("language_code",)

    @field_validator("language_code")
    @classmethod
    def validate_language_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (2, 3), "language_code")


class LanguageDetailUpdate(UpdateModel):
    is_official: Optional[bool] = None
    language_percentage: Optional[float] = Field(None, ge=0)

    def is_valid(self) -> bool:
        if not super().is_valid():
            return False
        # both columns are NOT NULL
        return all(
            getattr(self, name) is not None
            for name in ("is_official", "language_percentage")
            if self.is_property_set(name)
        )
