from pydantic import BaseModel, Field, field_validator
from typing import Optional

from world_api.schemas.base import Filter, InputModel, UpdateModel, normalize_code
from world_api.schemas.refs import CityRef


class CountryRead(BaseModel):
    """Schema for reading a country"""
    country_code: str = Field(..., description="ISO 3166-1 alpha-3 code")
    country_code2: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 code")
    country_name: str = Field(..., description="Official name of the country")
    continent: str = Field(..., description="Continent where the country is located")
    capital: CityRef = Field(default_factory=CityRef, description="Capital city or seat of government")
    country_population: Optional[int] = Field(None, description="Recorded population")


class CountryFilter(Filter):
    country_name: Optional[str] = Field(None, description="Name or part of the name")
    continent: Optional[str] = Field(None, description="Continent to limit results to")


class _CountryFields(BaseModel):
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-3 code")
    country_code2: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 code")
    country_name: Optional[str] = Field(None, max_length=255)
    continent: Optional[str] = Field(None, max_length=50)
    country_capital: Optional[int] = Field(None, gt=0, description="Id of the capital city")
    country_population: Optional[int] = Field(None, ge=0)

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (3,), "country_code")

    @field_validator("country_code2")
    @classmethod
    def validate_country_code2(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (2,), "country_code2")


class CountryCreate(_CountryFields, InputModel):
    """Schema for adding a country"""
    required_fields = ("country_code", "country_name", "continent")


class CountryUpdate(_CountryFields, UpdateModel):
    """Schema for a partial country update"""
    required_fields = ("country_code", "country_name", "continent")
