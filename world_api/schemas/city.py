from pydantic import BaseModel, Field, field_validator
from typing import Optional

from world_api.schemas.base import Filter, InputModel, UpdateModel, normalize_code
from world_api.schemas.refs import CountryRef


class CityRead(BaseModel):
    """Schema for reading a city"""
    city_id: int = Field(..., description="Unique id of the city")
    city_name: str = Field(..., description="Name of the city")
    country: CountryRef = Field(default_factory=CountryRef, description="Country the city belongs to")
    latitude: Optional[float] = Field(None, description="Latitude")
    longitude: Optional[float] = Field(None, description="Longitude")
    city_population: Optional[int] = Field(None, description="Recorded population")


class CityFilter(Filter):
    city_name: Optional[str] = Field(None, description="Name or part of the name")
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 or alpha-3 code")
    is_capital: bool = Field(False, description="Only include capital cities")


class _CityFields(BaseModel):
    city_name: Optional[str] = Field(None, max_length=255)
    country_code: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 or alpha-3 code")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    city_population: Optional[int] = Field(None, ge=0)

    @field_validator("country_code")
    @classmethod
    def validate_country_code(cls, v: Optional[str]) -> Optional[str]:
        return normalize_code(v, (2, 3), "country_code")


class CityCreate(_CityFields, InputModel):
    """Schema for adding a city"""
    required_fields = ("city_name",)


class CityUpdate(_CityFields, UpdateModel):
    """Schema for a partial city update"""
    required_fields = ("city_name",)
