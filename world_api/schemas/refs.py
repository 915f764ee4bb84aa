from typing import Optional

from pydantic import BaseModel


class CityRef(BaseModel):
    city_id: Optional[int] = None
    city_name: Optional[str] = None


class CountryRef(BaseModel):
    country_code: Optional[str] = None
    country_name: Optional[str] = None


class LanguageRef(BaseModel):
    language_code: Optional[str] = None
    language_name: Optional[str] = None
