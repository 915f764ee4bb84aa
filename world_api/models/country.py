from sqlmodel import SQLModel, Field
from typing import Optional


class Country(SQLModel, table=True):
    """A country or government of the world."""

    __tablename__ = "country"

    country_code: str = Field(
        primary_key=True,
        max_length=3,
        description="ISO 3166-1 alpha-3 code",
    )
    country_code2: Optional[str] = Field(
        default=None,
        max_length=2,
        unique=True,
        description="ISO 3166-1 alpha-2 code",
    )
    country_name: str = Field(
        max_length=255,
        index=True,
        description="Official name of the country",
    )
    continent: str = Field(
        max_length=50,
        description="Asia, Europe, North America, Africa, Oceania, Antarctica or South America",
    )
    country_capital: Optional[int] = Field(
        default=None,
        foreign_key="city.city_id",
        description="Id of the capital city",
    )
    country_population: Optional[int] = Field(
        default=None,
        description="Recorded population",
    )
