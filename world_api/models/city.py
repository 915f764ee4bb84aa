from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Float, Integer
from typing import Optional


class City(SQLModel, table=True):
    """A city or other area of population concentration."""

    __tablename__ = "city"

    city_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, primary_key=True, autoincrement=True),
        description="Surrogate id assigned by the store",
    )
    city_name: str = Field(
        max_length=255,
        index=True,
        description="Name of the city",
    )
    country_code: Optional[str] = Field(
        default=None,
        max_length=3,
        foreign_key="country.country_code",
        index=True,
        description="ISO 3166-1 alpha-3 code of the owning country",
    )
    latitude: Optional[float] = Field(
        default=None,
        sa_column=Column(Float),
        description="Latitude",
    )
    longitude: Optional[float] = Field(
        default=None,
        sa_column=Column(Float),
        description="Longitude",
    )
    city_population: Optional[int] = Field(
        default=None,
        description="Recorded population",
    )
