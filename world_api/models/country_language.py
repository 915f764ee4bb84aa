from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional

OFFICIAL = "T"
NOT_OFFICIAL = "F"


class CountryLanguage(SQLModel, table=True):
    """A language spoken in a country, with its share of the population."""

    __tablename__ = "country_language"

    country_language_id: Optional[int] = Field(default=None, primary_key=True)
    country_code: str = Field(
        max_length=3,
        foreign_key="country.country_code",
    )
    language_code: str = Field(
        max_length=3,
        foreign_key="language.language_code",
        index=True,
    )
    # 'T' / 'F'
    is_official: str = Field(default=NOT_OFFICIAL, max_length=1)
    language_percentage: float = Field(default=0.0, ge=0)

    __table_args__ = (
        UniqueConstraint("country_code", "language_code"),
    )


def to_flag(value: bool) -> str:
    return OFFICIAL if value else NOT_OFFICIAL


def from_flag(value: Optional[str]) -> bool:
    return value == OFFICIAL
