from sqlmodel import SQLModel, Field
from typing import Optional


class Language(SQLModel, table=True):
    """A language or dialect."""

    __tablename__ = "language"

    language_code: str = Field(
        primary_key=True,
        max_length=3,
        description="ISO 639-3 code",
    )
    language_code2: Optional[str] = Field(
        default=None,
        max_length=2,
        unique=True,
        description="ISO 639-1 code",
    )
    language_name: str = Field(
        max_length=255,
        description="Name of the language",
    )
    language_notes: Optional[str] = Field(
        default=None,
        max_length=1024,
    )
