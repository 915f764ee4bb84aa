"""
Shared plumbing for the SQL repositories.

Every operation opens its own session on the engine and closes it when done.
Multi-statement writes run in a single transaction: either all statements are
committed or none are.

Countries and languages can be addressed by either of their ISO codes. The
resolve_* functions below are the only place that knows about the alternate
key; all other queries work on the canonical 3-letter code.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.sql import ColumnElement, Executable
from sqlmodel import Session

from world_api.db.session import run_scripts
from world_api.models.country import Country
from world_api.models.language import Language
from world_api.schemas.base import UpdateModel

# Reserved LIKE characters; a filter value containing one is a pattern
WILDCARDS = re.compile(r"[_%]")


def text_predicate(column, value: str) -> ColumnElement:
    """Exact match, or a LIKE match when the value carries wildcard markers."""
    if WILDCARDS.search(value):
        return column.like(value)
    return column == value


def changed_values(input: UpdateModel, current: Mapping[str, Any]) -> Dict[str, Any]:
    """Fields explicitly set on the input whose value differs from the stored one."""
    return {
        name: getattr(input, name)
        for name, value in current.items()
        if input.is_property_set(name) and getattr(input, name) != value
    }


def _normalize_key(code: Optional[str]) -> Optional[str]:
    if code is None:
        return None
    code = str(code).strip().upper()
    return code or None


def resolve_country_code(session: Session, code: Optional[str]) -> Optional[str]:
    """Canonical alpha-3 code for an alpha-2 or alpha-3 country code, or None."""
    code = _normalize_key(code)
    if code is None:
        return None
    stmt = select(Country.country_code).where(
        or_(Country.country_code == code, Country.country_code2 == code)
    )
    return session.execute(stmt).scalars().first()


def resolve_language_code(session: Session, code: Optional[str]) -> Optional[str]:
    """Canonical ISO 639-3 code for a 639-1 or 639-3 language code, or None."""
    code = _normalize_key(code)
    if code is None:
        return None
    stmt = select(Language.language_code).where(
        or_(Language.language_code == code, Language.language_code2 == code)
    )
    return session.execute(stmt).scalars().first()


class SqlRepository:
    """Base class of the entity repositories."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine)

    def _fetch_all(self, stmt: Executable) -> List[Dict[str, Any]]:
        with self._session() as session:
            return [dict(row) for row in session.execute(stmt).mappings().all()]

    def _fetch_one(self, stmt: Executable) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(stmt)
        return rows[0] if rows else None

    def _execute(self, *statements: Executable) -> int:
        """Run the statements in order in one transaction. Returns the number of affected rows."""
        changes = 0
        with self._session() as session, session.begin():
            for stmt in statements:
                changes += session.execute(stmt).rowcount or 0
        return changes

    def _insert(self, stmt: Executable) -> Tuple[int, Any]:
        """Run an INSERT and return (affected rows, primary key of the new row)."""
        with self._session() as session, session.begin():
            result = session.execute(stmt)
            key = result.inserted_primary_key
            return result.rowcount or 0, (key[0] if key else None)

    def resolve_country(self, code: Optional[str]) -> Optional[str]:
        with self._session() as session:
            return resolve_country_code(session, code)

    def resolve_language(self, code: Optional[str]) -> Optional[str]:
        with self._session() as session:
            return resolve_language_code(session, code)

    def initialize(self, schema_file: str | Path, data_file: str | Path) -> int:
        """Drop and recreate the tables, then load the seed data. Returns the statement count."""
        return run_scripts(self.engine, [schema_file, data_file])
