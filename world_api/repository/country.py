from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from world_api.core.logging import get_logger
from world_api.models.city import City
from world_api.models.country import Country
from world_api.models.country_language import CountryLanguage
from world_api.repository.base import SqlRepository, changed_values, text_predicate
from world_api.schemas.country import CountryCreate, CountryFilter, CountryRead, CountryUpdate
from world_api.schemas.refs import CityRef
from world_api.schemas.response import (
    ResponseEnvelope,
    bad_request,
    not_found,
    not_modified,
    ok,
    orphaned,
    server_error,
)

logger = get_logger(__name__)

country_table = Country.__table__
city_table = City.__table__
country_language_table = CountryLanguage.__table__


def _select_countries(*where):
    """Countries joined with the name of their capital, ordered by name."""
    stmt = (
        select(
            Country.country_code,
            Country.country_code2,
            Country.country_name,
            Country.continent,
            Country.country_capital.label("capital_id"),
            City.city_name.label("capital_name"),
            Country.country_population,
        )
        .select_from(Country)
        .outerjoin(City, Country.country_capital == City.city_id)
        .order_by(Country.country_name)
    )
    if where:
        stmt = stmt.where(*where)
    return stmt


def to_country(row: Dict[str, Any]) -> CountryRead:
    data = dict(row)
    capital = CityRef(city_id=data.pop("capital_id", None), city_name=data.pop("capital_name", None))
    return CountryRead(**data, capital=capital)


class CountryRepository(SqlRepository):
    """Data access for the countries of the world."""

    def all(self) -> List[CountryRead]:
        return [to_country(row) for row in self._fetch_all(_select_countries())]

    def find(self, filter: Optional[CountryFilter]) -> List[CountryRead]:
        """Countries matching every option set on the filter."""
        if filter is None:
            return []

        predicates = []
        if filter.country_name:
            predicates.append(text_predicate(Country.country_name, filter.country_name))
        if filter.continent:
            predicates.append(Country.continent == filter.continent)

        return [to_country(row) for row in self._fetch_all(_select_countries(*predicates))]

    def get(self, code: Optional[str]) -> Optional[CountryRead]:
        """Country by its alpha-2 or alpha-3 code, or None."""
        canonical = self.resolve_country(code)
        if canonical is None:
            return None
        row = self._fetch_one(_select_countries(Country.country_code == canonical))
        return to_country(row) if row else None

    def add(self, input: Optional[CountryCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Invalid or missing values specified for new country.", {"input": input})

        stmt = insert(country_table).values(
            country_code=input.country_code,
            country_code2=input.country_code2,
            country_name=input.country_name,
            continent=input.continent,
            country_capital=input.country_capital,
            country_population=input.country_population,
        )
        label = f"({input.country_code}) {input.country_name}"
        try:
            changes, _ = self._insert(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to add country %s", label)
            return server_error(f"Failed to add country '{label}' due to an unhandled error.", {"error": str(e)})

        if not changes:
            return server_error(f"Failed to add country '{label}' due to a non-success status code.")

        country = self.get(input.country_code)
        if country is None:
            return orphaned(
                f"Country orphaned. Request for country ({input.country_code}) failed. Check database integrity.",
                {"country_code": input.country_code, "input": input},
            )
        logger.info("Country added %s", label)
        return ok(f"Country added. ({country.country_code}) {country.country_name}", country)

    def update(self, code: Optional[str], input: Optional[CountryUpdate]) -> ResponseEnvelope:
        """Write the explicitly set fields that differ from the stored country."""
        existing = self.get(code)
        if existing is None:
            return not_found(f"The requested country ({code}) was not found.")
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to modify requested country. Invalid input or missing parameters.",
                {"input": input, "existing": existing},
            )

        changes = changed_values(input, {
            "country_code": existing.country_code,
            "country_code2": existing.country_code2,
            "country_name": existing.country_name,
            "continent": existing.continent,
            "country_capital": existing.capital.city_id,
            "country_population": existing.country_population,
        })
        if not changes:
            return not_modified("No changes detected for country.", existing)

        label = f"({existing.country_code}) {existing.country_name}"
        stmt = (
            update(country_table)
            .where(country_table.c.country_code == existing.country_code)
            .values(**changes)
        )
        try:
            updated = self._execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to modify country %s", label)
            return server_error(
                f"Failed to modify country '{label}' due to an unhandled error.",
                {"input": input, "error": str(e)},
            )

        if not updated:
            return server_error(f"Failed to modify country '{label}' due to a non-success status code.", {"input": input})

        key = changes.get("country_code", existing.country_code)
        country = self.get(key)
        if country is None:
            return orphaned(
                f"Country orphaned. Request for country ({key}) failed. Check database integrity.",
                {"country_code": key, "input": input},
            )
        logger.info("Country modified %s: %s", label, sorted(changes))
        return ok(f"Country modified. ({country.country_code}) {country.country_name}", country)

    def delete(self, code: Optional[str]) -> ResponseEnvelope:
        """Remove a country, detaching its cities and dropping its language associations."""
        existing = self.get(code)
        if existing is None:
            return not_found(f"Requested country ({code}) was not found.")

        canonical = existing.country_code
        label = f"({canonical}) {existing.country_name}"
        try:
            self._execute(
                update(city_table)
                .where(city_table.c.country_code == canonical)
                .values(country_code=None),
                delete(country_language_table).where(country_language_table.c.country_code == canonical),
                delete(country_table).where(country_table.c.country_code == canonical),
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to remove country %s", label)
            return server_error(f"Failed to remove country '{label}' due to an unhandled error.", {"error": str(e)})

        logger.info("Country removed %s", label)
        return ok(f"Country removed. {label}", existing)
