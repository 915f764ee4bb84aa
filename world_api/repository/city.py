from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from world_api.core.logging import get_logger
from world_api.models.city import City
from world_api.models.country import Country
from world_api.repository.base import SqlRepository, changed_values, text_predicate
from world_api.schemas.city import CityCreate, CityFilter, CityRead, CityUpdate
from world_api.schemas.refs import CountryRef
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

city_table = City.__table__
country_table = Country.__table__


def _select_cities(*where):
    """Cities joined with the name of their country, ordered by name."""
    stmt = (
        select(
            City.city_id,
            City.city_name,
            City.country_code,
            Country.country_name,
            City.latitude,
            City.longitude,
            City.city_population,
        )
        .select_from(City)
        .outerjoin(Country, Country.country_code == City.country_code)
        .order_by(City.city_name)
    )
    if where:
        stmt = stmt.where(*where)
    return stmt


def to_city(row: Dict[str, Any]) -> CityRead:
    data = dict(row)
    country = CountryRef(country_code=data.pop("country_code", None), country_name=data.pop("country_name", None))
    return CityRead(**data, country=country)


class CityRepository(SqlRepository):
    """Data access for the cities of the world."""

    def all(self, country_code: Optional[str] = None) -> List[CityRead]:
        """Every city, or every city of one country when a code is given."""
        if country_code is None:
            return [to_city(row) for row in self._fetch_all(_select_cities())]

        canonical = self.resolve_country(country_code)
        if canonical is None:
            return []
        return [to_city(row) for row in self._fetch_all(_select_cities(City.country_code == canonical))]

    def find(self, filter: Optional[CityFilter]) -> List[CityRead]:
        if filter is None:
            return []

        predicates = []
        if filter.country_code:
            canonical = self.resolve_country(filter.country_code)
            if canonical is None:
                return []
            predicates.append(City.country_code == canonical)
        if filter.is_capital:
            capitals = select(Country.country_capital).where(Country.country_capital.is_not(None))
            predicates.append(City.city_id.in_(capitals))
        if filter.city_name:
            predicates.append(text_predicate(City.city_name, filter.city_name))

        return [to_city(row) for row in self._fetch_all(_select_cities(*predicates))]

    def get(self, city_id: Optional[int]) -> Optional[CityRead]:
        if not city_id:
            return None
        row = self._fetch_one(_select_cities(City.city_id == city_id))
        return to_city(row) if row else None

    def add(self, input: Optional[CityCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Invalid or missing values specified for new city.", {"input": input})

        country_code = None
        if input.country_code:
            country_code = self.resolve_country(input.country_code)
            if country_code is None:
                return not_found(f"Specified country ({input.country_code}) was not found.", {"input": input})

        stmt = insert(city_table).values(
            city_name=input.city_name,
            country_code=country_code,
            latitude=input.latitude,
            longitude=input.longitude,
            city_population=input.city_population,
        )
        label = f"({input.country_code}) {input.city_name}"
        try:
            changes, city_id = self._insert(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to add city %s", label)
            return server_error(f"Failed to add city '{label}' due to an unhandled error.", {"error": str(e)})

        if not changes:
            return server_error(f"Failed to add city '{label}' due to a non-success status code.")

        city = self.get(city_id)
        if city is None:
            return orphaned(
                f"City orphaned. Request for city ({city_id}) failed. Check database integrity.",
                {"city_id": city_id, "input": input},
            )
        logger.info("City added (%s) %s", city.city_id, city.city_name)
        return ok(f"City added. ({city.city_id}) {city.city_name}", city)

    def update(self, city_id: Optional[int], input: Optional[CityUpdate]) -> ResponseEnvelope:
        existing = self.get(city_id)
        if existing is None:
            return not_found(f"The requested city ({city_id}) was not found.")
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to modify requested city. Invalid input or missing parameters.",
                {"input": input, "existing": existing},
            )

        changes = changed_values(input, {
            "city_name": existing.city_name,
            "latitude": existing.latitude,
            "longitude": existing.longitude,
            "city_population": existing.city_population,
        })
        # The input may name the country by either code; compare canonical codes
        if input.is_property_set("country_code"):
            country_code = None
            if input.country_code:
                country_code = self.resolve_country(input.country_code)
                if country_code is None:
                    return not_found(f"Specified country ({input.country_code}) was not found.", {"input": input})
            if country_code != existing.country.country_code:
                changes["country_code"] = country_code

        if not changes:
            return not_modified("No changes detected for city.", existing)

        label = f"({existing.city_id}) {existing.city_name}"
        stmt = update(city_table).where(city_table.c.city_id == existing.city_id).values(**changes)
        try:
            updated = self._execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to modify city %s", label)
            return server_error(
                f"Failed to modify city '{label}' due to an unhandled error.",
                {"input": input, "error": str(e)},
            )

        if not updated:
            return server_error(f"Failed to modify city '{label}' due to a non-success status code.", {"input": input})

        city = self.get(existing.city_id)
        if city is None:
            return orphaned(
                f"City orphaned. Request for city ({existing.city_id}) failed. Check database integrity.",
                {"city_id": existing.city_id, "input": input},
            )
        logger.info("City modified %s: %s", label, sorted(changes))
        return ok(f"City modified. ({city.city_id}) {city.city_name}", city)

    def delete(self, city_id: Optional[int]) -> ResponseEnvelope:
        """Remove a city. A country using it as capital is left without one."""
        existing = self.get(city_id)
        if existing is None:
            return not_found(f"Requested city ({city_id}) was not found.")

        label = f"({existing.city_id}) {existing.city_name}"
        try:
            self._execute(
                update(country_table)
                .where(country_table.c.country_capital == existing.city_id)
                .values(country_capital=None),
                delete(city_table).where(city_table.c.city_id == existing.city_id),
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to remove city %s", label)
            return server_error(f"Failed to remove city '{label}' due to an unhandled error.", {"error": str(e)})

        logger.info("City removed %s", label)
        return ok(f"City removed. {label}", existing)
