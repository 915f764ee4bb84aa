"""
Business rules for the countries, cities and languages of the world.

The service sits between the HTTP routers and the repositories: it rewrites
name filters into substring searches, checks identifiers and payloads before
anything reaches the store, and enforces the rules that span entities
(capital cities, duplicate codes, language associations).
"""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from world_api.core.config import get_settings
from world_api.core.logging import get_logger
from world_api.db.session import get_engine
from world_api.repository.city import CityRepository
from world_api.repository.country import CountryRepository
from world_api.repository.language import LanguageRepository
from world_api.schemas.city import CityCreate, CityFilter, CityRead, CityUpdate
from world_api.schemas.country import CountryCreate, CountryFilter, CountryRead, CountryUpdate
from world_api.schemas.country_language import (
    CountryLanguageDetail,
    CountryLanguageRead,
    LanguageCountryDetail,
    LanguageDetailCreate,
    LanguageDetailUpdate,
)
from world_api.schemas.language import LanguageCreate, LanguageFilter, LanguageRead, LanguageUpdate
from world_api.schemas.response import (
    ResponseEnvelope,
    bad_request,
    conflict,
    not_found,
    ok,
    server_error,
)

logger = get_logger(__name__)


def is_valid_code(code: Optional[str]) -> bool:
    """ISO country and language codes are accepted in their 2 or 3 letter form."""
    return isinstance(code, str) and 2 <= len(code.strip()) <= 3


def is_valid_city_id(city_id) -> bool:
    return isinstance(city_id, int) and not isinstance(city_id, bool) and city_id > 0


def contains(value: str) -> str:
    return f"%{value}%"


def _invalid_country_code(code) -> ResponseEnvelope:
    return bad_request(f"Invalid country code specified. Specify a valid ISO 3166-1 identifier. Code: {code!r}")


def _invalid_language_code(code) -> ResponseEnvelope:
    return bad_request(f"Invalid language code specified. Specify a valid ISO 639-3 identifier. Code: {code!r}")


def _invalid_city_id(city_id) -> ResponseEnvelope:
    return bad_request(f"City id was missing or invalid. Id: {city_id!r}")


class WorldService:
    def __init__(
        self,
        country_repository: CountryRepository,
        city_repository: CityRepository,
        language_repository: LanguageRepository,
        schema_file: Union[str, Path, None] = None,
        data_file: Union[str, Path, None] = None,
    ):
        self.countries = country_repository
        self.cities = city_repository
        self.languages = language_repository
        self.schema_file = schema_file
        self.data_file = data_file

    def initialize(self) -> ResponseEnvelope:
        """Reset the store from the schema and seed data scripts."""
        if not self.schema_file or not self.data_file:
            return server_error("Schema and data scripts are not configured.")
        try:
            statements = self.countries.initialize(self.schema_file, self.data_file)
        except (OSError, SQLAlchemyError) as e:
            logger.exception("Failed to initialize the world database")
            return server_error("Failed to initialize the world database.", {"error": str(e)})
        logger.info("World database initialized (%d statements)", statements)
        return ok("World database initialized.", {"statements": statements})

    # Countries

    def get_countries(self, filter: Optional[CountryFilter] = None) -> List[CountryRead]:
        if filter is None or filter.is_empty():
            return self.countries.all()
        if filter.country_name:
            filter = filter.model_copy(update={"country_name": contains(filter.country_name)})
        return self.countries.find(filter)

    def get_country(self, code: Optional[str]) -> Optional[CountryRead]:
        if not is_valid_code(code):
            return None
        return self.countries.get(code)

    def add_country(self, input: Optional[CountryCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Failed to add country due to an invalid request. Data missing or incomplete.", {"input": input})

        existing = self.countries.get(input.country_code)
        if existing is None and input.country_code2:
            existing = self.countries.get(input.country_code2)
        if existing is not None:
            return conflict(
                f"Specified country code ({input.country_code}) already exists. Duplicate country.",
                existing,
            )

        if input.country_capital is not None and self.cities.get(input.country_capital) is None:
            return not_found(f"Specified capital city ({input.country_capital}) was not found.", {"input": input})

        return self.countries.add(input)

    def update_country(self, code: Optional[str], input: Optional[CountryUpdate]) -> ResponseEnvelope:
        if not is_valid_code(code):
            return _invalid_country_code(code)
        if input is None or not input.is_valid():
            return bad_request(
                f"Failed to modify country ({code}) due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )
        if input.country_capital is not None and self.cities.get(input.country_capital) is None:
            return not_found(f"Specified capital city ({input.country_capital}) was not found.", {"input": input})

        current = self.countries.get(code)
        if current is not None:
            for key in ("country_code", "country_code2"):
                value = getattr(input, key)
                if not input.is_property_set(key) or not value:
                    continue
                other = self.countries.get(value)
                if other is not None and other.country_code != current.country_code:
                    return conflict(
                        f"Specified country code ({value}) is already used by ({other.country_code}) {other.country_name}.",
                        other,
                    )

        return self.countries.update(code, input)

    def delete_country(self, code: Optional[str]) -> ResponseEnvelope:
        if not is_valid_code(code):
            return _invalid_country_code(code)
        return self.countries.delete(code)

    def set_capital(self, code: Optional[str], city_id: Optional[int]) -> ResponseEnvelope:
        """Make an existing city the capital of an existing country."""
        if not is_valid_code(code):
            return _invalid_country_code(code)
        if not is_valid_city_id(city_id):
            return _invalid_city_id(city_id)

        city = self.cities.get(city_id)
        if city is None:
            return not_found(f"Specified city ({city_id}) was not found. Country: {code!r}")
        country = self.countries.get(code)
        if country is None:
            return not_found(f"Specified country ({code}) was not found. City: {city_id!r}", {"city": city})

        return self.countries.update(country.country_code, CountryUpdate(country_capital=city_id))

    # Cities

    def get_cities(self, filter: Optional[CityFilter] = None) -> List[CityRead]:
        if filter is None or filter.is_empty():
            return self.cities.all()
        if filter.city_name:
            return self.cities.find(filter.model_copy(update={"city_name": contains(filter.city_name)}))
        if filter.country_code and not filter.is_capital:
            return self.cities.all(filter.country_code)
        return self.cities.find(filter)

    def get_city(self, city_id: Optional[int]) -> Optional[CityRead]:
        if not is_valid_city_id(city_id):
            return None
        return self.cities.get(city_id)

    def add_city(self, input: Optional[CityCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Failed to add city due to an invalid request. Data missing or incomplete.", {"input": input})
        return self.cities.add(input)

    def update_city(self, city_id: Optional[int], input: Optional[CityUpdate]) -> ResponseEnvelope:
        if not is_valid_city_id(city_id):
            return _invalid_city_id(city_id)
        if input is None or not input.is_valid():
            return bad_request(
                f"Failed to modify city ({city_id}) due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )
        return self.cities.update(city_id, input)

    def delete_city(self, city_id: Optional[int]) -> ResponseEnvelope:
        if not is_valid_city_id(city_id):
            return _invalid_city_id(city_id)
        return self.cities.delete(city_id)

    # Languages

    def get_languages(self, filter: Optional[LanguageFilter] = None) -> List[LanguageRead]:
        if filter is None or filter.is_empty():
            return self.languages.all()
        if filter.language_name:
            filter = filter.model_copy(update={"language_name": contains(filter.language_name)})
        return self.languages.find(filter)

    def get_language(self, code: Optional[str]) -> Optional[LanguageRead]:
        if not is_valid_code(code):
            return None
        return self.languages.get(code)

    def add_language(self, input: Optional[LanguageCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Failed to add language due to an invalid request. Data missing or incomplete.", {"input": input})

        existing = self.languages.get(input.language_code)
        if existing is None and input.language_code2:
            existing = self.languages.get(input.language_code2)
        if existing is not None:
            return conflict(
                f"Specified language code ({input.language_code}) already exists. Duplicate language.",
                existing,
            )
        return self.languages.add(input)

    def update_language(self, code: Optional[str], input: Optional[LanguageUpdate]) -> ResponseEnvelope:
        if not is_valid_code(code):
            return _invalid_language_code(code)
        if input is None or not input.is_valid():
            return bad_request(
                f"Failed to modify language ({code}) due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )

        current = self.languages.get(code)
        if current is not None:
            for key in ("language_code", "language_code2"):
                value = getattr(input, key)
                if not input.is_property_set(key) or not value:
                    continue
                other = self.languages.get(value)
                if other is not None and other.language_code != current.language_code:
                    return conflict(
                        f"Specified language code ({value}) is already used by ({other.language_code}) {other.language_name}.",
                        other,
                    )

        return self.languages.update(code, input)

    def delete_language(self, code: Optional[str]) -> ResponseEnvelope:
        if not is_valid_code(code):
            return _invalid_language_code(code)
        return self.languages.delete(code)

    # Languages spoken per country

    def get_countries_for_language(self, code: Optional[str]) -> List[LanguageCountryDetail]:
        if not is_valid_code(code):
            return []
        return self.languages.get_countries_for_language(code)

    def get_languages_for_country(self, code: Optional[str]) -> List[CountryLanguageDetail]:
        if not is_valid_code(code):
            return []
        return self.languages.get_languages_for_country(code)

    def get_language_for_country(self, country: Optional[str], language: Optional[str]) -> Optional[CountryLanguageRead]:
        if not is_valid_code(country) or not is_valid_code(language):
            return None
        return self.languages.get_language_for_country(country, language)

    def add_language_detail(self, country: Optional[str], input: Optional[LanguageDetailCreate]) -> ResponseEnvelope:
        if not is_valid_code(country):
            return _invalid_country_code(country)
        if input is None or not input.is_valid():
            return bad_request("Failed to add language due to an invalid request. Data missing or incomplete.", {"input": input})

        existing = self.languages.get_language_for_country(country, input.language_code)
        if existing is not None:
            return conflict(
                f"Language ({input.language_code}) details already exist for {country}. Duplicate language detail.",
                existing,
            )
        return self.languages.add_detail(country, input)

    def update_language_detail(
        self,
        country: Optional[str],
        language: Optional[str],
        input: Optional[LanguageDetailUpdate],
    ) -> ResponseEnvelope:
        if not is_valid_code(country):
            return _invalid_country_code(country)
        if not is_valid_code(language):
            return _invalid_language_code(language)
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to modify language details due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )
        return self.languages.update_detail(country, language, input)

    def delete_language_detail(self, country: Optional[str], language: Optional[str]) -> ResponseEnvelope:
        if not is_valid_code(country):
            return _invalid_country_code(country)
        if not is_valid_code(language):
            return _invalid_language_code(language)

        existing = self.languages.get_language_for_country(country, language)
        if existing is None:
            return not_found(f"Specified language ({language}) details not found for ({country})")
        return self.languages.delete_detail(country, language)


@lru_cache()
def get_world_service() -> WorldService:
    """Service bound to the application engine. Used as a FastAPI dependency."""
    settings = get_settings()
    engine = get_engine()
    return WorldService(
        CountryRepository(engine),
        CityRepository(engine),
        LanguageRepository(engine),
        schema_file=settings.schema_file,
        data_file=settings.data_file,
    )
