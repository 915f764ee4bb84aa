from typing import Any, Dict, List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from world_api.core.logging import get_logger
from world_api.models.country import Country
from world_api.models.country_language import CountryLanguage, from_flag, to_flag
from world_api.models.language import Language
from world_api.repository.base import (
    SqlRepository,
    changed_values,
    resolve_country_code,
    resolve_language_code,
    text_predicate,
)
from world_api.schemas.country_language import (
    CountryLanguageDetail,
    CountryLanguageRead,
    LanguageCountryDetail,
    LanguageDetailCreate,
    LanguageDetailUpdate,
)
from world_api.schemas.language import LanguageCreate, LanguageFilter, LanguageRead, LanguageUpdate
from world_api.schemas.refs import CountryRef, LanguageRef
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

language_table = Language.__table__
country_language_table = CountryLanguage.__table__


def _select_languages(*where):
    stmt = select(
        Language.language_code,
        Language.language_code2,
        Language.language_name,
        Language.language_notes,
    ).order_by(Language.language_name)
    if where:
        stmt = stmt.where(*where)
    return stmt


def _select_associations(*where, order_by=None):
    """Country / language pairs with the names of both sides."""
    stmt = (
        select(
            CountryLanguage.country_language_id,
            CountryLanguage.country_code,
            Country.country_name,
            CountryLanguage.language_code,
            Language.language_name,
            CountryLanguage.is_official,
            CountryLanguage.language_percentage,
        )
        .select_from(CountryLanguage)
        .join(Country, CountryLanguage.country_code == Country.country_code)
        .join(Language, CountryLanguage.language_code == Language.language_code)
    )
    if where:
        stmt = stmt.where(*where)
    if order_by is not None:
        stmt = stmt.order_by(order_by)
    return stmt


def _detail_fields(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "country_language_id": row["country_language_id"],
        "is_official": from_flag(row["is_official"]),
        "language_percentage": row["language_percentage"] or 0.0,
    }


def _country_ref(row: Dict[str, Any]) -> CountryRef:
    return CountryRef(country_code=row["country_code"], country_name=row["country_name"])


def _language_ref(row: Dict[str, Any]) -> LanguageRef:
    return LanguageRef(language_code=row["language_code"], language_name=row["language_name"])


def to_country_language(row: Dict[str, Any]) -> CountryLanguageRead:
    return CountryLanguageRead(**_detail_fields(row), country=_country_ref(row), language=_language_ref(row))


def to_country_language_detail(row: Dict[str, Any]) -> CountryLanguageDetail:
    return CountryLanguageDetail(**_detail_fields(row), language=_language_ref(row))


def to_language_country_detail(row: Dict[str, Any]) -> LanguageCountryDetail:
    return LanguageCountryDetail(**_detail_fields(row), country=_country_ref(row))


def _pair_label(detail: CountryLanguageRead) -> str:
    return (
        f"({detail.country.country_code}) {detail.country.country_name}. "
        f"({detail.language.language_code}) {detail.language.language_name}"
    )


class LanguageRepository(SqlRepository):
    """
    Data access for languages and for the languages spoken in each country.

    The association rows (country_language) store the official flag as a
    single 'T' / 'F' character; it is exposed as a bool.
    """

    def all(self) -> List[LanguageRead]:
        return [LanguageRead(**row) for row in self._fetch_all(_select_languages())]

    def find(self, filter: Optional[LanguageFilter]) -> List[LanguageRead]:
        if filter is None:
            return []

        predicates = []
        if filter.language_name:
            predicates.append(text_predicate(Language.language_name, filter.language_name))

        return [LanguageRead(**row) for row in self._fetch_all(_select_languages(*predicates))]

    def get(self, code: Optional[str]) -> Optional[LanguageRead]:
        canonical = self.resolve_language(code)
        if canonical is None:
            return None
        row = self._fetch_one(_select_languages(Language.language_code == canonical))
        return LanguageRead(**row) if row else None

    def add(self, input: Optional[LanguageCreate]) -> ResponseEnvelope:
        if input is None or not input.is_valid():
            return bad_request("Invalid or missing values specified for new language.", {"input": input})

        stmt = insert(language_table).values(
            language_code=input.language_code,
            language_code2=input.language_code2,
            language_name=input.language_name,
            language_notes=input.language_notes,
        )
        label = f"({input.language_code}) {input.language_name}"
        try:
            changes, _ = self._insert(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to add language %s", label)
            return server_error(f"Failed to add language '{label}' due to an unhandled error.", {"error": str(e)})

        if not changes:
            return server_error(f"Failed to add language '{label}' due to a non-success status code.")

        language = self.get(input.language_code)
        if language is None:
            return orphaned(
                f"Language orphaned. Request for language ({input.language_code}) failed. Check database integrity.",
                {"language_code": input.language_code, "input": input},
            )
        logger.info("Language added %s", label)
        return ok(f"Language added. ({language.language_code}) {language.language_name}", language)

    def update(self, code: Optional[str], input: Optional[LanguageUpdate]) -> ResponseEnvelope:
        existing = self.get(code)
        if existing is None:
            return not_found(f"The requested language ({code}) was not found.")
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to modify requested language. Invalid input or missing parameters.",
                {"input": input, "existing": existing},
            )

        changes = changed_values(input, existing.model_dump())
        if not changes:
            return not_modified("No changes detected for language.", existing)

        label = f"({existing.language_code}) {existing.language_name}"
        stmt = (
            update(language_table)
            .where(language_table.c.language_code == existing.language_code)
            .values(**changes)
        )
        try:
            updated = self._execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to modify language %s", label)
            return server_error(
                f"Failed to modify language '{label}' due to an unhandled error.",
                {"input": input, "error": str(e)},
            )

        if not updated:
            return server_error(f"Failed to modify language '{label}' due to a non-success status code.", {"input": input})

        key = changes.get("language_code", existing.language_code)
        language = self.get(key)
        if language is None:
            return orphaned(
                f"Language orphaned. Request for language ({key}) failed. Check database integrity.",
                {"language_code": key, "input": input},
            )
        logger.info("Language modified %s: %s", label, sorted(changes))
        return ok(f"Language modified. ({language.language_code}) {language.language_name}", language)

    def delete(self, code: Optional[str]) -> ResponseEnvelope:
        """Remove a language together with its country associations."""
        existing = self.get(code)
        if existing is None:
            return not_found(f"Requested language ({code}) was not found.")

        canonical = existing.language_code
        label = f"({canonical}) {existing.language_name}"
        try:
            self._execute(
                delete(country_language_table).where(country_language_table.c.language_code == canonical),
                delete(language_table).where(language_table.c.language_code == canonical),
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to remove language %s", label)
            return server_error(f"Failed to remove language '{label}' due to an unhandled error.", {"error": str(e)})

        logger.info("Language removed %s", label)
        return ok(f"Language removed. {label}", existing)

    def get_countries_for_language(self, code: Optional[str]) -> List[LanguageCountryDetail]:
        """Countries where the language is spoken, ordered by country name."""
        canonical = self.resolve_language(code)
        if canonical is None:
            return []
        stmt = _select_associations(
            CountryLanguage.language_code == canonical,
            order_by=Country.country_name,
        )
        return [to_language_country_detail(row) for row in self._fetch_all(stmt)]

    def get_languages_for_country(self, code: Optional[str]) -> List[CountryLanguageDetail]:
        """Languages spoken in the country, ordered by language name."""
        canonical = self.resolve_country(code)
        if canonical is None:
            return []
        stmt = _select_associations(
            CountryLanguage.country_code == canonical,
            order_by=Language.language_name,
        )
        return [to_country_language_detail(row) for row in self._fetch_all(stmt)]

    def get_language_for_country(self, country: Optional[str], language: Optional[str]) -> Optional[CountryLanguageRead]:
        if not country or not language:
            return None

        with self._session() as session:
            country_code = resolve_country_code(session, country)
            language_code = resolve_language_code(session, language)
            if country_code is None or language_code is None:
                return None
            stmt = _select_associations(
                CountryLanguage.country_code == country_code,
                CountryLanguage.language_code == language_code,
            )
            row = session.execute(stmt).mappings().first()
        return to_country_language(dict(row)) if row else None

    def _resolve_pair(self, country: str, language: str):
        with self._session() as session:
            return resolve_country_code(session, country), resolve_language_code(session, language)

    def add_detail(self, country: Optional[str], input: Optional[LanguageDetailCreate]) -> ResponseEnvelope:
        """Record that a language is spoken in a country."""
        if not country:
            return bad_request(
                f"Invalid country code specified. Specify a valid ISO 3166-1 identifier. Code: {country!r}"
            )
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to add language details due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )

        country_code, language_code = self._resolve_pair(country, input.language_code)
        if country_code is None:
            return not_found(f"Specified country ({country}) was not found.", {"input": input})
        if language_code is None:
            return not_found(f"Specified language ({input.language_code}) was not found.", {"input": input})

        stmt = insert(country_language_table).values(
            country_code=country_code,
            language_code=language_code,
            is_official=to_flag(input.is_official),
            language_percentage=input.language_percentage or 0.0,
        )
        label = f"language ({input.language_code}) details for {country}"
        try:
            changes, _ = self._insert(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to add %s", label)
            return server_error(f"Failed to add {label} due to an unhandled error.", {"error": str(e)})

        if not changes:
            return server_error(f"Failed to add {label} due to a non-success status code.")

        detail = self.get_language_for_country(country_code, language_code)
        if detail is None:
            return orphaned(
                f"Language detail orphaned. Request for {label} failed. Check database integrity.",
                {"country": country, "input": input},
            )
        logger.info("Language detail added %s", _pair_label(detail))
        return ok(f"Language detail added for {_pair_label(detail)}", detail)

    def update_detail(
        self,
        country: Optional[str],
        language: Optional[str],
        input: Optional[LanguageDetailUpdate],
    ) -> ResponseEnvelope:
        if not country:
            return bad_request(
                f"Invalid country code specified. Specify a valid ISO 3166-1 identifier. Code: {country!r}"
            )
        if not language:
            return bad_request(
                f"Invalid language code specified. Specify a valid ISO 639-3 identifier. Code: {language!r}"
            )
        if input is None or not input.is_valid():
            return bad_request(
                "Failed to modify language details due to an invalid request. Data missing or incomplete.",
                {"input": input},
            )

        country_code, language_code = self._resolve_pair(country, language)
        if country_code is None:
            return not_found(f"Specified country ({country}) was not found.")
        if language_code is None:
            return not_found(f"Specified language ({language}) was not found.")

        existing = self.get_language_for_country(country_code, language_code)
        if existing is None:
            return not_found(f"Language ({language}) details not found for {country}.")

        changes = changed_values(input, {
            "is_official": existing.is_official,
            "language_percentage": existing.language_percentage,
        })
        if not changes:
            return not_modified("No changes detected for language details.", existing)
        if "is_official" in changes:
            changes["is_official"] = to_flag(changes["is_official"])

        label = f"language ({language}) details for {country}"
        stmt = (
            update(country_language_table)
            .where(country_language_table.c.country_language_id == existing.country_language_id)
            .values(**changes)
        )
        try:
            updated = self._execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Failed to modify %s", label)
            return server_error(f"Failed to modify {label} due to an unhandled error.", {"error": str(e)})

        if not updated:
            return server_error(f"Failed to modify {label} due to a non-success status code.")

        detail = self.get_language_for_country(country_code, language_code)
        if detail is None:
            return orphaned(
                f"Language detail orphaned. Request for {label} failed. Check database integrity.",
                {"country": country, "language": language, "input": input},
            )
        logger.info("Language detail modified %s", _pair_label(detail))
        return ok(f"Language detail modified for {_pair_label(detail)}", detail)

    def delete_detail(self, country: Optional[str], language: Optional[str]) -> ResponseEnvelope:
        if not country:
            return bad_request(
                f"Invalid country code specified. Specify a valid ISO 3166-1 identifier. Code: {country!r}"
            )
        if not language:
            return bad_request(
                f"Invalid language code specified. Specify a valid ISO 639-3 identifier. Code: {language!r}"
            )

        country_code, language_code = self._resolve_pair(country, language)
        if country_code is None:
            return not_found(f"Specified country ({country}) was not found.")
        if language_code is None:
            return not_found(f"Specified language ({language}) was not found.")

        existing = self.get_language_for_country(country_code, language_code)
        if existing is None:
            return not_found(f"Language ({language}) details not found for {country}.")

        label = f"language ({language}) details for {country}"
        try:
            self._execute(
                delete(country_language_table)
                .where(country_language_table.c.country_language_id == existing.country_language_id)
            )
        except SQLAlchemyError as e:
            logger.exception("Failed to remove %s", label)
            return server_error(f"Failed to remove {label} due to an unhandled error.", {"error": str(e)})

        logger.info("Language detail removed %s", _pair_label(existing))
        return ok(f"Language detail removed for {_pair_label(existing)}", existing)
