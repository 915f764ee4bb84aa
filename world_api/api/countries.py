from typing import List, Optional

from fastapi import APIRouter, Depends

from world_api.api.responses import invalid_code, invalid_search, listing, missing, respond
from world_api.schemas.city import CityFilter, CityRead
from world_api.schemas.country import CountryCreate, CountryFilter, CountryRead, CountryUpdate
from world_api.schemas.country_language import (
    CountryLanguageDetail,
    CountryLanguageRead,
    LanguageDetailCreate,
    LanguageDetailUpdate,
)
from world_api.schemas.response import ResponseEnvelope
from world_api.service.world import WorldService, get_world_service, is_valid_code

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get(
    "",
    response_model=List[CountryRead],
    summary="List countries",
    description="All countries ordered by name",
)
def get_countries(service: WorldService = Depends(get_world_service)):
    return listing(service.get_countries(), "No countries found.")


@router.get(
    "/find",
    response_model=List[CountryRead],
    summary="Search countries",
    description="Countries whose name contains the given text and/or that are on the given continent",
)
def find_countries(
    country_name: Optional[str] = None,
    continent: Optional[str] = None,
    service: WorldService = Depends(get_world_service),
):
    filter = CountryFilter(country_name=country_name or None, continent=continent or None)
    if filter.is_empty():
        return invalid_search("Specify a country name and/or a continent to search for.")
    return listing(service.get_countries(filter), "No countries matched the search.")


@router.get("/{code}", response_model=CountryRead, summary="Get a country by its alpha-2 or alpha-3 code")
def get_country(code: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("country", code)
    country = service.get_country(code)
    if country is None:
        return missing(f"Country ({code}) was not found.")
    return country


@router.post("", response_model=ResponseEnvelope, summary="Add a country")
def add_country(input: CountryCreate, service: WorldService = Depends(get_world_service)):
    return respond(service.add_country(input))


@router.put(
    "/{code}",
    response_model=ResponseEnvelope,
    summary="Modify a country",
    description="Only the fields present in the body are written. An update that changes nothing returns code 304.",
)
def update_country(code: str, input: CountryUpdate, service: WorldService = Depends(get_world_service)):
    return respond(service.update_country(code, input), 304)


@router.delete("/{code}", response_model=ResponseEnvelope, summary="Remove a country")
def delete_country(code: str, service: WorldService = Depends(get_world_service)):
    """
    Remove a country.

    Its cities are kept without a country and its language associations are
    dropped. The removed country is returned in the envelope.
    """
    return respond(service.delete_country(code))


@router.put("/{code}/capital/{city_id}", response_model=ResponseEnvelope, summary="Set the capital of a country")
def set_capital(code: str, city_id: int, service: WorldService = Depends(get_world_service)):
    return respond(service.set_capital(code, city_id), 304)


@router.get("/{code}/cities", response_model=List[CityRead], summary="List the cities of a country")
def get_country_cities(code: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("country", code)
    if service.get_country(code) is None:
        return missing(f"Country ({code}) was not found.")
    return listing(service.get_cities(CityFilter(country_code=code)), f"No cities found for country ({code}).")


@router.get(
    "/{code}/languages",
    response_model=List[CountryLanguageDetail],
    summary="List the languages spoken in a country",
)
def get_country_languages(code: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("country", code)
    if service.get_country(code) is None:
        return missing(f"Country ({code}) was not found.")
    return listing(service.get_languages_for_country(code), f"No languages found for country ({code}).")


@router.get(
    "/{code}/languages/{language}",
    response_model=CountryLanguageRead,
    summary="Get the details of a language spoken in a country",
)
def get_country_language(code: str, language: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("country", code)
    if not is_valid_code(language):
        return invalid_code("language", language)
    detail = service.get_language_for_country(code, language)
    if detail is None:
        return missing(f"Language ({language}) details not found for country ({code}).")
    return detail


@router.post("/{code}/languages", response_model=ResponseEnvelope, summary="Add a language to a country")
def add_country_language(
    code: str,
    input: LanguageDetailCreate,
    service: WorldService = Depends(get_world_service),
):
    return respond(service.add_language_detail(code, input))


@router.put(
    "/{code}/languages/{language}",
    response_model=ResponseEnvelope,
    summary="Modify the details of a language spoken in a country",
)
def update_country_language(
    code: str,
    language: str,
    input: LanguageDetailUpdate,
    service: WorldService = Depends(get_world_service),
):
    return respond(service.update_language_detail(code, language, input), 304)


@router.delete(
    "/{code}/languages/{language}",
    response_model=ResponseEnvelope,
    summary="Remove a language from a country",
)
def delete_country_language(code: str, language: str, service: WorldService = Depends(get_world_service)):
    return respond(service.delete_language_detail(code, language))
