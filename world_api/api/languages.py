from typing import List, Optional

from fastapi import APIRouter, Depends

from world_api.api.responses import invalid_code, invalid_search, listing, missing, respond
from world_api.schemas.country_language import LanguageCountryDetail
from world_api.schemas.language import LanguageCreate, LanguageFilter, LanguageRead, LanguageUpdate
from world_api.schemas.response import ResponseEnvelope
from world_api.service.world import WorldService, get_world_service, is_valid_code

router = APIRouter(prefix="/languages", tags=["languages"])


@router.get("", response_model=List[LanguageRead], summary="List languages")
def get_languages(service: WorldService = Depends(get_world_service)):
    return listing(service.get_languages(), "No languages found.")


@router.get("/find", response_model=List[LanguageRead], summary="Search languages by part of their name")
def find_languages(language_name: Optional[str] = None, service: WorldService = Depends(get_world_service)):
    filter = LanguageFilter(language_name=language_name or None)
    if filter.is_empty():
        return invalid_search("Specify a language name to search for.")
    return listing(service.get_languages(filter), "No languages matched the search.")


@router.get("/{code}", response_model=LanguageRead, summary="Get a language by its ISO 639-1 or 639-3 code")
def get_language(code: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("language", code)
    language = service.get_language(code)
    if language is None:
        return missing(f"Language ({code}) was not found.")
    return language


@router.get(
    "/{code}/countries",
    response_model=List[LanguageCountryDetail],
    summary="List the countries where a language is spoken",
)
def get_language_countries(code: str, service: WorldService = Depends(get_world_service)):
    if not is_valid_code(code):
        return invalid_code("language", code)
    if service.get_language(code) is None:
        return missing(f"Language ({code}) was not found.")
    return listing(service.get_countries_for_language(code), f"No countries found for language ({code}).")


@router.post("", response_model=ResponseEnvelope, summary="Add a language")
def add_language(input: LanguageCreate, service: WorldService = Depends(get_world_service)):
    return respond(service.add_language(input))


@router.put(
    "/{code}",
    response_model=ResponseEnvelope,
    summary="Modify a language",
    description="Only the fields present in the body are written. An update that changes nothing returns code 304.",
)
def update_language(code: str, input: LanguageUpdate, service: WorldService = Depends(get_world_service)):
    return respond(service.update_language(code, input), 304)


@router.delete("/{code}", response_model=ResponseEnvelope, summary="Remove a language")
def delete_language(code: str, service: WorldService = Depends(get_world_service)):
    """Remove a language together with its country associations."""
    return respond(service.delete_language(code))
