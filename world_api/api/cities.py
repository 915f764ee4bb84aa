from typing import List, Optional

from fastapi import APIRouter, Depends

from world_api.api.responses import invalid_code, invalid_id, invalid_search, listing, missing, respond
from world_api.schemas.city import CityCreate, CityFilter, CityRead, CityUpdate
from world_api.schemas.response import ResponseEnvelope
from world_api.service.world import WorldService, get_world_service, is_valid_city_id, is_valid_code

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get(
    "",
    response_model=List[CityRead],
    summary="List cities",
    description="All cities ordered by name, each with the code and name of its country",
)
def get_cities(service: WorldService = Depends(get_world_service)):
    return listing(service.get_cities(), "No cities found.")


@router.get(
    "/find",
    response_model=List[CityRead],
    summary="Search cities",
    description="Cities filtered by part of their name, by country, and/or to capitals only",
)
def find_cities(
    city_name: Optional[str] = None,
    country_code: Optional[str] = None,
    is_capital: bool = False,
    service: WorldService = Depends(get_world_service),
):
    """
    Search cities.

    **Parameters**:
    - city_name: text contained in the city name (optional)
    - country_code: ISO 3166-1 alpha-2 or alpha-3 code of the country (optional)
    - is_capital: only return capital cities (default: false)

    At least one option must be given.
    """
    filter = CityFilter(city_name=city_name or None, country_code=country_code or None, is_capital=is_capital)
    if filter.is_empty():
        return invalid_search("Specify a city name, a country code and/or is_capital to search for.")
    if filter.country_code and not is_valid_code(filter.country_code):
        return invalid_code("country", filter.country_code)
    return listing(service.get_cities(filter), "No cities matched the search.")


@router.get("/{city_id}", response_model=CityRead, summary="Get a city by id")
def get_city(city_id: int, service: WorldService = Depends(get_world_service)):
    if not is_valid_city_id(city_id):
        return invalid_id(city_id)
    city = service.get_city(city_id)
    if city is None:
        return missing(f"City ({city_id}) was not found.")
    return city


@router.post("", response_model=ResponseEnvelope, summary="Add a city")
def add_city(input: CityCreate, service: WorldService = Depends(get_world_service)):
    """Add a city. The new id is assigned by the database and returned with the city."""
    return respond(service.add_city(input))


@router.put(
    "/{city_id}",
    response_model=ResponseEnvelope,
    summary="Modify a city",
    description="Only the fields present in the body are written. An update that changes nothing returns code 304.",
)
def update_city(city_id: int, input: CityUpdate, service: WorldService = Depends(get_world_service)):
    return respond(service.update_city(city_id, input), 304)


@router.delete("/{city_id}", response_model=ResponseEnvelope, summary="Remove a city")
def delete_city(city_id: int, service: WorldService = Depends(get_world_service)):
    return respond(service.delete_city(city_id))
