from fastapi import APIRouter
from . import cities, countries, home, languages

api_router = APIRouter(
    responses={404: {"description": "Not found"}},
)

# Include routers
api_router.include_router(home.router)
api_router.include_router(countries.router)
api_router.include_router(cities.router)
api_router.include_router(languages.router)
