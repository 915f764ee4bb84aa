from fastapi import APIRouter, Depends

from world_api.api.responses import respond
from world_api.core.config import settings
from world_api.schemas.response import ResponseEnvelope
from world_api.service.world import WorldService, get_world_service

router = APIRouter(tags=["home"])


@router.get("/", summary="Welcome banner")
def root():
    return {
        "message": f"Welcome to the {settings.app_name}",
        "resources": ["/countries", "/cities", "/languages"],
    }


@router.post(
    "/initialize",
    response_model=ResponseEnvelope,
    summary="Reset the database",
    description="Drop and recreate every table, then load the seed data. Responds once the reset has completed.",
)
def initialize(service: WorldService = Depends(get_world_service)):
    return respond(service.initialize())
