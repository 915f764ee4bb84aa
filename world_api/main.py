from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from world_api.core.config import settings
from world_api.core.errors import register_exception_handlers
from world_api.core.logging import setup_logging, get_logger
from world_api.middleware.request_id import RequestIDMiddleware
from world_api.api import api_router

# Logging is configured before the app is created
setup_logging()
logger = get_logger("world_api.main")

app = FastAPI(
    title=settings.app_name,
    description="REST API over a small relational database of countries, cities and languages",
    version="0.1.0",
    debug=settings.debug,
    openapi_tags=[
        {"name": "countries", "description": "Countries, their capital, cities and spoken languages."},
        {"name": "cities", "description": "Cities of the world."},
        {"name": "languages", "description": "Languages and the countries where they are spoken."},
        {"name": "home", "description": "Banner and database reset."},
        {"name": "health", "description": "Health check endpoints."},
    ],
)

# Request id middleware goes before CORS
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)

register_exception_handlers(app)

app.include_router(api_router)

logger.info(
    "Application started",
    extra={"environment": settings.app_env, "cors_origins": settings.cors_origins},
)


@app.get("/health", tags=["health"])
def health_check():
    """
    Health check endpoint.

    Returns the current status of the application and environment.
    """
    return {"status": "ok", "environment": settings.app_env}
