from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from world_api.core.config import Settings
from world_api.db.session import create_db_engine
from world_api.main import app
from world_api.repository.city import CityRepository
from world_api.repository.country import CountryRepository
from world_api.repository.language import LanguageRepository
from world_api.service.world import WorldService, get_world_service


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(app_env="test", database_url=None, database_file=str(tmp_path / "world.db"))


@pytest.fixture()
def engine(settings: Settings):
    engine = create_db_engine(settings)
    yield engine
    engine.dispose()


@pytest.fixture()
def service(engine, settings: Settings) -> WorldService:
    """Service over a freshly seeded database file."""
    service = WorldService(
        CountryRepository(engine),
        CityRepository(engine),
        LanguageRepository(engine),
        schema_file=settings.schema_file,
        data_file=settings.data_file,
    )
    result = service.initialize()
    assert result.code == 200, result.message
    return service


@pytest.fixture()
def countries(service: WorldService) -> CountryRepository:
    return service.countries


@pytest.fixture()
def cities(service: WorldService) -> CityRepository:
    return service.cities


@pytest.fixture()
def languages(service: WorldService) -> LanguageRepository:
    return service.languages


@pytest.fixture()
def client(service: WorldService):
    app.dependency_overrides[get_world_service] = lambda: service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
