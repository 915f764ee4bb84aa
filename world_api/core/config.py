from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from typing import List, Union
from functools import lru_cache

# Scripts shipped with the package, used by POST /initialize
SQL_DIR = Path(__file__).resolve().parent.parent / "db" / "sql"

# Local front-end ports always allowed in dev, on both localhost and 127.0.0.1
DEV_PORTS = (3000, 5173, 8000, 8080)
DEV_CORS_ORIGINS = [f"http://{host}:{port}" for host in ("localhost", "127.0.0.1") for port in DEV_PORTS]


class Settings(BaseSettings):
    app_name: str = "Countries of the World API"
    app_env: str = "dev"

    # Either a full SQLAlchemy DATABASE_URL or the path of the SQLite file
    database_url: str | None = None
    database_file: str = "db/world.db"
    db_echo: bool = False

    schema_file: str = str(SQL_DIR / "world_schema.sql")
    data_file: str = str(SQL_DIR / "world_data.sql")

    cors_origins: Union[List[str], str] = ["http://localhost:8000", "http://127.0.0.1:8000"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """CORS_ORIGINS may be given as a comma separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def add_dev_cors_origins(self) -> "Settings":
        if self.is_dev:
            merged = list(dict.fromkeys([*self.cors_origins, *DEV_CORS_ORIGINS]))
            object.__setattr__(self, "cors_origins", merged)
        return self

    @property
    def database_url_computed(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.database_file}"

    @property
    def is_dev(self) -> bool:
        return self.app_env.lower() == "dev"

    @property
    def debug(self) -> bool:
        return self.is_dev

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
