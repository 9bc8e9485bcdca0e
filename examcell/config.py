from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EXAMCELL_",
        env_file=str(PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
    )

    project_name: str = "Exam Cell API"
    api_prefix: str = "/api"
    # the seating front end calls these routes unprefixed
    seating_prefix: str = ""

    database_url: str = "sqlite:///./examcell.db"

    # flat files read at startup and on /data/reload
    data_dir: Path = PROJECT_ROOT / "data"
    export_dir: Path = PROJECT_ROOT / "exports"

    seed_on_startup: bool = True
    reset_allocations_on_startup: bool = True

    log_level: str = "INFO"

    # EXAMCELL_CORS_ORIGINS is a comma separated list
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:5175",
    ]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_origin_list(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
