from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    database_url: str = "sqlite:///./dentalchart.db"

    # Defaults applied when a tool interaction omits its options
    default_filling_material: str = "composite"
    default_crown_material: str = "porcelain"
    default_procedure_status: str = "PENDING"

    # Comma-separated origins of the chart frontends allowed to call the API
    cors_allowed_origins: str = "http://localhost:3000"

    log_level: str = "INFO"

    # Seed the code catalog with the codes the engine references on startup
    seed_codes_on_startup: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_cors_origins(self) -> List[str]:
        origins: List[str] = []
        for origin in self.cors_allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)
        return origins


@lru_cache()
def get_settings() -> Settings:
    return Settings()
