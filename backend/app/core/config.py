from datetime import datetime
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "FEDV Team Ranking"
    API_V1_STR: str = "/api/v1"
    SUPABASE_URL: str
    SUPABASE_KEY: str
    # Supabase project JWT secret; tokens are only decoded when unset
    JWT_SECRET: Optional[str] = None
    RANKING_CONFIG_KEY: str = "ranking_config"
    MAX_POSITIONS: int = 20
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()


def get_current_season() -> int:
    """Season the ranking is computed for."""
    return datetime.now().year
