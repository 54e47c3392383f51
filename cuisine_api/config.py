"""
My Cuisine configuration settings
Defaults reproduce the fixed local deployment; environment overrides are optional
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="MY_CUISINE_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "My Cuisine API"
    VERSION: str = "1.0.0"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 4000

    # Storage
    DATABASE_PATH: Path = BASE_DIR / "recipes.db"
    UPLOADS_DIR: Path = BASE_DIR / "uploads"

    # CORS
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.DATABASE_PATH}"


def get_settings() -> Settings:
    """Build the settings for this process"""
    return Settings()
