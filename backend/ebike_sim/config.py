from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application Configuration
    """
    PROJECT_NAME: str = "EBike_Simulator"
    VERSION: str = "0.1.0"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "info"

    # Localization
    DEFAULT_LANGUAGE: str = "ru"

    # Redis translation store (optional, in-memory table when unset)
    REDIS_HOST: Optional[str] = None
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_TRANSLATION_PREFIX: str = "translations"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

settings = Settings()
