"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./fide.db"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 7373

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Feed ingestion
    FEED_SOURCE: str = "players_list_xml_foa.xml"
    FEED_TIMEOUT: float = 120.0
    ETL_BATCH_SIZE: int = 500

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
