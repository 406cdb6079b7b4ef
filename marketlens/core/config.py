"""
Application configuration using Pydantic settings
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from marketlens import __version__


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # Application
    PROJECT_NAME: str = "MarketLens API"
    VERSION: str = __version__
    ENVIRONMENT: str = "development"
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    WORKERS: int = 1
    SENTRY_DSN: Optional[str] = None
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    ENABLE_METRICS: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./marketlens.db"
    db_echo: bool = False

    # Connection pool settings (ignored for SQLite)
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_pre_ping: bool = True

    # Cache (in-memory when no redis_url)
    redis_url: Optional[str] = None
    cache_ttl: int = 300  # 5 minutes

    # Rate limiting
    rate_limit_enabled: bool = True
    search_rate_limit: str = "30/minute"

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    # Mock analysis pipeline
    pipeline_stage_delay: float = Field(default=1.5, ge=0)  # seconds between stages
    mock_products_per_platform: int = Field(default=3, ge=1)
    mock_reviews_per_product: int = Field(default=5, ge=1)
    max_keywords: int = Field(default=10, ge=1)
    pipeline_seed: Optional[int] = None

    # Dashboard client
    api_base_url: str = "http://localhost:8000"
    poll_interval: float = 2.0
    poll_timeout: float = 120.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
