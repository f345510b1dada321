"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./taxmate.db"

    # External Services
    filing_api_base: str = "http://localhost:8002/mock-itax"

    # Service
    service_name: str = "taxmate-gateway"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 10.0
    filing_max_retries: int = 5
    filing_backoff_base: float = 1.0  # Exponential backoff base in seconds


settings = Settings()
