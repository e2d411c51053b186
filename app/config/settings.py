from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    # API Configuration
    debug: bool = False
    environment: str = "development"
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    api_prefix: str = "/api"
    cors_origins: List[str] = ["*"]

    # Gemini Configuration (secrets come from environment)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash-exp"
    # No timeout unless configured; a hung upstream call holds the request open
    gemini_timeout_seconds: Optional[float] = None
    # Substitute the built-in example test cases when generation fails.
    # Keep False outside of demos so failures surface to the caller.
    generation_fallback_enabled: bool = False

    # Storage Configuration ("database" or "memory")
    storage_backend: str = "database"
    database_url: str = "sqlite:///./data/testcases.db"

    # Uploads
    upload_dir: str = "uploads"
    max_files_per_upload: int = 10

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
