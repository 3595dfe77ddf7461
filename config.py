"""
API Configuration Settings
"""

from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    PROJECT_NAME: str = "Crowdin Length Checker"

    # Public URL Crowdin uses to reach this app (also used for self-calls)
    BASE_URL: str = "http://localhost:3000"

    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "https://localhost:3000",
    ]

    # Crowdin app credentials (Add actual values in .env or environment variables)
    CROWDIN_CLIENT_ID: str = "YOUR_CROWDIN_CLIENT_ID"
    CROWDIN_CLIENT_SECRET: str = "YOUR_CROWDIN_CLIENT_SECRET"
    CROWDIN_APP_IDENTIFIER: str = "getting-started-local"
    CROWDIN_APP_NAME: str = "Getting Started Local"
    CROWDIN_TOKEN_URL: str = "https://accounts.crowdin.com/oauth/token"
    CROWDIN_IFRAME_SRC: str = "https://cdn.crowdin.com/apps/dist/iframe.js"

    DATABASE_URL: str = "sqlite:///./crowdin_app.db"

    # Encryption key for token storage (Generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())")
    ENCRYPTION_KEY: str = "YOUR_FERNET_ENCRYPTION_KEY"

    # QA check
    QA_BATCH_SIZE: int = 50
    QA_LOOKUP_CONCURRENCY: int = 5
    METADATA_TIMEOUT: float = 10.0

    # Text measurement
    DEFAULT_FONT: str = "Arial"
    DEFAULT_FONT_SIZE: int = 16
    FONT_DIRS: List[str] = []

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore"  # Ignore extra fields in .env file
    )


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings
