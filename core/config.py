"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Dict
from core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # geodienste.ch
    GEODIENSTE_BASE_URL: str = "https://geodienste.ch"
    GEODIENSTE_LANGUAGE: str = "de"
    GEODIENSTE_TOKENS: Dict[str, str] = {}  # canton -> access token

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Export Configuration
    EXPORT_MAX_ATTEMPTS: int = 10
    EXPORT_WAIT_SECONDS: float = 60.0
    HTTP_TIMEOUT: float = 30.0
    DATA_DIRECTORY: str = "data"

    def token_for(self, canton: str) -> str:
        """Access token of a canton"""
        token = self.GEODIENSTE_TOKENS.get(canton)
        if not token:
            raise ConfigurationError(
                f"No access token configured for {canton}",
                context={"setting": "GEODIENSTE_TOKENS", "canton": canton}
            )
        return token

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
