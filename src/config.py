from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # App
    APP_NAME: str = "BFHL API"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"

    # Identity echoed in every response envelope
    OFFICIAL_EMAIL: str = ""

    # AI delegate
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"
    AI_MODEL: str = "google/gemini-2.0-flash-001"
    AI_TIMEOUT_SECONDS: float = 30.0

    # Input limits
    FIBONACCI_MAX: int = 1000
    MAX_ARRAY_LENGTH: int = 1000
    MAX_PRIME_VALUE: int = 1_000_000_000
    MAX_QUESTION_LENGTH: int = 1000
    MAX_BODY_BYTES: int = 16384
    COMPUTE_TIMEOUT_SECONDS: float = 5.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

@lru_cache()
def get_settings() -> Settings:
    return Settings()
