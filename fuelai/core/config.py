from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union

class Settings(BaseSettings):
    # Application Secret Key - signs access tokens, must be set via environment variable
    SECRET_KEY: str = ""

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./fuelai.db"

    # JWT Settings
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    JWT_CLOCK_SKEW_TOLERANCE_SECONDS: int = 5

    # CORS Configuration - must be set via environment variable
    ALLOWED_ORIGINS: Union[List[str], str] = []

    # Rate Limiting Configuration
    RATE_LIMIT_ENABLED: bool = True

    # Default rate limits (requests per minute)
    DEFAULT_RATE_LIMIT: str = "100/minute"

    # Standard endpoint rate limits
    MEAL_PLAN_RATE_LIMIT: str = "60/minute"
    MEAL_RATE_LIMIT: str = "30/minute"
    TASK_RATE_LIMIT: str = "60/minute"

    # Request size limits (in bytes)
    MAX_REQUEST_SIZE: int = 1 * 1024 * 1024  # 1MB

    # Logging
    LOG_LEVEL: str = "INFO"
    AUDIT_LOG_LEVEL: str = "INFO"
    LOG_AUDIT_EVENTS: bool = True
    AUDIT_LOG_DIR: str = "logs"

    @field_validator('ALLOWED_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',') if origin.strip()]
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"  # Ignore extra environment variables

settings = Settings()
