# giftpool/core/config.py

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./giftpool.db"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # JWT
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # The SPA origin; the OAuth callback also redirects back here
    CORS_ORIGIN: str = "http://localhost:3000"

    # Google OAuth
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    OAUTH_CALLBACK_URL: str | None = None
    GOOGLE_AUTH_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL: str = "https://www.googleapis.com/oauth2/v2/userinfo"
    GOOGLE_HTTP_TIMEOUT: float = 10.0

    # Participant CSV upload limit
    CSV_MAX_BYTES: int = 1024 * 1024

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def oauth_configured(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.OAUTH_CALLBACK_URL)

    @model_validator(mode="after")
    def check_production_secret(self):
        if self.is_production and self.JWT_SECRET == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET environment variable must be set in production")
        return self


settings = Settings()
