import os
from enum import Enum
from typing import Any

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment types."""

    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):  # type: ignore[misc]
    """
    Main settings class.

    All values are read from flat, case-sensitive environment variables.
    Environment-specific defaults are applied after loading unless the
    variable was set explicitly.
    """

    model_config = SettingsConfigDict(case_sensitive=True)

    # Environment configuration
    ENV: Environment = Environment.DEV

    # Database settings
    DB_URL: str | None = None
    DB_USER: str
    DB_PASSWORD: SecretStr
    DB_HOST: str = "catalog-db"
    DB_PORT: int = 5432
    DB_NAME: str = "catalog"
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True
    DB_INIT_RETRY_INTERVAL: int = 2
    DB_INIT_MAX_RETRIES: int = 5

    # Token settings
    JWT_SECRET: SecretStr
    # No expiry unless configured; tokens issued without TTL never expire
    TOKEN_TTL_SECONDS: int | None = None
    LOGIN_SHARED_PASSWORD: SecretStr = SecretStr("secret")

    # Notification bus settings
    NOTIFICATION_QUEUE_SIZE: int = 100

    # GraphQL settings
    GRAPHQL_PATH: str = "/graphql"
    GRAPHIQL_ENABLED: bool = True

    # Logging settings
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_LEVEL: str = "INFO"
    LOG_CONSOLE_FORMAT: str = "human"

    def __init__(self, **kwargs: Any) -> None:
        """Initialize settings with environment-specific defaults."""
        super().__init__(**kwargs)
        self._apply_environment_defaults()

    def _apply_environment_defaults(self) -> None:
        """Apply environment-specific configuration defaults."""
        if self.ENV == Environment.PRODUCTION:
            if os.getenv("LOG_CONSOLE_FORMAT") is None:
                self.LOG_CONSOLE_FORMAT = "json"
            if os.getenv("LOG_LEVEL") is None:
                self.LOG_LEVEL = "WARNING"
            if os.getenv("GRAPHIQL_ENABLED") is None:
                self.GRAPHIQL_ENABLED = False

        elif self.ENV == Environment.STAGING:
            if os.getenv("LOG_CONSOLE_FORMAT") is None:
                self.LOG_CONSOLE_FORMAT = "json"
            if os.getenv("LOG_LEVEL") is None:
                self.LOG_LEVEL = "INFO"

        else:  # Environment.DEV
            if os.getenv("LOG_CONSOLE_FORMAT") is None:
                self.LOG_CONSOLE_FORMAT = "human"
            if os.getenv("LOG_LEVEL") is None:
                self.LOG_LEVEL = "DEBUG"

    @property
    def DATABASE_URL(self) -> str:
        """
        Build the async database URL.

        `DB_URL` wins when set; otherwise a PostgreSQL (asyncpg) URL is
        assembled from the individual DB_* settings.
        """
        if self.DB_URL:
            return self.DB_URL

        return (
            f"postgresql+asyncpg://{self.DB_USER}:"
            f"{self.DB_PASSWORD.get_secret_value()}@"
            f"{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


app_settings = Settings()
