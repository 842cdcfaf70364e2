from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]
ENV_FILE = BASE_DIR / ".env"

SUPPORTED_LOG_FORMATS = {"plain", "json"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, env_file_encoding="utf-8", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"
    log_format: str = "plain"

    database_url_override: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DATABASE_URL", "DATABASE_URL_OVERRIDE"),
    )
    postgres_db: str = "cryptoglance"
    postgres_user: str = "cryptoglance"
    postgres_password: str = "cryptoglance"
    postgres_host: str = "localhost"
    postgres_port: int = 5432

    redis_url: str = "redis://localhost:6379/0"
    identity_events_enabled: bool = False
    identity_events_channel: str = "auth:identity:events"

    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("COINGECKO_API_KEY", "VITE_COINGECKO_API_KEY"),
    )
    coingecko_timeout_seconds: float = 10.0
    market_data_default_currency: str = "usd"
    market_data_default_per_page: int = 40
    market_data_cache_ttl_seconds: int = 60

    cors_allow_origins: list[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    @field_validator("app_env")
    @classmethod
    def _normalize_app_env(cls, value: str) -> str:
        return value.strip().lower() or "dev"

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return normalized

    @field_validator("log_format")
    @classmethod
    def _normalize_log_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in SUPPORTED_LOG_FORMATS:
            raise ValueError("LOG_FORMAT must be 'plain' or 'json'")
        return normalized

    @field_validator("market_data_default_per_page")
    @classmethod
    def _validate_per_page(cls, value: int) -> int:
        if not 1 <= value <= 250:
            raise ValueError("MARKET_DATA_DEFAULT_PER_PAGE must be between 1 and 250")
        return value

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def database_url(self) -> str:
        override = (self.database_url_override or "").strip()
        if override:
            return override
        return (
            f"postgresql+psycopg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
