"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every knob has a default that works out of the box (in-memory sqlite3)
    - get_settings() is cached (lru_cache) — single instance per process
    - RepoConfig is the only thing the item store sees of the settings

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - RepoConfig as a plain dataclass: stores can be built in tests without env vars
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from payments_api.core.rate_limit import Rate, parse_rate


@dataclass(frozen=True)
class RepoConfig:
    """Container for item store configuration."""
    driver: str = "sqlite3"
    uri: str = ""
    table: str = "payments"
    schema: str | None = None
    migrate: bool = True
    debug: bool = False
    pool_size: int = 20
    max_overflow: int = 10


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Repository
    repo_driver: str = "sqlite3"
    repo_uri: str = ""
    repo_table: str = "payments"
    repo_schema: str | None = None
    repo_migrate: bool = True
    repo_debug: bool = False
    repo_pool_size: int = 20
    repo_max_overflow: int = 10

    @field_validator("repo_driver", mode="before")
    @classmethod
    def normalize_driver(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # HTTP
    listen_host: str = "0.0.0.0"
    listen_port: int = 8080
    external_url: str = "http://localhost:8080"
    api_version: str = "v1"
    max_page_size: int = 20
    admin_routes: bool = False
    cors_enabled: bool = False
    cors_origins: list[str] = ["*"]
    compress: bool = False
    http_logs: bool = True
    error_details: bool = False
    request_timeout: float = 60.0
    rate_limit: str = ""
    metrics_enabled: bool = False

    @field_validator("rate_limit")
    @classmethod
    def check_rate_limit(cls, v: str) -> str:
        if v.strip():
            parse_rate(v)
        return v.strip()

    @field_validator("external_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def base_url(self) -> str:
        """Prefix for every link rendered in payment responses."""
        return f"{self.external_url}/{self.api_version}"

    @property
    def rate(self) -> Rate | None:
        """Parsed rate_limit, or None when rate limiting is off."""
        return parse_rate(self.rate_limit) if self.rate_limit else None

    def repo_config(self) -> RepoConfig:
        return RepoConfig(
            driver=self.repo_driver,
            uri=self.repo_uri,
            table=self.repo_table,
            schema=self.repo_schema,
            migrate=self.repo_migrate,
            debug=self.repo_debug,
            pool_size=self.repo_pool_size,
            max_overflow=self.repo_max_overflow,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
