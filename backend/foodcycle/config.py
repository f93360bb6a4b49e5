"""
FoodCycle Backend - Application Configuration
=============================================

What:  Centralized configuration loaded from environment variables (or .env).
How:   Pydantic Settings reads and validates each field; `get_settings()` returns
       a cached instance for the process, and `create_app()` accepts an explicit
       instance so tests can build apps with their own values.
Who:   Read by the application factory, the database layer and the auth layer.

Environment names follow the deployment the frontend was built against:
DB_USER / DB_PASS / ACCESS_TOKEN_SECRET / NODE_ENV / PORT.
"""

from functools import lru_cache
from typing import List
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_CORS_ORIGINS = ",".join(
    [
        "http://localhost:5173",
        "https://food-bd-31846.web.app",
        "https://food-bd-31846.firebaseapp.com",
    ]
)


class Settings(BaseSettings):
    """
    Application settings.

    Every value has a development default. Production deployments must set
    ACCESS_TOKEN_SECRET and either MONGODB_URI or DB_USER/DB_PASS.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # A full URI wins; otherwise one is composed from the Atlas credentials.
    mongodb_uri: str = Field(default="")
    db_user: str = Field(default="")
    db_pass: str = Field(default="")
    db_cluster_host: str = Field(default="cluster0.5gtpi.mongodb.net")
    db_app_name: str = Field(default="Cluster0")
    mongodb_db_name: str = Field(default="foodDB")

    # Server selection timeout for every driver operation, in milliseconds
    mongodb_timeout_ms: int = Field(default=5000, ge=100, le=60000)

    # Startup connectivity: ping attempts, and whether a failed ping stops the process
    db_startup_attempts: int = Field(default=3, ge=1, le=10)
    db_abort_on_startup_failure: bool = Field(default=False)

    # ── Auth ──────────────────────────────────────────────────────────────
    access_token_secret: str = Field(default="")
    token_ttl_hours: int = Field(default=5, ge=1, le=24 * 30)
    token_cookie_name: str = Field(default="token")

    # development | production; production switches cookies to Secure + SameSite=None
    environment: str = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default=DEFAULT_CORS_ORIGINS)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("backend_port", "port"),
    )
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("environment")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        return v.strip().lower() or "development"

    # ── Derived values ────────────────────────────────────────────────────

    @property
    def mongo_uri(self) -> str:
        """
        What: The connection string handed to the driver.
        How:  MONGODB_URI when set, else an SRV URI built from the Atlas
              credentials (percent-encoded) and cluster host, else a local
              server for development.
        """
        if self.mongodb_uri:
            return self.mongodb_uri
        if not (self.db_user and self.db_pass):
            return "mongodb://localhost:27017"
        return (
            f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
            f"@{self.db_cluster_host}/?retryWrites=true&w=majority&appName={self.db_app_name}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def cookie_samesite(self) -> str:
        # The production frontend is served from a different site than the API
        return "none" if self.is_production else "strict"

    @property
    def token_ttl_seconds(self) -> int:
        return self.token_ttl_hours * 3600

    def validate_required_for_production(self) -> None:
        """
        What:  Checks that secrets and store credentials are configured.
        When:  Called during app startup (lifespan).
        Raises ValueError listing every missing setting.
        """
        errors = []
        if not self.access_token_secret:
            errors.append("ACCESS_TOKEN_SECRET is not set; issued tokens cannot be trusted.")
        if not self.mongodb_uri and not (self.db_user and self.db_pass):
            errors.append("Neither MONGODB_URI nor DB_USER/DB_PASS is set.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
