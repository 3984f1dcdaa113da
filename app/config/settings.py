"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from typing import Literal

from loguru import logger
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.enums import LifecyclePolicy, ReferralRewardMode

DEFAULT_SECRET_KEY = "change-me-in-production-please-32chars"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: Literal["development", "test", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = "logs/yieldly.log"

    # Database
    database_url: str = "sqlite+aiosqlite:///./yieldly.db"
    database_echo: bool = False
    database_pool_size: int = Field(default=10, gt=0)
    database_max_overflow: int = Field(default=20, ge=0)
    database_pool_timeout: int = Field(
        default=10, gt=0, description="Seconds to wait for a pooled connection"
    )
    database_command_timeout: int = Field(
        default=15, gt=0, description="Per-statement timeout for asyncpg"
    )

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str | None = None
    redis_db: int = 0

    # Tokens
    secret_key: str = DEFAULT_SECRET_KEY
    user_token_ttl_seconds: int = Field(default=7 * 24 * 3600, gt=0)
    admin_token_ttl_seconds: int = Field(default=30 * 60, gt=0)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Admin
    admin_username: str = "admin"
    admin_password_hash: str = ""
    admin_login_max_attempts: int = Field(default=5, gt=0)
    admin_login_window_seconds: int = Field(
        default=15 * 60,
        gt=0,
        description="Lockout window after too many failed admin logins",
    )
    rate_limiter_backend: Literal["memory", "redis"] = "memory"

    # Platform behaviour
    lifecycle_policy: LifecyclePolicy = LifecyclePolicy.AUTO_INVEST
    referral_reward_mode: ReferralRewardMode = ReferralRewardMode.QUALIFICATION
    platform_wallet_address: str = ""

    # Maturity sweep
    sweep_enabled: bool = True
    sweep_interval_minutes: int = Field(
        default=5, gt=0, description="Minutes between maturity sweep runs"
    )

    # HTTP
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    health_check_port: int = 8081

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith(('postgresql+asyncpg://', 'sqlite+aiosqlite://')):
            raise ValueError(
                'DATABASE_URL must start with postgresql+asyncpg:// '
                'or sqlite+aiosqlite://'
            )
        return v

    @field_validator('platform_wallet_address')
    @classmethod
    def strip_wallet_address(cls, v: str) -> str:
        """Strip surrounding whitespace from the wallet address."""
        return v.strip()

    @model_validator(mode='after')
    def validate_production_settings(self) -> 'Settings':
        """Refuse insecure defaults in production."""
        if self.environment != "production":
            return self

        if self.secret_key == DEFAULT_SECRET_KEY or len(self.secret_key) < 32:
            raise ValueError(
                'SECRET_KEY must be set to at least 32 characters in production'
            )
        if self.debug:
            raise ValueError('DEBUG must be disabled in production')
        if not self.admin_password_hash:
            raise ValueError('ADMIN_PASSWORD_HASH is required in production')
        if self.database_url.startswith('sqlite'):
            logger.warning("SQLite database configured in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


# Global settings instance
settings = Settings()
