"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with TEAMHUB_ prefix.
No config files: the signing secret and database URL are injected at
process start so they can be rotated without a deploy.
"""

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via TEAMHUB_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./teamhub.db"

    # Redis (rate limiting only)
    redis_url: str = "redis://localhost:6379/0"

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    session_ttl_hours: int = 24
    session_cookie_name: str = "token"
    bcrypt_rounds: int = 12  # ~250ms per hash; lower only in tests
    reset_token_ttl_minutes: int = 60
    require_approval_for_login: bool = False

    # Frontend (password reset links point here)
    frontend_url: str = "http://localhost:3000"

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Rate limiting (None = enabled in production only)
    rate_limit_enabled: Optional[bool] = None
    rate_limit_rpm: int = 100  # requests per minute per IP
    rate_limit_auth_rpm: int = 10  # login, signup, forgot-password

    model_config = {"env_prefix": "TEAMHUB_"}

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cookie_secure(self) -> bool:
        return self.is_production

    @property
    def rate_limit_active(self) -> bool:
        if self.rate_limit_enabled is None:
            return self.is_production
        return self.rate_limit_enabled

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment not in ("development", "test")
            and self.jwt_secret == "change-me-in-production"
        ):
            raise ValueError(
                "TEAMHUB_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        return self


# Singleton, import this everywhere
settings = Settings()
