"""Application configuration via environment variables.

Learn: Uses pydantic-settings to load config from env vars with NERV_ prefix.
Settings are read once per process; create_app() also accepts an explicit
Settings instance so tests can build isolated apps.
"""

import secrets
from functools import lru_cache
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via NERV_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/nerv.sqlite"

    # Auth
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    bcrypt_rounds: int = 12

    # Server
    environment: Literal["development", "test", "production"] = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # CORS
    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    model_config = {"env_prefix": "NERV_"}

    @model_validator(mode="after")
    def require_signing_key(self):
        """The JWT signing key must come from the environment.

        Only the test environment may run without one; it gets a random
        key that lives as long as the process.
        """
        if not self.jwt_secret:
            if self.environment != "test":
                raise ValueError(
                    "NERV_JWT_SECRET must be set outside the test environment. "
                    "Generate one with: "
                    'python -c "import secrets; print(secrets.token_urlsafe(32))"'
                )
            self.jwt_secret = secrets.token_urlsafe(32)
        return self


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, loaded on first use."""
    return Settings()
