"""
Runtime Environment Validation Module

Validates required environment variables at application startup.
If validation fails, the application refuses to start (hard fail).
"""

import logging
import os
import sys

from pydantic import ValidationError

from rehaish.core.config import Settings

logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    print(f"FATAL: {message}", file=sys.stderr)
    sys.exit(1)


def validate_environment() -> Settings:
    """
    Validate all required environment variables at startup.

    This function MUST be called before the FastAPI app starts.
    Production-only rules (CORS, database driver, credentials file) are
    skipped in development and test environments.

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = Settings()
    except ValidationError as e:
        print("FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   - {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    if settings.is_production:
        # 1. CORS: wildcard is not allowed in production
        if "*" in settings.cors_origins:
            _fail("Wildcard CORS origin (*) detected in production mode. Set ALLOWED_ORIGINS to specific domains.")

        # 2. Database URL: PostgreSQL only
        if not settings.database_url.startswith("postgresql"):
            _fail("DATABASE_URL must be a PostgreSQL connection string (postgresql+asyncpg://)")

        # 3. Firebase: credentials path must exist (if provided)
        if settings.google_application_credentials and not os.path.exists(
            settings.google_application_credentials
        ):
            _fail(f"Firebase credentials file not found: {settings.google_application_credentials}")

    logger.info(
        f"[ENV] Validation passed (app={settings.app_name}, environment={settings.environment.value}, "
        f"debug={settings.debug})"
    )
    return settings


if __name__ == "__main__":
    validate_environment()
    print("All environment variables are valid!")
