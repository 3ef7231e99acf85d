import logging
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Database
    DATABASE_URL: Optional[str] = None
    TEST_DATABASE_URL: Optional[str] = None

    # Day boundaries are computed in this timezone (IANA name)
    DAY_BOUNDARY_TZ: str = "UTC"

    # Streak lookback and status summary windows (days)
    STREAK_WINDOW_DAYS: int = 30
    STATUS_WINDOW_DAYS: int = 7

    # Seed task catalog, badges and shop items on startup
    SEED_DEFAULTS: bool = True

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    Secrets are not logged, only the names of offending keys.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("dailyfive")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    if not getattr(cfg, "DATABASE_URL", None):
        problems.append("DATABASE_URL is not set (using in-memory store)")

    try:
        ZoneInfo(cfg.DAY_BOUNDARY_TZ)
    except (ZoneInfoNotFoundError, ValueError):
        problems.append(f"DAY_BOUNDARY_TZ is not a known timezone: {cfg.DAY_BOUNDARY_TZ}")

    if cfg.STREAK_WINDOW_DAYS < 1:
        problems.append("STREAK_WINDOW_DAYS must be >= 1")
    if cfg.STATUS_WINDOW_DAYS < 1:
        problems.append("STATUS_WINDOW_DAYS must be >= 1")

    if problems:
        message = f"Invalid configuration: {'; '.join(problems)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)
        return False

    return True
