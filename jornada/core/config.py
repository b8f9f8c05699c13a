import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

STORE_BACKENDS = ("memory", "file", "sql")


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # App identity (manual export header)
    APP_NAME: str = "Jornada Bíblica"
    APP_VERSION: str = "1.0.0"

    # Durable store
    STORE_BACKEND: str = "file"  # memory | file | sql
    STORE_PATH: str = "data/jornada_store.json"
    DATABASE_URL: Optional[str] = None
    TEST_DATABASE_URL: Optional[str] = None

    # Backup cadence
    AUTO_BACKUP_INTERVAL_DAYS: int = 7

    # Calendar
    LOCAL_TIMEZONE: str = "America/Sao_Paulo"

    # Reference data
    READING_PLAN_PATH: Optional[str] = None

    # HTTP
    CORS_ORIGINS: str = "http://localhost:8081"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


def local_tz(settings_obj: Optional[Settings] = None) -> ZoneInfo:
    cfg = settings_obj or settings
    return ZoneInfo(cfg.LOCAL_TIMEZONE)


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate store and calendar configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("jornada")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    backend = (cfg.STORE_BACKEND or "").lower()
    if backend not in STORE_BACKENDS:
        problems.append(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}")
    elif backend == "file" and not cfg.STORE_PATH:
        problems.append("STORE_PATH is required for the file store")
    elif backend == "sql" and not (cfg.DATABASE_URL or cfg.TEST_DATABASE_URL):
        problems.append("DATABASE_URL is required for the sql store")

    if cfg.AUTO_BACKUP_INTERVAL_DAYS < 1:
        problems.append("AUTO_BACKUP_INTERVAL_DAYS must be at least 1")

    try:
        ZoneInfo(cfg.LOCAL_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        problems.append(f"LOCAL_TIMEZONE is not a known timezone: {cfg.LOCAL_TIMEZONE}")

    if problems:
        message = f"Invalid configuration: {'; '.join(problems)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)
        return False

    return True
