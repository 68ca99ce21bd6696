"""Settings for timeleft, read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./timeleft.db"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        database_url: SQLAlchemy async URL of the task store
        sql_echo: Whether the engine logs every SQL statement
        log_level: Logging level name used by command-line entry points
    """
    database_url: str
    sql_echo: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv(
                "TIMELEFT_DATABASE_URL",
                os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            ),
            sql_echo=_env_bool("TIMELEFT_SQL_ECHO", False),
            log_level=os.getenv("TIMELEFT_LOG_LEVEL", "INFO").upper(),
        )


def get_settings() -> Settings:
    return Settings.from_env()
