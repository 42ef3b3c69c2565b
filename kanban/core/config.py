"""Settings resolved from the environment (KANBAN_* variables) with defaults."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

ENV_PREFIX = "KANBAN_"


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///kanban.db"
    echo_sql: bool = False
    bcrypt_rounds: int = 12
    token_secret: str = "change-me"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            database_url=_env("DATABASE_URL", defaults.database_url),
            echo_sql=_env_bool("ECHO_SQL", defaults.echo_sql),
            bcrypt_rounds=int(_env("BCRYPT_ROUNDS", str(defaults.bcrypt_rounds))),
            token_secret=_env("TOKEN_SECRET", defaults.token_secret),
            log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
