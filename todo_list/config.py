"""Application settings loaded from environment variables (+ optional .env)."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    """Settings shared by the server, the console client and the agent."""

    database_path: Path = Path("tasks.db")
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_dir: Path = Path(".local/todo")
    log_level: str = "INFO"
    api_url: str = "http://127.0.0.1:8000/api/tasks"

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            database_path=_env_path(_k("DATABASE_PATH"), defaults.database_path),
            host=_env(_k("HOST"), defaults.host),
            port=_env_int(_k("PORT"), defaults.port),
            reload=_env_bool(_k("RELOAD"), defaults.reload),
            cors_origins=_env_list(_k("CORS_ORIGINS"), defaults.cors_origins),
            log_dir=_env_path(_k("LOG_DIR"), defaults.log_dir),
            log_level=_env(_k("LOG_LEVEL"), defaults.log_level).upper(),
            api_url=_env(_k("API_URL"), defaults.api_url).rstrip("/"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read from the environment once."""
    load_dotenv(override=False)
    return Settings.from_env()
