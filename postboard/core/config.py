"""
Configuration helpers for the postboard backend.

Routers and repositories read settings through ``get_settings()`` instead of
fetching os.environ directly. The result is cached; tests call
``get_settings.cache_clear()`` after changing the environment.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_dir: Path
    log_level: str
    log_file: str
    host: str
    port: int
    cors_origins: tuple[str, ...]
    require_known_owner: bool
    auth_rate_limit: int
    auth_rate_window_seconds: int

    @property
    def users_file(self) -> Path:
        return self.data_dir / "users.json"

    @property
    def posts_file(self) -> Path:
        return self.data_dir / "posts.json"


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _csv(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip() for item in (value or "").split(",") if item.strip())

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_dir=Path(os.getenv("DATA_DIR") or "data"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=os.getenv("LOG_FILE", ""),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "5000"), 5000),
        cors_origins=_csv(os.getenv("CORS_ORIGINS", "*")),
        require_known_owner=_bool(os.getenv("REQUIRE_KNOWN_OWNER"), True),
        auth_rate_limit=_int(os.getenv("AUTH_RATE_LIMIT", "20"), 20),
        auth_rate_window_seconds=_int(os.getenv("AUTH_RATE_WINDOW_SECONDS", "60"), 60),
    )
