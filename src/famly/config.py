"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))

Backend = Literal["local", "supabase"]


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    backend: Backend = Field(
        default="local",
        description="Persistence backend: 'supabase' (hosted) or 'local' (mock mode).",
    )
    database_path: Path = Field(
        default=Path("./data/famly.db"),
        description="SQLite file backing the local store and the persisted session.",
    )
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g. https://xyz.supabase.co).",
    )
    supabase_anon_key: Optional[str] = Field(
        default=None,
        description="Public anon key sent as the apikey header.",
    )
    http_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for calls to the hosted backend.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    currency_symbol: str = Field(
        default="€",
        description="Symbol used when formatting expense amounts.",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def uses_supabase(self) -> bool:
        return self.backend == "supabase"

def _backend(value: str) -> Optional[str]:
    normalized = value.strip().lower()
    return normalized if normalized in {"local", "supabase"} else None


def _flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _seconds(value: str) -> Optional[float]:
    try:
        return float(value)
    except ValueError:
        return None


# env var -> (settings field, parser); a parser returning None keeps the default.
_ENV_FIELDS: dict[str, tuple[str, Callable[[str], object]]] = {
    "FAMLY_BACKEND": ("backend", _backend),
    "FAMLY_DATABASE_PATH": ("database_path", Path),
    "FAMLY_SUPABASE_URL": ("supabase_url", lambda value: value.rstrip("/")),
    "FAMLY_SUPABASE_ANON_KEY": ("supabase_anon_key", str),
    "FAMLY_HTTP_TIMEOUT": ("http_timeout", _seconds),
    "FAMLY_LOG_LEVEL": ("log_level", str),
    "FAMLY_LOG_FORMAT": ("log_format", str),
    "FAMLY_LOG_REQUESTS": ("log_requests", _flag),
    "FAMLY_CURRENCY_SYMBOL": ("currency_symbol", str),
}


def _read_dotenv(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    entries: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        key, sep, raw = line.strip().partition("=")
        if not sep or key.startswith("#"):
            continue
        entries[key.strip()] = raw.strip().strip("\"'")
    return entries


def _load_from_env() -> dict[str, object]:
    """Collect overrides from the process environment, then .env files."""

    dotenv: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        dotenv.update(_read_dotenv(candidate))

    overrides: dict[str, object] = {}
    for env_key, (field, parse) in _ENV_FIELDS.items():
        raw = os.environ.get(env_key) or dotenv.get(env_key)
        if not raw:
            continue
        value = parse(raw)
        if value is not None:
            overrides[field] = value
    return overrides


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
