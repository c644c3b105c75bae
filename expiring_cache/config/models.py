"""Config models and loader.

This module defines Pydantic models for file- and environment-based cache
configuration. JSON parsing prefers `orjson` when available and falls back to
the Python standard library's `json` module, keeping `orjson` an optional
extra.
"""

from __future__ import annotations

import json as _json
from pathlib import Path
from typing import Any, Callable, Optional

try:
    import orjson as _orjson_mod  # type: ignore[assignment]
except ImportError:  # pragma: no cover - optional dependency
    _orjson_mod = None  # type: ignore[assignment]
    _loads_orjson: Optional[Callable[[bytes], Any]] = None
else:

    def _loads_orjson(buf: bytes) -> Any:
        loader = getattr(_orjson_mod, "loads")  # type: ignore[assignment]
        return loader(buf)


from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheConfig(BaseModel):
    """Constructor arguments for a cache.

    Attributes
    ----------
    default_expiration_ms: int
        Reserved default entry lifetime in milliseconds.
    cleanup_interval_ms: int
        Delay between janitor sweeps in milliseconds.
    initial_capacity: Optional[int]
        Expected number of entries.
    """

    default_expiration_ms: int = Field(
        1000, ge=0, description="Reserved default entry lifetime (ms)"
    )
    cleanup_interval_ms: int = Field(
        3000, ge=1, description="Delay between janitor sweeps (ms)"
    )
    initial_capacity: Optional[int] = Field(
        None, ge=0, description="Expected number of entries"
    )

    @staticmethod
    def load(path: Path) -> "CacheConfig":
        """Load cache config from a JSON file."""
        raw = path.read_bytes()
        if _loads_orjson is not None:
            data = _loads_orjson(raw)
        else:
            data = _json.loads(raw.decode("utf-8"))
        return CacheConfig.model_validate(data)


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    default_expiration_ms: int
        Reserved default entry lifetime in milliseconds.
    cleanup_interval_ms: int
        Delay between janitor sweeps in milliseconds.
    initial_capacity: Optional[int]
        Expected number of entries.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="EXPIRING_CACHE_")

    log_level: str = Field("INFO")
    default_expiration_ms: int = Field(1000, ge=0)
    cleanup_interval_ms: int = Field(3000, ge=1)
    initial_capacity: Optional[int] = Field(None, ge=0)

    def to_cache_config(self) -> CacheConfig:
        """Project the cache-related settings onto a :class:`CacheConfig`."""
        return CacheConfig(
            default_expiration_ms=self.default_expiration_ms,
            cleanup_interval_ms=self.cleanup_interval_ms,
            initial_capacity=self.initial_capacity,
        )
