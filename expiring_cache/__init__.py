"""
Expiring cache Python package.

This package hosts an in-memory key-value cache whose entries carry an
absolute expiration time, a background janitor that reclaims expired entries,
and supporting configuration and logging helpers. See README.md for usage.
"""

from .__version__ import __version__
from .core.cache import ExpiringCache, KeyValueCache, new_cache, new_cache_from_config
from .core.handlers import EvictedHandler, stop_janitor

__all__ = [
    "__version__",
    "EvictedHandler",
    "ExpiringCache",
    "KeyValueCache",
    "new_cache",
    "new_cache_from_config",
    "stop_janitor",
]
