"""Eviction hooks fired when a cache is closed."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from .cache import ExpiringCache

logger = logging.getLogger(__name__)

# Called synchronously from ``ExpiringCache.close()`` with the cache and an
# argument slot that is currently always None.
EvictedHandler = Callable[["ExpiringCache[Any]", Any], None]


def stop_janitor(cache: "ExpiringCache[Any]", args: Any) -> None:
    """Default hook: cancel the cache's janitor so no further sweep runs."""
    logger.debug("cache.evicted.stop_janitor", extra={"entries": len(cache.store)})
    cache.janitor.cancel()
