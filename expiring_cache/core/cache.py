"""Public cache facade.

:func:`new_cache` wires a :class:`Store`, a reader/writer access guard, a
:class:`Janitor` and an eviction hook into an :class:`ExpiringCache` and
starts the janitor, whose first sweep runs immediately.

Lock scope
----------
``put`` holds the guard exclusively and ``get`` holds it shared, which makes
the cache's own operations atomic with respect to each other. The janitor
deletes straight from the store without the guard, so a ``get`` can race a
janitor delete. The value returned by such a ``get`` was live when read; any
later staleness is ordinary cache staleness.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Optional, Protocol, TypeVar

from ..config.models import CacheConfig
from .entry import Clock, now_ms
from .guard import ReadWriteLock
from .handlers import EvictedHandler, stop_janitor
from .janitor import Janitor, sweep_expired
from .store import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class KeyValueCache(Protocol[T]):
    """Minimal surface shared by cache implementations."""

    def put(self, key: str, value: T, duration_ms: int) -> None:
        """Store ``value`` under ``key`` for ``duration_ms`` milliseconds."""
        raise NotImplementedError

    def get(self, key: str) -> Optional[T]:
        """Return the live value for ``key`` or None."""
        raise NotImplementedError

    def close(self) -> None:
        """Release background resources."""
        raise NotImplementedError


class ExpiringCache(Generic[T]):
    """In-memory cache whose entries expire at an absolute time.

    Instances are normally built with :func:`new_cache`; the constructor only
    stores already-wired collaborators and does not start the janitor.

    Parameters
    ----------
    default_expiration_ms: int
        Reserved default lifetime. Stored and configurable, but ``put`` always
        takes an explicit duration.
    cleanup_interval_ms: int
        Delay between janitor sweeps.
    store: Store[T]
        Backing store, owned exclusively by this cache.
    janitor: Janitor
        Background sweeper for ``store``.
    evicted_handler: EvictedHandler
        Hook invoked by :meth:`close`.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        default_expiration_ms: int,
        cleanup_interval_ms: int,
        store: Store[T],
        janitor: Janitor,
        evicted_handler: EvictedHandler,
    ) -> None:
        self._default_expiration_ms = _non_negative(
            "default_expiration_ms", default_expiration_ms
        )
        self._cleanup_interval_ms = int(cleanup_interval_ms)
        self._store = store
        self._guard = ReadWriteLock()
        self._janitor = janitor
        self.evicted_handler = evicted_handler

    def put(self, key: str, value: T, duration_ms: int) -> None:
        """Store ``value`` under ``key`` until ``now + duration_ms``.

        Overwrites any existing entry; the new duration alone governs expiry.
        """
        with self._guard.write_locked():
            self._store.set(key, value, duration_ms)

    def get(self, key: str) -> Optional[T]:
        """Return the value for ``key``, or None if missing or expired."""
        with self._guard.read_locked():
            return self._store.lookup(key)

    def close(self) -> None:
        """Fire the eviction hook.

        Each call invokes the hook again. With the default hook the janitor is
        cancelled; a custom hook that does not cancel it leaves sweeps running.
        """
        logger.info(
            "cache.closed",
            extra={"entries": len(self._store), "janitor": self._janitor.name},
        )
        self.evicted_handler(self, None)

    def __enter__(self) -> "ExpiringCache[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def default_expiration_ms(self) -> int:
        return self._default_expiration_ms

    @default_expiration_ms.setter
    def default_expiration_ms(self, value: int) -> None:
        self._default_expiration_ms = _non_negative("default_expiration_ms", value)

    @property
    def cleanup_interval_ms(self) -> int:
        return self._cleanup_interval_ms

    @property
    def store(self) -> Store[T]:
        return self._store

    @property
    def guard(self) -> ReadWriteLock:
        return self._guard

    @property
    def janitor(self) -> Janitor:
        return self._janitor


def new_cache(
    default_expiration_ms: int,
    cleanup_interval_ms: int,
    initial_capacity: Optional[int] = None,
    evicted_handler: Optional[EvictedHandler] = None,
    *,
    clock: Clock = now_ms,
) -> ExpiringCache[Any]:
    """Build a cache and start its janitor.

    Parameters
    ----------
    default_expiration_ms: int
        Reserved default lifetime (see :class:`ExpiringCache`).
    cleanup_interval_ms: int
        Fixed delay between sweeps; must be positive.
    initial_capacity: Optional[int]
        Expected number of entries, kept as a hint on the store.
    evicted_handler: Optional[EvictedHandler]
        Hook run by ``close()``. Defaults to :func:`stop_janitor`.
    clock: Clock
        Millisecond clock for stamping and checking entries.

    Returns
    -------
    ExpiringCache
        A live cache whose first sweep has already been scheduled.
    """
    if initial_capacity is not None:
        _non_negative("initial_capacity", initial_capacity)
    store: Store[Any] = Store(clock=clock, capacity_hint=initial_capacity)
    janitor = Janitor(
        lambda: sweep_expired(store), cleanup_interval_ms, name="expiring-cache-janitor"
    )
    cache: ExpiringCache[Any] = ExpiringCache(
        default_expiration_ms,
        cleanup_interval_ms,
        store,
        janitor,
        evicted_handler if evicted_handler is not None else stop_janitor,
    )
    janitor.start()
    logger.info(
        "cache.created",
        extra={
            "default_expiration_ms": default_expiration_ms,
            "cleanup_interval_ms": cleanup_interval_ms,
            "custom_handler": evicted_handler is not None,
        },
    )
    return cache


def new_cache_from_config(
    config: CacheConfig,
    evicted_handler: Optional[EvictedHandler] = None,
    *,
    clock: Clock = now_ms,
) -> ExpiringCache[Any]:
    """Build a cache from a validated :class:`CacheConfig`."""
    return new_cache(
        config.default_expiration_ms,
        config.cleanup_interval_ms,
        config.initial_capacity,
        evicted_handler,
        clock=clock,
    )


def _non_negative(name: str, value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value
