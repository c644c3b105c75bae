"""Cache entry model and clock helpers.

An :class:`Entry` pairs a stored value with an absolute expiration timestamp
expressed in integer milliseconds on the same clock as :func:`now_ms`.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current wall-clock time in integer milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True, slots=True)
class Entry(Generic[T]):
    """Immutable value + absolute expiration pair.

    Attributes
    ----------
    value: T
        Caller-supplied value, stored as-is.
    expires_at: int
        Absolute expiration timestamp in milliseconds.
    """

    value: T
    expires_at: int

    @classmethod
    def create(cls, value: T, duration_ms: int, now: int) -> "Entry[T]":
        """Build an entry expiring ``duration_ms`` after ``now``."""
        return cls(value=value, expires_at=now + int(duration_ms))

    def is_live(self, now: int) -> bool:
        """Readable while the expiration lies strictly in the future."""
        return self.expires_at > now

    def is_expired(self, now: int) -> bool:
        """Sweepable once the expiration lies strictly in the past.

        An entry with ``expires_at == now`` is neither live nor expired: reads
        already miss it, the janitor picks it up on a later pass.
        """
        return self.expires_at < now
