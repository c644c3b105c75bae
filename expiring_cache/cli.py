"""Command-line demonstration of the expiring cache.

Builds a cache, stores a value for five seconds, reads it back just before
and just after it expires, then closes the cache.

Usage
-----
    python -m expiring_cache.cli --config cache.json
    expiring-cache-demo --speed 10 -v
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Any, Optional

from .config.models import CacheConfig, EnvSettings
from .core.cache import ExpiringCache, new_cache_from_config
from .observability import setup_logging

logger = logging.getLogger(__name__)

DEMO_KEY = "one"
DEMO_VALUE = 1
DEMO_DURATION_MS = 5000


def _load_config(config_path: Optional[Path], settings: EnvSettings) -> CacheConfig:
    """Resolve the cache config from a JSON file or the environment.

    Parameters
    ----------
    config_path: Optional[Path]
        Filesystem path to a JSON config file; environment settings are used
        when omitted.
    settings: EnvSettings
        Environment and .env settings already loaded by the caller.
    """
    if config_path is not None:
        return CacheConfig.load(config_path)
    return settings.to_cache_config()


def run_demo(cache: ExpiringCache[Any], speed: float = 1.0) -> list[Optional[Any]]:
    """Put one value, read it before and after expiry, close the cache.

    Waits are divided by ``speed``; the entry duration is scaled the same way
    so the two reads still land on either side of the expiration.
    """
    duration_ms = int(DEMO_DURATION_MS / speed)
    cache.put(DEMO_KEY, DEMO_VALUE, duration_ms)

    results = []
    try:
        time.sleep(4.0 / speed)
        results.append(cache.get(DEMO_KEY))
        time.sleep(1.1 / speed)
        results.append(cache.get(DEMO_KEY))
    finally:
        cache.close()
    return results


def main() -> None:
    """CLI entrypoint for the expiring cache demonstration."""
    parser = argparse.ArgumentParser(description="Expiring cache demo")
    parser.add_argument("--config", help="Path to JSON cache config")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=1.0,
        help="Divide demo waits and durations by this factor (default 1.0)",
    )
    args = parser.parse_args()
    if args.speed <= 0:
        parser.error("--speed must be positive")

    settings = EnvSettings()
    env_level = settings.log_level.upper()
    effective_level = args.log_level or ("DEBUG" if args.verbose > 0 else env_level)
    setup_logging(effective_level)

    cfg = _load_config(Path(args.config) if args.config else None, settings)
    cache = new_cache_from_config(cfg)
    for value in run_demo(cache, speed=args.speed):
        print(value)


if __name__ == "__main__":
    main()
