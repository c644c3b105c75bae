"""Tests for cache configuration models."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

import expiring_cache.config.models as models_mod
from expiring_cache import new_cache_from_config
from expiring_cache.config.models import CacheConfig, EnvSettings


def test_defaults_match_demo_values():
    cfg = CacheConfig()
    assert cfg.default_expiration_ms == 1000
    assert cfg.cleanup_interval_ms == 3000
    assert cfg.initial_capacity is None


def test_load_from_json(tmp_path: Path):
    path = tmp_path / "cache.json"
    path.write_text(
        json.dumps(
            {
                "default_expiration_ms": 250,
                "cleanup_interval_ms": 50,
                "initial_capacity": 16,
            }
        )
    )

    cfg = CacheConfig.load(path)
    assert cfg == CacheConfig(
        default_expiration_ms=250, cleanup_interval_ms=50, initial_capacity=16
    )


def test_load_without_orjson(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(models_mod, "_loads_orjson", None)
    path = tmp_path / "cache.json"
    path.write_text('{"cleanup_interval_ms": 75}')

    assert CacheConfig.load(path).cleanup_interval_ms == 75


@pytest.mark.parametrize(
    "data",
    [
        {"cleanup_interval_ms": 0},
        {"default_expiration_ms": -1},
        {"initial_capacity": -3},
    ],
)
def test_invalid_values_rejected(data):
    with pytest.raises(ValidationError):
        CacheConfig.model_validate(data)


def test_env_settings(monkeypatch):
    monkeypatch.setenv("EXPIRING_CACHE_DEFAULT_EXPIRATION_MS", "5000")
    monkeypatch.setenv("EXPIRING_CACHE_CLEANUP_INTERVAL_MS", "100")
    monkeypatch.setenv("EXPIRING_CACHE_LOG_LEVEL", "DEBUG")

    settings = EnvSettings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.to_cache_config() == CacheConfig(
        default_expiration_ms=5000, cleanup_interval_ms=100
    )


def test_new_cache_from_config(clock):
    cfg = CacheConfig(
        default_expiration_ms=10, cleanup_interval_ms=20, initial_capacity=4
    )
    cache = new_cache_from_config(cfg, clock=clock)
    try:
        assert cache.default_expiration_ms == 10
        assert cache.cleanup_interval_ms == 20
        assert cache.store.capacity_hint == 4
        assert cache.janitor.interval_ms == 20
    finally:
        cache.close()
        cache.janitor.join(2.0)
