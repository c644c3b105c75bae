"""Configuration models for building caches from files and the environment."""
