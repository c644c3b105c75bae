"""
Version information for the expiring cache.

The package version is read from pyproject.toml via importlib.metadata so
that packaging metadata stays the single source of truth.
"""

try:
    from importlib.metadata import version

    __version__ = version("expiring-cache")
except Exception:
    # Fallback for development (package not installed)
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except Exception:
        # Last resort fallback
        __version__ = "0.0.0-dev"
