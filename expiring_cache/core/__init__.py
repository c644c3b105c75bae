"""Cache engine: entries, store, access guard, janitor and eviction hook."""
