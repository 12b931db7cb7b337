"""
Dependency wiring for the serverless handler and the FastAPI app.
"""

from __future__ import annotations

from greeter.config import StoreConfig, get_settings
from greeter.store import InMemorySettingsStore, SettingsStore, SqlSettingsStore

_settings_store: SettingsStore | None = None


def get_settings_store() -> SettingsStore:
    """
    Return a singleton store. It holds configuration only; connections are
    opened per operation.
    """
    global _settings_store
    if _settings_store is not None:
        return _settings_store

    settings = get_settings()
    config = StoreConfig.from_settings(settings)
    if settings.use_in_memory_backends:
        _settings_store = InMemorySettingsStore(config)
    else:
        _settings_store = SqlSettingsStore(config)
    return _settings_store
