"""User settings persisted in the key-value store."""

import logging
from typing import Optional

from ..analyzer.errors import ConfigurationError
from ..storage.kv import KeyValueStore
from .models import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODEL,
    DEFAULT_THRESHOLD,
    Settings,
    is_valid_api_key,
)

logger = logging.getLogger(__name__)

KEY_API_KEY = "or_api_key"
KEY_ENDPOINT = "or_endpoint"
KEY_MODEL = "or_model"
KEY_THRESHOLD = "user_threshold"

SETTINGS_KEYS = [KEY_API_KEY, KEY_ENDPOINT, KEY_MODEL, KEY_THRESHOLD]


def clamp_threshold(value) -> int:
    try:
        threshold = int(value)
    except (TypeError, ValueError):
        return DEFAULT_THRESHOLD
    if threshold == 0:
        return DEFAULT_THRESHOLD
    return max(1, min(100, threshold))


class SettingsProvider:
    """Reads and writes the user's analysis settings."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def resolve(self) -> Settings:
        """Current settings with defaults for everything but the API key.

        Stored values are trusted as-is; the key format is only checked on save.
        """
        stored = self.kv.get(SETTINGS_KEYS)
        return Settings(
            api_key=stored.get(KEY_API_KEY) or None,
            endpoint=stored.get(KEY_ENDPOINT) or DEFAULT_ENDPOINT,
            model=stored.get(KEY_MODEL) or DEFAULT_MODEL,
            threshold=clamp_threshold(stored.get(KEY_THRESHOLD) or DEFAULT_THRESHOLD),
        )

    def save(
        self,
        api_key: str,
        endpoint: Optional[str] = None,
        model: Optional[str] = None,
        threshold=DEFAULT_THRESHOLD,
    ) -> Settings:
        """Validate and persist settings."""
        api_key = (api_key or "").strip()
        if not api_key:
            raise ConfigurationError("Please enter an API key")
        if not is_valid_api_key(api_key):
            raise ConfigurationError("Invalid API key format (should start with sk-or-)")

        settings = Settings(
            api_key=api_key,
            endpoint=(endpoint or "").strip() or DEFAULT_ENDPOINT,
            model=(model or "").strip() or DEFAULT_MODEL,
            threshold=clamp_threshold(threshold),
        )
        self.kv.set({
            KEY_API_KEY: settings.api_key,
            KEY_ENDPOINT: settings.endpoint,
            KEY_MODEL: settings.model,
            KEY_THRESHOLD: settings.threshold,
        })
        logger.info("Settings saved (model=%s, threshold=%d)", settings.model, settings.threshold)
        return settings

    def clear_api_key(self) -> None:
        """Forget the credential. Stored results are kept."""
        self.kv.remove([KEY_API_KEY])
        logger.info("API key cleared")
