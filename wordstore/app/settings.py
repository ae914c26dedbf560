"""
Process Settings
================
User preferences persisted next to the word book data.

Replaces a module-level theme singleton with an explicit object: build it
with a key-value store, call load() once, then read or toggle.
"""

import logging

from wordstore.errors import WordStoreError
from wordstore.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

THEME_KEY = "app_theme_dark"


class ThemeSettings:
    """Light/dark theme preference."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._is_dark = False

    @property
    def is_dark(self) -> bool:
        return self._is_dark

    async def load(self) -> bool:
        """Read the stored preference. Failures keep the light default."""
        try:
            stored = await self.store.get(THEME_KEY)
        except (WordStoreError, OSError) as e:
            logger.error(f"Failed to load theme: {e}")
            return self._is_dark

        if stored is not None:
            self._is_dark = bool(stored)
        return self._is_dark

    async def toggle(self) -> bool:
        """Flip the preference and persist it. A failed write keeps the new value in memory."""
        self._is_dark = not self._is_dark
        try:
            await self.store.set(THEME_KEY, self._is_dark)
        except (WordStoreError, OSError) as e:
            logger.error(f"Failed to save theme: {e}")
        return self._is_dark
