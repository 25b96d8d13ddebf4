"""Short-lived cache over the global pricing settings provider."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from ...models.domain import GlobalSettings

logger = logging.getLogger(__name__)

SettingsLoader = Callable[[], Optional[GlobalSettings]]


class SettingsCache:
    """Serve ``GlobalSettings`` from memory until ``expires_at`` passes.

    The loader returns ``None`` when the provider has nothing stored or is
    unreachable; the cache then serves defaults without caching them so the
    next call retries the provider. Concurrent refreshes race harmlessly:
    the last writer wins.
    """

    def __init__(
        self,
        loader: SettingsLoader,
        ttl_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        defaults: Optional[GlobalSettings] = None,
    ) -> None:
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._defaults = defaults or GlobalSettings()
        self._value: Optional[GlobalSettings] = None
        self.expires_at: float = 0.0

    @classmethod
    def static(cls, value: GlobalSettings) -> "SettingsCache":
        """A cache that always serves ``value``; used for dry runs and tests."""
        return cls(lambda: value, ttl_seconds=float("inf"))

    def get(self) -> GlobalSettings:
        if self._value is not None and self._clock() < self.expires_at:
            return self._value
        return self.refresh()

    def refresh(self) -> GlobalSettings:
        try:
            loaded = self._loader()
        except Exception as exc:
            logger.warning(f"Failed to load delivery settings, using defaults: {exc}")
            loaded = None
        if loaded is None:
            return self._defaults
        self._value = loaded
        self.expires_at = self._clock() + self.ttl_seconds
        logger.debug("Loaded delivery settings from provider")
        return loaded

    def invalidate(self) -> None:
        self._value = None
        self.expires_at = 0.0
