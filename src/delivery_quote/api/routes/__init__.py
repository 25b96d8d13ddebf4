"""Route group exports."""

from . import audit, health, quotes, settings, zones

__all__ = ["audit", "health", "quotes", "settings", "zones"]
