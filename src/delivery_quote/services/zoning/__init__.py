"""Zone resolution services."""

from .cross_zone import CrossZoneFeeTable
from .resolver import ZoneResolver

__all__ = ["CrossZoneFeeTable", "ZoneResolver"]
