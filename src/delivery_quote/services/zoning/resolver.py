"""Coordinate to zone resolution over the two-tier zone catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import Coordinate, ZoneConfig
from ..geospatial import distance_km


@dataclass(slots=True)
class ZoneResolver:
    """Resolve points against city zones first, then regional zones.

    City zones match within a fixed radius regardless of their declared
    radius; regional zones match within their own ``radius_km``. Catalog
    order is the tie-break: the first matching zone wins.
    """

    city_zones: Sequence[ZoneConfig] = ()
    regional_zones: Sequence[ZoneConfig] = ()
    city_radius_km: float = field(default_factory=lambda: settings.city_zone_radius_km)
    city_prefix: str = field(default_factory=lambda: settings.city_zone_prefix)

    def resolve(self, coord: Coordinate) -> Optional[ZoneConfig]:
        for zone in self.city_zones:
            if distance_km(coord, zone.center) <= self.city_radius_km:
                return zone
        for zone in self.regional_zones:
            if distance_km(coord, zone.center) <= zone.radius_km:
                return zone
        return None

    def is_city_zone(self, zone: Optional[ZoneConfig]) -> bool:
        return zone is not None and zone.code.startswith(self.city_prefix)

    def all_zones(self) -> list[ZoneConfig]:
        return [*self.city_zones, *self.regional_zones]

    def find(self, code: str) -> Optional[ZoneConfig]:
        for zone in self.all_zones():
            if zone.code == code:
                return zone
        return None
