"""Zone catalog loader with database-first approach, falling back to the bundled seed file."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import Coordinate, ZoneConfig, ZoneEta, ZoneKind, ZonePricing
from ..services.zoning.cross_zone import CrossZoneFeeTable

CITY_ZONES_TABLE = "city_delivery_zones"
REGIONAL_ZONES_TABLE = "regional_delivery_zones"
SETTINGS_TABLE = "delivery_settings"


@dataclass(slots=True)
class ZoneCatalog:
    city_zones: tuple[ZoneConfig, ...]
    regional_zones: tuple[ZoneConfig, ...]
    cross_zone_fees: CrossZoneFeeTable
    source: str


def _maybe_json(value: Any) -> Any:
    # Mongo-era rows stored nested objects as JSON strings
    if isinstance(value, str):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def parse_zone(row: Mapping[str, Any]) -> ZoneConfig:
    """Build a ``ZoneConfig`` from a stored row or seed entry."""

    center = _maybe_json(row["center"])
    pricing = _maybe_json(row.get("pricing")) or {}
    eta = _maybe_json(row["eta"])
    handling = eta.get("pickup_handling_minutes") or {}
    delivery_types = _maybe_json(row.get("delivery_types")) or []

    return ZoneConfig(
        code=str(row["code"]).strip(),
        name=str(row.get("name") or row["code"]),
        kind=ZoneKind(row.get("type") or ZoneKind.CENTROID_FALLBACK.value),
        center=Coordinate(lat=float(center["lat"]), lng=float(center["lng"])),
        radius_km=float(row.get("radius_km") or 0.0),
        pricing=ZonePricing(
            base_fee=float(pricing.get("base_fee_ngn") or 0.0),
            per_km_rate=float(pricing.get("per_km_rate_ngn") or 0.0),
            min_fee=float(pricing.get("min_fee_ngn") or 0.0),
            max_fee=float(pricing.get("max_fee_ngn") or 0.0),
            free_distance_km=_optional_float(pricing.get("free_distance_km")),
        ),
        eta=ZoneEta(
            base_dispatch_minutes=float(eta["base_dispatch_minutes"]),
            travel_profile=str(eta.get("travel_profile") or ""),
            congestion_factor=float(eta.get("congestion_factor") or 0.0),
            operational_buffer_percent=float(eta.get("operational_buffer_percent") or 0.0),
            pickup_handling_min=float(handling.get("min") or 0.0),
            pickup_handling_max=float(handling.get("max") or 0.0),
        ),
        delivery_types_allowed=frozenset(str(item) for item in delivery_types),
        is_active=bool(row.get("is_active", True)),
        is_suspended=bool(row.get("is_suspended", False)),
        suspension_reason=row.get("suspension_reason"),
    )


def _parse_zones(rows: Iterable[Mapping[str, Any]]) -> tuple[ZoneConfig, ...]:
    zones: list[ZoneConfig] = []
    for row in rows:
        try:
            zone = parse_zone(row)
        except (KeyError, ValueError, TypeError) as e:
            # Skip invalid rows but continue processing
            logging.warning(f"Skipping invalid zone row {row.get('code')!r}: {e}")
            continue
        if zone.is_active:
            zones.append(zone)
    return tuple(zones)


def _load_catalog_from_database() -> ZoneCatalog | None:
    """Load zones from Supabase. Returns None if database not available or empty."""
    supabase = get_supabase_client()
    if not supabase:
        return None

    try:
        city_rows = supabase.table(CITY_ZONES_TABLE).select("*").order("sort_order").execute().data or []
        regional_rows = supabase.table(REGIONAL_ZONES_TABLE).select("*").order("sort_order").execute().data or []
        city_zones = _parse_zones(city_rows)
        regional_zones = _parse_zones(regional_rows)
        if not city_zones and not regional_zones:
            if city_rows or regional_rows:
                logging.warning("No usable zone rows in database, falling back to seed file")
            return None

        fee_rows = (
            supabase.table(SETTINGS_TABLE).select("value").eq("key", "cross_zone_fees").limit(1).execute().data
            or []
        )
        raw_fees = _maybe_json(fee_rows[0]["value"]) if fee_rows else {}
        return ZoneCatalog(
            city_zones=city_zones,
            regional_zones=regional_zones,
            cross_zone_fees=CrossZoneFeeTable.from_mapping(raw_fees or {}),
            source="database",
        )
    except Exception as e:
        # If database query fails, return None to fall back to file
        logging.warning(f"Zone query failed, falling back to seed file: {e}")
        return None


def _load_catalog_from_file(source: Path | None = None) -> ZoneCatalog:
    seed_path = source or settings.zone_seed_file
    if not seed_path.exists():
        raise FileNotFoundError(f"Zone seed file not found: {seed_path}")

    with seed_path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    return ZoneCatalog(
        city_zones=_parse_zones(data.get("city_zones", [])),
        regional_zones=_parse_zones(data.get("regional_zones", [])),
        cross_zone_fees=CrossZoneFeeTable.from_mapping(data.get("cross_zone_fees", {})),
        source=str(seed_path),
    )


def load_zone_catalog(source: Path | None = None) -> ZoneCatalog:
    """Get zones from the database first, fall back to the seed file."""
    db_catalog = _load_catalog_from_database()
    if db_catalog:
        logging.info(
            f"Loaded {len(db_catalog.city_zones)} city and {len(db_catalog.regional_zones)} regional zones from database"
        )
        return db_catalog

    catalog = _load_catalog_from_file(source)
    logging.info(
        f"Loaded {len(catalog.city_zones)} city and {len(catalog.regional_zones)} regional zones from {catalog.source}"
    )
    return catalog


class ZoneCatalogCache:
    """Serve the zone catalog from memory until ``expires_at`` passes.

    A failed reload keeps serving the last catalog that loaded, so a
    database outage never empties the zone list mid-flight.
    """

    def __init__(
        self,
        loader: Callable[[], ZoneCatalog] = load_zone_catalog,
        ttl_seconds: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[ZoneCatalog] = None
        self.expires_at: float = 0.0

    def get(self) -> ZoneCatalog:
        if self._value is not None and self._clock() < self.expires_at:
            return self._value
        return self.refresh()

    def refresh(self) -> ZoneCatalog:
        try:
            catalog = self._loader()
        except Exception as exc:
            if self._value is None:
                raise
            logging.warning(f"Failed to reload zone catalog, serving previous one: {exc}")
            return self._value
        self._value = catalog
        self.expires_at = self._clock() + self.ttl_seconds
        return catalog

    def invalidate(self) -> None:
        self._value = None
        self.expires_at = 0.0
