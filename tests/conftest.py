"""Shared test fixtures: a small two-tier zone catalog around Makurdi."""

from __future__ import annotations

import math
from typing import Callable, Iterable

import pytest

from delivery_quote.models.domain import (
    Coordinate,
    GlobalSettings,
    RiderAvailability,
    ZoneConfig,
    ZoneEta,
    ZoneKind,
    ZonePricing,
)
from delivery_quote.services.pricing.composer import FeeComposer
from delivery_quote.services.pricing.settings_cache import SettingsCache
from delivery_quote.services.quotes.service import QuoteDependencies
from delivery_quote.services.zoning.cross_zone import CrossZoneFeeTable
from delivery_quote.services.zoning.resolver import ZoneResolver

CITY_A = Coordinate(lat=7.70, lng=8.50)
CITY_B = Coordinate(lat=7.80, lng=8.60)
REGIONAL = Coordinate(lat=7.30, lng=9.00)
NOWHERE = Coordinate(lat=9.00, lng=5.00)


def north_of(point: Coordinate, km: float) -> Coordinate:
    """A point ``km`` due north; haversine returns exactly ``km`` for it."""
    return Coordinate(lat=point.lat + math.degrees(km / 6371.0), lng=point.lng)


class StaticRiders:
    def __init__(self, active_riders: int = 5, queued_jobs: int = 3) -> None:
        self.availability = RiderAvailability(active_riders=active_riders, queued_jobs=queued_jobs)
        self.calls: list[str | None] = []

    def snapshot(self, zone_code: str | None = None) -> RiderAvailability:
        self.calls.append(zone_code)
        return self.availability


def _zone(
    code: str,
    center: Coordinate,
    *,
    kind: ZoneKind = ZoneKind.POLYGON,
    radius_km: float = 0.0,
    base_fee: float = 300,
    per_km_rate: float = 50,
    min_fee: float = 300,
    max_fee: float = 10000,
    free_distance_km: float | None = None,
    travel_profile: str = "urban",
    base_dispatch_minutes: float = 20,
    delivery_types: Iterable[str] = ("standard", "express", "same_day"),
    is_suspended: bool = False,
    suspension_reason: str | None = None,
) -> ZoneConfig:
    return ZoneConfig(
        code=code,
        name=code,
        kind=kind,
        center=center,
        radius_km=radius_km,
        pricing=ZonePricing(
            base_fee=base_fee,
            per_km_rate=per_km_rate,
            min_fee=min_fee,
            max_fee=max_fee,
            free_distance_km=free_distance_km,
        ),
        eta=ZoneEta(
            base_dispatch_minutes=base_dispatch_minutes,
            travel_profile=travel_profile,
            congestion_factor=0.2,
            operational_buffer_percent=0.1,
            pickup_handling_min=5,
            pickup_handling_max=15,
        ),
        delivery_types_allowed=frozenset(delivery_types),
        is_suspended=is_suspended,
        suspension_reason=suspension_reason,
    )


@pytest.fixture
def make_zone() -> Callable[..., ZoneConfig]:
    return _zone


@pytest.fixture
def city_zones() -> tuple[ZoneConfig, ...]:
    return (
        _zone("MKD-AA", CITY_A),
        _zone("MKD-BB", CITY_B, base_fee=400, min_fee=400, max_fee=3000),
    )


@pytest.fixture
def regional_zones() -> tuple[ZoneConfig, ...]:
    return (
        _zone(
            "BN-RR",
            REGIONAL,
            kind=ZoneKind.CENTROID_FALLBACK,
            radius_km=20,
            base_fee=800,
            per_km_rate=40,
            min_fee=800,
            travel_profile="rural",
            base_dispatch_minutes=60,
            delivery_types=("standard", "express"),
        ),
    )


@pytest.fixture
def cross_zone_fees() -> CrossZoneFeeTable:
    return CrossZoneFeeTable.from_mapping({"default": 150, "MKD-AA": {"MKD-BB": 200}})


@pytest.fixture
def resolver(city_zones, regional_zones) -> ZoneResolver:
    return ZoneResolver(city_zones=city_zones, regional_zones=regional_zones, city_radius_km=5.0, city_prefix="MKD-")


@pytest.fixture
def composer(resolver, cross_zone_fees) -> FeeComposer:
    return FeeComposer(resolver=resolver, cross_zone_fees=cross_zone_fees)


@pytest.fixture
def global_settings() -> GlobalSettings:
    return GlobalSettings()


@pytest.fixture
def riders() -> StaticRiders:
    return StaticRiders()


@pytest.fixture
def dependencies(resolver, composer, global_settings, riders) -> QuoteDependencies:
    return QuoteDependencies(
        resolver=resolver,
        composer=composer,
        settings_cache=SettingsCache.static(global_settings),
        rider_client=riders,
    )
