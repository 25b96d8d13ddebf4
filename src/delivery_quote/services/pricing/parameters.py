"""Resolution of pricing parameters from zone, global settings and hardcoded defaults."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...models.domain import GlobalSettings, ZoneConfig

DEFAULT_MIN_FEE_NGN = 300.0
DEFAULT_MAX_FEE_NGN = 10000.0
REGIONAL_FALLBACK_RULE = "benue_fallback"


@dataclass(slots=True, frozen=True)
class PricingParameters:
    base_fee: float
    per_km_rate: float
    min_fee: float
    max_fee: float
    free_distance_km: float
    rule: str


def _first_truthy(*values: Optional[float]) -> float:
    for value in values:
        if value:
            return value
    return 0.0


def resolve_base_fee(zone: Optional[ZoneConfig], settings: GlobalSettings) -> float:
    return _first_truthy(zone.pricing.base_fee if zone else None, settings.base_fee_ngn)


def resolve_per_km_rate(zone: Optional[ZoneConfig], settings: GlobalSettings) -> float:
    return _first_truthy(zone.pricing.per_km_rate if zone else None, settings.per_km_rate_ngn)


def resolve_min_fee(zone: Optional[ZoneConfig]) -> float:
    return _first_truthy(zone.pricing.min_fee if zone else None, DEFAULT_MIN_FEE_NGN)


def resolve_max_fee(zone: Optional[ZoneConfig]) -> float:
    return _first_truthy(zone.pricing.max_fee if zone else None, DEFAULT_MAX_FEE_NGN)


def resolve_free_distance_km(zone: Optional[ZoneConfig], settings: GlobalSettings) -> float:
    # an explicit zero on the zone is honoured; only an unset value defers
    if zone is not None and zone.pricing.free_distance_km is not None:
        return zone.pricing.free_distance_km
    return settings.free_distance_km


def resolve_pricing_parameters(zone: Optional[ZoneConfig], settings: GlobalSettings) -> PricingParameters:
    """Pick zone pricing when the delivery zone resolved, else the regional fallback."""

    return PricingParameters(
        base_fee=resolve_base_fee(zone, settings),
        per_km_rate=resolve_per_km_rate(zone, settings),
        min_fee=resolve_min_fee(zone),
        max_fee=resolve_max_fee(zone),
        free_distance_km=resolve_free_distance_km(zone, settings),
        rule=f"zone_{zone.code}_base" if zone else REGIONAL_FALLBACK_RULE,
    )
