"""Domain models for zones, pricing settings and quote ledgers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional


class DeliveryTier(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"
    SCHEDULED = "scheduled"

    @property
    def label(self) -> str:
        """Display name, e.g. ``same_day`` -> ``Same day``."""
        text = self.value.replace("_", " ", 1)
        return text[:1].upper() + text[1:]


class TravelProfile(str, Enum):
    URBAN = "urban"
    INNER_CITY = "inner_city"
    SUBURBAN = "suburban"
    RURAL = "rural"


class PaymentMethod(str, Enum):
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    COD = "cod"
    MOBILE_MONEY = "mobile_money"


class ZoneKind(str, Enum):
    POLYGON = "polygon"
    CENTROID_FALLBACK = "centroid-fallback"


@dataclass(slots=True, frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(slots=True, frozen=True)
class Dimensions:
    length_cm: float
    width_cm: float
    height_cm: float


@dataclass(slots=True, frozen=True)
class CartItem:
    """A cart line as seen by the engine. Never mutated."""

    id: str
    product_id: str
    quantity: int
    price: float
    pickup_location_id: str
    weight_kg: Optional[float] = None
    dimensions: Optional[Dimensions] = None
    pickup_coords: Optional[Coordinate] = None


@dataclass(slots=True)
class ZonePricing:
    """Zone-level pricing. Zero or missing values defer to global settings."""

    base_fee: float = 0.0
    per_km_rate: float = 0.0
    min_fee: float = 0.0
    max_fee: float = 0.0
    free_distance_km: Optional[float] = None


@dataclass(slots=True)
class ZoneEta:
    base_dispatch_minutes: float
    travel_profile: str
    congestion_factor: float
    operational_buffer_percent: float
    pickup_handling_min: float
    pickup_handling_max: float


DEFAULT_ZONE_ETA = ZoneEta(
    base_dispatch_minutes=45,
    travel_profile=TravelProfile.SUBURBAN.value,
    congestion_factor=0.2,
    operational_buffer_percent=0.2,
    pickup_handling_min=5,
    pickup_handling_max=15,
)


@dataclass(slots=True)
class ZoneConfig:
    """A delivery zone resolved by proximity to its centre."""

    code: str
    name: str
    kind: ZoneKind
    center: Coordinate
    pricing: ZonePricing
    eta: ZoneEta
    radius_km: float = 0.0
    delivery_types_allowed: frozenset[str] = field(default_factory=frozenset)
    is_active: bool = True
    is_suspended: bool = False
    suspension_reason: Optional[str] = None

    def allows(self, tier: DeliveryTier) -> bool:
        # zones without a declared set accept every tier
        return not self.delivery_types_allowed or tier.value in self.delivery_types_allowed


@dataclass(slots=True, frozen=True)
class RiderAvailability:
    active_riders: int
    queued_jobs: int


DEFAULT_DELIVERY_TYPE_MULTIPLIERS: Mapping[str, float] = {
    DeliveryTier.STANDARD.value: 1.0,
    DeliveryTier.EXPRESS.value: 1.3,
    DeliveryTier.SAME_DAY.value: 1.5,
}


@dataclass(slots=True)
class GlobalSettings:
    """Tunable pricing defaults shared by every zone."""

    free_distance_km: float = 0.0
    per_km_rate_ngn: float = 50.0
    base_fee_ngn: float = 300.0
    weight_free_limit_kg: float = 5.0
    weight_surcharge_per_kg: float = 100.0
    platform_commission_percent: float = 15.0
    insurance_threshold_ngn: float = 50000.0
    insurance_rate_percent: float = 1.0
    cod_surcharge_percent: float = 2.0
    default_cross_zone_fee: float = 150.0
    delivery_type_multipliers: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_DELIVERY_TYPE_MULTIPLIERS)
    )


@dataclass(slots=True, frozen=True)
class PriceBreakdownItem:
    label: str
    amount_ngn: int


@dataclass(slots=True, frozen=True)
class EtaEstimate:
    min: int
    max: int
    friendly: str
