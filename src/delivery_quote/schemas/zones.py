"""Zone catalog and settings response schemas."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from ..models.domain import GlobalSettings, ZoneConfig


class ZonePricingModel(BaseModel):
    base_fee_ngn: float
    per_km_rate_ngn: float
    min_fee_ngn: float
    max_fee_ngn: float
    free_distance_km: Optional[float] = None


class ZoneEtaModel(BaseModel):
    base_dispatch_minutes: float
    travel_profile: str
    congestion_factor: float
    operational_buffer_percent: float
    pickup_handling_min: float
    pickup_handling_max: float


class ZoneModel(BaseModel):
    code: str
    name: str
    type: str
    is_city_zone: bool
    center: Dict[str, float]
    radius_km: float
    pricing: ZonePricingModel
    eta: ZoneEtaModel
    delivery_types: List[str]
    is_suspended: bool
    suspension_reason: Optional[str] = None

    @classmethod
    def from_domain(cls, zone: ZoneConfig, *, is_city_zone: bool) -> "ZoneModel":
        return cls(
            code=zone.code,
            name=zone.name,
            type=zone.kind.value,
            is_city_zone=is_city_zone,
            center={"lat": zone.center.lat, "lng": zone.center.lng},
            radius_km=zone.radius_km,
            pricing=ZonePricingModel(
                base_fee_ngn=zone.pricing.base_fee,
                per_km_rate_ngn=zone.pricing.per_km_rate,
                min_fee_ngn=zone.pricing.min_fee,
                max_fee_ngn=zone.pricing.max_fee,
                free_distance_km=zone.pricing.free_distance_km,
            ),
            eta=ZoneEtaModel(
                base_dispatch_minutes=zone.eta.base_dispatch_minutes,
                travel_profile=zone.eta.travel_profile,
                congestion_factor=zone.eta.congestion_factor,
                operational_buffer_percent=zone.eta.operational_buffer_percent,
                pickup_handling_min=zone.eta.pickup_handling_min,
                pickup_handling_max=zone.eta.pickup_handling_max,
            ),
            delivery_types=sorted(zone.delivery_types_allowed),
            is_suspended=zone.is_suspended,
            suspension_reason=zone.suspension_reason,
        )


class ZoneListResponse(BaseModel):
    success: bool = True
    zones: List[ZoneModel]
    count: int


class GlobalSettingsModel(BaseModel):
    free_distance_km: float
    per_km_rate_ngn: float
    base_fee_ngn: float
    weight_free_limit_kg: float
    weight_surcharge_per_kg: float
    platform_commission_percent: float
    insurance_threshold_ngn: float
    insurance_rate_percent: float
    cod_surcharge_percent: float
    default_cross_zone_fee: float
    delivery_type_multipliers: Dict[str, float]

    @classmethod
    def from_domain(cls, value: GlobalSettings) -> "GlobalSettingsModel":
        return cls(
            free_distance_km=value.free_distance_km,
            per_km_rate_ngn=value.per_km_rate_ngn,
            base_fee_ngn=value.base_fee_ngn,
            weight_free_limit_kg=value.weight_free_limit_kg,
            weight_surcharge_per_kg=value.weight_surcharge_per_kg,
            platform_commission_percent=value.platform_commission_percent,
            insurance_threshold_ngn=value.insurance_threshold_ngn,
            insurance_rate_percent=value.insurance_rate_percent,
            cod_surcharge_percent=value.cod_surcharge_percent,
            default_cross_zone_fee=value.default_cross_zone_fee,
            delivery_type_multipliers=dict(value.delivery_type_multipliers),
        )
