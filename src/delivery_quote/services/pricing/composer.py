"""Itemized fee composition for a single shipment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ...models.domain import (
    Coordinate,
    DeliveryTier,
    GlobalSettings,
    PaymentMethod,
    PriceBreakdownItem,
    ZoneConfig,
)
from ..geospatial import distance_km as geo_distance_km, round_half_up
from ..zoning.cross_zone import CrossZoneFeeTable
from ..zoning.resolver import ZoneResolver
from .parameters import PricingParameters, resolve_pricing_parameters

CITY_TIER_MULTIPLIERS: dict[DeliveryTier, float] = {
    DeliveryTier.STANDARD: 1.0,
    DeliveryTier.EXPRESS: 1.3,
    DeliveryTier.SAME_DAY: 1.5,
    DeliveryTier.SCHEDULED: 1.0,
}

REGIONAL_TIER_MULTIPLIERS: dict[DeliveryTier, float] = {
    DeliveryTier.STANDARD: 1.0,
    DeliveryTier.EXPRESS: 1.5,
    DeliveryTier.SAME_DAY: 2.0,
    DeliveryTier.SCHEDULED: 1.0,
}


def _naira(amount: float) -> int:
    return int(round_half_up(amount))


def _percent(value: float) -> str:
    return f"{value:g}"


def tier_multiplier(tier: DeliveryTier, settings: GlobalSettings, is_city_delivery: bool) -> float:
    """Settings multiplier when configured and non-zero, else the city or regional table."""

    configured = settings.delivery_type_multipliers.get(tier.value)
    if configured:
        return configured
    table = CITY_TIER_MULTIPLIERS if is_city_delivery else REGIONAL_TIER_MULTIPLIERS
    return table.get(tier) or 1.0


@dataclass(slots=True)
class ShipmentFee:
    """Result of composing one shipment's fee."""

    breakdown: list[PriceBreakdownItem]
    total: int
    applied_rules: list[str]
    distance_km: float
    parameters: PricingParameters
    pickup_zone: Optional[ZoneConfig] = None
    delivery_zone: Optional[ZoneConfig] = None


@dataclass(slots=True)
class _Ledger:
    items: list[PriceBreakdownItem] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)

    def append(self, label: str, amount: float, rule: Optional[str] = None) -> None:
        self.items.append(PriceBreakdownItem(label=label, amount_ngn=_naira(amount)))
        if rule:
            self.rules.append(rule)


@dataclass(slots=True)
class FeeComposer:
    """Layer base, distance, weight, cross-zone, tier, insurance, COD and platform fees.

    Ledger lines are rounded when appended and the total is rounded again
    after clamping, so the line sum and the total may legitimately differ.
    """

    resolver: ZoneResolver
    cross_zone_fees: CrossZoneFeeTable

    def compose(
        self,
        pickup: Coordinate,
        delivery: Coordinate,
        effective_weight_kg: float,
        package_value_ngn: float,
        tier: DeliveryTier,
        payment_method: PaymentMethod,
        is_city_delivery: bool,
        settings: GlobalSettings,
        *,
        distance_km: Optional[float] = None,
    ) -> ShipmentFee:
        pickup_zone = self.resolver.resolve(pickup)
        delivery_zone = self.resolver.resolve(delivery)
        if distance_km is None:
            distance_km = geo_distance_km(pickup, delivery)

        params = resolve_pricing_parameters(delivery_zone, settings)
        ledger = _Ledger(rules=[params.rule])

        ledger.append("Base Fee", params.base_fee)

        billable_km = max(0.0, distance_km - params.free_distance_km)
        distance_fee = billable_km * params.per_km_rate
        if distance_fee > 0:
            ledger.append(f"Distance Fee ({billable_km:.2f}km)", distance_fee, "distance_fee")

        weight_fee = 0.0
        excess_kg = effective_weight_kg - settings.weight_free_limit_kg
        if excess_kg > 0:
            weight_fee = excess_kg * settings.weight_surcharge_per_kg
            if weight_fee > 0:
                ledger.append(f"Weight Surcharge ({excess_kg:.1f}kg)", weight_fee, "weight_surcharge")

        cross_zone_fee = 0.0
        if pickup_zone and delivery_zone and pickup_zone.code != delivery_zone.code:
            cross_zone_fee = self.cross_zone_fees.fee(
                pickup_zone.code, delivery_zone.code, fallback=settings.default_cross_zone_fee
            )
            ledger.append("Cross-Zone Fee", cross_zone_fee, "cross_zone_fee")

        subtotal = params.base_fee + distance_fee + weight_fee + cross_zone_fee

        multiplier = tier_multiplier(tier, settings, is_city_delivery)
        if multiplier != 1.0:
            ledger.append(
                f"{tier.label} Surcharge ({(multiplier - 1) * 100:.0f}%)",
                subtotal * (multiplier - 1),
                f"multiplier_{tier.value}",
            )
            subtotal *= multiplier

        insurance_fee = 0.0
        if package_value_ngn > settings.insurance_threshold_ngn:
            insurance_fee = package_value_ngn * settings.insurance_rate_percent / 100
            ledger.append(f"Insurance ({_percent(settings.insurance_rate_percent)}%)", insurance_fee, "insurance")

        cod_fee = 0.0
        if not is_city_delivery and payment_method == PaymentMethod.COD:
            cod_fee = package_value_ngn * settings.cod_surcharge_percent / 100
            ledger.append(f"COD Surcharge ({_percent(settings.cod_surcharge_percent)}%)", cod_fee, "cod_surcharge")

        platform_fee = subtotal * settings.platform_commission_percent / 100
        ledger.append(
            f"Platform Fee ({_percent(settings.platform_commission_percent)}%)", platform_fee, "platform_fee"
        )

        total = subtotal + insurance_fee + cod_fee + platform_fee
        total = max(total, params.min_fee)
        if params.max_fee:
            total = min(total, params.max_fee)

        return ShipmentFee(
            breakdown=ledger.items,
            total=_naira(total),
            applied_rules=ledger.rules,
            distance_km=distance_km,
            parameters=params,
            pickup_zone=pickup_zone,
            delivery_zone=delivery_zone,
        )
