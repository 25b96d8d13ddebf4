"""Quote orchestration: group a cart by pickup point, price and time each shipment."""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Iterable, Optional, Sequence

from ...config import settings
from ...data.settings_repository import load_global_settings
from ...data.zones_repository import ZoneCatalogCache, load_zone_catalog
from ...models.domain import (
    DEFAULT_ZONE_ETA,
    CartItem,
    Coordinate,
    DeliveryTier,
    EtaEstimate,
    GlobalSettings,
    PaymentMethod,
    PriceBreakdownItem,
    RiderAvailability,
    ZoneConfig,
)
from ...schemas.quotes import (
    CartItemModel,
    CoordinateModel,
    DeliveryOptionModel,
    DeliveryQuoteRequest,
    DeliveryQuoteResponse,
    EtaWindowModel,
    PreviewItemModel,
    PriceBreakdownItemModel,
    ShipmentFeeModel,
)
from ..eta.estimator import estimate_eta, format_eta
from ..geospatial import round_half_up
from ..pricing.composer import FeeComposer, ShipmentFee
from ..pricing.settings_cache import SettingsCache
from ..riders.client import RiderAvailabilityClient
from ..weight import effective_weight
from ..zoning.resolver import ZoneResolver

logger = logging.getLogger(__name__)

ALTERNATIVE_TIERS: tuple[DeliveryTier, ...] = (
    DeliveryTier.STANDARD,
    DeliveryTier.EXPRESS,
    DeliveryTier.SAME_DAY,
)
UNKNOWN_ZONE = "UNKNOWN"
DEFAULT_SUSPENSION_REASON = "Area temporarily unavailable"


@dataclass(slots=True)
class QuoteDependencies:
    """Collaborators the orchestrator needs; tests build these by hand."""

    resolver: ZoneResolver
    composer: FeeComposer
    settings_cache: SettingsCache
    rider_client: RiderAvailabilityClient
    catalog_cache: Optional[ZoneCatalogCache] = None

    def current_resolver(self) -> ZoneResolver:
        """Point the resolver and composer at the live zone catalog and return the resolver."""
        if self.catalog_cache is not None:
            catalog = self.catalog_cache.get()
            self.resolver.city_zones = catalog.city_zones
            self.resolver.regional_zones = catalog.regional_zones
            self.composer.cross_zone_fees = catalog.cross_zone_fees
        return self.resolver


def build_quote_dependencies() -> QuoteDependencies:
    catalog_cache = ZoneCatalogCache(load_zone_catalog, settings.settings_cache_ttl_seconds)
    catalog = catalog_cache.get()
    resolver = ZoneResolver(city_zones=catalog.city_zones, regional_zones=catalog.regional_zones)
    return QuoteDependencies(
        resolver=resolver,
        composer=FeeComposer(resolver=resolver, cross_zone_fees=catalog.cross_zone_fees),
        settings_cache=SettingsCache(load_global_settings, settings.settings_cache_ttl_seconds),
        rider_client=RiderAvailabilityClient(),
        catalog_cache=catalog_cache,
    )


@lru_cache()
def get_quote_dependencies() -> QuoteDependencies:
    return build_quote_dependencies()


@dataclass(slots=True)
class _Shipment:
    pickup_location_id: str
    pickup: Coordinate
    fee: ShipmentFee


def _default_hub() -> Coordinate:
    return Coordinate(lat=settings.default_pickup_lat, lng=settings.default_pickup_lng)


def _group_by_pickup(items: Iterable[CartItem]) -> list[tuple[str, list[CartItem]]]:
    groups: dict[str, list[CartItem]] = defaultdict(list)
    for item in items:
        groups[item.pickup_location_id].append(item)
    return [(pickup_id, groups[pickup_id]) for pickup_id in sorted(groups)]


def _pickup_coordinate(items: Sequence[CartItem], fallback: Optional[Coordinate]) -> Coordinate:
    return items[0].pickup_coords or fallback or _default_hub()


def _breakdown(items: Iterable[PriceBreakdownItem]) -> list[PriceBreakdownItemModel]:
    return [PriceBreakdownItemModel.from_domain(item) for item in items]


def _tags(tier: DeliveryTier, free_shipping: bool) -> list[str]:
    if free_shipping:
        return ["free_shipping"]
    return ["recommended"] if tier == DeliveryTier.STANDARD else []


def _option(
    tier: DeliveryTier,
    price: int,
    breakdown: list[PriceBreakdownItemModel],
    eta: EtaEstimate,
    applied_rules: Iterable[str],
    *,
    free_shipping: bool,
    is_available: bool,
    suspension_reason: Optional[str],
) -> DeliveryOptionModel:
    return DeliveryOptionModel(
        id=tier.value,
        label=f"{tier.label} Delivery",
        price_ngn=0 if free_shipping else price,
        price_breakdown=breakdown,
        estimated_eta_minutes=EtaWindowModel(min=eta.min, max=eta.max),
        eta_friendly=eta.friendly,
        applied_rules=sorted(set(applied_rules)),
        tags=_tags(tier, free_shipping),
        is_available=is_available,
        suspension_reason=suspension_reason,
    )


def _combined_eta(estimates: Sequence[EtaEstimate]) -> EtaEstimate:
    eta_min = min(estimate.min for estimate in estimates)
    eta_max = max(estimate.max for estimate in estimates)
    return EtaEstimate(min=eta_min, max=eta_max, friendly=format_eta(eta_min, eta_max))


def _shipment_model(shipment: _Shipment, delivery_zone: Optional[ZoneConfig]) -> ShipmentFeeModel:
    fee = shipment.fee
    return ShipmentFeeModel(
        pickup_location_id=shipment.pickup_location_id,
        pickup_zone=fee.pickup_zone.code if fee.pickup_zone else UNKNOWN_ZONE,
        delivery_zone=delivery_zone.code if delivery_zone else UNKNOWN_ZONE,
        distance_km=fee.distance_km,
        fee_breakdown=_breakdown(fee.breakdown),
        subtotal_ngn=fee.total,
        applied_rules=list(fee.applied_rules),
    )


def get_quote(request: DeliveryQuoteRequest, dependencies: Optional[QuoteDependencies] = None) -> DeliveryQuoteResponse:
    """Build the full quote for a cart: primary option, alternatives and per-shipment fees."""

    deps = dependencies or get_quote_dependencies()
    tier = request.delivery_type
    items = request.cart_items()
    delivery = request.delivery_coords.to_domain()
    request_pickup = request.pickup_coords.to_domain() if request.pickup_coords else None

    global_settings: GlobalSettings = deps.settings_cache.get()
    cart_weight = effective_weight(items)

    resolver = deps.current_resolver()
    delivery_zone = resolver.resolve(delivery)
    is_city_delivery = resolver.is_city_zone(delivery_zone)
    zone_eta = delivery_zone.eta if delivery_zone else DEFAULT_ZONE_ETA
    availability: RiderAvailability = deps.rider_client.snapshot(delivery_zone.code if delivery_zone else None)

    shipments: list[_Shipment] = []
    for pickup_id, group in _group_by_pickup(items):
        pickup = _pickup_coordinate(group, request_pickup)
        fee = deps.composer.compose(
            pickup,
            delivery,
            effective_weight(group),
            sum(item.price * item.quantity for item in group),
            tier,
            request.payment_method,
            is_city_delivery,
            global_settings,
        )
        shipments.append(_Shipment(pickup_location_id=pickup_id, pickup=pickup, fee=fee))

    grand_total = sum(shipment.fee.total for shipment in shipments)
    total_distance = sum(shipment.fee.distance_km for shipment in shipments)
    average_distance = total_distance / max(1, len(shipments))

    distances = [shipment.fee.distance_km for shipment in shipments] or [0.0]
    estimates = [
        estimate_eta(distance, zone_eta, tier, request.requested_at, availability) for distance in distances
    ]

    free_shipping = request.subtotal_ngn > settings.free_shipping_threshold_ngn
    is_suspended = bool(delivery_zone and delivery_zone.is_suspended)
    suspension_reason = (delivery_zone.suspension_reason or DEFAULT_SUSPENSION_REASON) if is_suspended else None

    def zone_allows(candidate: DeliveryTier) -> bool:
        return delivery_zone.allows(candidate) if delivery_zone else True

    if len(shipments) == 1:
        primary_breakdown = _breakdown(shipments[0].fee.breakdown)
    else:
        primary_breakdown = [PriceBreakdownItemModel(label="Combined Shipments", amount_ngn=grand_total)]

    options = [
        _option(
            tier,
            grand_total,
            primary_breakdown,
            _combined_eta(estimates),
            (rule for shipment in shipments for rule in shipment.fee.applied_rules),
            free_shipping=free_shipping,
            is_available=not is_suspended and zone_allows(tier),
            suspension_reason=suspension_reason,
        )
    ]

    # alternatives are an estimate over the averaged distance from a single pickup point
    alternative_pickup = request_pickup or (shipments[0].pickup if shipments else _default_hub())
    for alternative in ALTERNATIVE_TIERS:
        if alternative == tier or not zone_allows(alternative):
            continue
        fee = deps.composer.compose(
            alternative_pickup,
            delivery,
            cart_weight,
            request.subtotal_ngn,
            alternative,
            request.payment_method,
            is_city_delivery,
            global_settings,
            distance_km=average_distance,
        )
        eta = estimate_eta(average_distance, zone_eta, alternative, request.requested_at, availability)
        options.append(
            _option(
                alternative,
                fee.total,
                _breakdown(fee.breakdown),
                eta,
                fee.applied_rules,
                free_shipping=free_shipping,
                is_available=not is_suspended,
                suspension_reason=suspension_reason,
            )
        )

    zone_code = delivery_zone.code if delivery_zone else UNKNOWN_ZONE
    logger.info(f"Quoted cart {request.cart_id}: {len(shipments)} shipment(s) to zone {zone_code}, total {grand_total} NGN")

    return DeliveryQuoteResponse(
        cart_id=request.cart_id,
        effective_weight_kg=cart_weight,
        distance_km=round_half_up(average_distance, 3),
        delivery_options=options,
        per_shipment_fees=[_shipment_model(s, delivery_zone) for s in shipments] if len(shipments) > 1 else None,
        grand_total_ngn=0 if free_shipping else grand_total,
    )


def preview_quote(
    items: Sequence[PreviewItemModel],
    delivery_coords: CoordinateModel,
    delivery_type: DeliveryTier = DeliveryTier.STANDARD,
    payment_method: PaymentMethod = PaymentMethod.CARD,
    dependencies: Optional[QuoteDependencies] = None,
) -> DeliveryQuoteResponse:
    """Dry-run a quote for admin tooling. Nothing is audited."""

    cart_items = [
        CartItemModel(
            id=f"preview_item_{index}",
            product_id=f"preview_product_{index}",
            **item.model_dump(),
        )
        for index, item in enumerate(items)
    ]
    request = DeliveryQuoteRequest(
        cart_id=f"preview_{int(time.time() * 1000)}",
        subtotal_ngn=sum(item.price * item.quantity for item in items),
        items=cart_items,
        payment_method=payment_method,
        delivery_coords=delivery_coords,
        delivery_type=delivery_type,
        requested_at=datetime.now(timezone.utc),
    )
    return get_quote(request, dependencies)
