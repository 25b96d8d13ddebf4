"""Flat-rate quote served when quote computation fails."""

from __future__ import annotations

from typing import Optional

from ...config import settings
from ...schemas.quotes import (
    DeliveryOptionModel,
    DeliveryQuoteResponse,
    EtaWindowModel,
    PriceBreakdownItemModel,
)

FALLBACK_ETA_MIN = 45
FALLBACK_ETA_MAX = 90
FALLBACK_RULE = "frontend_fallback"


def fallback_fee(subtotal_ngn: float) -> tuple[int, bool]:
    """Return ``(fee, is_free)`` for the flat-rate fallback."""
    if subtotal_ngn > settings.free_shipping_threshold_ngn:
        return 0, True
    return settings.fallback_flat_fee_ngn, False


def build_fallback_quote(cart_id: str, subtotal_ngn: float, error: Optional[str] = None) -> DeliveryQuoteResponse:
    fee, is_free = fallback_fee(subtotal_ngn)
    option = DeliveryOptionModel(
        id="fallback",
        label="Standard Delivery",
        price_ngn=fee,
        price_breakdown=[PriceBreakdownItemModel(label="Free Shipping" if is_free else "Flat Rate", amount_ngn=fee)],
        estimated_eta_minutes=EtaWindowModel(min=FALLBACK_ETA_MIN, max=FALLBACK_ETA_MAX),
        eta_friendly=f"{FALLBACK_ETA_MIN}-{FALLBACK_ETA_MAX} mins",
        applied_rules=[FALLBACK_RULE],
        tags=["free_shipping"] if is_free else [],
        is_available=True,
    )
    return DeliveryQuoteResponse(
        cart_id=cart_id,
        effective_weight_kg=0.0,
        distance_km=0.0,
        delivery_options=[option],
        grand_total_ngn=fee,
        error=error,
        fallback=True,
    )
