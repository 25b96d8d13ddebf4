"""Pydantic request/response models for quote endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import (
    CartItem,
    Coordinate,
    DeliveryTier,
    Dimensions,
    PaymentMethod,
    PriceBreakdownItem,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CoordinateModel(BaseModel):
    lat: float
    lng: float

    def to_domain(self) -> Coordinate:
        return Coordinate(lat=self.lat, lng=self.lng)


class DimensionsModel(BaseModel):
    length_cm: float = Field(..., ge=0)
    width_cm: float = Field(..., ge=0)
    height_cm: float = Field(..., ge=0)


class CartItemModel(BaseModel):
    id: str
    product_id: str
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)
    weight_kg: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[DimensionsModel] = None
    pickup_location_id: str
    pickup_coords: Optional[CoordinateModel] = None

    def to_domain(self) -> CartItem:
        return CartItem(
            id=self.id,
            product_id=self.product_id,
            quantity=self.quantity,
            price=self.price,
            pickup_location_id=self.pickup_location_id,
            weight_kg=self.weight_kg,
            dimensions=Dimensions(**self.dimensions.model_dump()) if self.dimensions else None,
            pickup_coords=self.pickup_coords.to_domain() if self.pickup_coords else None,
        )


class DeliveryQuoteRequest(BaseModel):
    cart_id: str = Field(..., min_length=1)
    subtotal_ngn: float = Field(default=0.0, description="Declared cart subtotal, used for free shipping.")
    items: List[CartItemModel] = Field(default_factory=list)
    payment_method: PaymentMethod = PaymentMethod.CARD
    pickup_coords: Optional[CoordinateModel] = Field(
        default=None, description="Fallback pickup point for items without their own coordinates."
    )
    delivery_coords: CoordinateModel
    delivery_type: DeliveryTier = DeliveryTier.STANDARD
    requested_at: datetime = Field(default_factory=_utc_now)
    store_hub_id: Optional[str] = None

    def cart_items(self) -> list[CartItem]:
        return [item.to_domain() for item in self.items]


class PreviewItemModel(BaseModel):
    quantity: int = Field(..., gt=0)
    price: float = Field(..., ge=0)
    weight_kg: Optional[float] = Field(default=None, ge=0)
    dimensions: Optional[DimensionsModel] = None
    pickup_location_id: str
    pickup_coords: Optional[CoordinateModel] = None


class PreviewQuoteRequest(BaseModel):
    items: List[PreviewItemModel] = Field(..., min_length=1)
    delivery_coords: CoordinateModel
    delivery_type: DeliveryTier = DeliveryTier.STANDARD
    payment_method: PaymentMethod = PaymentMethod.CARD


class PriceBreakdownItemModel(BaseModel):
    label: str
    amount_ngn: int

    @classmethod
    def from_domain(cls, item: PriceBreakdownItem) -> "PriceBreakdownItemModel":
        return cls(label=item.label, amount_ngn=item.amount_ngn)


class EtaWindowModel(BaseModel):
    min: int
    max: int


class DeliveryOptionModel(BaseModel):
    id: str
    label: str
    price_ngn: int
    price_breakdown: List[PriceBreakdownItemModel]
    estimated_eta_minutes: EtaWindowModel
    eta_friendly: str
    applied_rules: List[str]
    tags: List[str]
    is_available: bool
    suspension_reason: Optional[str] = None


class ShipmentFeeModel(BaseModel):
    pickup_location_id: str
    pickup_zone: str
    delivery_zone: str
    distance_km: float
    fee_breakdown: List[PriceBreakdownItemModel]
    subtotal_ngn: int
    applied_rules: List[str]


class DeliveryQuoteResponse(BaseModel):
    cart_id: str
    currency: str = "NGN"
    effective_weight_kg: float
    distance_km: float
    delivery_options: List[DeliveryOptionModel]
    per_shipment_fees: Optional[List[ShipmentFeeModel]] = None
    grand_total_ngn: int
    error: Optional[str] = Field(default=None, description="Failure cause when the fallback quote was served.")
    fallback: Optional[bool] = None


class PreviewQuoteResponse(BaseModel):
    success: bool = True
    preview: bool = True
    quote: DeliveryQuoteResponse
