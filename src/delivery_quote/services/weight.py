"""Billable weight for a set of cart items."""

from __future__ import annotations

from typing import Iterable

from ..models.domain import CartItem
from .geospatial import round_half_up

VOLUMETRIC_DIVISOR = 5000.0


def volumetric_weight_kg(item: CartItem) -> float:
    if item.dimensions is None:
        return 0.0
    dims = item.dimensions
    return (dims.length_cm * dims.width_cm * dims.height_cm) / VOLUMETRIC_DIVISOR * item.quantity


def gross_weight_kg(item: CartItem) -> float:
    if not item.weight_kg:
        return 0.0
    return item.weight_kg * item.quantity


def effective_weight(items: Iterable[CartItem]) -> float:
    """Return the greater of declared and volumetric mass, in kg to 3 decimals.

    Both sums run over the whole set independently; an item lacking mass or
    dimensions contributes nothing to the corresponding sum.
    """

    gross_kg = 0.0
    volumetric_kg = 0.0
    for item in items:
        gross_kg += gross_weight_kg(item)
        volumetric_kg += volumetric_weight_kg(item)
    return round_half_up(max(gross_kg, volumetric_kg), 3)
